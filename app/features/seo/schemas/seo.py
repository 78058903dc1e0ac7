from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


# Display grouping only, no numeric rank implied
SEVERITY_DISPLAY_ORDER = (
    Severity.ERROR,
    Severity.WARNING,
    Severity.INFO,
    Severity.SUCCESS,
)


class SeoIssue(BaseModel):
    """One finding produced by a rule"""
    model_config = ConfigDict(frozen=True)

    id: str
    level: Severity
    message: str
    field: Optional[str] = None
    recommendation: Optional[str] = None


class BaseMeta(BaseModel):
    """Base <head> metadata. Every value is a trimmed non-empty string or None."""
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    robots: Optional[str] = None
    canonical: Optional[str] = None
    lang: Optional[str] = None
    charset: Optional[str] = None


class OpenGraphMeta(BaseModel):
    """Open Graph tags for social media sharing"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    site_name: Optional[str] = Field(default=None, alias="siteName")


class TwitterMeta(BaseModel):
    """Twitter / X card tags"""
    model_config = ConfigDict(frozen=True)

    card: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    site: Optional[str] = None
    creator: Optional[str] = None


class SeoSummary(BaseModel):
    """Issue counts and the weighted pass/warn/fail score (0-100)"""
    model_config = ConfigDict(frozen=True)

    errors: int = 0
    warnings: int = 0
    info: int = 0
    successes: int = 0
    score: int = 0
    rating: str = "critical"  # critical, needs_improvement, good, perfect


class GooglePreview(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    display_url: str = Field(alias="displayUrl")
    title: Optional[str] = None
    description: Optional[str] = None


class SocialPreview(BaseModel):
    model_config = ConfigDict(frozen=True)

    platform: str  # facebook, x, mastodon, discord
    host: str
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class PreviewData(BaseModel):
    """Resolved values for the SERP card and one social card per platform"""
    model_config = ConfigDict(frozen=True)

    google: GooglePreview
    social: Tuple[SocialPreview, ...] = ()


class SeoAnalysisResult(BaseModel):
    """Complete analysis report for one URL"""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "url": "https://example.com/",
                "normalizedUrl": "https://example.com/",
                "htmlLength": 1256,
                "meta": {"title": "Example Domain", "lang": "en"},
                "openGraph": {},
                "twitter": {},
                "issues": [
                    {
                        "id": "title_too_short",
                        "level": "warning",
                        "message": "Title is too short (14 characters).",
                        "field": "title",
                        "recommendation": "Use a title between 30 and 60 characters, including the main keyword.",
                    }
                ],
            }
        },
    )

    url: str
    normalized_url: str = Field(alias="normalizedUrl")
    html_length: int = Field(alias="htmlLength")
    meta: BaseMeta
    open_graph: OpenGraphMeta = Field(alias="openGraph")
    twitter: TwitterMeta
    issues: Tuple[SeoIssue, ...] = ()
    summary: SeoSummary
    previews: PreviewData


class AnalyzeRequest(BaseModel):
    """Request schema for a single-page SEO analysis"""
    url: Optional[str] = Field(default=None, description="The URL to analyze")

    class Config:
        json_schema_extra = {
            "example": {
                "url": "example.com"
            }
        }

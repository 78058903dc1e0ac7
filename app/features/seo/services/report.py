import math
from typing import Dict, Iterable, Optional, Tuple
from urllib.parse import urlsplit

from app.features.seo.schemas.seo import (
    BaseMeta,
    GooglePreview,
    OpenGraphMeta,
    PreviewData,
    SEVERITY_DISPLAY_ORDER,
    SeoAnalysisResult,
    SeoIssue,
    SeoSummary,
    Severity,
    SocialPreview,
    TwitterMeta,
)
from app.platform.utils.url_validator import normalize_url

SOCIAL_PLATFORMS = ("facebook", "x", "mastodon", "discord")

# Weight of each severity in the score; info does not count
SCORE_WEIGHTS = {
    Severity.SUCCESS: 1.0,
    Severity.WARNING: 0.5,
    Severity.ERROR: 0.0,
}


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def _host(url: str) -> str:
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        return url
    return netloc.rsplit("@", 1)[-1] or url


def score_to_rating(score: int) -> str:
    if score < 50:
        return "critical"
    elif score < 85:
        return "needs_improvement"
    elif score == 100:
        return "perfect"
    else:
        return "good"


def group_issues_by_level(issues: Iterable[SeoIssue]) -> Dict[Severity, Tuple[SeoIssue, ...]]:
    """Issues bucketed per severity, keys in SEVERITY_DISPLAY_ORDER; order within a bucket is kept."""
    issues = tuple(issues)
    return {
        level: tuple(issue for issue in issues if issue.level == level)
        for level in SEVERITY_DISPLAY_ORDER
    }


def summarize_issues(issues: Iterable[SeoIssue]) -> SeoSummary:
    """
    Counts per severity plus the weighted score:
    (success * 1 + warning * 0.5 + error * 0) / (success + warning + error) * 100
    """
    counts = {level: len(group) for level, group in group_issues_by_level(issues).items()}

    total_checks = sum(counts[level] for level in SCORE_WEIGHTS)
    if total_checks:
        weighted = sum(counts[level] * weight for level, weight in SCORE_WEIGHTS.items())
        score = int(math.floor(weighted / total_checks * 100 + 0.5))
    else:
        score = 0

    return SeoSummary(
        errors=counts[Severity.ERROR],
        warnings=counts[Severity.WARNING],
        info=counts[Severity.INFO],
        successes=counts[Severity.SUCCESS],
        score=score,
        rating=score_to_rating(score),
    )


def build_google_preview(url: str, meta: BaseMeta) -> GooglePreview:
    try:
        parsed = urlsplit(url)
        display_url = (parsed.netloc.rsplit("@", 1)[-1] + parsed.path.rstrip("/")) if parsed.netloc else url
    except ValueError:
        display_url = url
    return GooglePreview(display_url=display_url, title=meta.title, description=meta.description)


def build_social_preview(
    platform: str,
    url: str,
    meta: BaseMeta,
    open_graph: OpenGraphMeta,
    twitter: TwitterMeta,
) -> SocialPreview:
    """X reads twitter:* first, the other platforms read og:* first."""
    if platform == "x":
        title = _first(twitter.title, open_graph.title, meta.title)
        description = _first(twitter.description, open_graph.description, meta.description)
        image = _first(twitter.image, open_graph.image)
    else:
        title = _first(open_graph.title, meta.title)
        description = _first(open_graph.description, meta.description)
        image = _first(open_graph.image, twitter.image)

    return SocialPreview(
        platform=platform,
        host=_host(url),
        title=title,
        description=description,
        image=image,
    )


def build_previews(
    url: str,
    meta: BaseMeta,
    open_graph: OpenGraphMeta,
    twitter: TwitterMeta,
) -> PreviewData:
    return PreviewData(
        google=build_google_preview(url, meta),
        social=tuple(
            build_social_preview(platform, url, meta, open_graph, twitter)
            for platform in SOCIAL_PLATFORMS
        ),
    )


def build_analysis_result(
    requested_url: str,
    final_url: Optional[str],
    html: str,
    meta: BaseMeta,
    open_graph: OpenGraphMeta,
    twitter: TwitterMeta,
    issues: Tuple[SeoIssue, ...],
) -> SeoAnalysisResult:
    """Package everything into the immutable report; no rule logic lives here."""
    normalized_url = normalize_url(final_url or requested_url)

    return SeoAnalysisResult(
        url=requested_url,
        normalized_url=normalized_url,
        html_length=len(html),
        meta=meta,
        open_graph=open_graph,
        twitter=twitter,
        issues=tuple(issues),
        summary=summarize_issues(issues),
        previews=build_previews(normalized_url, meta, open_graph, twitter),
    )

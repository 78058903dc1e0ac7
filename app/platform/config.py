from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "SEO Meta Analyzer"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: List[str] = ["*"]

    # ── Page fetch ──────────────────────────────
    FETCH_TIMEOUT: float = 10.0  # seconds, per phase and overall
    FETCH_MAX_BYTES: int = 2 * 1024 * 1024
    FETCH_MAX_REDIRECTS: int = 5
    FETCH_USER_AGENT: str = "SEO-Analyser-Bot/1.0 (+https://example.com; educational-purpose)"
    FETCH_ACCEPT: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    BLOCK_PRIVATE_TARGETS: bool = True

    # ── Logging ─────────────────────────────────
    LOG_DIR: str = "logs"
    LOG_FILE: str = "seo_analyzer.log"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()

from typing import Optional

from app.features.seo.schemas.seo import SeoAnalysisResult
from app.features.seo.services.fetcher import PageFetcher
from app.features.seo.services.meta_extractor import MetaExtractorService
from app.features.seo.services.report import build_analysis_result
from app.features.seo.services.rule_evaluator import evaluate_seo
from app.platform.exceptions import AppError, EmptyInputError, InternalAnalysisError
from app.platform.logger import get_logger
from app.platform.utils.url_validator import normalize_url, sanitize_url

logger = get_logger(__name__)


class SeoAnalyzerService:
    """
    Single-page SEO meta analysis:
    sanitize -> fetch -> parse -> extract -> evaluate -> assemble.

    Validation errors are raised before any network call. AppErrors
    propagate unchanged, anything else becomes InternalAnalysisError.
    """

    def __init__(self, fetcher: Optional[PageFetcher] = None):
        self.fetcher = fetcher or PageFetcher()

    async def analyze(self, raw_url: Optional[str]) -> SeoAnalysisResult:
        if raw_url is None or not raw_url.strip():
            raise EmptyInputError()

        target_url = sanitize_url(raw_url)
        logger.info(f"Analyzing {target_url}")

        page = await self.fetcher.fetch(target_url)

        try:
            result = self.build_report(target_url, page.final_url, page.html)
        except AppError:
            raise
        except Exception as e:
            logger.exception(f"SEO analysis failed for {target_url}: {e}")
            raise InternalAnalysisError() from e

        logger.info(
            f"Analyzed {target_url} (final: {result.normalized_url}): "
            f"{len(result.issues)} issues, score {result.summary.score}"
        )
        return result

    @staticmethod
    def build_report(requested_url: str, final_url: Optional[str], html: str) -> SeoAnalysisResult:
        """Everything after the fetch; pure and synchronous."""
        soup = MetaExtractorService.parse(html)
        meta, open_graph, twitter = MetaExtractorService.extract_meta(soup)

        comparison_url = normalize_url(final_url or requested_url)
        issues = evaluate_seo(comparison_url, meta, open_graph, twitter)

        return build_analysis_result(
            requested_url=requested_url,
            final_url=final_url,
            html=html,
            meta=meta,
            open_graph=open_graph,
            twitter=twitter,
            issues=issues,
        )

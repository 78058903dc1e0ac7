from app.features.seo.services.analyzer import SeoAnalyzerService


def get_analyzer_service() -> SeoAnalyzerService:
    """New service per request; nothing is shared between analyses."""
    return SeoAnalyzerService()

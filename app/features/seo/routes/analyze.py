from fastapi import APIRouter, Depends, status

from app.features.seo.dependencies.analyzer import get_analyzer_service
from app.features.seo.schemas.seo import AnalyzeRequest
from app.features.seo.services.analyzer import SeoAnalyzerService
from app.platform.response import api_response

router = APIRouter(prefix="/seo", tags=["SEO"])


@router.post(
    "/analyze",
    response_model=dict,
    status_code=status.HTTP_200_OK,
    summary="Analyze a page's SEO meta tags",
    description=(
        "Fetch one page, extract its base / Open Graph / Twitter metadata and "
        "return the issue checklist, score summary and preview data"
    ),
)
async def analyze_page(
    request: AnalyzeRequest,
    analyzer: SeoAnalyzerService = Depends(get_analyzer_service),
):
    result = await analyzer.analyze(request.url)

    return api_response(
        data=result,
        message="Analysis completed successfully",
        status_code=status.HTTP_200_OK,
    )

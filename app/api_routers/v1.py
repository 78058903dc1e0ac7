from fastapi import APIRouter

from app.features.seo.routes.analyze import router as seo_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(seo_router)

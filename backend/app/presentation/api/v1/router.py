"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from app.presentation.api.v1.endpoints.health import router as health_router
from app.presentation.api.v1.endpoints.records import router as records_router
from app.presentation.api.v1.endpoints.stats import router as stats_router
from app.presentation.api.v1.endpoints.export import router as export_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(records_router)
router.include_router(stats_router)
router.include_router(export_router)

"""Health check endpoint — reports liveness and record store connectivity."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.domain.exceptions import StoreError
from app.infrastructure.dependencies import get_record_store
from app.infrastructure.database.store import RecordStore

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    request: Request,
    store: RecordStore = Depends(get_record_store),
) -> JSONResponse:
    """Returns the current application health status, pinging the record store."""
    settings = get_settings()
    timestamp = datetime.now(timezone.utc).isoformat()

    try:
        await store.ping()
    except StoreError as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "error": exc.message,
                "timestamp": timestamp,
            },
        )

    return JSONResponse(
        content={
            "status": "healthy",
            "database": "connected",
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "timestamp": timestamp,
            "version": settings.app_version,
            "environment": settings.app_env,
        }
    )

"""FastAPI application factory."""

import logging
import time
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import RecordStore, StoreRetryPolicy
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.error_handlers import register_error_handlers
from app.presentation.api.v1.router import router as v1_router

logger = logging.getLogger(__name__)


def _build_record_store() -> RecordStore:
    """Construct the process-wide RecordStore from settings; no connection is made yet."""
    settings = get_settings()
    return RecordStore(
        settings.database_url,
        retry_policy=StoreRetryPolicy(
            max_attempts=settings.store_connect_max_attempts,
            backoff_seconds=settings.store_connect_backoff_seconds,
            max_backoff_seconds=settings.store_connect_max_backoff_seconds,
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup and release the record store on shutdown."""
    settings = get_settings()
    setup_logging()
    logger.info("%s %s starting (%s)", settings.app_title, settings.app_version, settings.app_env)

    yield

    # Shutdown
    await app.state.record_store.dispose()


def create_app(store: RecordStore | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    Tests pass their own ``store`` (e.g. backed by a temporary SQLite file).
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.record_store = store if store is not None else _build_record_store()
    app.state.started_at = time.monotonic()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Mount API routes
    app.include_router(v1_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )

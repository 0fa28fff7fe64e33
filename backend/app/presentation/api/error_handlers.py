"""Global exception handlers. Every failure is rendered as ``{"success": false, "error": ...}``."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.application.schemas import ErrorResponse
from app.domain.exceptions import AuthError, ConflictError, StoreError, ValidationError

logger = logging.getLogger(__name__)

_DOMAIN_STATUS: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    for exc_type, status_code in _DOMAIN_STATUS.items():
        _register_domain_error_handler(app, exc_type, status_code)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(
    app: FastAPI, exc_type: type[Exception], status_code: int
) -> None:

    @app.exception_handler(exc_type)
    async def domain_error_handler(request: Request, exc: Exception):
        message = getattr(exc, "message", str(exc))
        if status_code >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, message)
        else:
            logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, message)
        return _error_response(status_code, message)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Malformed query parameters or bodies are client errors (400)."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
            for e in exc.errors()
        )
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            f"Invalid request data ({details})" if details else "Invalid request data",
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            "Unhandled exception on %s: %s", request.url.path, exc, exc_info=True,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )

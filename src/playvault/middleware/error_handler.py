"""Exception handlers. Every error leaves the API as ``{"message", "code"}``."""

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from playvault.errors import InsufficientBalanceError, PlayVaultError
from playvault.schemas import ErrorResponse

logger = structlog.get_logger()

_STATUS_CODES = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    429: "rate_limited",
}


def _error_body(message: str, code: str, **extra: object) -> dict:
    return {**ErrorResponse(message=message, code=code).model_dump(), **extra}


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(PlayVaultError)
    async def domain_exception_handler(request: Request, exc: PlayVaultError) -> JSONResponse:
        extra: dict = {}
        if isinstance(exc, InsufficientBalanceError):
            extra = {"currentBalance": exc.current_balance, "requiredAmount": exc.required_amount}
        if exc.status_code >= 500:
            logger.error("domain_error", path=request.url.path, code=exc.code, error=exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code, **extra),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Routing errors (unknown path, wrong method) in the same shape as domain errors."""
        message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(message, _STATUS_CODES.get(exc.status_code, "http_error")),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies and query strings are client errors (400)."""
        return JSONResponse(
            status_code=400,
            content=_error_body("Invalid request", "validation_error", errors=jsonable_encoder(exc.errors())),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all. The client gets a generic message; details go to the log."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("Internal server error", "internal_error"),
        )

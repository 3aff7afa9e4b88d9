"""Middleware and exception handler wiring for the app factory."""

from fastapi import FastAPI

from playvault.config import Settings
from playvault.middleware.cors import setup_cors
from playvault.middleware.error_handler import setup_error_handlers
from playvault.middleware.logging import setup_logging
from playvault.middleware.rate_limit import RateLimitMiddleware
from playvault.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install logging, error handlers and the middleware stack.

    The stack runs CORS -> request id -> rate limit -> routes. Starlette wraps
    in reverse-add order, hence CORS is added last. ``rate_limit_requests <= 0``
    leaves the limiter out entirely.
    """
    setup_logging(settings)
    setup_error_handlers(app)

    if settings.rate_limit_requests > 0:
        app.add_middleware(
            RateLimitMiddleware,
            requests_per_window=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)

"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from playvault.auth.router import router as auth_router
from playvault.config import get_settings
from playvault.database import close_db, get_session, init_db
from playvault.gamification.router import router as gamification_router
from playvault.games.router import router as games_router
from playvault.health.router import router as health_router
from playvault.middleware import setup_middleware
from playvault.redis_client import close_redis, init_redis
from playvault.referrals.router import router as referrals_router
from playvault.rewards.router import router as rewards_router
from playvault.rewards.seed import seed_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url, socket_timeout=settings.redis_socket_timeout)

    if settings.seed_catalog:
        try:
            async for db in get_session():
                await seed_catalog(db)
                break
        except SQLAlchemyError:
            logger.warning("Catalog seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="PlayVault API",
        description="Backend API for PlayVault: earn XP, level up, redeem rewards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(gamification_router)
    app.include_router(rewards_router)
    app.include_router(games_router)
    app.include_router(referrals_router)

    return app


app = create_app()

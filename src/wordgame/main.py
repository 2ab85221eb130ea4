"""FastAPI application factory for the Tamil word game backend."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import APIRouter, FastAPI
from sqlalchemy.exc import SQLAlchemyError

from wordgame.auth.router import router as auth_router
from wordgame.config import get_settings
from wordgame.database import close_db, get_session_factory, init_db
from wordgame.games.router import router as games_router
from wordgame.health.router import router as health_router
from wordgame.leaderboard.router import router as leaderboard_router
from wordgame.middleware import setup_middleware
from wordgame.users.router import router as users_router
from wordgame.words.router import router as words_router
from wordgame.words.service import seed_sample_words

logger = structlog.get_logger()

API_ROUTERS: tuple[APIRouter, ...] = (
    auth_router,
    games_router,
    leaderboard_router,
    users_router,
    words_router,
)


async def _seed_word_pool() -> None:
    """Top up the sample vocabulary so a fresh install has something to play."""
    try:
        async with get_session_factory()() as db:
            added = await seed_sample_words(db)
    except SQLAlchemyError:
        # Tables missing before the first `alembic upgrade head`
        logger.warning("sample_word_seeding_failed", exc_info=True)
        return
    logger.info("word_pool_ready", seeded=added)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.seed_sample_words:
        await _seed_word_pool()
    logger.info("api_started", environment=settings.environment, version=settings.app_version)

    yield

    await close_db()


def create_app() -> FastAPI:
    """Build the app: middleware first, then health probes and the API routers."""
    settings = get_settings()

    app = FastAPI(
        title="Tamil Word Game API",
        description="Sessions, scoring, leaderboards and vocabulary for the Tamil word game",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    for router in API_ROUTERS:
        app.include_router(router)

    return app


app = create_app()

"""Ticket Assignment Engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.persistence.database import async_session_factory, engine
from app.adapters.persistence.repositories import SqlSettingsRepository
from app.config import settings
from app.domain.errors import InvalidSettingsError
from app.infrastructure.api.routes_agents import router as agents_router
from app.infrastructure.api.routes_assignments import router as assignments_router
from app.infrastructure.api.routes_health import router as health_router
from app.infrastructure.api.routes_settings import router as settings_router
from app.infrastructure.api.routes_webhooks import router as webhooks_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def check_engine_settings() -> None:
    """Load the persisted settings once so bad values show up in the startup log."""
    async with async_session_factory() as session:
        try:
            engine_settings = await SqlSettingsRepository(session).load()
        except InvalidSettingsError as e:
            logger.error("Persisted engine settings are invalid: %s", e)
            return
    logger.info(
        "Engine settings: auto_assign=%s, threshold=%.2f, location=%s",
        engine_settings.assignment.auto_assign_enabled,
        engine_settings.assignment.min_score_threshold,
        engine_settings.eligibility.location_matching.value,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if not settings.freshservice_domain or not settings.freshservice_api_key:
        logger.warning("Freshservice is not configured; tickets cannot be fetched or assigned")
    try:
        await check_engine_settings()
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Ticket Assignment Engine",
        description="Eligibility filtering, multi-factor scoring and assignment of support tickets",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS for the admin frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in (health_router, assignments_router, settings_router, agents_router, webhooks_router):
        app.include_router(router, prefix="/api")

    return app


app = create_app()

"""
Eido backend - FastAPI Application Entry Point.

Feature-based modular architecture:
  Each feature in eido/features/ has its own schemas, service, and router.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eido.config import get_settings

# ── Feature Routers ──────────────────────────────────────
from eido.features.calendar.router import router as calendar_router
from eido.features.uploads.router import router as uploads_router
from eido.features.preferences.router import router as preferences_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup & shutdown."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    logger.info(f"🔗 Supabase: {settings.SUPABASE_URL[:40]}...")

    if settings.SCHEDULER_ENABLED:
        from eido.background.scheduler import init_scheduler
        init_scheduler()

    yield

    if settings.SCHEDULER_ENABLED:
        from eido.background.scheduler import shutdown_scheduler
        shutdown_scheduler()
    logger.info("👋 Shutting down...")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Classes, calendar and file ingestion API for Eido",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Register Feature Routers ─────────────────────────
    app.include_router(calendar_router, prefix="/api/calendar", tags=["Calendar"])
    app.include_router(uploads_router, prefix="/api/uploads", tags=["Uploads"])
    app.include_router(preferences_router, prefix="/api/preferences", tags=["Preferences"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()

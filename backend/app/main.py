"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.routes import api_router
from app.config import get_settings
from app.core.logging import setup_logging
from app.core.telemetry import setup_telemetry
from app.db.init import init_database
from app.db.session import Database, get_db
from app.db.session import database as default_database

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    """Build the application bound to ``database`` (the shared instance by default)."""

    settings = get_settings()
    setup_logging()

    database = database or default_database

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialise the database schema when the service boots."""

        logger.info("Starting %s with %s", settings.app_name, settings.dict_for_logging()["database_url"])
        await init_database(database)
        yield
        await database.dispose()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    setup_telemetry(app, settings, engine=database.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["traceparent", "tracestate", "x-request-id"],
    )
    register_exception_handlers(app)
    app.dependency_overrides[get_db] = database.get_session

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "timezone": settings.timezone,
        }

    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]

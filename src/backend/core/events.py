"""
Application lifecycle event handlers.

Manages startup and shutdown of the database connection pool. The in-memory
backend needs neither.
"""

from typing import Callable

import structlog
from fastapi import FastAPI

from core.config import settings
from db.session import close_db, init_db

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        logger.info("Starting IdeaBox API...", storage=settings.STORAGE_BACKEND)

        if settings.STORAGE_BACKEND == "postgres":
            await init_db()
            logger.info("Database initialized")

        logger.info("IdeaBox API started successfully")

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        logger.info("Shutting down IdeaBox API...")

        if settings.STORAGE_BACKEND == "postgres":
            await close_db()

        logger.info("IdeaBox API shutdown complete", subscribers=app.state.change_feed.subscriber_count)

    return stop_app

"""
IdeaBox Backend Application

A product-feedback board: users submit improvement ideas and spend a limited
number of votes per quarter on the ones they want most.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from api.v1 import router as api_v1_router
from core.config import settings
from core.events import create_start_app_handler, create_stop_app_handler
from core.exceptions import ErrorKind, IdeaBoxError
from core.logging_config import configure_logging
from repositories.memory_repository import InMemoryStore
from schemas.vote import ErrorResponse
from services.change_feed import ChangeFeed

logger = structlog.get_logger(__name__)

API_VERSION = "1.0.0"

# Seconds a client should wait before retrying after a store outage
RETRY_AFTER_SECONDS = 5

ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.ALREADY_VOTED: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_VOTED: status.HTTP_404_NOT_FOUND,
    ErrorKind.QUOTA_EXHAUSTED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.IDEA_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    await create_start_app_handler(app)()
    yield
    # Shutdown
    await create_stop_app_handler(app)()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    application = FastAPI(
        title=settings.APP_NAME,
        description="Product-feedback board with quarterly vote quotas",
        version=API_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # Per-application state, so separate app instances never share votes or subscribers
    application.state.change_feed = ChangeFeed()
    if settings.STORAGE_BACKEND == "memory":
        application.state.memory_store = InMemoryStore()

    # Add middleware (order matters - processed in reverse)
    # 1. CORS - restricted to specific methods and headers
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["Retry-After"],
    )

    # 2. GZip compression for responses
    application.add_middleware(GZipMiddleware, minimum_size=1000)

    # Include routers
    application.include_router(api_v1_router, prefix="/api/v1")

    @application.exception_handler(IdeaBoxError)
    async def ideabox_exception_handler(request: Request, exc: IdeaBoxError) -> JSONResponse:
        """Render domain errors with a stable kind plus notification title and message."""
        status_code = ERROR_STATUS_CODES.get(exc.kind, status.HTTP_400_BAD_REQUEST)
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if exc.retryable else None

        logger.info(
            "request_rejected",
            error=exc.kind.value,
            status_code=status_code,
            path=request.url.path,
            method=request.method,
        )

        body = ErrorResponse(error=exc.kind.value, title=exc.title, detail=exc.message)
        return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)

    # Add global exception handler to ensure CORS headers are present on error responses
    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler to catch unhandled exceptions.

        Unexpected errors are logged with their context and returned as a
        structured 500 so failures are never reported as success.
        """
        logger.exception(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )

        # Return a proper JSON response - CORS middleware will add headers
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An internal server error occurred. Please try again later.",
                "error_type": type(exc).__name__ if settings.DEBUG else "InternalServerError",
            },
        )

    @application.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for load balancers and monitoring."""
        return {"status": "healthy", "service": "ideabox-api", "storage": settings.STORAGE_BACKEND}

    @application.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": API_VERSION,
            "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
        }

    return application


app = create_application()

"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order

For local development:
    uvicorn trainerdesk.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import (
    availability,
    clients,
    earnings,
    health,
    payments,
    progress,
    schedules,
)
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=get_settings().log_level.upper(),
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs on startup and shutdown. FastAPI calls this automatically.
    """
    settings = get_settings()

    logger.info(
        "TrainerDesk API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": settings.snowflake_mock_mode,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )
        # For development, we log the error but continue

    yield

    logger.info("TrainerDesk API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Called once at startup, or per test with different configurations.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Client, billing and schedule management for personal trainers.

        ## Features

        - Track clients with a monthly fee and a start date
        - Record payments; each is attributed to the client's billing cycle
        - See who has paid, partially paid or not paid this cycle
        - Plan weekly workout schedules and find free time slots
        - Log weight progress

        ## Authentication

        All endpoints require an API key in the `X-API-Key` header and the
        trainer's identity in the `X-User-Id` header.

        ## Billing cycles

        A client's billing cycle starts on the day of the month they
        started. When that day doesn't exist in a month, the cycle starts
        on the month's last day instead.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Configure allowed origins via CORS_ORIGINS environment variable
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        clients.router,
        prefix="/api/v1/clients",
        tags=["Clients"],
    )

    app.include_router(
        payments.router,
        prefix="/api/v1/payments",
        tags=["Payments"],
    )

    app.include_router(
        schedules.router,
        prefix="/api/v1/schedules",
        tags=["Schedules"],
    )

    app.include_router(
        progress.router,
        prefix="/api/v1/progress",
        tags=["Progress"],
    )

    app.include_router(
        availability.router,
        prefix="/api/v1/availability",
        tags=["Availability"],
    )

    app.include_router(
        earnings.router,
        prefix="/api/v1/earnings",
        tags=["Earnings"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - points at the docs."""
        return {
            "message": "TrainerDesk API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "trainerdesk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )

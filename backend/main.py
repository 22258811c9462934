"""
Auto-Schedule - Main Application Entry Point

Places tasks onto the calendar inside business hours, around existing
commitments, and asks before overriding conflicts.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from autoschedule.core.config import get_settings
from autoschedule.core.logger import setup_logger, setup_logging

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting Auto-Schedule in {settings.ENVIRONMENT} mode...")

    # Initialize database if needed
    if settings.is_local:
        from autoschedule.infrastructure.local.database import init_db

        await init_db()

    yield

    # Shutdown
    logger.info("Shutting down Auto-Schedule...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Auto-Schedule",
        description="Business-hours aware task auto-scheduling",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from autoschedule.api import calendar, schedule, tasks

    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(calendar.router, prefix="/api/calendar", tags=["calendar"])
    app.include_router(schedule.router, prefix="/api/schedule", tags=["schedule"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )

"""HR Directory — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from hr_backend.absence.router import router as absence_router
from hr_backend.auth.router import router as auth_router
from hr_backend.common.exceptions import register_exception_handlers
from hr_backend.common.rate_limit import limiter
from hr_backend.common.request_logging import RequestLoggingMiddleware, configure_logging
from hr_backend.config import settings
from hr_backend.core_hr.router import employees_router, teams_router
from hr_backend.database import engine
from hr_backend.feedback.router import router as feedback_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    configure_logging(settings.LOG_LEVEL)
    logger.info("HR Directory starting (environment=%s)", settings.ENVIRONMENT)
    yield
    await engine.dispose()
    logger.info("HR Directory stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="HR Directory",
        description="Employees, teams, absence requests and peer feedback",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Access log
    app.add_middleware(RequestLoggingMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(employees_router, prefix="/api/employees", tags=["employees"])
    app.include_router(teams_router, prefix="/api/teams", tags=["teams"])
    app.include_router(absence_router, prefix="/api/absence-requests", tags=["absence"])
    app.include_router(feedback_router, prefix="/api/feedback", tags=["feedback"])

    return app


app = create_app()

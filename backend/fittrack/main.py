"""
FitTrack - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .agents import KeywordCoachResponder, MockFoodClassifier, MockPostureAnalyzer, RandomStepSource
from .api import (
    auth_router,
    coach_router,
    food_router,
    posture_router,
    profile_router,
    progress_router,
    workouts_router,
)
from .config import Settings, settings as default_settings
from .core import WorkoutCatalog
from .core.logging_config import setup_logging
from .identity import IdentityService
from .middleware import RequestLoggingMiddleware
from .storage import LocalStorage

logger = logging.getLogger(__name__)


def _build_store(settings: Settings):
    if settings.storage_type != "local":
        raise ValueError(f"Unsupported storage type: {settings.storage_type}")
    return LocalStorage(settings.local_storage_path)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings; the environment-derived defaults when None

    Returns:
        FastAPI: Application whose services are created in its lifespan
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        setup_logging(settings)

        store = _build_store(settings)
        app.state.settings = settings
        app.state.store = store
        app.state.identity = IdentityService.from_settings(store, settings)
        app.state.catalog = WorkoutCatalog(store)
        app.state.coach = KeywordCoachResponder()
        app.state.food_classifier = MockFoodClassifier()
        app.state.posture_analyzer = MockPostureAnalyzer()
        app.state.step_source = RandomStepSource(settings.mock_steps_min, settings.mock_steps_max)

        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Storage: {settings.storage_type} at {settings.local_storage_path}")
        logger.info(f"Log level: {settings.log_level.upper()}")
        logger.info(f"Debug mode: {settings.debug}")
        yield
        logger.info(f"Shutting down {settings.app_name}")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Workout, food and weight tracking with a rule-based fitness coach",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.log_api_requests:
        app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report invalid request bodies and parameters as 400."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Any other failure is a 500 carrying the exception text."""
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )

    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(workouts_router)
    app.include_router(food_router)
    app.include_router(coach_router)
    app.include_router(progress_router)
    app.include_router(posture_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "storage": settings.storage_type,
            "version": settings.app_version
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fittrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.debug
    )

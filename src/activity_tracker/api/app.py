"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from activity_tracker.api.activities import router as activities_router
from activity_tracker.api.meals import router as meals_router
from activity_tracker.api.preferences import router as preferences_router
from activity_tracker.app_logging import configure_logging
from activity_tracker.containers import AppContainer
from activity_tracker.domain.errors import (
    AINotConfiguredError,
    AIError,
    NotProvisionedError,
    StoreError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(activities_router)
    app.include_router(meals_router)
    app.include_router(preferences_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(ValidationError)
    async def validation_failed(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"field": exc.field, "detail": exc.message},
        )

    @app.exception_handler(NotProvisionedError)
    async def not_provisioned(
        request: Request, exc: NotProvisionedError
    ) -> JSONResponse:
        logger.warning("Write to missing table %s (%s)", exc.table, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "This feature is not available yet."},
        )

    @app.exception_handler(StoreError)
    async def store_failed(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Could not reach storage. Please try again."},
        )

    @app.exception_handler(AINotConfiguredError)
    async def ai_not_configured(
        request: Request, exc: AINotConfiguredError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Meal analysis requires an OpenAI API key."},
        )

    @app.exception_handler(AIError)
    async def ai_failed(request: Request, exc: AIError) -> JSONResponse:
        logger.warning("AI request failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": "Unable to analyze the meal description. "
                "Please adjust the details and try again."
            },
        )

    return app

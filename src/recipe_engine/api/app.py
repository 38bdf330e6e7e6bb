"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from recipe_engine.api.recipes import router as recipes_router
from recipe_engine.app_logging import configure_logging
from recipe_engine.containers import AppContainer
from recipe_engine.errors import (
    AuthError,
    NoServiceAvailableError,
    NotFoundError,
    ParseError,
    ProviderError,
    RecipeEngineError,
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

    app.include_router(recipes_router)

    @app.exception_handler(RecipeEngineError)
    async def handle_engine_error(
        _request: Request, exc: RecipeEngineError
    ) -> JSONResponse:
        status_code = error_status(exc)
        logger.warning("%s (%s): %s", type(exc).__name__, status_code, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": exc.user_message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def error_status(exc: RecipeEngineError) -> int:
    """Map an engine error to an HTTP status code."""
    if isinstance(exc, AuthError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, NoServiceAvailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, ProviderError | ParseError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR

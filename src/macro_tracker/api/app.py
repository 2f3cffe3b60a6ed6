"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from macro_tracker.api.ingredients import router as ingredients_router
from macro_tracker.api.meals import router as meals_router
from macro_tracker.api.profiles import router as profiles_router
from macro_tracker.api.recipes import router as recipes_router
from macro_tracker.app_logging import configure_logging
from macro_tracker.containers import AppContainer
from macro_tracker.domain.errors import MacroTrackerError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(logging.DEBUG if container.settings.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(ingredients_router)
    app.include_router(recipes_router)
    app.include_router(meals_router)
    app.include_router(profiles_router)

    @app.exception_handler(MacroTrackerError)
    async def domain_error_handler(
        request: Request, exc: MacroTrackerError
    ) -> JSONResponse:
        logger.warning("Rejected request: path=%s error=%s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.exception_handler(httpx.HTTPError)
    async def upstream_error_handler(
        request: Request, exc: httpx.HTTPError
    ) -> JSONResponse:
        logger.error(
            "Upstream request failed: path=%s", request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Ingredient lookup failed"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app

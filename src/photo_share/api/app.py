"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from photo_share.api.images import router as images_router
from photo_share.api.users import router as users_router
from photo_share.app_logging import configure_logging
from photo_share.containers import AppContainer
from photo_share.domain.errors import ImageRequestError, StorageFailure


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

    app.include_router(images_router)
    app.include_router(users_router)

    @app.exception_handler(ImageRequestError)
    async def image_request_error(
        request: Request, exc: ImageRequestError
    ) -> JSONResponse:
        logger.warning(
            "Rejected request: %s",
            exc,
            extra={"path": request.url.path, "error": type(exc).__name__},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.exception_handler(StorageFailure)
    async def storage_failure(request: Request, exc: StorageFailure) -> JSONResponse:
        logger.error("Storage failure: %s", exc, extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app

"""Bearer token authentication for API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from photo_share.domain.uploads import UploadContext  # noqa: TC001

if TYPE_CHECKING:
    from photo_share.containers import AppContainer


async def require_upload_context(
    request: Request,
    authorization: str | None = Header(default=None),
    x_device_id: str | None = Header(default=None),
) -> UploadContext:
    """Resolve the caller's identity from the Authorization header."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    container: AppContainer = request.app.state.container
    context = container.identity_service.resolve(token.strip(), x_device_id)
    if context is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return context

"""Image API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from photo_share.api.auth import require_upload_context
from photo_share.api.form_parts import is_multipart_form, parse_form_parts
from photo_share.containers import AppContainer
from photo_share.domain.uploads import UploadContext, UploadPart

router = APIRouter(prefix="/images", tags=["images"])

logger = logging.getLogger(__name__)


@router.get("")
async def list_images(request: Request) -> dict[str, object]:
    """Return all images with their owners."""
    container: AppContainer = request.app.state.container
    collection = await container.document_reader.list_images()
    if collection is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read images",
        )
    return collection


@router.get("/{image_id}")
async def get_image(image_id: str, request: Request) -> dict[str, object]:
    """Return a single image record."""
    container: AppContainer = request.app.state.container
    record = await container.document_reader.read_image_by_id(image_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return record


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request,
    context: UploadContext = Depends(require_upload_context),
) -> dict[str, object]:
    """Store an uploaded image and start its processing."""
    container: AppContainer = request.app.state.container
    parts = await _read_parts(request)
    return await container.image_service.upload(parts, context)


async def _read_parts(request: Request) -> list[UploadPart] | None:
    """Read multipart form parts, or None when the body is not a form."""
    content_type = request.headers.get("content-type", "")
    if not is_multipart_form(content_type):
        return None
    body = await request.body()
    try:
        return parse_form_parts(body, content_type)
    except ValueError:
        logger.exception("Failed to parse multipart body")
        return None

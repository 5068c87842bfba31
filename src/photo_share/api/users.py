"""User API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from photo_share.api.auth import require_upload_context
from photo_share.containers import AppContainer
from photo_share.domain.uploads import UploadContext

router = APIRouter(prefix="/users", tags=["users"])


class UserRegistrationRequest(BaseModel):
    """Body of a user registration request."""

    name: str = Field(min_length=1)


@router.get("")
async def list_users(request: Request) -> dict[str, object]:
    """Return all registered users."""
    container: AppContainer = request.app.state.container
    collection = await container.document_reader.list_users()
    if collection is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read users",
        )
    return collection


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_user(
    body: UserRegistrationRequest,
    request: Request,
    response: Response,
    context: UploadContext = Depends(require_upload_context),
) -> dict[str, object]:
    """Register the calling user and create their image container."""
    container: AppContainer = request.app.state.container
    registration = await container.user_service.register(context.user_id, body.name)
    if not registration.created:
        response.status_code = status.HTTP_200_OK
    return registration.user


@router.get("/{user_id}/images")
async def list_user_images(user_id: str, request: Request) -> dict[str, object]:
    """Return the images uploaded by a user."""
    container: AppContainer = request.app.state.container
    collection = await container.document_reader.list_user_images(user_id)
    if collection is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read user images",
        )
    return collection

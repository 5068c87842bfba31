"""Image upload business logic."""

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from photo_share.domain.errors import MalformedDocument, StorageFailure
from photo_share.domain.uploads import UploadContext, UploadPart, decode_upload
from photo_share.domain.urls import build_url
from photo_share.services.documents import DocumentDatabase
from photo_share.services.pipeline import PipelineDispatcher
from photo_share.services.storage import StorageGateway

IMAGE_TYPE = "image"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

logger = logging.getLogger(__name__)


def enrich_image_json(
    image_json: dict[str, object],
    context: UploadContext,
    public_base: str,
    now: datetime,
) -> dict[str, object]:
    """Add server-derived fields to client-submitted image JSON."""
    file_name = image_json.get("fileName")
    if not isinstance(file_name, str) or not file_name.strip():
        raise MalformedDocument("Image document has no fileName")
    if "/" in file_name:
        raise MalformedDocument("fileName must not contain '/'")
    content_type, _ = mimetypes.guess_type(file_name)
    if content_type is None:
        raise MalformedDocument(f"Unsupported file type for {file_name!r}")

    enriched = dict(image_json)
    enriched["contentType"] = content_type
    enriched["url"] = build_url(public_base, context.user_id, file_name)
    enriched["userId"] = context.user_id
    enriched["deviceId"] = context.device_id
    enriched["uploadedTs"] = now.strftime(TIMESTAMP_FORMAT)
    enriched["type"] = IMAGE_TYPE
    return enriched


@dataclass
class ImageService:
    """Stores uploaded images and notifies the processing pipeline."""

    storage: StorageGateway
    database: DocumentDatabase
    dispatcher: PipelineDispatcher
    public_base: str
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    async def upload(
        self, parts: list[UploadPart] | None, context: UploadContext
    ) -> dict[str, object]:
        """Persist an uploaded image and return its stored record."""
        image_json, image_data = decode_upload(parts)
        record = enrich_image_json(image_json, context, self.public_base, self.clock())
        file_name = str(record["fileName"])
        logger.debug(
            "Uploading image",
            extra={"user_id": context.user_id, "file_name": file_name},
        )

        stored = await self.storage.store_object(
            image_data,
            file_name,
            context.user_id,
            content_type=str(record["contentType"]),
        )
        if not stored:
            raise StorageFailure(f"Failed to store image {file_name!r}")

        try:
            image_id, revision = await self.database.create_document(record)
        except Exception as exc:
            logger.exception(
                "Failed to persist image document, stored object left orphaned",
                extra={"container": context.user_id, "object": file_name},
            )
            raise StorageFailure("Failed to persist image document") from exc

        self.dispatcher.dispatch(image_id)
        return {**record, "_id": image_id, "_rev": revision}

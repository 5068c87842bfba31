"""Multipart image upload decoding."""

import json
import logging
from dataclasses import dataclass

from photo_share.domain.errors import InvalidEncoding, MissingPart, UnsupportedBody

IMAGE_JSON_PART = "imageJson"
IMAGE_BINARY_PART = "imageBinary"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadPart:
    """Single named part of a multipart form body.

    Bodies parsed from a request are raw ``bytes``; ``str`` bodies are text.
    """

    name: str
    body: str | bytes
    content_type: str | None = None


@dataclass(frozen=True)
class UploadContext:
    """Identity of the caller performing an upload."""

    user_id: str
    device_id: str


def decode_upload(parts: list[UploadPart] | None) -> tuple[dict[str, object], bytes]:
    """Extract the image JSON and image binary from multipart parts."""
    if parts is None:
        raise UnsupportedBody("Request has no multipart form body")

    image_json: dict[str, object] | None = None
    image_data: bytes | None = None
    for part in parts:
        if part.name == IMAGE_JSON_PART:
            image_json = _decode_json(part.body)
        elif part.name == IMAGE_BINARY_PART:
            if isinstance(part.body, bytes) and not _is_text(part.content_type):
                image_data = part.body
            else:
                logger.warning("Ignoring non-binary imageBinary part")

    if image_json is None:
        raise MissingPart(f"Missing {IMAGE_JSON_PART} part")
    if not image_data:
        raise MissingPart(f"Missing {IMAGE_BINARY_PART} part")
    return image_json, image_data


def _decode_json(body: str | bytes) -> dict[str, object]:
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncoding("imageJson is not UTF-8 text") from exc
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise InvalidEncoding("imageJson is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise InvalidEncoding("imageJson must be a JSON object")
    return payload


def _is_text(content_type: str | None) -> bool:
    return (content_type or "").lower().startswith("text/")

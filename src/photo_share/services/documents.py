"""Read paths over the document database views."""

import logging
from dataclasses import dataclass
from typing import Protocol

from photo_share.domain.errors import MalformedDocument
from photo_share.domain.records import (
    shape_image_records,
    shape_user_images,
    shape_user_records,
    wrap_as_collection,
)
from photo_share.domain.results import Err, Ok, QueryFailure

DESIGN_DOCUMENT = "main_design"
IMAGES_VIEW = "images"
IMAGES_BY_ID_VIEW = "images_by_id"
IMAGES_PER_USER_VIEW = "images_per_user"
USERS_VIEW = "users"

# Highest value in CouchDB key collation.
MAX_KEY: dict[str, object] = {}

logger = logging.getLogger(__name__)


class DocumentDatabase(Protocol):
    """Persistence interface for the document database."""

    async def query_view(
        self, design: str, view: str, params: dict[str, object]
    ) -> dict[str, object]:
        """Query a view and return the raw result document."""

    async def get_document(self, document_id: str) -> dict[str, object] | None:
        """Return a document by id, if present."""

    async def create_document(self, document: dict[str, object]) -> tuple[str, str]:
        """Create a document and return its id and revision."""


@dataclass
class DocumentReader:
    """Queries views and shapes their rows into client records."""

    database: DocumentDatabase
    public_base: str

    async def read_image_by_id(self, image_id: str) -> dict[str, object] | None:
        """Return the image record for an id, or None.

        Not found, duplicate matches and query errors are all reported as None.
        """
        result = await self.read_image_result(image_id)
        if isinstance(result, Err):
            logger.error(
                "Failed to get specific image document",
                extra={
                    "image_id": image_id,
                    "kind": result.kind.value,
                    "detail": result.detail,
                },
            )
            return None
        return result.value

    async def read_image_result(
        self, image_id: str
    ) -> Ok[dict[str, object]] | Err[QueryFailure]:
        """Look up a single image record, reporting why none was returned."""
        params: dict[str, object] = {
            "descending": True,
            "include_docs": True,
            "startkey": [image_id, MAX_KEY],
            "endkey": [image_id, 0],
        }
        try:
            document = await self.database.query_view(
                DESIGN_DOCUMENT, IMAGES_BY_ID_VIEW, params
            )
        except Exception as exc:
            return Err(QueryFailure.REQUEST_FAILED, f"{type(exc).__name__}: {exc}")
        try:
            records = shape_image_records(document, self.public_base)
        except MalformedDocument as exc:
            return Err(QueryFailure.MALFORMED, str(exc))
        if not records:
            return Err(QueryFailure.NOT_FOUND)
        if len(records) > 1:
            return Err(QueryFailure.DUPLICATE, f"{len(records)} matching records")
        return Ok(records[0])

    async def list_images(self) -> dict[str, object] | None:
        """Return all image records with their owners, newest first."""
        params: dict[str, object] = {"descending": True, "include_docs": True}
        document = await self._query(IMAGES_VIEW, params)
        if document is None:
            return None
        try:
            return wrap_as_collection(shape_image_records(document, self.public_base))
        except MalformedDocument:
            logger.exception("Invalid images document returned from database")
            return None

    async def list_user_images(self, user_id: str) -> dict[str, object] | None:
        """Return the image records owned by a user."""
        params: dict[str, object] = {
            "descending": True,
            "startkey": [user_id, MAX_KEY],
            "endkey": [user_id],
        }
        document = await self._query(IMAGES_PER_USER_VIEW, params)
        if document is None:
            return None
        try:
            records = shape_user_images(document, user_id, self.public_base)
        except MalformedDocument:
            logger.exception(
                "Invalid user images document returned from database",
                extra={"user_id": user_id},
            )
            return None
        return wrap_as_collection(records)

    async def list_users(self) -> dict[str, object] | None:
        """Return all user records."""
        document = await self._query(USERS_VIEW, {"descending": True})
        if document is None:
            return None
        try:
            return wrap_as_collection(shape_user_records(document))
        except MalformedDocument:
            logger.exception("Invalid users document returned from database")
            return None

    async def get_user(self, user_id: str) -> dict[str, object] | None:
        """Return a user document by id, or None when absent or unreadable."""
        try:
            return await self.database.get_document(user_id)
        except Exception:
            logger.exception("Failed to read user document", extra={"user_id": user_id})
            return None

    async def _query(
        self, view: str, params: dict[str, object]
    ) -> dict[str, object] | None:
        try:
            return await self.database.query_view(DESIGN_DOCUMENT, view, params)
        except Exception:
            logger.exception("Failed to query view", extra={"view": view})
            return None

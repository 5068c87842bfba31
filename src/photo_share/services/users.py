"""User registration business logic."""

import logging
from dataclasses import dataclass

from photo_share.domain.errors import StorageFailure
from photo_share.services.documents import DocumentDatabase, DocumentReader
from photo_share.services.storage import StorageGateway

USER_TYPE = "user"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registration:
    """Outcome of registering a user."""

    user: dict[str, object]
    created: bool


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    reader: DocumentReader
    database: DocumentDatabase
    storage: StorageGateway

    async def register(self, user_id: str, name: str) -> Registration:
        """Ensure a user document and image container exist for the id."""
        existing = await self.reader.get_user(user_id)
        if existing:
            return Registration(user=existing, created=False)

        if not await self.storage.create_container(user_id):
            raise StorageFailure(f"Failed to create container for user {user_id!r}")

        document: dict[str, object] = {"_id": user_id, "name": name, "type": USER_TYPE}
        try:
            _, revision = await self.database.create_document(document)
        except Exception as exc:
            logger.exception(
                "Failed to persist user document", extra={"user_id": user_id}
            )
            raise StorageFailure("Failed to persist user document") from exc
        return Registration(user={**document, "_rev": revision}, created=True)

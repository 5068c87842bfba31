"""Object storage gateway for per-user image containers."""

import logging
from dataclasses import dataclass
from typing import Protocol

from photo_share.domain.results import Err, Ok, StorageFailureStage

logger = logging.getLogger(__name__)

PUBLIC_CONTAINER_METADATA: dict[str, str] = {
    "X-Container-Meta-Web-Listings": "true",
    "X-Container-Read": ".r:*,.rlistings",
}


class ObjectStorageSession(Protocol):
    """Authenticated handle on an object storage account."""

    async def create_container(self, name: str) -> None:
        """Create a container."""

    async def retrieve_container(self, name: str) -> bool:
        """Return true when the container exists."""

    async def update_container_metadata(
        self, name: str, metadata: dict[str, str]
    ) -> None:
        """Apply metadata headers to a container."""

    async def store_object(
        self, container_name: str, name: str, data: bytes, content_type: str | None
    ) -> None:
        """Store an object in a container."""


class ObjectStorageClient(Protocol):
    """Factory for authenticated object storage sessions."""

    async def connect(self) -> ObjectStorageSession | None:
        """Authenticate and return a session handle."""


@dataclass
class StorageGateway:
    """Creates containers and stores image binaries.

    The ``*_result`` methods report the failing stage; the plain methods keep
    the boolean contract used by request handlers.
    """

    client: ObjectStorageClient

    async def create_container(self, name: str) -> bool:
        """Create a public container, returning whether it succeeded."""
        result = await self.create_container_result(name)
        return isinstance(result, Ok)

    async def store_object(
        self,
        data: bytes,
        name: str,
        container_name: str,
        content_type: str | None = None,
    ) -> bool:
        """Store an object in an existing container."""
        result = await self.store_object_result(
            data, name, container_name, content_type
        )
        return isinstance(result, Ok)

    async def create_container_result(
        self, name: str
    ) -> Ok[str] | Err[StorageFailureStage]:
        """Create a container and configure it for public web access."""
        session = await self._session()
        if session is None:
            return _failure(StorageFailureStage.SESSION, container=name)
        try:
            await session.create_container(name)
        except Exception as exc:
            return _failure(StorageFailureStage.CREATE, container=name, exc=exc)
        try:
            await session.update_container_metadata(name, PUBLIC_CONTAINER_METADATA)
        except Exception as exc:
            return _failure(StorageFailureStage.CONFIGURE, container=name, exc=exc)
        logger.info(
            "Created container for public access and web hosting",
            extra={"container": name},
        )
        return Ok(name)

    async def store_object_result(
        self,
        data: bytes,
        name: str,
        container_name: str,
        content_type: str | None = None,
    ) -> Ok[str] | Err[StorageFailureStage]:
        """Store an object, failing when the container does not exist."""
        session = await self._session()
        if session is None:
            return _failure(StorageFailureStage.SESSION, container=container_name)
        try:
            exists = await session.retrieve_container(container_name)
        except Exception as exc:
            return _failure(
                StorageFailureStage.RETRIEVE, container=container_name, exc=exc
            )
        if not exists:
            return _failure(StorageFailureStage.RETRIEVE, container=container_name)
        try:
            await session.store_object(container_name, name, data, content_type)
        except Exception as exc:
            return _failure(
                StorageFailureStage.STORE, container=container_name, exc=exc
            )
        logger.info(
            "Stored object", extra={"container": container_name, "object": name}
        )
        return Ok(name)

    async def _session(self) -> ObjectStorageSession | None:
        try:
            return await self.client.connect()
        except Exception:
            logger.exception("Failed to open object storage session")
            return None


def _failure(
    stage: StorageFailureStage, container: str, exc: Exception | None = None
) -> Err[StorageFailureStage]:
    detail = f"{type(exc).__name__}: {exc}" if exc else None
    logger.error(
        "Object storage %s step failed",
        stage.value,
        extra={"stage": stage.value, "container": container, "detail": detail},
    )
    return Err(stage, detail)

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photo_share.adapters.couchdb_client import HttpxCouchClient
from photo_share.adapters.pipeline_client import HttpxPipelineClient
from photo_share.adapters.supabase_identity_provider import SupabaseIdentityProvider
from photo_share.adapters.swift_object_storage import HttpxSwiftClient
from photo_share.config import Settings
from photo_share.services.documents import DocumentReader
from photo_share.services.identity import IdentityService
from photo_share.services.images import ImageService
from photo_share.services.pipeline import PipelineDispatcher
from photo_share.services.storage import StorageGateway
from photo_share.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_service: IdentityService
    document_reader: DocumentReader
    storage_gateway: StorageGateway
    pipeline_dispatcher: PipelineDispatcher
    image_service: ImageService
    user_service: UserService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    public_base = resolved_settings.object_storage_public_url

    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    identity_service = IdentityService(SupabaseIdentityProvider(supabase_client))

    couch_client = HttpxCouchClient.create(
        base_url=resolved_settings.couchdb_url,
        database=resolved_settings.couchdb_database,
        username=resolved_settings.couchdb_username,
        password=resolved_settings.couchdb_password,
        timeout=resolved_settings.database_timeout_seconds,
    )
    swift_client = HttpxSwiftClient.create(
        auth_url=resolved_settings.object_storage_auth_url,
        storage_url=public_base,
        project_id=resolved_settings.object_storage_project_id,
        user_id=resolved_settings.object_storage_user_id,
        password=resolved_settings.object_storage_password,
        timeout=resolved_settings.storage_timeout_seconds,
    )
    pipeline_client = HttpxPipelineClient.create(
        url=resolved_settings.pipeline_url,
        auth_token=resolved_settings.pipeline_auth_token,
        timeout=resolved_settings.pipeline_timeout_seconds,
    )

    document_reader = DocumentReader(database=couch_client, public_base=public_base)
    storage_gateway = StorageGateway(swift_client)
    pipeline_dispatcher = PipelineDispatcher(pipeline_client)
    image_service = ImageService(
        storage=storage_gateway,
        database=couch_client,
        dispatcher=pipeline_dispatcher,
        public_base=public_base,
    )
    user_service = UserService(
        reader=document_reader,
        database=couch_client,
        storage=storage_gateway,
    )

    async def close_resources() -> None:
        await pipeline_dispatcher.drain()
        await pipeline_client.close()
        await swift_client.close()
        await couch_client.close()

    return AppContainer(
        settings=resolved_settings,
        identity_service=identity_service,
        document_reader=document_reader,
        storage_gateway=storage_gateway,
        pipeline_dispatcher=pipeline_dispatcher,
        image_service=image_service,
        user_service=user_service,
        close_resources=close_resources,
    )

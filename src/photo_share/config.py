"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from photo_share.domain.urls import object_storage_public_base

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    couchdb_url: str
    couchdb_database: str = "photo_share"
    couchdb_username: str | None = None
    couchdb_password: str | None = None
    database_timeout_seconds: float = 10.0
    object_storage_access_point: str = "dal.objectstorage.open.softlayer.com"
    object_storage_auth_url: str = "https://identity.open.softlayer.com"
    object_storage_project_id: str
    object_storage_user_id: str
    object_storage_password: str
    storage_timeout_seconds: float = 30.0
    pipeline_host: str
    pipeline_path: str
    pipeline_auth_token: str
    pipeline_timeout_seconds: float = 30.0
    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def object_storage_public_url(self) -> str:
        """Public account URL that image URLs are built from."""
        return object_storage_public_base(
            self.object_storage_access_point, self.object_storage_project_id
        )

    @property
    def pipeline_url(self) -> str:
        """Full HTTPS URL of the processing pipeline endpoint."""
        return f"https://{self.pipeline_host}{self.pipeline_path}"

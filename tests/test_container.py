"""Tests for container wiring and settings."""

import asyncio

from photo_share.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.image_service.public_base == (
        "https://dal.objectstorage.open.softlayer.com/v1/AUTH_project"
    )
    assert container.document_reader.public_base == container.image_service.public_base
    asyncio.run(container.close_resources())


def test_settings_pipeline_url(settings) -> None:
    assert settings.pipeline_url == (
        "https://pipeline.test/api/v1/namespaces/_/actions/process"
    )

"""Tests for the image upload service."""

import asyncio
import logging

import pytest

from photo_share.domain.errors import MalformedDocument, MissingPart, StorageFailure
from photo_share.domain.uploads import UploadContext, UploadPart
from photo_share.services.images import ImageService, enrich_image_json
from photo_share.services.pipeline import PipelineDispatcher
from photo_share.services.storage import StorageGateway
from tests.conftest import (
    FIXED_NOW,
    PUBLIC_BASE,
    InMemoryDocumentDatabase,
    InMemoryObjectStorageClient,
    RecordingPipelineClient,
)

CONTEXT = UploadContext(user_id="u1", device_id="d1")


def _parts(image_json: str = '{"fileName": "a.png"}') -> list[UploadPart]:
    return [
        UploadPart(name="imageJson", body=image_json),
        UploadPart(name="imageBinary", body=b"\x89PNG-bytes"),
    ]


def _service(
    storage_client: InMemoryObjectStorageClient,
    database: InMemoryDocumentDatabase,
    pipeline_client: RecordingPipelineClient,
) -> ImageService:
    return ImageService(
        storage=StorageGateway(storage_client),
        database=database,
        dispatcher=PipelineDispatcher(pipeline_client),
        public_base=PUBLIC_BASE,
        clock=lambda: FIXED_NOW,
    )


def test_enrich_image_json_adds_derived_fields() -> None:
    enriched = enrich_image_json(
        {"fileName": "a.png", "caption": "hello", "url": "https://evil"},
        CONTEXT,
        PUBLIC_BASE,
        FIXED_NOW,
    )

    assert enriched == {
        "fileName": "a.png",
        "caption": "hello",
        "contentType": "image/png",
        "url": f"{PUBLIC_BASE}/u1/a.png",
        "userId": "u1",
        "deviceId": "d1",
        "uploadedTs": "2024-05-01T12:30:45",
        "type": "image",
    }


@pytest.mark.parametrize(
    "image_json",
    [{}, {"fileName": ""}, {"fileName": "../a.png"}, {"fileName": "a.unknownext"}],
)
def test_enrich_image_json_rejects_bad_file_names(
    image_json: dict[str, object],
) -> None:
    with pytest.raises(MalformedDocument):
        enrich_image_json(image_json, CONTEXT, PUBLIC_BASE, FIXED_NOW)


def test_upload_stores_binary_persists_document_and_dispatches() -> None:
    storage_client = InMemoryObjectStorageClient(containers={"u1": {}})
    database = InMemoryDocumentDatabase()
    pipeline_client = RecordingPipelineClient()
    service = _service(storage_client, database, pipeline_client)

    async def scenario() -> dict[str, object]:
        record = await service.upload(_parts(), CONTEXT)
        await service.dispatcher.drain()
        return record

    record = asyncio.run(scenario())

    assert record["url"] == f"{PUBLIC_BASE}/u1/a.png"
    assert record["userId"] == "u1"
    assert record["deviceId"] == "d1"
    assert record["type"] == "image"
    assert record["_id"] == "doc-1"
    assert storage_client.containers["u1"]["a.png"] == b"\x89PNG-bytes"
    assert database.documents["doc-1"]["fileName"] == "a.png"
    assert pipeline_client.submitted == ["doc-1"]


def test_upload_without_container_fails_before_persisting() -> None:
    database = InMemoryDocumentDatabase()
    pipeline_client = RecordingPipelineClient()
    service = _service(InMemoryObjectStorageClient(), database, pipeline_client)

    with pytest.raises(StorageFailure):
        asyncio.run(service.upload(_parts(), CONTEXT))

    assert database.documents == {}
    assert pipeline_client.submitted == []


def test_upload_reports_document_write_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    database = InMemoryDocumentDatabase(fail_writes=True)
    pipeline_client = RecordingPipelineClient()
    storage_client = InMemoryObjectStorageClient(containers={"u1": {}})
    service = _service(storage_client, database, pipeline_client)

    logger = logging.getLogger("photo_share.services.images")
    logger.addHandler(caplog.handler)
    try:
        with pytest.raises(StorageFailure):
            asyncio.run(service.upload(_parts(), CONTEXT))
    finally:
        logger.removeHandler(caplog.handler)

    assert pipeline_client.submitted == []
    assert "a.png" in storage_client.containers["u1"]
    orphaned = [rec for rec in caplog.records if getattr(rec, "object", None)]
    assert [(rec.container, rec.object) for rec in orphaned] == [("u1", "a.png")]


def test_upload_propagates_decode_errors() -> None:
    service = _service(
        InMemoryObjectStorageClient(),
        InMemoryDocumentDatabase(),
        RecordingPipelineClient(),
    )

    with pytest.raises(MissingPart):
        asyncio.run(
            service.upload([UploadPart(name="imageJson", body="{}")], CONTEXT)
        )

"""Shaping of raw view rows into client-facing image and user records."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from photo_share.domain.errors import MalformedDocument
from photo_share.domain.urls import build_url

_STRIPPED_IMAGE_FIELDS = ("userId", "_attachments")


@dataclass(frozen=True)
class RowPair:
    """A user document and the image document that follows it in a view."""

    user_doc: dict[str, object]
    image_doc: dict[str, object]


def pair_rows(rows: list[Mapping[str, object]]) -> list[RowPair]:
    """Decode alternating (user, image) view rows into pairs."""
    if len(rows) % 2 != 0:
        raise MalformedDocument(
            f"Expected an even number of paired rows, got {len(rows)}"
        )
    pairs: list[RowPair] = []
    for index in range(0, len(rows), 2):
        user_doc = _row_doc(rows[index], index)
        image_doc = _row_doc(rows[index + 1], index + 1)
        user_ok = user_doc.get("type", "user") == "user"
        image_ok = image_doc.get("type", "image") == "image"
        if not (user_ok and image_ok):
            raise MalformedDocument(f"Rows {index} and {index + 1} are mis-ordered")
        pairs.append(RowPair(user_doc=user_doc, image_doc=image_doc))
    return pairs


def shape_image_record(
    image_doc: Mapping[str, object],
    user_doc: Mapping[str, object],
    container_name: str,
    public_base: str,
) -> dict[str, object]:
    """Return an image record with its owner embedded and its URL derived."""
    record = _shape(image_doc, container_name, public_base)
    record["user"] = dict(user_doc)
    return record


def shape_image_record_for_user(
    image_doc: Mapping[str, object], user_id: str, public_base: str
) -> dict[str, object]:
    """Return an image record from a per-user listing."""
    return _shape(image_doc, user_id, public_base)


def shape_image_records(
    document: Mapping[str, object], public_base: str
) -> list[dict[str, object]]:
    """Shape every (user, image) pair of a paired view result."""
    records = []
    for pair in pair_rows(_rows(document)):
        container_name = pair.user_doc.get("_id")
        if not isinstance(container_name, str) or not container_name:
            raise MalformedDocument("User document has no _id")
        records.append(
            shape_image_record(
                pair.image_doc, pair.user_doc, container_name, public_base
            )
        )
    return records


def shape_user_images(
    document: Mapping[str, object], user_id: str, public_base: str
) -> list[dict[str, object]]:
    """Shape the value rows of a per-user image listing."""
    return [
        shape_image_record_for_user(value, user_id, public_base)
        for value in _values(document)
    ]


def shape_user_records(document: Mapping[str, object]) -> list[dict[str, object]]:
    """Project the value field of every row."""
    return [dict(value) for value in _values(document)]


def wrap_as_collection(records: Iterable[dict[str, object]]) -> dict[str, object]:
    """Wrap records in the envelope shared by all list responses."""
    items = list(records)
    return {"number_of_records": len(items), "records": items}


def _shape(
    image_doc: Mapping[str, object], container_name: str, public_base: str
) -> dict[str, object]:
    file_name = image_doc.get("fileName")
    if not isinstance(file_name, str) or not file_name:
        raise MalformedDocument("Image document has no fileName")
    record = {
        key: value
        for key, value in image_doc.items()
        if key not in _STRIPPED_IMAGE_FIELDS
    }
    record["url"] = build_url(public_base, container_name, file_name)
    return record


def _rows(document: Mapping[str, object]) -> list[Mapping[str, object]]:
    rows = document.get("rows")
    if not isinstance(rows, list):
        raise MalformedDocument("View result has no rows")
    return rows


def _row_doc(row: Mapping[str, object], index: int) -> dict[str, object]:
    doc = row.get("doc") if isinstance(row, Mapping) else None
    if not isinstance(doc, Mapping):
        raise MalformedDocument(f"Row {index} has no doc")
    return dict(doc)


def _values(document: Mapping[str, object]) -> list[Mapping[str, object]]:
    values = []
    for index, row in enumerate(_rows(document)):
        value = row.get("value") if isinstance(row, Mapping) else None
        if not isinstance(value, Mapping):
            raise MalformedDocument(f"Row {index} has no value")
        values.append(value)
    return values

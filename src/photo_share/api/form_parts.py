"""Raw multipart/form-data parsing that keeps every part's bytes and type."""

from python_multipart.multipart import MultipartParser, parse_options_header

from photo_share.domain.uploads import UploadPart

MULTIPART_FORM_DATA = b"multipart/form-data"


def is_multipart_form(content_type: str | None) -> bool:
    """Return true when a Content-Type header names a multipart form."""
    if not content_type:
        return False
    media_type, _ = parse_options_header(content_type)
    return media_type == MULTIPART_FORM_DATA


class _PartCollector:
    def __init__(self) -> None:
        self.parts: list[UploadPart] = []
        self._headers: dict[bytes, bytes] = {}
        self._field = b""
        self._value = b""
        self._data = bytearray()

    def callbacks(self) -> dict[str, object]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._field.lower()] = self._value
        self._field = b""
        self._value = b""

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data.extend(data[start:end])

    def on_part_end(self) -> None:
        _, disposition = parse_options_header(
            self._headers.get(b"content-disposition")
        )
        name = disposition.get(b"name")
        if name is None:
            raise ValueError("Multipart part has no name")
        content_type = self._headers.get(b"content-type")
        self.parts.append(
            UploadPart(
                name=name.decode("utf-8"),
                body=bytes(self._data),
                content_type=content_type.decode("latin-1") if content_type else None,
            )
        )


def parse_form_parts(body: bytes, content_type: str) -> list[UploadPart]:
    """Split a multipart/form-data body into named parts.

    Bodies are kept as raw bytes whether or not the part carries a filename.
    Raises ``ValueError`` on a missing boundary or malformed body.
    """
    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if not boundary:
        raise ValueError("Multipart body has no boundary")
    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())
    parser.write(body)
    parser.finalize()
    return collector.parts

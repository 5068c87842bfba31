"""Errors raised while handling image and user requests."""


class PhotoShareError(Exception):
    """Base class for errors surfaced to request handlers."""


class ImageRequestError(PhotoShareError):
    """A client request or stored document could not be processed."""


class MalformedDocument(ImageRequestError):
    """A document or view result does not have the expected shape."""


class MissingPart(ImageRequestError):
    """A required multipart form part is absent."""


class InvalidEncoding(ImageRequestError):
    """The image JSON part could not be decoded."""


class UnsupportedBody(ImageRequestError):
    """The request carries no parseable multipart body."""


class StorageFailure(PhotoShareError):
    """Persisting a binary or document failed."""

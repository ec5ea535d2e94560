"""Exceptions raised while extracting a body from a MIME message."""

from __future__ import annotations

__all__ = [
    "MimeError",
    "MessageFramingError",
    "ConvertError",
    "DecodeError",
    "Base64DecodeError",
    "QuotedPrintableDecodeError",
    "WalkError",
    "MissingBoundaryError",
    "DepthExceededError",
    "MultipartFramingError",
]


class MimeError(Exception):
    """Base class for every error raised by :mod:`mime_body`."""


class MessageFramingError(MimeError):
    """Raw bytes do not form an RFC 5322 header block and body."""


class ConvertError(MimeError):
    """Conversion of a message into a single body failed."""


class DecodeError(ConvertError):
    """A payload could not be decoded from its transfer encoding."""

    encoding = ""


class Base64DecodeError(DecodeError):
    encoding = "base64"


class QuotedPrintableDecodeError(DecodeError):
    encoding = "quoted-printable"


class WalkError(ConvertError):
    """Traversal of a multipart body failed."""


class MissingBoundaryError(WalkError):
    """A ``multipart/*`` content type has no ``boundary`` parameter."""

    def __init__(self, media_type: str) -> None:
        super().__init__(f"{media_type} has no boundary parameter")
        self.media_type = media_type


class DepthExceededError(WalkError):
    """Multipart nesting is deeper than the configured maximum."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"multipart nesting exceeds maximum depth of {max_depth}")
        self.max_depth = max_depth


class MultipartFramingError(WalkError):
    """Delimiter lines are missing or the body ends before the close delimiter."""

    def __init__(self, boundary: str, reason: str) -> None:
        super().__init__(f"boundary {boundary!r}: {reason}")
        self.boundary = boundary

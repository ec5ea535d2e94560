"""Header/body framing for RFC 5322 messages and MIME parts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from email import errors as email_errors
from email.message import Message
from email.parser import BytesHeaderParser
from email.policy import compat32
from email.utils import collapse_rfc2231_value
from typing import Optional, Tuple

from .errors import MessageFramingError
from .types import MediaType

__all__ = [
    "RawMessage",
    "parse_raw_message",
    "parse_header_block",
    "parse_media_type",
    "header_value",
]

_HEADER_END = re.compile(rb"\r?\n\r?\n")
_TOKEN = r"[!#$%&'*+\-.^_`|~0-9a-z]+"
_MEDIA_TYPE = re.compile(rf"^{_TOKEN}(?:/{_TOKEN})?$")
_PARAMS = re.compile(
    rf'(?:\s*;\s*{_TOKEN}\s*=\s*(?:{_TOKEN}|"(?:[^"\\]|\\.)*"))*\s*;?\s*',
    re.IGNORECASE | re.DOTALL,
)
_FOLD = re.compile(r"\r?\n(?=[ \t])")

# Defects meaning the header block is not made of header lines.
_FATAL_DEFECTS = (
    email_errors.MissingHeaderBodySeparatorDefect,
    email_errors.FirstHeaderLineIsContinuationDefect,
)


@dataclass
class RawMessage:
    """Headers of a message plus its unparsed body bytes."""

    headers: Message
    body: bytes

    def get(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)


def header_value(headers: Message, name: str, default: str = "") -> str:
    """Return the first ``name`` header as a raw string.

    Lookup is case insensitive. Folded lines are joined; encoded words are
    left as they are.
    """
    value = headers.get(name)
    if value is None:
        return default
    return _FOLD.sub("", str(value))


def _split(data: bytes) -> Tuple[bytes, bytes]:
    if data.startswith(b"\n"):
        return b"", data[1:]
    if data.startswith(b"\r\n"):
        return b"", data[2:]
    match = _HEADER_END.search(data)
    if match is None:
        return data, b""
    return data[:match.start()], data[match.end():]


def parse_header_block(data: bytes) -> Tuple[Message, bytes]:
    """Split ``data`` at the first empty line and parse the headers above it.

    Raises :class:`MessageFramingError` when a line of the header block is
    neither a header field nor a continuation of one.
    """
    head, body = _split(data)
    headers = BytesHeaderParser(policy=compat32).parsebytes(head)
    for defect in headers.defects:
        if isinstance(defect, _FATAL_DEFECTS):
            raise MessageFramingError(f"malformed header block: {type(defect).__name__}")
    return headers, body


def parse_raw_message(data: bytes) -> RawMessage:
    """Parse the raw bytes of an email into a :class:`RawMessage`."""
    if not data:
        raise MessageFramingError("empty message")
    headers, body = parse_header_block(data)
    return RawMessage(headers=headers, body=body)


def parse_media_type(value: Optional[str]) -> Optional[MediaType]:
    """Parse a ``Content-Type`` value.

    Missing or malformed values yield ``None`` instead of an error so that
    callers can treat the part as having no media type at all.
    """
    if not value:
        return None
    mtype, sep, rest = value.partition(";")
    mtype = mtype.strip().lower()
    if not _MEDIA_TYPE.match(mtype):
        return None
    # every parameter must be token=token or token="quoted"; one trailing ';' is allowed
    if not _PARAMS.fullmatch(sep + rest):
        return None
    holder = Message()
    holder["Content-Type"] = value
    params = {}
    for key, val in (holder.get_params(failobj=[]) or [])[1:]:
        params.setdefault(key.strip().lower(), collapse_rfc2231_value(val))
    return MediaType(mtype, params)

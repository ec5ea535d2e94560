"""Content-Transfer-Encoding decoding for single MIME parts."""

from __future__ import annotations

import base64
import binascii
import quopri
import re
from typing import Optional

from .errors import Base64DecodeError, QuotedPrintableDecodeError

__all__ = ["decode_transfer_encoding", "encode_quoted_printable", "to_text"]

DEFAULT_CHARSET = "utf-8"

_QP_ESCAPE = re.compile(rb"=([0-9A-Fa-f]{2})")
_QP_INVALID = re.compile(rb"=(?![0-9A-Fa-f]{2})")


def _decode_base64(raw: bytes) -> bytes:
    # MIME wraps encoded lines at 76 columns; only the line breaks are ignored.
    data = raw.replace(b"\r", b"").replace(b"\n", b"")
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as exc:
        raise Base64DecodeError(f"invalid base64 payload: {exc}") from exc


def _decode_quoted_printable(raw: bytes) -> bytes:
    out = bytearray()
    for lineno, line in enumerate(raw.splitlines(keepends=True), start=1):
        content = line.rstrip(b"\r\n")
        eol = line[len(content):]
        content = content.rstrip(b" \t")
        if content.endswith(b"="):
            # soft line break
            content = content[:-1]
            eol = b""
        bad = _QP_INVALID.search(content)
        if bad:
            snippet = content[bad.start():bad.start() + 3]
            raise QuotedPrintableDecodeError(
                f"invalid escape {snippet!r} on line {lineno}"
            )
        out += _QP_ESCAPE.sub(lambda m: bytes([int(m.group(1), 16)]), content)
        out += eol
    return bytes(out)


def decode_transfer_encoding(encoding: Optional[str], raw: bytes) -> bytes:
    """Decode ``raw`` according to a ``Content-Transfer-Encoding`` value.

    ``base64`` and ``quoted-printable`` are decoded; the comparison is case
    insensitive. Any other value, including ``7bit``, ``8bit``, ``binary``
    and a missing header, returns ``raw`` unchanged.

    Raises
    ------
    Base64DecodeError
        If a base64 payload contains characters outside the standard alphabet
        or is incorrectly padded.
    QuotedPrintableDecodeError
        If a quoted-printable payload contains a malformed ``=`` escape.
    """
    token = (encoding or "").strip().lower()
    if token == "base64":
        return _decode_base64(raw)
    if token == "quoted-printable":
        return _decode_quoted_printable(raw)
    return raw


def encode_quoted_printable(data: bytes) -> bytes:
    """Return ``data`` encoded as quoted-printable."""
    return quopri.encodestring(data)


def to_text(payload: bytes, charset: Optional[str] = None) -> str:
    """Decode ``payload`` using ``charset``, falling back to UTF-8."""
    try:
        return payload.decode(charset or DEFAULT_CHARSET, errors="replace")
    except LookupError:
        return payload.decode(DEFAULT_CHARSET, errors="replace")

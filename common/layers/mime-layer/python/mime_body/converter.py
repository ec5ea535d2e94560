"""Convert a parsed email into a subject and a single flattened body."""

from __future__ import annotations

import logging

from .errors import MissingBoundaryError
from .message import RawMessage, parse_media_type
from .transfer import decode_transfer_encoding, to_text
from .types import ConvertedMessage, DecodedBody
from .walker import MAX_DEPTH, walk

__all__ = ["convert_message"]

logger = logging.getLogger(__name__)


def convert_message(message: RawMessage, max_depth: int = MAX_DEPTH) -> ConvertedMessage:
    """Return the subject and flattened body of ``message``.

    A ``multipart/*`` message has the decoded text of all its leaf parts
    concatenated without separators and is always returned as HTML, whatever
    the media types of the individual parts. Any other message, including one
    whose ``Content-Type`` cannot be parsed, has its whole body decoded with
    the top-level ``Content-Transfer-Encoding`` and is returned as plain text.

    Raises
    ------
    MissingBoundaryError
        The message is ``multipart/*`` but has no ``boundary`` parameter.
    DecodeError, WalkError
        Propagated from the transfer decoder or the part walker.
    """
    subject = message.get("Subject")
    media_type = parse_media_type(message.get("Content-Type"))

    if media_type is not None and media_type.is_multipart:
        boundary = media_type.params.get("boundary")
        if not boundary:
            raise MissingBoundaryError(media_type.type)
        parts = walk(message.body, boundary, max_depth)
        logger.debug("Joined %d leaf parts of %s", len(parts), media_type.type)
        return ConvertedMessage(subject=subject, body=DecodedBody.html("".join(parts)))

    charset = media_type.params.get("charset") if media_type else None
    payload = decode_transfer_encoding(
        message.get("Content-Transfer-Encoding") or None, message.body
    )
    return ConvertedMessage(subject=subject, body=DecodedBody.text(to_text(payload, charset)))

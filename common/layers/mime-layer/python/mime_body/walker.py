"""Recursive traversal of ``multipart/*`` bodies.

The body is first parsed into a tree of :class:`~mime_body.types.Leaf` and
:class:`~mime_body.types.Multipart` nodes, then flattened depth first into the
decoded text of every leaf in document order. Nesting depth is bounded by
``max_depth`` because the format itself places no limit on it.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from .errors import (
    DepthExceededError,
    MessageFramingError,
    MissingBoundaryError,
    MultipartFramingError,
)
from .message import header_value, parse_header_block, parse_media_type
from .transfer import decode_transfer_encoding, to_text
from .types import Leaf, Multipart, Part

__all__ = ["MAX_DEPTH", "split_parts", "parse_multipart", "flatten", "walk"]

logger = logging.getLogger(__name__)

MAX_DEPTH = 20


def _iter_lines(body: bytes) -> Iterator[bytes]:
    lines = body.split(b"\n")
    last = len(lines) - 1
    for idx, line in enumerate(lines):
        if idx < last:
            yield line + b"\n"
        elif line:
            yield line


def _strip_line_break(chunk: bytes) -> bytes:
    # The line break before a delimiter belongs to the delimiter.
    if chunk.endswith(b"\r\n"):
        return chunk[:-2]
    if chunk.endswith(b"\n"):
        return chunk[:-1]
    return chunk


def split_parts(body: bytes, boundary: str) -> List[bytes]:
    """Return the raw bytes of each part of ``body`` delimited by ``boundary``.

    The preamble and epilogue are discarded. A body without an opening
    delimiter or without the closing ``--boundary--`` line is rejected.
    """
    delimiter = b"--" + boundary.encode("utf-8", "surrogateescape")
    close = delimiter + b"--"
    parts: List[bytes] = []
    current: Optional[List[bytes]] = None
    opened = closed = False
    for line in _iter_lines(body):
        marker = line.rstrip(b"\r\n").rstrip(b" \t")
        if marker == delimiter or marker == close:
            if current is not None:
                parts.append(_strip_line_break(b"".join(current)))
            if marker == close:
                closed = True
                break
            opened = True
            current = []
        elif current is not None:
            current.append(line)
    if not opened and not closed:
        raise MultipartFramingError(boundary, "no opening delimiter")
    if not closed:
        raise MultipartFramingError(boundary, "body ends before closing delimiter")
    return parts


def _parse_part(raw: bytes, boundary: str, depth: int, max_depth: int) -> Part:
    try:
        headers, payload = parse_header_block(raw)
    except MessageFramingError as exc:
        raise MultipartFramingError(boundary, str(exc)) from exc
    media_type = parse_media_type(header_value(headers, "Content-Type"))
    if media_type is not None and media_type.is_multipart:
        sub_boundary = media_type.params.get("boundary")
        if not sub_boundary:
            raise MissingBoundaryError(media_type.type)
        return _parse(payload, sub_boundary, depth + 1, max_depth)
    return Leaf(
        payload=payload,
        encoding=header_value(headers, "Content-Transfer-Encoding") or None,
        charset=media_type.params.get("charset") if media_type else None,
    )


def _parse(body: bytes, boundary: str, depth: int, max_depth: int) -> Multipart:
    if depth > max_depth:
        raise DepthExceededError(max_depth)
    node = Multipart(boundary=boundary)
    for raw in split_parts(body, boundary):
        node.parts.append(_parse_part(raw, boundary, depth, max_depth))
    logger.debug("Parsed %d parts at depth %d", len(node.parts), depth)
    return node


def parse_multipart(body: bytes, boundary: str, max_depth: int = MAX_DEPTH) -> Multipart:
    """Parse ``body`` into a :class:`Multipart` tree.

    Raises
    ------
    MissingBoundaryError
        A nested ``multipart/*`` part has no ``boundary`` parameter.
    DepthExceededError
        Multipart nesting is deeper than ``max_depth``. The top level counts
        as depth 1.
    MultipartFramingError
        Delimiters are missing or a part's header block is malformed.
    """
    return _parse(body, boundary, 1, max_depth)


def _iter_leaves(node: Part) -> Iterator[Leaf]:
    if isinstance(node, Leaf):
        yield node
        return
    for child in node.parts:
        yield from _iter_leaves(child)


def flatten(tree: Multipart) -> List[str]:
    """Decode every leaf of ``tree``, depth first and left to right."""
    return [
        to_text(decode_transfer_encoding(leaf.encoding, leaf.payload), leaf.charset)
        for leaf in _iter_leaves(tree)
    ]


def walk(body: bytes, boundary: str, max_depth: int = MAX_DEPTH) -> List[str]:
    """Return the decoded text of every leaf part of a multipart ``body``."""
    return flatten(parse_multipart(body, boundary, max_depth))

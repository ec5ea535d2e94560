"""Dataclasses describing a MIME part tree and the extracted body."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

__all__ = [
    "MediaType",
    "Leaf",
    "Multipart",
    "Part",
    "BodyKind",
    "DecodedBody",
    "ConvertedMessage",
]


@dataclass(frozen=True)
class MediaType:
    """Parsed ``Content-Type`` value."""

    type: str
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def is_multipart(self) -> bool:
        return self.type.startswith("multipart/")


@dataclass
class Leaf:
    """Part carrying content bytes in their transfer encoding."""

    payload: bytes
    encoding: Optional[str] = None
    charset: Optional[str] = None


@dataclass
class Multipart:
    """Part whose body is split into child parts by ``boundary``."""

    boundary: str
    parts: List["Part"] = field(default_factory=list)


Part = Union[Leaf, Multipart]


class BodyKind(str, Enum):
    TEXT = "Text"
    HTML = "Html"


@dataclass(frozen=True)
class DecodedBody:
    """Flattened message body; ``kind`` says which SES body field it fills."""

    kind: BodyKind
    data: str

    @classmethod
    def text(cls, data: str) -> "DecodedBody":
        return cls(BodyKind.TEXT, data)

    @classmethod
    def html(cls, data: str) -> "DecodedBody":
        return cls(BodyKind.HTML, data)


@dataclass(frozen=True)
class ConvertedMessage:
    """Result of :func:`mime_body.converter.convert_message`."""

    subject: str
    body: DecodedBody

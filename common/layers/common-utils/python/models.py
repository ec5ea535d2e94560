"""Shared dataclasses describing Lambda events, responses and SES payloads."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class LambdaResponse:
    """Standard HTTP-style Lambda response."""

    statusCode: int
    body: Any

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class S3Record:
    """Single record from an S3 event."""

    bucket: str
    key: str


@dataclass
class S3Event:
    """Wrapper for S3 event records."""

    Records: List[Dict[str, Any]]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "S3Event":
        records = data.get("Records")
        if not isinstance(records, list):
            raise ValueError("Records missing from event")
        return cls(Records=records)


BODY_KINDS = ("Text", "Html")


@dataclass(frozen=True)
class ForwardableMessage:
    """Message handed to SES ``send_email``.

    ``body_kind`` names the SES body field (``Text`` or ``Html``) that
    carries ``body``; the other field is left out.
    """

    subject: str
    body: str
    body_kind: str
    source: str
    reply_to: Optional[str]
    destinations: Tuple[str, ...]
    charset: str = "UTF-8"

    def __post_init__(self) -> None:
        if self.body_kind not in BODY_KINDS:
            raise ValueError(f"body_kind must be one of {BODY_KINDS}, got {self.body_kind!r}")

    def _content(self, data: str) -> Dict[str, str]:
        return {"Data": data, "Charset": self.charset}

    def to_send_email_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "Source": self.source,
            "Destination": {"ToAddresses": list(self.destinations)},
            "Message": {
                "Subject": self._content(self.subject),
                "Body": {self.body_kind: self._content(self.body)},
            },
        }
        if self.reply_to:
            kwargs["ReplyToAddresses"] = [self.reply_to]
        return kwargs


__all__ = [
    "LambdaResponse",
    "S3Record",
    "S3Event",
    "BODY_KINDS",
    "ForwardableMessage",
]

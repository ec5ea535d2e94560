"""Utilities for handling S3 event records."""

from typing import Iterable, Dict, Any, Iterator
from urllib.parse import unquote_plus

from models import S3Event, S3Record

__all__ = ["iter_s3_records", "iter_s3_objects"]


def iter_s3_records(event: S3Event) -> Iterable[Dict[str, Any]]:
    """Yield each S3 event record contained in ``event``.

    Parameters
    ----------
    event : :class:`models.S3Event`
        Event object or dictionary from an S3-triggered Lambda.
    """
    records = event.Records if hasattr(event, "Records") else event.get("Records", [])
    for record in records:
        yield record


def iter_s3_objects(event: S3Event) -> Iterator[S3Record]:
    """Yield the bucket and object key referenced by each record of ``event``.

    Object keys arrive URL encoded in S3 notifications and are decoded here.
    A record without bucket or key raises ``KeyError``.
    """
    for record in iter_s3_records(event):
        s3 = record["s3"]
        yield S3Record(
            bucket=s3["bucket"]["name"],
            key=unquote_plus(s3["object"]["key"]),
        )

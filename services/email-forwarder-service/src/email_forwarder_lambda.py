# ------------------------------------------------------------------------------
# email_forwarder_lambda.py
# ------------------------------------------------------------------------------
"""
Module: email_forwarder_lambda.py
Description:
  1. Receives S3 notifications for raw emails written by an SES receipt rule.
  2. Flattens each message body to a single text or HTML body.
  3. Re-sends the message through SES to the configured forward addresses,
     with the original sender set as Reply-To.

Records are processed in order and the first failure aborts the batch.

Version: 1.0.0
Created: 2025-07-14
Last Modified: 2025-07-14
Modified By: Koushik Sinha
"""

from __future__ import annotations

from typing import List

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from common_utils import (
    configure_logger,
    get_config,
    iter_s3_objects,
    lambda_response,
    log_exception,
    split_csv,
)
from mime_body import (
    MAX_DEPTH,
    MessageFramingError,
    MimeError,
    ConvertedMessage,
    RawMessage,
    convert_message,
    parse_raw_message,
)
from models import ForwardableMessage, S3Event, S3Record

# Module Metadata
__author__ = "Koushik Sinha"
__version__ = "1.0.0"
__modified_by__ = "Koushik Sinha"

# ─── Logging Configuration ─────────────────────────────────────────────────────
logger = configure_logger(__name__)

_s3 = boto3.client("s3")
_ses = boto3.client("ses")


class ConfigurationError(Exception):
    """A required setting is missing or invalid."""


class ForwardingError(Exception):
    """Forwarding of one stored email failed at ``stage``."""

    stage = "forward"

    def __init__(self, record: S3Record, message: str) -> None:
        super().__init__(f"{self.stage} failed for s3://{record.bucket}/{record.key}: {message}")
        self.bucket = record.bucket
        self.key = record.key


class StorageError(ForwardingError):
    stage = "storage"


class MessageParseError(ForwardingError):
    stage = "parse"


class ConversionError(ForwardingError):
    stage = "convert"


class DispatchError(ForwardingError):
    stage = "dispatch"


def forward_addresses() -> List[str]:
    """Return the destination list from ``FORWARD_TO_ADDRESS``."""
    try:
        value = get_config("FORWARD_TO_ADDRESS")
    except (BotoCoreError, ClientError, RuntimeError) as exc:
        raise ConfigurationError(f"FORWARD_TO_ADDRESS could not be read: {exc}") from exc
    addresses = split_csv(value)
    if not addresses:
        raise ConfigurationError("FORWARD_TO_ADDRESS not configured")
    return addresses


def max_multipart_depth() -> int:
    """Return the multipart nesting limit from ``MAX_MULTIPART_DEPTH``.

    The setting is optional; when Parameter Store has no environment prefix
    or cannot be reached the default limit applies.
    """
    try:
        value = get_config("MAX_MULTIPART_DEPTH")
    except (BotoCoreError, ClientError, RuntimeError) as exc:
        logger.debug("No MAX_MULTIPART_DEPTH in Parameter Store: %s", exc)
        value = None
    if not value:
        return MAX_DEPTH
    try:
        depth = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"MAX_MULTIPART_DEPTH must be an integer: {value!r}") from exc
    if depth < 1:
        raise ConfigurationError(f"MAX_MULTIPART_DEPTH must be positive: {depth}")
    return depth


def fetch_raw_email(record: S3Record) -> bytes:
    """Read the stored email referenced by ``record``."""
    try:
        obj = _s3.get_object(Bucket=record.bucket, Key=record.key)
        return obj["Body"].read()
    except (ClientError, BotoCoreError) as exc:
        raise StorageError(record, str(exc)) from exc


def build_forwardable(
    message: RawMessage, converted: ConvertedMessage, destinations: List[str]
) -> ForwardableMessage:
    """Address ``converted`` from the original recipient back to the forward list."""
    return ForwardableMessage(
        subject=converted.subject,
        body=converted.body.data,
        body_kind=converted.body.kind.value,
        source=message.get("To"),
        reply_to=message.get("From") or None,
        destinations=tuple(destinations),
    )


def forward_record(
    record: S3Record, destinations: List[str], max_depth: int = MAX_DEPTH
) -> ForwardableMessage:
    """Fetch, convert and re-send one stored email."""
    data = fetch_raw_email(record)

    try:
        message = parse_raw_message(data)
    except MessageFramingError as exc:
        raise MessageParseError(record, str(exc)) from exc

    try:
        converted = convert_message(message, max_depth)
    except MimeError as exc:
        raise ConversionError(record, str(exc)) from exc

    outbound = build_forwardable(message, converted, destinations)
    try:
        _ses.send_email(**outbound.to_send_email_kwargs())
    except (ClientError, BotoCoreError) as exc:
        raise DispatchError(record, str(exc)) from exc

    logger.info(
        "Successfully forwarded email from %s to %s",
        outbound.reply_to,
        ", ".join(destinations),
    )
    return outbound


def lambda_handler(event: S3Event | dict, context) -> dict:
    """Forward every email referenced by ``event``.

    Any failure is logged and re-raised so the invocation fails; records
    after the failing one are left unprocessed.
    """
    forwarded = 0
    try:
        destinations = forward_addresses()
        max_depth = max_multipart_depth()
        for record in iter_s3_objects(event):
            logger.info("Processing s3://%s/%s", record.bucket, record.key)
            forward_record(record, destinations, max_depth)
            forwarded += 1
    except (ConfigurationError, ForwardingError, KeyError) as exc:
        log_exception(f"Email forwarding stopped after {forwarded} message(s)", exc, logger)
        raise
    return lambda_response(200, {"forwarded": forwarded})

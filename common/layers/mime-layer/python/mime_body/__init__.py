# Module Metadata
__author__ = "Koushik Sinha"
__version__ = "1.0.0"
__modified_by__ = "Koushik Sinha"

from .errors import (
    MimeError,
    MessageFramingError,
    ConvertError,
    DecodeError,
    Base64DecodeError,
    QuotedPrintableDecodeError,
    WalkError,
    MissingBoundaryError,
    DepthExceededError,
    MultipartFramingError,
)
from .types import (
    MediaType,
    Leaf,
    Multipart,
    BodyKind,
    DecodedBody,
    ConvertedMessage,
)
from .transfer import decode_transfer_encoding, encode_quoted_printable, to_text
from .message import RawMessage, parse_raw_message, parse_media_type
from .walker import MAX_DEPTH, parse_multipart, flatten, walk
from .converter import convert_message

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
    "MediaType",
    "Leaf",
    "Multipart",
    "BodyKind",
    "DecodedBody",
    "ConvertedMessage",
    "decode_transfer_encoding",
    "encode_quoted_printable",
    "to_text",
    "RawMessage",
    "parse_raw_message",
    "parse_media_type",
    "MAX_DEPTH",
    "parse_multipart",
    "flatten",
    "walk",
    "convert_message",
]

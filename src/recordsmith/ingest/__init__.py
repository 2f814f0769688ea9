"""File ingestion: separator/header detection and record parsing."""

from .models import (
    AUTO,
    JSON_SENTINEL,
    CANDIDATE_SEPARATORS,
    Record,
    FileEncoding,
    HeaderPolicy,
    DetectionResult,
    ParseResult,
    ParseWarning,
    WarningKind,
    FormatError,
)
from .decoding import decode_bytes, coerce_encoding
from .separator import SeparatorDetector, detect_separator
from .header import HeaderDetector, detect_header
from .parser import RecordParser, parse_file, parse_bytes

__all__ = [
    "AUTO",
    "JSON_SENTINEL",
    "CANDIDATE_SEPARATORS",
    "Record",
    "FileEncoding",
    "HeaderPolicy",
    "DetectionResult",
    "ParseResult",
    "ParseWarning",
    "WarningKind",
    "FormatError",
    "decode_bytes",
    "coerce_encoding",
    "SeparatorDetector",
    "detect_separator",
    "HeaderDetector",
    "detect_header",
    "RecordParser",
    "parse_file",
    "parse_bytes",
]

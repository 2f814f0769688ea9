"""Data models for file ingestion."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

# A parsed row or object, keyed by the current header set
Record = dict[str, str]

AUTO = "auto"
JSON_SENTINEL = "json"
TAB = "\t"

# Tested in this order; the earliest candidate wins ties
CANDIDATE_SEPARATORS: tuple[str, ...] = (";", ",", TAB, "|")


class FileEncoding(str, Enum):
    """Recognized text encodings for loading and exporting files."""

    UTF_8 = "UTF-8"
    ISO_8859_1 = "ISO-8859-1"
    ISO_8859_2 = "ISO-8859-2"
    WINDOWS_1250 = "Windows-1250"
    X_MAC_CE = "x-mac-ce"


class HeaderPolicy(str, Enum):
    """How the first line of a delimited file is treated."""

    AUTO = "auto"
    FIRST_LINE_IS_HEADER = "firstLineIsHeader"
    NO_HEADER = "noHeader"


class WarningKind(str, Enum):
    """Kinds of non-fatal parse outcomes."""

    HEADER_ONLY = "header_only"  # Header names found but no data rows


def separator_display(separator: str) -> str:
    """Render a separator for messages (tab as \\t, the JSON sentinel as JSON)."""
    if separator == TAB:
        return "\\t"
    if separator == JSON_SENTINEL:
        return "JSON"
    return separator


class DetectionResult(BaseModel):
    """What was detected (or chosen) for the currently loaded file."""

    separator: str  # The separator used, or "json"
    header_present: bool
    encoding: FileEncoding = FileEncoding.UTF_8
    header_policy: HeaderPolicy = HeaderPolicy.AUTO

    @property
    def is_json(self) -> bool:
        return self.separator == JSON_SENTINEL

    @property
    def separator_display(self) -> str:
        return separator_display(self.separator)


class ParseWarning(BaseModel):
    """A parse that succeeded syntactically but produced an empty result."""

    kind: WarningKind
    message: str


class ParseResult(BaseModel):
    """Header set, records and detection metadata for one loaded file."""

    file_name: str
    headers: list[str]
    records: list[Record] = Field(default_factory=list)
    detection: DetectionResult
    warnings: list[ParseWarning] = Field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.records)

    def summary(self) -> str:
        """One-line description of the load, for logs and the CLI."""
        return (
            f"{self.record_count} records ({len(self.headers)} columns, "
            f"format/separator: '{self.detection.separator_display}', "
            f"encoding: {self.detection.encoding.value}, "
            f"header: {self.detection.header_policy.value})"
        )


class JsonArrayTarget(BaseModel):
    """Top-level JSON array whose first element is an object."""

    items: list[Any]

    @property
    def headers(self) -> list[str]:
        return list(self.items[0].keys())


class JsonObjectTarget(BaseModel):
    """Top-level JSON object, loaded as a single record."""

    item: dict[str, Any]

    @property
    def headers(self) -> list[str]:
        return list(self.item.keys())


JsonTarget = Union[JsonArrayTarget, JsonObjectTarget]


class FormatError(Exception):
    """Exception raised when a file cannot be turned into records."""

    def __init__(
        self,
        message: str,
        file_name: str = "",
        separator: Optional[str] = None,
        encoding: Optional[str] = None,
        header_policy: Optional[str] = None,
    ):
        self.reason = message
        self.file_name = file_name
        self.separator = separator
        self.encoding = encoding
        self.header_policy = header_policy
        if file_name:
            sep = separator_display(separator) if separator is not None else "?"
            message = (
                f"Error parsing file {file_name} (format/separator: {sep}, "
                f"encoding: {encoding}, header: {header_policy}): {message}"
            )
        super().__init__(message)

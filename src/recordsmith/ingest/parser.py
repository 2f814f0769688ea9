"""Parse delimited text or JSON into a header set and uniform records."""

import json
import logging
from typing import Any, Optional, Union

from .decoding import coerce_encoding, decode_bytes
from .header import HeaderDetector, split_fields
from .models import (
    AUTO,
    JSON_SENTINEL,
    DetectionResult,
    FileEncoding,
    FormatError,
    HeaderPolicy,
    JsonArrayTarget,
    JsonObjectTarget,
    JsonTarget,
    ParseResult,
    ParseWarning,
    Record,
    WarningKind,
)
from .separator import LINE_BREAK, SeparatorDetector

logger = logging.getLogger(__name__)

SYNTHETIC_FIELD_PREFIX = "Field"
BYTE_ORDER_MARK = "\ufeff"


def stringify_value(value: Any) -> str:
    """Render a JSON value as a record string (null becomes empty)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON: {name} is not a valid JSON value")


def synthetic_headers(count: int) -> list[str]:
    """Header names for files without a header row: Field 1..Field N."""
    return [f"{SYNTHETIC_FIELD_PREFIX} {i + 1}" for i in range(count)]


def is_json_input(text: str, file_name: str, separator_choice: str) -> bool:
    """Whether the input takes the JSON branch rather than the delimited one."""
    if file_name.lower().endswith(".json") or separator_choice == JSON_SENTINEL:
        return True
    if separator_choice == AUTO:
        stripped = text.strip()
        return stripped.startswith("{") or stripped.startswith("[")
    return False


class RecordParser:
    """Turns raw file text into a ParseResult."""

    def __init__(
        self,
        separator_detector: Optional[SeparatorDetector] = None,
        header_detector: Optional[HeaderDetector] = None,
    ):
        self.separator_detector = separator_detector or SeparatorDetector()
        self.header_detector = header_detector or HeaderDetector()

    def parse(
        self,
        raw_text: str,
        file_name: str,
        separator_choice: str = AUTO,
        encoding: Union[str, FileEncoding, None] = FileEncoding.UTF_8,
        header_policy: Union[str, HeaderPolicy] = HeaderPolicy.AUTO,
    ) -> ParseResult:
        """
        Parse one file.

        Args:
            raw_text: File content, already decoded by the caller; a leading
                byte-order-mark is dropped
            file_name: Original file name; only the .json suffix matters
            separator_choice: A separator string, "auto" or "json"
            encoding: Encoding tag the caller decoded with (recorded only)
            header_policy: "auto", "firstLineIsHeader" or "noHeader"

        Returns:
            ParseResult with headers, records, detection metadata and any
            empty-result warnings

        Raises:
            FormatError: when the input cannot produce a usable header set
        """
        raw_text = raw_text.removeprefix(BYTE_ORDER_MARK)
        tag = coerce_encoding(encoding)
        policy = HeaderPolicy(header_policy)
        used_separator = separator_choice
        if is_json_input(raw_text, file_name, separator_choice):
            used_separator = JSON_SENTINEL

        def fail(message: str) -> FormatError:
            return FormatError(
                message,
                file_name=file_name,
                separator=used_separator,
                encoding=tag.value,
                header_policy=policy.value,
            )

        if used_separator == JSON_SENTINEL:
            try:
                headers, records = self._parse_json(raw_text)
            except ValueError as e:
                raise fail(str(e)) from e
            header_present = True
        else:
            if used_separator == AUTO:
                used_separator = self.separator_detector.detect(raw_text)
                logger.info(f"Detected separator {used_separator!r} for {file_name}")
            if not used_separator:
                raise fail("Separator must not be empty.")
            try:
                headers, records, header_present = self._parse_delimited(
                    raw_text, used_separator, policy
                )
            except ValueError as e:
                raise fail(str(e)) from e

        if not headers or all(not h.strip() for h in headers):
            raise fail("No valid column headers found or generated.")

        if len(set(headers)) != len(headers):
            logger.warning(f"Duplicate header names in {file_name}: {headers}")

        result = ParseResult(
            file_name=file_name,
            headers=headers,
            records=records,
            detection=DetectionResult(
                separator=used_separator,
                header_present=header_present,
                encoding=tag,
                header_policy=policy,
            ),
            warnings=self._empty_result_warnings(records),
        )
        for warning in result.warnings:
            logger.warning(f"{file_name}: {warning.message}")
        logger.info(f"Loaded {file_name}: {result.summary()}")
        return result

    def _parse_json(self, raw_text: str) -> tuple[list[str], list[Record]]:
        target = self._json_target(raw_text)
        headers = target.headers
        if isinstance(target, JsonArrayTarget):
            items = target.items
        else:
            items = [target.item]
        records = []
        for item in items:
            source = item if isinstance(item, dict) else {}
            records.append({key: stringify_value(source.get(key)) for key in headers})
        return headers, records

    @staticmethod
    def _json_target(raw_text: str) -> JsonTarget:
        try:
            data = json.loads(raw_text, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}") from e

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return JsonArrayTarget(items=data)
        if isinstance(data, dict):
            return JsonObjectTarget(item=data)
        raise ValueError(
            "Unsupported JSON format. Expected an array of objects or a single object."
        )

    def _parse_delimited(
        self, raw_text: str, separator: str, policy: HeaderPolicy
    ) -> tuple[list[str], list[Record], bool]:
        lines = [line for line in LINE_BREAK.split(raw_text.strip()) if line.strip()]
        if not lines:
            raise ValueError("The file is empty or contains no valid data.")

        if policy == HeaderPolicy.NO_HEADER:
            first_line_is_data = True
        elif policy == HeaderPolicy.FIRST_LINE_IS_HEADER:
            first_line_is_data = False
        else:
            first_line_is_data = not self.header_detector.detect(lines, separator)

        if first_line_is_data:
            headers = synthetic_headers(len(lines[0].split(separator)))
            data_lines = lines
        else:
            headers = split_fields(lines[0], separator)
            data_lines = lines[1:]

        records = [self._zip_record(headers, split_fields(line, separator)) for line in data_lines]
        return headers, records, not first_line_is_data

    @staticmethod
    def _zip_record(headers: list[str], values: list[str]) -> Record:
        # Short rows pad with "", extra trailing values are dropped
        return {
            header: values[index] if index < len(values) else ""
            for index, header in enumerate(headers)
        }

    @staticmethod
    def _empty_result_warnings(records: list[Record]) -> list[ParseWarning]:
        if records:
            return []
        return [
            ParseWarning(
                kind=WarningKind.HEADER_ONLY,
                message="The file seems to contain only a header row "
                "(or no data row was found when 'noHeader' was chosen).",
            )
        ]


def parse_file(
    raw_text: str,
    file_name: str,
    separator_choice: str = AUTO,
    encoding: Union[str, FileEncoding, None] = FileEncoding.UTF_8,
    header_policy: Union[str, HeaderPolicy] = HeaderPolicy.AUTO,
) -> ParseResult:
    """Parse file text with the default detectors."""
    return RecordParser().parse(raw_text, file_name, separator_choice, encoding, header_policy)


def parse_bytes(
    raw: bytes,
    file_name: str,
    separator_choice: str = AUTO,
    encoding: Union[str, FileEncoding, None] = FileEncoding.UTF_8,
    header_policy: Union[str, HeaderPolicy] = HeaderPolicy.AUTO,
) -> ParseResult:
    """Decode raw file bytes with the chosen encoding, then parse them."""
    text = decode_bytes(raw, encoding)
    return parse_file(text, file_name, separator_choice, encoding, header_policy)

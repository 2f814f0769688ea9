"""Decide whether the first line of a delimited file is a header row."""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Number literal forms accepted by JavaScript's Number(): decimal with optional
# exponent, signed Infinity, and unsigned hex/octal/binary integers.
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_INFINITY = re.compile(r"[+-]?Infinity")
_PREFIXED = re.compile(r"0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def normalize_field(value: str) -> str:
    """Trim whitespace and strip one layer of surrounding double quotes."""
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def split_fields(line: str, separator: str) -> list[str]:
    """Split a line on the separator and normalize every field."""
    return [normalize_field(part) for part in line.split(separator)]


def is_numeric(value: str) -> bool:
    """True when the value is non-empty and reads as a number."""
    value = value.strip()
    if not value:
        return False
    return any(p.fullmatch(value) for p in (_DECIMAL, _INFINITY, _PREFIXED))


@dataclass
class LinePair:
    """The first two non-blank lines, split and normalized."""

    first: list[str]
    second: list[str]

    @property
    def first_all_alpha(self) -> bool:
        return all(not is_numeric(f) for f in self.first)

    @property
    def second_all_alpha(self) -> bool:
        return all(not is_numeric(f) for f in self.second)

    @property
    def second_has_numeric(self) -> bool:
        return any(is_numeric(f) for f in self.second)

    @property
    def first_has_numeric(self) -> bool:
        return any(is_numeric(f) for f in self.first)


# Each rule returns True (header), False (data) or None (no verdict)
HeaderRule = Callable[[LinePair], Optional[bool]]


def _empty_first_line(pair: LinePair) -> Optional[bool]:
    if len(pair.first) == 0:
        return False
    return None


def _field_count_mismatch(pair: LinePair) -> Optional[bool]:
    if len(pair.first) != len(pair.second) and len(pair.second) > 0:
        return True
    return None


def _labels_over_numbers(pair: LinePair) -> Optional[bool]:
    if pair.first_all_alpha and pair.second_has_numeric:
        return True
    return None


def _both_textual(pair: LinePair) -> Optional[bool]:
    # A header row should differ from its own data; identical lines are data.
    if not (pair.first_all_alpha and pair.second_all_alpha):
        return None
    if len(set(pair.first)) != len(set(pair.second)):
        return True
    return pair.first != pair.second


def _numbers_on_top(pair: LinePair) -> Optional[bool]:
    if pair.first_has_numeric and not pair.second_all_alpha:
        return False
    return None


HEADER_RULES: tuple[HeaderRule, ...] = (
    _empty_first_line,
    _field_count_mismatch,
    _labels_over_numbers,
    _both_textual,
    _numbers_on_top,
)


class HeaderDetector:
    """Best-effort classifier for the first line of a delimited file."""

    def __init__(self, rules: tuple[HeaderRule, ...] = HEADER_RULES):
        self.rules = rules

    def detect(self, lines: list[str], separator: str) -> bool:
        """
        Return True when the first non-blank line looks like a header.

        Inputs that no rule decides default to True.
        """
        data_lines = [line for line in lines if line.strip()]
        if len(data_lines) < 2:
            return True

        pair = LinePair(
            first=split_fields(data_lines[0], separator),
            second=split_fields(data_lines[1], separator),
        )
        for rule in self.rules:
            verdict = rule(pair)
            if verdict is not None:
                logger.debug(f"Header rule {rule.__name__} decided header={verdict}")
                return verdict
        return True


def detect_header(lines: list[str], separator: str) -> bool:
    """Detect whether the first line is a header with the default rules."""
    return HeaderDetector().detect(lines, separator)

"""Heuristic field separator detection for delimited text."""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from .models import CANDIDATE_SEPARATORS, TAB

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r"\r?\n")

SAMPLE_LINES = 5
CONSISTENT_BONUS = 100.0
SPREAD_BASE = 50.0
SPREAD_PENALTY = 20.0
OCCURRENCE_WEIGHT = 0.5


def sample_lines(text: str, limit: int = SAMPLE_LINES) -> list[str]:
    """Return up to ``limit`` non-blank lines from the start of the text."""
    lines = [line for line in LINE_BREAK.split(text.strip()) if line.strip()]
    return lines[:limit]


@dataclass
class SeparatorStats:
    """Column statistics for one candidate separator over the sampled lines."""

    separator: str
    column_counts: list[int] = field(default_factory=list)
    occurrences: int = 0

    @classmethod
    def measure(cls, separator: str, lines: list[str]) -> "SeparatorStats":
        stats = cls(separator=separator)
        for line in lines:
            count = len(line.split(separator))
            stats.column_counts.append(count)
            stats.occurrences += count - 1
        return stats

    @property
    def first_line_columns(self) -> int:
        return self.column_counts[0] if self.column_counts else 0

    @property
    def mean(self) -> float:
        return sum(self.column_counts) / len(self.column_counts)

    @property
    def stddev(self) -> float:
        mean = self.mean
        variance = sum((c - mean) ** 2 for c in self.column_counts) / len(self.column_counts)
        return math.sqrt(variance)

    @property
    def consistent(self) -> bool:
        return len(set(self.column_counts)) == 1

    def score(self) -> float:
        """Consistency score; higher means more table-like."""
        total = 0.0
        if self.consistent and self.first_line_columns > 1:
            total += CONSISTENT_BONUS
        elif self.first_line_columns > 1:
            total += max(0.0, SPREAD_BASE - SPREAD_PENALTY * self.stddev)
        total += self.occurrences * OCCURRENCE_WEIGHT
        return total


# Skip rules, checked in order; any match drops the candidate
SkipRule = Callable[[SeparatorStats], bool]


def _never_occurs(stats: SeparatorStats) -> bool:
    return stats.occurrences == 0 and all(c <= 1 for c in stats.column_counts)


def _no_tabular_structure(stats: SeparatorStats) -> bool:
    return (
        stats.mean <= 1.1
        and len(stats.column_counts) > 1
        and all(c == 1 for c in stats.column_counts)
    )


SKIP_RULES: tuple[SkipRule, ...] = (_never_occurs, _no_tabular_structure)


class SeparatorDetector:
    """Picks the most likely separator from a fixed candidate set."""

    def __init__(
        self,
        candidates: tuple[str, ...] = CANDIDATE_SEPARATORS,
        fallback: str = TAB,
        sample_size: int = SAMPLE_LINES,
    ):
        self.candidates = candidates
        self.fallback = fallback
        self.sample_size = sample_size

    def detect(self, text: str) -> str:
        """
        Return the best separator for the text, or the fallback when nothing
        looks tabular. Never raises.
        """
        lines = sample_lines(text, self.sample_size)
        if not lines:
            return self.fallback

        best: Optional[str] = None
        best_score = -1.0

        for separator in self.candidates:
            stats = SeparatorStats.measure(separator, lines)
            if any(rule(stats) for rule in SKIP_RULES):
                continue

            score = stats.score()
            logger.debug(
                f"Separator {separator!r}: counts={stats.column_counts} score={score:.2f}"
            )
            eligible = stats.first_line_columns > 1 or len(lines) == 1
            if eligible and score > best_score:
                best, best_score = separator, score

        return best if best is not None else self.fallback


def detect_separator(text: str) -> str:
    """Detect the separator of delimited text with the default candidates."""
    return SeparatorDetector().detect(text)

"""Data models for field order reconciliation."""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel


class Resolution(str, Enum):
    """How the user chose to resolve an order conflict."""

    ADJUSTED = "adjusted"  # Keep stored order for present fields, append new ones
    RESET = "reset"  # Drop the stored order, use file order


class Compatible(BaseModel):
    """The stored order (or the file order, when none was stored) can be used as-is."""

    status: Literal["compatible"] = "compatible"
    order: list[str]
    stored: Optional[list[str]] = None  # What the host should keep as its custom order


class Conflict(BaseModel):
    """Stored order references fields the new file does not have."""

    status: Literal["conflict"] = "conflict"
    missing: list[str]
    adjusted: list[str]
    reset: list[str]

    def resolve(self, choice: Union[Resolution, str]) -> list[str]:
        """Return the field order for the chosen resolution."""
        if Resolution(choice) == Resolution.ADJUSTED:
            return list(self.adjusted)
        return list(self.reset)

    def resolve_stored(self, choice: Union[Resolution, str]) -> Optional[list[str]]:
        """
        Return what the host should store as its custom order.

        A reset clears the custom order (None means "use file order").
        """
        if Resolution(choice) == Resolution.ADJUSTED:
            return list(self.adjusted)
        return None


ReconcileDecision = Union[Compatible, Conflict]

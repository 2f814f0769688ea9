"""Reconcile a stored custom field order with a newly loaded header set."""

import logging
from typing import Optional

from .models import Compatible, Conflict, ReconcileDecision

logger = logging.getLogger(__name__)


def adjusted_order(stored_order: list[str], headers: list[str]) -> list[str]:
    """Stored names still present in the file, then the file's other headers in file order."""
    present = set(headers)
    kept = [name for name in stored_order if name in present]
    kept_set = set(kept)
    return kept + [name for name in headers if name not in kept_set]


def display_order(custom_order: Optional[list[str]], headers: list[str]) -> list[str]:
    """Order in which fields of the current file are shown to the user."""
    if not custom_order:
        return list(headers)
    return adjusted_order(custom_order, headers)


class FieldOrderReconciler:
    """Compares a remembered field order against a new file's headers."""

    def reconcile(
        self, stored_order: Optional[list[str]], headers: list[str]
    ) -> ReconcileDecision:
        """
        Decide whether a stored order still fits the new headers.

        Returns Compatible when there is no stored order or every stored name
        exists in the new file; otherwise a Conflict carrying the missing names
        and both candidate resolutions for the user to choose from.
        """
        if stored_order is None:
            return Compatible(order=list(headers), stored=None)

        present = set(headers)
        missing = [name for name in stored_order if name not in present]
        if not missing:
            return Compatible(order=list(stored_order), stored=list(stored_order))

        logger.info(
            f"Stored field order conflicts with new file: {len(missing)} missing field(s)"
        )
        return Conflict(
            missing=missing,
            adjusted=adjusted_order(stored_order, headers),
            reset=list(headers),
        )


def reconcile(stored_order: Optional[list[str]], headers: list[str]) -> ReconcileDecision:
    """Reconcile with the default reconciler."""
    return FieldOrderReconciler().reconcile(stored_order, headers)

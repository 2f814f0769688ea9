"""Field order reconciliation between stored preferences and loaded files."""

from .models import Compatible, Conflict, ReconcileDecision, Resolution
from .reconciler import FieldOrderReconciler, adjusted_order, display_order, reconcile

__all__ = [
    "Compatible",
    "Conflict",
    "ReconcileDecision",
    "Resolution",
    "FieldOrderReconciler",
    "adjusted_order",
    "display_order",
    "reconcile",
]

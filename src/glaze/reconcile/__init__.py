"""Reconciliation core: debounced single-flight sync with a write-loop guard."""

from .engine import DEFAULT_DEBOUNCE_SECONDS, ReconcileEngine
from .guard import ConflictGuard, GuardVerdict
from .state import EMPTY_STATE, CachedReconcileState, TintColors

__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "ReconcileEngine",
    "ConflictGuard",
    "GuardVerdict",
    "EMPTY_STATE",
    "CachedReconcileState",
    "TintColors",
]

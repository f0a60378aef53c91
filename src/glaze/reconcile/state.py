"""
Cached reconcile state.

Immutable snapshot of the last reconcile's observable results, owned by a
single ReconcileEngine and replaced wholesale on every change.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from glaze.core.tint import TintColors


@dataclass(frozen=True)
class CachedReconcileState:
    workspace_identifier: str | None = None
    tint_colors: TintColors | None = None
    customized_outside_owner: bool = False
    last_error: str | None = None

    def update(self, **changes: Any) -> CachedReconcileState:
        return replace(self, **changes)


EMPTY_STATE = CachedReconcileState()

__all__ = ["CachedReconcileState", "EMPTY_STATE", "TintColors"]

"""
Write-loop guard.

A sliding-window rate limiter over real settings writes. When another
actor keeps rewriting the document and each rewrite triggers a reconcile,
the guard trips, pauses reconciling for a cooldown, and reports why.
No-op reconciles never count against the limit.
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from collections.abc import Callable
from enum import StrEnum

from glaze.core.ir import ReconcileSettings

logger = logging.getLogger(__name__)

DEFAULT_MAX_WRITES = 5
DEFAULT_WINDOW_SECONDS = 3.0
DEFAULT_COOLDOWN_SECONDS = 10.0


class GuardVerdict(StrEnum):
    """Outcome of a guard check."""

    ALLOWED = "allowed"
    BLOCKED = "blocked"  # cooling down
    TRIPPED = "tripped"  # this check started a cooldown
    RESUMED = "resumed"  # cooldown just ended

    @property
    def allowed(self) -> bool:
        return self in (GuardVerdict.ALLOWED, GuardVerdict.RESUMED)


class ConflictGuard:
    """Sliding-window write limiter with cooldown.

    The guard is inert until armed so tests and startup can write freely.
    ``force`` always bypasses it.
    """

    def __init__(
        self,
        max_writes: int = DEFAULT_MAX_WRITES,
        window: float = DEFAULT_WINDOW_SECONDS,
        cooldown: float = DEFAULT_COOLDOWN_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_writes = max_writes
        self.window = window
        self.cooldown = cooldown
        self._clock = clock
        self._armed = False
        self._timestamps: deque[float] = deque()
        self._cooldown_until: float | None = None

    @classmethod
    def from_settings(
        cls, settings: ReconcileSettings, *, clock: Callable[[], float] = time.monotonic
    ) -> ConflictGuard:
        return cls(
            max_writes=settings.max_writes,
            window=settings.window_ms / 1000,
            cooldown=settings.cooldown_ms / 1000,
            clock=clock,
        )

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def cooling_down(self) -> bool:
        return self._cooldown_until is not None and self._clock() < self._cooldown_until

    @property
    def recent_writes(self) -> int:
        return len(self._timestamps)

    def arm(self) -> None:
        self._armed = True

    def disarm(self) -> None:
        self._armed = False

    def configure(
        self,
        *,
        max_writes: int | None = None,
        window: float | None = None,
        cooldown: float | None = None,
    ) -> None:
        if max_writes is not None:
            self.max_writes = max_writes
        if window is not None:
            self.window = window
        if cooldown is not None:
            self.cooldown = cooldown

    def reset(self) -> None:
        """Restore defaults, clear history and disarm."""
        self._armed = False
        self._timestamps.clear()
        self._cooldown_until = None
        self.max_writes = DEFAULT_MAX_WRITES
        self.window = DEFAULT_WINDOW_SECONDS
        self.cooldown = DEFAULT_COOLDOWN_SECONDS

    def trip_message(self) -> str:
        secs = math.ceil(self.cooldown)
        return (
            "Reconcile paused: too many settings writes detected. "
            f"Resuming automatically in {secs} s. Use force to override."
        )

    def check(self, force: bool = False) -> GuardVerdict:
        """Decide whether a reconcile may proceed."""
        if not self._armed or force:
            return GuardVerdict.ALLOWED

        now = self._clock()
        resumed = False

        if self._cooldown_until is not None:
            if now < self._cooldown_until:
                return GuardVerdict.BLOCKED
            self._cooldown_until = None
            self._timestamps.clear()
            resumed = True
            logger.info("Reconcile guard cooldown over, resuming")

        window_start = now - self.window
        while self._timestamps and self._timestamps[0] < window_start:
            self._timestamps.popleft()

        if len(self._timestamps) >= self.max_writes:
            self._cooldown_until = now + self.cooldown
            self._timestamps.clear()
            logger.warning(
                "Runaway reconcile loop detected: %d writes within %.1fs, pausing for %.1fs",
                self.max_writes,
                self.window,
                self.cooldown,
            )
            return GuardVerdict.TRIPPED

        return GuardVerdict.RESUMED if resumed else GuardVerdict.ALLOWED

    def record_write(self) -> None:
        """Count one real write. Ignored while disarmed or cooling down."""
        if not self._armed or self._cooldown_until is not None:
            return
        self._timestamps.append(self._clock())

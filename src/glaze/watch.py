"""
File watching for the reconcile loop.

Polls glaze.yaml and the settings file for changes and asks the reconcile
engine to run. Polling keeps the watcher dependency-free and works on
every platform and filesystem.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glaze.reconcile.engine import ReconcileEngine

logger = logging.getLogger(__name__)


class FileWatcher:
    """
    Watches individual files for changes using mtime polling.

    Creation, modification and deletion all count as a change.
    """

    def __init__(
        self,
        paths: Sequence[Path],
        on_change: Callable[[Path], None],
        poll_interval: float = 0.5,
    ):
        """
        Initialize the file watcher.

        Args:
            paths: Files to watch (they need not exist yet)
            on_change: Callback with the changed path, run on the watcher thread
            poll_interval: How often to check for changes (seconds)
        """
        self.paths = list(paths)
        self.on_change = on_change
        self.poll_interval = poll_interval

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._file_mtimes: dict[Path, float | None] = {}

    def start(self) -> None:
        """Start watching for file changes."""
        self._file_mtimes = self._scan_files()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._watch_loop, name="glaze-watch", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop watching for file changes."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None

    def _scan_files(self) -> dict[Path, float | None]:
        mtimes: dict[Path, float | None] = {}
        for path in self.paths:
            try:
                mtimes[path] = path.stat().st_mtime
            except OSError:
                mtimes[path] = None
        return mtimes

    def poll(self) -> list[Path]:
        """Check once and return the files that changed since the last check."""
        current = self._scan_files()
        changed = [path for path, mtime in current.items() if mtime != self._file_mtimes.get(path)]
        self._file_mtimes = current
        return changed

    def _watch_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                changed = self.poll()
            except Exception:
                logger.exception("File watcher error")
                changed = []

            for path in changed:
                logger.debug("Detected change in %s", path)
                try:
                    self.on_change(path)
                except Exception:
                    logger.exception("Error in change callback for %s", path)

            self._stop_event.wait(self.poll_interval)


def watch_engine(
    engine: ReconcileEngine,
    paths: Sequence[Path],
    loop: asyncio.AbstractEventLoop,
    poll_interval: float = 0.5,
) -> FileWatcher:
    """Start a watcher that requests a reconcile on ``loop`` for every change."""

    def on_change(path: Path) -> None:
        loop.call_soon_threadsafe(engine.request_reconcile)

    watcher = FileWatcher(paths, on_change, poll_interval=poll_interval)
    watcher.start()
    return watcher

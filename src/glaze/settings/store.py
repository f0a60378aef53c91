"""
Settings stores.

A store reads and writes the color customization document that the
reconcile engine manages. Two implementations:
- MemorySettingsStore: in-process dict (tests, previews)
- JsonSettingsStore: one section of a JSON settings file on disk

Both are async so the engine can treat local files and remote settings
services the same way.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from glaze.core.errors import ErrorContext, SettingsStoreError

logger = logging.getLogger(__name__)

COLOR_CUSTOMIZATIONS_SECTION = "workbench.colorCustomizations"


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class SettingsStore(Protocol):
    """Async access to the managed settings document."""

    async def read(self) -> dict[str, Any] | None:
        """Return the current document, or None when it is absent or empty."""
        ...

    async def write(self, document: dict[str, Any]) -> None:
        """Replace the document. Raises SettingsStoreError on failure."""
        ...


# =============================================================================
# In-memory store
# =============================================================================


class MemorySettingsStore:
    """Dict-backed store. Keeps copies so callers cannot alias its state."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document = copy.deepcopy(document) if document else None
        self.writes: list[dict[str, Any]] = []

    @property
    def document(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._document) if self._document else None

    async def read(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._document) if self._document else None

    async def write(self, document: dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)
        self.writes.append(copy.deepcopy(document))


# =============================================================================
# JSON file store
# =============================================================================


class JsonSettingsStore:
    """Reads and writes one section of a JSON settings file.

    Other top-level settings in the file are preserved. Writes go through a
    temporary file and an atomic rename. Comments are not preserved.
    """

    def __init__(self, path: Path, section: str = COLOR_CUSTOMIZATIONS_SECTION) -> None:
        self.path = Path(path)
        self.section = section

    def _error(self, message: str) -> SettingsStoreError:
        return SettingsStoreError(message, ErrorContext(file=self.path, key=self.section))

    def _load_file(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise self._error(f"Cannot read settings: {e}") from e
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise self._error(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise self._error("Settings file must contain a JSON object")
        return data

    def read_sync(self) -> dict[str, Any] | None:
        section = self._load_file().get(self.section)
        if section is None:
            return None
        if not isinstance(section, dict):
            raise self._error("Section is not an object")
        return section or None

    def write_sync(self, document: dict[str, Any]) -> None:
        data = self._load_file()
        data[self.section] = document
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".glaze-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise self._error(f"Cannot write settings: {e}") from e

        logger.debug("Wrote %d color keys to %s", len(document), self.path)

    async def read(self) -> dict[str, Any] | None:
        return await asyncio.get_running_loop().run_in_executor(None, self.read_sync)

    async def write(self, document: dict[str, Any]) -> None:
        await asyncio.get_running_loop().run_in_executor(None, self.write_sync, document)

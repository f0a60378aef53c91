"""
Glaze - deterministic workspace tinting.

Derives a stable color palette from a workspace's identity and keeps it
synchronized into a user-editable settings document without clobbering
anyone else's customizations.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import ir
from .core.errors import ConfigError, GlazeError, InvalidColorError, SettingsStoreError


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("glaze")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "GlazeError",
    "ConfigError",
    "InvalidColorError",
    "SettingsStoreError",
]

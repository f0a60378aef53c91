"""Settings document handling: ownership-aware merging and async stores."""

from .merge import (
    LEGACY_MARKER_KEYS,
    MARKER_KEY,
    documents_equal,
    has_managed_keys_without_marker,
    is_managed_key,
    merge,
    owned_theme,
    remove,
    theme_block_key,
)
from .store import (
    COLOR_CUSTOMIZATIONS_SECTION,
    JsonSettingsStore,
    MemorySettingsStore,
    SettingsStore,
)

__all__ = [
    "LEGACY_MARKER_KEYS",
    "MARKER_KEY",
    "documents_equal",
    "has_managed_keys_without_marker",
    "is_managed_key",
    "merge",
    "owned_theme",
    "remove",
    "theme_block_key",
    "COLOR_CUSTOMIZATIONS_SECTION",
    "JsonSettingsStore",
    "MemorySettingsStore",
    "SettingsStore",
]

"""
Settings document merging.

The color customization document is an opaque mapping: string values at
the root are global settings, mapping values keyed ``"[Theme Name]"`` are
theme-scoped blocks. Glaze owns at most one block, named by the ownership
marker at the document root. Everything it does not own is copied through
untouched.

All functions are pure and never mutate their inputs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from glaze.core.errors import SettingsStoreError
from glaze.core.keys import MANAGED_KEYS

Document = dict[str, Any]

MARKER_KEY = "glaze.activeTheme"
LEGACY_MARKER_KEYS: tuple[str, ...] = ("patina.activeTheme", "patina.active")
MARKER_KEYS: frozenset[str] = frozenset((MARKER_KEY, *LEGACY_MARKER_KEYS))


def theme_block_key(theme_name: str) -> str:
    return f"[{theme_name}]"


def is_managed_key(key: str) -> bool:
    """True for palette keys and every spelling of the ownership marker."""
    return key in MANAGED_KEYS or key in MARKER_KEYS


def owned_theme(existing: Mapping[str, Any] | None) -> str | None:
    """Theme name recorded by the ownership marker, canonical key first."""
    if not existing:
        return None
    for key in (MARKER_KEY, *LEGACY_MARKER_KEYS):
        value = existing.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _strip_block(block: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in block.items() if key not in MANAGED_KEYS}


def _copy_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    return value


def merge(
    existing: Mapping[str, Any] | None,
    palette: Mapping[str, str],
    theme_name: str,
) -> Document:
    """Write ``palette`` into the block for ``theme_name`` and claim it.

    The previously owned block loses its managed keys (and is dropped if
    nothing else remains). Managed keys at the root and legacy markers are
    removed; the canonical marker is set to ``theme_name``.

    Raises:
        SettingsStoreError: If the key for ``theme_name`` holds something
            other than an object. The user's value is never replaced.
    """
    existing = existing or {}
    target_block = theme_block_key(theme_name)
    current = existing.get(target_block)
    if current is not None and not isinstance(current, Mapping):
        raise SettingsStoreError(f"{target_block} is not an object, not overwriting it")

    previous = owned_theme(existing)
    previous_block = theme_block_key(previous) if previous else None

    result: Document = {}
    for key, value in existing.items():
        if is_managed_key(key):
            continue
        if isinstance(value, Mapping) and key in (previous_block, target_block):
            stripped = _strip_block(value)
            if stripped or key == target_block:
                result[key] = stripped
            continue
        result[key] = _copy_value(value)

    block = dict(result.get(target_block) or {})
    block.update(palette)
    result[target_block] = block
    result[MARKER_KEY] = theme_name
    return result


def remove(existing: Mapping[str, Any] | None) -> Document | None:
    """Strip managed keys and the marker.

    The owned block is dropped if it becomes empty. Returns None when the
    resulting document would be empty; callers should write ``{}`` rather
    than delete the setting.
    """
    if not existing:
        return None
    owned = owned_theme(existing)
    owned_block = theme_block_key(owned) if owned else None

    result: Document = {}
    for key, value in existing.items():
        if is_managed_key(key):
            continue
        if key == owned_block and isinstance(value, Mapping):
            stripped = _strip_block(value)
            if stripped:
                result[key] = stripped
            continue
        result[key] = _copy_value(value)

    return result or None


def has_managed_keys_without_marker(
    existing: Mapping[str, Any] | None, theme_name: str | None = None
) -> bool:
    """Detect managed colors that Glaze cannot prove it wrote.

    True when managed keys sit at the root without a marker, or when the
    block for ``theme_name`` holds managed keys while the marker names a
    different theme (or is absent).
    """
    if not existing:
        return False
    owned = owned_theme(existing)

    if owned is None and any(key in MANAGED_KEYS for key in existing):
        return True

    if theme_name:
        block = existing.get(theme_block_key(theme_name))
        if isinstance(block, Mapping) and owned != theme_name:
            if any(key in MANAGED_KEYS for key in block):
                return True

    return False


def _normalize(doc: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    return doc if doc else None


def documents_equal(a: Mapping[str, Any] | None, b: Mapping[str, Any] | None) -> bool:
    """Structural equality, one level into theme blocks. Empty equals missing."""
    a, b = _normalize(a), _normalize(b)
    if a is None or b is None:
        return a is b
    if a.keys() != b.keys():
        return False
    for key, left in a.items():
        right = b[key]
        if isinstance(left, Mapping) and isinstance(right, Mapping):
            if dict(left) != dict(right):
                return False
        elif left != right:
            return False
    return True

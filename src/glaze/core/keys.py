"""
Managed color keys.

The twelve settings keys Glaze writes, the UI element and role each one
belongs to, and the theme-color lookup used for blending.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from .ir import ColorRole, TintTarget


class ManagedKey(StrEnum):
    """Settings keys owned by Glaze. The set is closed and bit-exact."""

    TITLE_BAR_ACTIVE_BACKGROUND = "titleBar.activeBackground"
    TITLE_BAR_ACTIVE_FOREGROUND = "titleBar.activeForeground"
    TITLE_BAR_INACTIVE_BACKGROUND = "titleBar.inactiveBackground"
    TITLE_BAR_INACTIVE_FOREGROUND = "titleBar.inactiveForeground"
    STATUS_BAR_BACKGROUND = "statusBar.background"
    STATUS_BAR_FOREGROUND = "statusBar.foreground"
    ACTIVITY_BAR_BACKGROUND = "activityBar.background"
    ACTIVITY_BAR_FOREGROUND = "activityBar.foreground"
    SIDE_BAR_BACKGROUND = "sideBar.background"
    SIDE_BAR_FOREGROUND = "sideBar.foreground"
    SIDE_BAR_SECTION_HEADER_BACKGROUND = "sideBarSectionHeader.background"
    SIDE_BAR_SECTION_HEADER_FOREGROUND = "sideBarSectionHeader.foreground"


@dataclass(frozen=True)
class KeyInfo:
    """Element and role a managed key belongs to."""

    element: TintTarget
    role: ColorRole


_BG = ColorRole.BACKGROUND
_FG = ColorRole.FOREGROUND

KEY_INFO: dict[ManagedKey, KeyInfo] = {
    ManagedKey.TITLE_BAR_ACTIVE_BACKGROUND: KeyInfo(TintTarget.TITLE_BAR, _BG),
    ManagedKey.TITLE_BAR_ACTIVE_FOREGROUND: KeyInfo(TintTarget.TITLE_BAR, _FG),
    ManagedKey.TITLE_BAR_INACTIVE_BACKGROUND: KeyInfo(TintTarget.TITLE_BAR, _BG),
    ManagedKey.TITLE_BAR_INACTIVE_FOREGROUND: KeyInfo(TintTarget.TITLE_BAR, _FG),
    ManagedKey.STATUS_BAR_BACKGROUND: KeyInfo(TintTarget.STATUS_BAR, _BG),
    ManagedKey.STATUS_BAR_FOREGROUND: KeyInfo(TintTarget.STATUS_BAR, _FG),
    ManagedKey.ACTIVITY_BAR_BACKGROUND: KeyInfo(TintTarget.ACTIVITY_BAR, _BG),
    ManagedKey.ACTIVITY_BAR_FOREGROUND: KeyInfo(TintTarget.ACTIVITY_BAR, _FG),
    ManagedKey.SIDE_BAR_BACKGROUND: KeyInfo(TintTarget.SIDE_BAR, _BG),
    ManagedKey.SIDE_BAR_FOREGROUND: KeyInfo(TintTarget.SIDE_BAR, _FG),
    ManagedKey.SIDE_BAR_SECTION_HEADER_BACKGROUND: KeyInfo(TintTarget.SIDE_BAR, _BG),
    ManagedKey.SIDE_BAR_SECTION_HEADER_FOREGROUND: KeyInfo(TintTarget.SIDE_BAR, _FG),
}

MANAGED_KEYS: frozenset[str] = frozenset(key.value for key in ManagedKey)

BACKGROUND_KEYS: tuple[ManagedKey, ...] = tuple(
    key for key, info in KEY_INFO.items() if info.role is ColorRole.BACKGROUND
)

# Theme keys to try when a theme does not define the managed key itself.
_FALLBACK_KEYS: dict[ManagedKey, str] = {
    ManagedKey.TITLE_BAR_INACTIVE_BACKGROUND: "titleBar.activeBackground",
    ManagedKey.TITLE_BAR_INACTIVE_FOREGROUND: "titleBar.activeForeground",
    ManagedKey.SIDE_BAR_SECTION_HEADER_BACKGROUND: "sideBar.background",
    ManagedKey.SIDE_BAR_SECTION_HEADER_FOREGROUND: "sideBar.foreground",
}

EDITOR_BACKGROUND = "editor.background"
EDITOR_FOREGROUND = "editor.foreground"


def keys_for_target(target: TintTarget) -> list[ManagedKey]:
    """Managed keys belonging to one tint target, in declaration order."""
    return [key for key, info in KEY_INFO.items() if info.element is target]


def color_for_key(key: ManagedKey, theme_colors: Mapping[str, str] | None) -> str | None:
    """Resolve the theme color a managed key should blend toward.

    Lookup order: the key itself, its mapped fallback key, then
    editor.background or editor.foreground depending on the key's role.
    """
    if not theme_colors:
        return None
    if key.value in theme_colors:
        return theme_colors[key.value]
    fallback = _FALLBACK_KEYS.get(key)
    if fallback and fallback in theme_colors:
        return theme_colors[fallback]
    editor_key = EDITOR_BACKGROUND if KEY_INFO[key].role is ColorRole.BACKGROUND else EDITOR_FOREGROUND
    return theme_colors.get(editor_key)

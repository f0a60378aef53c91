"""
Color styles: lightness and chroma curves per theme type and managed key.

A static style stores, for every key, an OKLCH lightness and a chroma
factor (fraction of the maximum in-gamut chroma at that lightness and
hue). The adaptive style borrows lightness and chroma from the theme and
only swaps in the tint hue.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from .errors import InvalidColorError
from .ir import ColorRole, ColorStyle, ThemeType
from .keys import KEY_INFO, ManagedKey, color_for_key
from .oklch import OKLCH, hex_to_oklch, max_chroma


@dataclass(frozen=True)
class StyleEntry:
    lightness: float
    chroma_factor: float


@dataclass(frozen=True)
class StyleContext:
    """Inputs a style needs beyond the theme type and key."""

    element_hue: float
    theme_colors: Mapping[str, str] | None = None


@dataclass(frozen=True)
class ResolvedTint:
    """Tint color for one key, and whether blending may touch only its hue."""

    tint: OKLCH
    hue_only_blend: bool = False


StyleTable = dict[ThemeType, dict[ManagedKey, StyleEntry]]
StyleResolver = Callable[[ThemeType, ManagedKey, StyleContext], ResolvedTint]

_KEY_ORDER = tuple(ManagedKey)


def _rows(*pairs: tuple[float, float]) -> dict[ManagedKey, StyleEntry]:
    """Build one theme type's table from (lightness, chroma_factor) pairs in key order."""
    return {key: StyleEntry(lightness, factor) for key, (lightness, factor) in zip(_KEY_ORDER, pairs, strict=True)}


# Row order: titleBar active bg/fg, inactive bg/fg, statusBar bg/fg,
# activityBar bg/fg, sideBar bg/fg, sideBarSectionHeader bg/fg.

PASTEL: StyleTable = {
    ThemeType.DARK: _rows(
        (0.42, 0.55), (0.92, 0.12), (0.36, 0.45), (0.72, 0.10), (0.45, 0.60), (0.92, 0.12),
        (0.34, 0.50), (0.88, 0.12), (0.31, 0.50), (0.88, 0.12), (0.34, 0.50), (0.88, 0.12),
    ),
    ThemeType.LIGHT: _rows(
        (0.76, 0.55), (0.15, 0.15), (0.80, 0.45), (0.35, 0.10), (0.72, 0.60), (0.15, 0.15),
        (0.82, 0.50), (0.18, 0.12), (0.85, 0.50), (0.18, 0.12), (0.82, 0.50), (0.18, 0.12),
    ),
    ThemeType.HC_DARK: _rows(
        (0.24, 0.60), (0.96, 0.10), (0.20, 0.50), (0.82, 0.08), (0.26, 0.65), (0.96, 0.10),
        (0.18, 0.55), (0.94, 0.10), (0.15, 0.55), (0.94, 0.10), (0.18, 0.55), (0.94, 0.10),
    ),
    ThemeType.HC_LIGHT: _rows(
        (0.88, 0.60), (0.10, 0.20), (0.90, 0.50), (0.25, 0.12), (0.85, 0.65), (0.10, 0.20),
        (0.92, 0.55), (0.12, 0.15), (0.95, 0.55), (0.12, 0.15), (0.92, 0.55), (0.12, 0.15),
    ),
}

NEON: StyleTable = {
    ThemeType.DARK: _rows(
        (0.58, 1.00), (0.98, 0.15), (0.50, 0.85), (0.82, 0.12), (0.60, 1.00), (0.98, 0.15),
        (0.52, 0.95), (0.96, 0.14), (0.49, 0.95), (0.96, 0.14), (0.52, 0.95), (0.96, 0.14),
    ),
    ThemeType.LIGHT: _rows(
        (0.72, 0.95), (0.12, 0.25), (0.76, 0.80), (0.28, 0.18), (0.70, 1.00), (0.12, 0.25),
        (0.78, 0.90), (0.15, 0.20), (0.81, 0.90), (0.15, 0.20), (0.78, 0.90), (0.15, 0.20),
    ),
    ThemeType.HC_DARK: _rows(
        (0.45, 1.00), (0.99, 0.12), (0.38, 0.90), (0.90, 0.10), (0.48, 1.00), (0.99, 0.12),
        (0.40, 0.95), (0.98, 0.10), (0.37, 0.95), (0.98, 0.10), (0.40, 0.95), (0.98, 0.10),
    ),
    ThemeType.HC_LIGHT: _rows(
        (0.80, 1.00), (0.06, 0.30), (0.84, 0.85), (0.20, 0.20), (0.78, 1.00), (0.06, 0.30),
        (0.85, 0.95), (0.08, 0.25), (0.88, 0.95), (0.08, 0.25), (0.85, 0.95), (0.08, 0.25),
    ),
}

TINTED: StyleTable = {
    ThemeType.DARK: _rows(
        (0.30, 0.10), (0.88, 0.08), (0.24, 0.08), (0.65, 0.06), (0.32, 0.12), (0.88, 0.08),
        (0.22, 0.10), (0.82, 0.06), (0.19, 0.10), (0.82, 0.06), (0.22, 0.10), (0.82, 0.06),
    ),
    ThemeType.LIGHT: _rows(
        (0.85, 0.10), (0.15, 0.08), (0.90, 0.08), (0.35, 0.06), (0.82, 0.12), (0.15, 0.08),
        (0.92, 0.10), (0.18, 0.06), (0.95, 0.10), (0.18, 0.06), (0.92, 0.10), (0.18, 0.06),
    ),
    ThemeType.HC_DARK: _rows(
        (0.14, 0.10), (0.96, 0.06), (0.10, 0.08), (0.80, 0.05), (0.16, 0.12), (0.96, 0.06),
        (0.08, 0.10), (0.92, 0.05), (0.05, 0.10), (0.92, 0.05), (0.08, 0.10), (0.92, 0.05),
    ),
    ThemeType.HC_LIGHT: _rows(
        (0.94, 0.10), (0.08, 0.06), (0.96, 0.08), (0.25, 0.05), (0.92, 0.12), (0.08, 0.06),
        (0.97, 0.10), (0.10, 0.05), (0.99, 0.10), (0.10, 0.05), (0.97, 0.10), (0.10, 0.05),
    ),
}


def _derive(base: StyleTable, background_scale: float, foreground_scale: float) -> StyleTable:
    """Scale a table's chroma factors by role, capped at full gamut."""
    derived: StyleTable = {}
    for theme_type, rows in base.items():
        derived[theme_type] = {}
        for key, entry in rows.items():
            scale = background_scale if KEY_INFO[key].role is ColorRole.BACKGROUND else foreground_scale
            derived[theme_type][key] = StyleEntry(entry.lightness, min(1.0, entry.chroma_factor * scale))
    return derived


VIBRANT = _derive(PASTEL, 1.5, 1.25)
MUTED = _derive(PASTEL, 0.5, 0.5)
MONOCHROME = _derive(TINTED, 0.0, 0.0)


def static_resolver(table: StyleTable) -> StyleResolver:
    """Wrap a static table as a resolver."""

    def resolve(theme_type: ThemeType, key: ManagedKey, context: StyleContext) -> ResolvedTint:
        entry = table[theme_type][key]
        chroma = max_chroma(entry.lightness, context.element_hue) * entry.chroma_factor
        return ResolvedTint(OKLCH(entry.lightness, chroma, context.element_hue))

    return resolve


_pastel_resolver = static_resolver(PASTEL)


def adaptive_resolver(theme_type: ThemeType, key: ManagedKey, context: StyleContext) -> ResolvedTint:
    """Theme lightness and chroma with the element hue; pastel when the theme has no color."""
    theme_hex = color_for_key(key, context.theme_colors)
    if theme_hex is None:
        return _pastel_resolver(theme_type, key, context)
    try:
        theme = hex_to_oklch(theme_hex)
    except InvalidColorError:
        return _pastel_resolver(theme_type, key, context)
    return ResolvedTint(OKLCH(theme.l, theme.c, context.element_hue), hue_only_blend=True)


STYLE_RESOLVERS: dict[ColorStyle, StyleResolver] = {
    ColorStyle.NEON: static_resolver(NEON),
    ColorStyle.VIBRANT: static_resolver(VIBRANT),
    ColorStyle.PASTEL: _pastel_resolver,
    ColorStyle.MUTED: static_resolver(MUTED),
    ColorStyle.TINTED: static_resolver(TINTED),
    ColorStyle.MONOCHROME: static_resolver(MONOCHROME),
    ColorStyle.ADAPTIVE: adaptive_resolver,
}


def get_style_resolver(style: ColorStyle) -> StyleResolver:
    return STYLE_RESOLVERS[style]

"""
Theme-aware color blending.

Two strategies pull a tint toward the theme color for the same key:

- overlay: alpha compositing in linear sRGB
- hueShift: OKLCH interpolation with directed hue rotation

All blends are total: a malformed theme color leaves the tint untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from .errors import InvalidColorError
from .hue import normalize_hue
from .ir import BlendMethod, HueDirection
from .keys import BACKGROUND_KEYS, color_for_key
from .oklch import OKLCH, clamp_to_gamut, hex_to_linear_rgb, hex_to_oklch, linear_rgb_to_hex, oklch_to_hex

logger = logging.getLogger(__name__)

# Forced arcs longer than this fall back to the shortest path.
MAX_FORCED_ARC_DEGREES = 270.0

BlendFunction = Callable[[OKLCH, str, str, float, bool], str]
"""(tint_oklch, tint_hex, theme_hex, factor, hue_only) -> blended hex"""


def _clamp_factor(factor: float) -> float:
    return max(0.0, min(1.0, factor))


# =============================================================================
# Overlay
# =============================================================================


def overlay_blend(
    tint_oklch: OKLCH,
    tint_hex: str,
    theme_hex: str,
    factor: float,
    hue_only: bool = False,
) -> str:
    """Composite the tint over the theme color in linear sRGB.

    ``tint_oklch`` and ``hue_only`` are accepted for signature parity with
    the hue-shift blend and are ignored.
    """
    try:
        tint = hex_to_linear_rgb(tint_hex)
        theme = hex_to_linear_rgb(theme_hex)
    except InvalidColorError:
        logger.debug("Skipping overlay blend for malformed color %r / %r", tint_hex, theme_hex)
        return tint_hex
    f = _clamp_factor(factor)
    mixed = tuple(t * (1 - f) + b * f for t, b in zip(tint, theme, strict=True))
    return linear_rgb_to_hex(mixed)  # type: ignore[arg-type]


# =============================================================================
# Hue interpolation
# =============================================================================


def blend_hue_directed(
    hue1: float,
    hue2: float,
    factor: float,
    direction: HueDirection = HueDirection.SHORTEST,
) -> float:
    """Interpolate from ``hue1`` toward ``hue2`` along the chosen arc."""
    diff = hue2 - hue1
    if direction is HueDirection.CW:
        if diff < 0:
            diff += 360
    elif direction is HueDirection.CCW:
        if diff > 0:
            diff -= 360
    elif diff > 180:
        diff -= 360
    elif diff < -180:
        diff += 360
    return normalize_hue(hue1 + diff * factor)


def hue_blend_direction(tint_hue: float, theme_hue: float) -> HueDirection:
    """Direction of the shortest arc from tint to theme; 180 resolves to cw."""
    diff = theme_hue - tint_hue
    if diff > 180:
        diff -= 360
    elif diff < -180:
        diff += 360
    return HueDirection.CW if diff >= 0 else HueDirection.CCW


def majority_hue_direction(
    base_hue: float, theme_colors: Mapping[str, str] | None
) -> HueDirection | None:
    """Vote a single rotation direction across all background theme colors.

    Returns None when no background key resolves to a usable theme color.
    Ties go to cw.
    """
    cw = 0
    total = 0
    for key in BACKGROUND_KEYS:
        theme_hex = color_for_key(key, theme_colors)
        if theme_hex is None:
            continue
        try:
            theme_hue = hex_to_oklch(theme_hex).h
        except InvalidColorError:
            continue
        if hue_blend_direction(base_hue, theme_hue) is HueDirection.CW:
            cw += 1
        total += 1
    if total == 0:
        return None
    return HueDirection.CW if cw >= total - cw else HueDirection.CCW


def effective_hue_direction(
    tint_hue: float, theme_hue: float, majority: HueDirection | None
) -> HueDirection | None:
    """Apply the majority direction to one pair unless the arc gets too long."""
    if majority is None or majority is HueDirection.SHORTEST:
        return None
    diff = theme_hue - tint_hue
    if majority is HueDirection.CW:
        if diff < 0:
            diff += 360
    elif diff > 0:
        diff -= 360
    return majority if abs(diff) <= MAX_FORCED_ARC_DEGREES else None


# =============================================================================
# OKLCH blends
# =============================================================================


def _blend_oklch(
    tint: OKLCH,
    theme_hex: str,
    factor: float,
    hue_only: bool,
    direction: HueDirection,
) -> OKLCH:
    try:
        theme = hex_to_oklch(theme_hex)
    except InvalidColorError:
        return tint
    f = _clamp_factor(factor)
    hue = blend_hue_directed(tint.h, theme.h, f, direction)
    if hue_only:
        return clamp_to_gamut(OKLCH(tint.l, tint.c, hue))
    return clamp_to_gamut(
        OKLCH(
            tint.l * (1 - f) + theme.l * f,
            tint.c * (1 - f) + theme.c * f,
            hue,
        )
    )


def blend_with_theme_oklch(
    tint: OKLCH,
    theme_hex: str,
    factor: float,
    direction: HueDirection = HueDirection.SHORTEST,
) -> OKLCH:
    """Interpolate lightness, chroma and hue toward the theme color."""
    return _blend_oklch(tint, theme_hex, factor, False, direction)


def blend_hue_only_oklch(
    tint: OKLCH,
    theme_hex: str,
    factor: float,
    direction: HueDirection = HueDirection.SHORTEST,
) -> OKLCH:
    """Interpolate only the hue; the tint keeps its lightness and chroma."""
    return _blend_oklch(tint, theme_hex, factor, True, direction)


def blend_directed_oklch(
    tint: OKLCH,
    theme_hex: str,
    factor: float,
    hue_only: bool,
    majority: HueDirection | None = None,
) -> OKLCH:
    try:
        theme_hue = hex_to_oklch(theme_hex).h
    except InvalidColorError:
        return tint
    direction = effective_hue_direction(tint.h, theme_hue, majority) or HueDirection.SHORTEST
    return _blend_oklch(tint, theme_hex, factor, hue_only, direction)


def create_hue_shift_blend(majority: HueDirection | None = None) -> BlendFunction:
    def hue_shift_blend(
        tint_oklch: OKLCH, tint_hex: str, theme_hex: str, factor: float, hue_only: bool
    ) -> str:
        blended = blend_directed_oklch(tint_oklch, theme_hex, factor, hue_only, majority)
        if blended is tint_oklch:
            return tint_hex
        return oklch_to_hex(blended)

    return hue_shift_blend


def get_blend_function(
    method: BlendMethod, majority: HueDirection | None = None
) -> BlendFunction:
    """Blend function for a method; ``majority`` only affects hueShift."""
    if method is BlendMethod.HUE_SHIFT:
        return create_hue_shift_blend(majority)
    return overlay_blend

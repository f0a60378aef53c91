"""
Pure-Python OKLCH color conversions.

Converts between #RRGGBB hex, linear sRGB and OKLCH using Björn
Ottosson's OKLab matrices, with gamut clamping by chroma reduction.
No external color libraries required.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from .errors import InvalidColorError

_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")

# Chroma ceiling for binary searches; no sRGB color exceeds it.
_CHROMA_CEILING = 0.4
_SEARCH_STEPS = 24
_GAMUT_EPSILON = 1e-6
_ACHROMATIC = 1e-4


@dataclass(frozen=True)
class OKLCH:
    """A color in OKLCH space.

    Attributes:
        l: Lightness (0-1).
        c: Chroma (0-0.4).
        h: Hue in degrees [0, 360).
    """

    l: float  # noqa: E741
    c: float
    h: float


RGB = tuple[float, float, float]


def oklch_to_css(L: float, C: float, H: float, alpha: float = 1.0) -> str:
    """Format an OKLCH color as a CSS string.

    Args:
        L: Lightness (0-1).
        C: Chroma (0-0.4).
        H: Hue (0-360).
        alpha: Opacity (0-1).

    Returns:
        CSS oklch() string.
    """
    L_fmt = f"{L:.3f}"
    C_fmt = f"{C:.4f}"
    H_fmt = f"{H:.1f}"
    if alpha < 1.0:
        return f"oklch({L_fmt} {C_fmt} {H_fmt} / {alpha:.2f})"
    return f"oklch({L_fmt} {C_fmt} {H_fmt})"


# =============================================================================
# sRGB transfer
# =============================================================================


def _to_linear(channel: float) -> float:
    if channel <= 0.04045:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def _to_gamma(channel: float) -> float:
    if channel <= 0.0031308:
        return channel * 12.92
    return 1.055 * channel ** (1 / 2.4) - 0.055


def parse_hex(value: str) -> RGB:
    """Parse ``#RRGGBB`` (case-insensitive) into gamma sRGB channels in [0, 1].

    Raises:
        InvalidColorError: If the value is not a six-digit hex color.
    """
    match = _HEX_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise InvalidColorError(f"Invalid hex color: {value!r}")
    digits = match.group(1)
    return (
        int(digits[0:2], 16) / 255,
        int(digits[2:4], 16) / 255,
        int(digits[4:6], 16) / 255,
    )


def rgb_to_hex(rgb: RGB) -> str:
    """Format gamma sRGB channels as lowercase ``#rrggbb``, clipping to [0, 1]."""
    parts = []
    for channel in rgb:
        clipped = min(1.0, max(0.0, channel))
        parts.append(f"{round(clipped * 255):02x}")
    return "#" + "".join(parts)


def hex_to_linear_rgb(value: str) -> RGB:
    """Convert hex to linear-light sRGB."""
    r, g, b = parse_hex(value)
    return (_to_linear(r), _to_linear(g), _to_linear(b))


def linear_rgb_to_hex(rgb: RGB) -> str:
    """Convert linear-light sRGB to hex."""
    r, g, b = (min(1.0, max(0.0, channel)) for channel in rgb)
    return rgb_to_hex((_to_gamma(r), _to_gamma(g), _to_gamma(b)))


# =============================================================================
# OKLab
# =============================================================================


def _linear_rgb_to_oklab(rgb: RGB) -> tuple[float, float, float]:
    r, g, b = rgb
    lms_l = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b
    lms_m = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    lms_s = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b

    l_ = math.copysign(abs(lms_l) ** (1 / 3), lms_l)
    m_ = math.copysign(abs(lms_m) ** (1 / 3), lms_m)
    s_ = math.copysign(abs(lms_s) ** (1 / 3), lms_s)

    return (
        0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
        1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
        0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
    )


def _oklab_to_linear_rgb(L: float, a: float, b: float) -> RGB:
    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b

    lms_l = l_**3
    lms_m = m_**3
    lms_s = s_**3

    return (
        4.0767416621 * lms_l - 3.3077115913 * lms_m + 0.2309699292 * lms_s,
        -1.2684380046 * lms_l + 2.6097574011 * lms_m - 0.3413193965 * lms_s,
        -0.0041960863 * lms_l - 0.7034186147 * lms_m + 1.7076147010 * lms_s,
    )


def oklch_to_linear_rgb(color: OKLCH) -> RGB:
    """Convert OKLCH to (possibly out-of-gamut) linear sRGB."""
    h_rad = math.radians(color.h)
    return _oklab_to_linear_rgb(color.l, color.c * math.cos(h_rad), color.c * math.sin(h_rad))


def linear_rgb_to_oklch(rgb: RGB) -> OKLCH:
    """Convert linear sRGB to OKLCH. Achromatic colors get hue 0."""
    L, a, b = _linear_rgb_to_oklab(rgb)
    C = math.hypot(a, b)
    if C < _ACHROMATIC:
        return OKLCH(L, 0.0, 0.0)
    H = math.degrees(math.atan2(b, a)) % 360
    return OKLCH(L, C, H)


def hex_to_oklch(value: str) -> OKLCH:
    """Convert ``#RRGGBB`` to OKLCH.

    Raises:
        InvalidColorError: If the value is not a six-digit hex color.
    """
    return linear_rgb_to_oklch(hex_to_linear_rgb(value))


def oklch_to_hex(color: OKLCH) -> str:
    """Convert OKLCH to lowercase hex, clamping to the sRGB gamut first."""
    return linear_rgb_to_hex(oklch_to_linear_rgb(clamp_to_gamut(color)))


# =============================================================================
# Gamut
# =============================================================================


def is_in_gamut(color: OKLCH) -> bool:
    """True when the color maps to linear sRGB channels inside [0, 1]."""
    return all(
        -_GAMUT_EPSILON <= channel <= 1 + _GAMUT_EPSILON for channel in oklch_to_linear_rgb(color)
    )


def max_chroma(lightness: float, hue: float) -> float:
    """Largest in-gamut chroma for a lightness/hue pair (binary search)."""
    if lightness <= 0.0 or lightness >= 1.0:
        return 0.0
    low, high = 0.0, _CHROMA_CEILING
    for _ in range(_SEARCH_STEPS):
        mid = (low + high) / 2
        if is_in_gamut(OKLCH(lightness, mid, hue)):
            low = mid
        else:
            high = mid
    return low


def clamp_to_gamut(color: OKLCH) -> OKLCH:
    """Reduce chroma until the color fits sRGB, keeping lightness and hue."""
    lightness = min(1.0, max(0.0, color.l))
    clamped = OKLCH(lightness, max(0.0, color.c), color.h)
    if is_in_gamut(clamped):
        return clamped
    return OKLCH(lightness, max_chroma(lightness, color.h), color.h)

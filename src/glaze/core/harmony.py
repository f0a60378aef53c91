"""
Color harmonies: per-element hue offsets from the workspace base hue.

Ordered from least to most hue variation.
"""

from __future__ import annotations

from .ir import ColorHarmony, TintTarget

_T = TintTarget

HARMONY_OFFSETS: dict[ColorHarmony, dict[TintTarget, float]] = {
    # All elements share the base hue
    ColorHarmony.UNIFORM: {},
    # Activity bar gets a 60 degree pop
    ColorHarmony.ACCENT: {_T.ACTIVITY_BAR: 60},
    ColorHarmony.GRADIENT: {
        _T.TITLE_BAR: -30,
        _T.STATUS_BAR: 30,
        _T.ACTIVITY_BAR: -15,
        _T.SIDE_BAR: 15,
    },
    ColorHarmony.ANALOGOUS: {_T.TITLE_BAR: -25, _T.STATUS_BAR: 25},
    # Complementary status bar
    ColorHarmony.UNDERCURRENT: {_T.STATUS_BAR: 180},
    ColorHarmony.DUOTONE: {_T.ACTIVITY_BAR: 180, _T.SIDE_BAR: 180},
    ColorHarmony.SPLIT_COMPLEMENTARY: {_T.TITLE_BAR: -150, _T.STATUS_BAR: 150},
    ColorHarmony.TRIADIC: {_T.TITLE_BAR: -120, _T.STATUS_BAR: 120},
    ColorHarmony.TETRADIC: {_T.TITLE_BAR: 90, _T.STATUS_BAR: 180, _T.ACTIVITY_BAR: 270},
}


def hue_offset(harmony: ColorHarmony, element: TintTarget) -> float:
    """Hue offset in degrees for one element; unlisted elements get 0."""
    return HARMONY_OFFSETS[harmony].get(element, 0.0)

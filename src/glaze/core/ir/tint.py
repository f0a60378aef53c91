"""
Tint IR types shared by the color engine and the reconcile core.

Enumerations for theme types, tint targets, styles, harmonies and blend
methods, plus the ThemeContext snapshot handed to palette generation.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class ThemeType(StrEnum):
    """Editor theme types."""

    DARK = "dark"
    LIGHT = "light"
    HC_DARK = "hcDark"
    HC_LIGHT = "hcLight"

    @property
    def is_light(self) -> bool:
        return self in (ThemeType.LIGHT, ThemeType.HC_LIGHT)


class ThemeMode(StrEnum):
    """User preference for which theme type drives tint generation."""

    AUTO = "auto"
    LIGHT = "light"
    DARK = "dark"


class TintTarget(StrEnum):
    """UI element families that can be tinted."""

    TITLE_BAR = "titleBar"
    STATUS_BAR = "statusBar"
    ACTIVITY_BAR = "activityBar"
    SIDE_BAR = "sideBar"


class ColorRole(StrEnum):
    """Whether a managed key colors a surface or the text on it."""

    BACKGROUND = "background"
    FOREGROUND = "foreground"


class ColorStyle(StrEnum):
    """Lightness/chroma curves applied to the base hue."""

    NEON = "neon"
    VIBRANT = "vibrant"
    PASTEL = "pastel"
    MUTED = "muted"
    TINTED = "tinted"
    MONOCHROME = "monochrome"
    ADAPTIVE = "adaptive"


class ColorHarmony(StrEnum):
    """Per-element hue offset schemes."""

    UNIFORM = "uniform"
    ACCENT = "accent"
    GRADIENT = "gradient"
    ANALOGOUS = "analogous"
    UNDERCURRENT = "undercurrent"
    DUOTONE = "duotone"
    SPLIT_COMPLEMENTARY = "split-complementary"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"


class BlendMethod(StrEnum):
    """Strategy for pulling tint colors toward the theme."""

    OVERLAY = "overlay"
    HUE_SHIFT = "hueShift"


class HueDirection(StrEnum):
    """Direction for hue interpolation around the color wheel."""

    CW = "cw"
    CCW = "ccw"
    SHORTEST = "shortest"


DEFAULT_COLOR_STYLE = ColorStyle.PASTEL
DEFAULT_COLOR_HARMONY = ColorHarmony.UNIFORM
DEFAULT_BLEND_METHOD = BlendMethod.OVERLAY
DEFAULT_BLEND_FACTOR = 0.35


# =============================================================================
# Theme context
# =============================================================================


class ThemeContext(BaseModel):
    """Snapshot of the active editor theme for one reconcile."""

    model_config = ConfigDict(frozen=True)

    type: ThemeType = Field(default=ThemeType.DARK, description="Theme type used for tinting")
    name: str | None = Field(default=None, description="Display name of the active theme")
    is_auto_detected: bool = Field(
        default=True, description="False when the type comes from an explicit mode setting"
    )
    colors: dict[str, str] | None = Field(
        default=None,
        description="Theme color key -> hex; editor.background is the universal fallback",
    )

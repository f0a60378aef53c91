"""
Glaze Intermediate Representation (IR) types.

Enumerations, the theme snapshot and the configuration models are
re-exported here.
"""

from .config import (
    INT32_MAX,
    INT32_MIN,
    CustomThemeSpec,
    GlazeConfig,
    IdentifierConfig,
    IdentifierSource,
    MultiRootSource,
    ReconcileSettings,
)
from .tint import (
    DEFAULT_BLEND_FACTOR,
    DEFAULT_BLEND_METHOD,
    DEFAULT_COLOR_HARMONY,
    DEFAULT_COLOR_STYLE,
    BlendMethod,
    ColorHarmony,
    ColorRole,
    ColorStyle,
    HueDirection,
    ThemeContext,
    ThemeMode,
    ThemeType,
    TintTarget,
)

__all__ = [
    "INT32_MAX",
    "INT32_MIN",
    "CustomThemeSpec",
    "GlazeConfig",
    "IdentifierConfig",
    "IdentifierSource",
    "MultiRootSource",
    "ReconcileSettings",
    "DEFAULT_BLEND_FACTOR",
    "DEFAULT_BLEND_METHOD",
    "DEFAULT_COLOR_HARMONY",
    "DEFAULT_COLOR_STYLE",
    "BlendMethod",
    "ColorHarmony",
    "ColorRole",
    "ColorStyle",
    "HueDirection",
    "ThemeContext",
    "ThemeMode",
    "ThemeType",
    "TintTarget",
]

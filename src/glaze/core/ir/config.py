"""
Glaze configuration IR.

Defines the structure of glaze.yaml. Every reconcile reads a fresh
GlazeConfig; the models are frozen so a reconcile never observes a
half-updated configuration.

Sections: tint (top level), identifier, theme_colors, reconcile.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .tint import (
    DEFAULT_BLEND_FACTOR,
    DEFAULT_BLEND_METHOD,
    DEFAULT_COLOR_HARMONY,
    DEFAULT_COLOR_STYLE,
    BlendMethod,
    ColorHarmony,
    ColorStyle,
    ThemeMode,
    ThemeType,
    TintTarget,
)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class IdentifierSource(StrEnum):
    """What value the workspace identifier is derived from."""

    NAME = "name"
    PATH_RELATIVE_TO_HOME = "pathRelativeToHome"
    PATH_ABSOLUTE = "pathAbsolute"
    PATH_RELATIVE_TO_CUSTOM = "pathRelativeToCustom"


class MultiRootSource(StrEnum):
    """How multi-folder workspaces are reduced to one identifier."""

    FIRST_FOLDER = "firstFolder"
    ALL_FOLDERS = "allFolders"
    WORKSPACE_FILE = "workspaceFile"


# =============================================================================
# Section: identifier
# =============================================================================


class IdentifierConfig(BaseModel):
    """Workspace identifier derivation."""

    model_config = ConfigDict(frozen=True)

    source: IdentifierSource = Field(
        default=IdentifierSource.PATH_RELATIVE_TO_HOME,
        description="Value used to derive the workspace identifier",
    )
    custom_base_path: str = Field(
        default="", description="Base path for pathRelativeToCustom (supports ~ and $HOME)"
    )
    multi_root: MultiRootSource = Field(
        default=MultiRootSource.FIRST_FOLDER,
        description="Identifier base for multi-folder workspaces",
    )


# =============================================================================
# Section: theme_colors
# =============================================================================


class CustomThemeSpec(BaseModel):
    """User-supplied colors for a theme missing from the built-in table."""

    model_config = ConfigDict(frozen=True)

    type: ThemeType = Field(description="Theme type")
    colors: dict[str, str] = Field(description="Theme color key -> #RRGGBB")

    @field_validator("colors")
    @classmethod
    def _check_colors(cls, value: dict[str, str]) -> dict[str, str]:
        if "editor.background" not in value:
            raise ValueError("colors must include editor.background")
        for key, hex_value in value.items():
            if not re.match(HEX_PATTERN, hex_value):
                raise ValueError(f"{key}: expected #RRGGBB, got {hex_value!r}")
        return {key: hex_value.upper() for key, hex_value in value.items()}


# =============================================================================
# Section: reconcile
# =============================================================================


class ReconcileSettings(BaseModel):
    """Debounce and write-loop guard tuning."""

    model_config = ConfigDict(frozen=True)

    debounce_ms: int = Field(default=75, ge=0, le=5000, description="Debounce window")
    max_writes: int = Field(default=5, ge=1, description="Writes allowed per window")
    window_ms: int = Field(default=3000, ge=1, description="Sliding window size")
    cooldown_ms: int = Field(default=10000, ge=0, description="Pause after the guard trips")


# =============================================================================
# Root
# =============================================================================


class GlazeConfig(BaseModel):
    """Complete glaze.yaml configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Tint this workspace")
    targets: list[TintTarget] = Field(
        default_factory=lambda: [
            TintTarget.TITLE_BAR,
            TintTarget.STATUS_BAR,
            TintTarget.ACTIVITY_BAR,
        ],
        description="UI element families to tint",
    )
    mode: ThemeMode = Field(default=ThemeMode.AUTO, description="Theme type override")
    seed: int = Field(
        default=0, ge=INT32_MIN, le=INT32_MAX, description="Shifts every workspace's hue"
    )
    base_hue_override: float | None = Field(
        default=None, ge=0.0, lt=360.0, description="Fixed hue; bypasses the identifier hash"
    )
    style: ColorStyle = Field(default=DEFAULT_COLOR_STYLE, description="Color style")
    harmony: ColorHarmony = Field(default=DEFAULT_COLOR_HARMONY, description="Color harmony")
    blend_method: BlendMethod = Field(default=DEFAULT_BLEND_METHOD, description="Blend method")
    blend_factor: float = Field(
        default=DEFAULT_BLEND_FACTOR, ge=0.0, le=1.0, description="Pull toward theme colors"
    )
    target_blend_factors: dict[TintTarget, float] = Field(
        default_factory=dict, description="Per-target blend factor overrides"
    )
    identifier: IdentifierConfig = Field(default_factory=IdentifierConfig)
    theme_colors: dict[str, CustomThemeSpec] = Field(
        default_factory=dict, description="Custom theme colors keyed by theme name"
    )
    reconcile: ReconcileSettings = Field(default_factory=ReconcileSettings)

    @field_validator("targets")
    @classmethod
    def _dedupe_targets(cls, value: list[TintTarget]) -> list[TintTarget]:
        return list(dict.fromkeys(value))

    @field_validator("target_blend_factors")
    @classmethod
    def _check_factors(cls, value: dict[TintTarget, float]) -> dict[TintTarget, float]:
        for target, factor in value.items():
            if not 0.0 <= factor <= 1.0:
                raise ValueError(f"{target}: blend factor must be between 0 and 1")
        return value

    def with_overrides(self, **updates: Any) -> GlazeConfig:
        """Return a copy with validated field overrides (used by the CLI)."""
        data = self.model_dump()
        data.update(updates)
        return GlazeConfig(**data)

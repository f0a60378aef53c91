"""
Palette generation.

Composes the hue generator, harmonies, styles and blend engine into a
keyed palette of managed colors. Every function here is pure: identical
inputs always produce identical output.

Pipeline per managed key:
1. base hue from the workspace identifier and seed (or an override)
2. harmony offset for the key's element
3. style resolver -> OKLCH tint
4. background keys blend toward the theme color for that key
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .blend import get_blend_function, majority_hue_direction
from .harmony import hue_offset
from .hue import apply_hue_offset, compute_base_hue
from .ir import (
    DEFAULT_BLEND_FACTOR,
    DEFAULT_BLEND_METHOD,
    DEFAULT_COLOR_HARMONY,
    DEFAULT_COLOR_STYLE,
    BlendMethod,
    ColorHarmony,
    ColorRole,
    ColorStyle,
    ThemeContext,
    ThemeType,
    TintTarget,
)
from .keys import KEY_INFO, ManagedKey, color_for_key
from .oklch import OKLCH, max_chroma, oklch_to_hex
from .styles import StyleContext, get_style_resolver

# Display-only base tint
BASE_TINT_LIGHTNESS_LIGHT = 0.65
BASE_TINT_LIGHTNESS_DARK = 0.5
BASE_TINT_CHROMA_FACTOR = 0.7


# =============================================================================
# Result types
# =============================================================================


@dataclass(frozen=True)
class TintKeyDetail:
    """Everything computed for one managed key."""

    key: ManagedKey
    element: TintTarget
    role: ColorRole
    tint_hex: str
    final_hex: str
    theme_color: str | None
    blend_factor: float
    enabled: bool


@dataclass(frozen=True)
class TintColors:
    """Reduced view of applied colors for status displays."""

    base_tint: str
    title_bar: str | None = None
    status_bar: str | None = None
    activity_bar: str | None = None
    side_bar: str | None = None


_STATUS_FIELDS: dict[ManagedKey, str] = {
    ManagedKey.TITLE_BAR_ACTIVE_BACKGROUND: "title_bar",
    ManagedKey.STATUS_BAR_BACKGROUND: "status_bar",
    ManagedKey.ACTIVITY_BAR_BACKGROUND: "activity_bar",
    ManagedKey.SIDE_BAR_BACKGROUND: "side_bar",
}


@dataclass(frozen=True)
class TintResult:
    base_hue: float
    base_tint_hex: str
    keys: tuple[TintKeyDetail, ...] = field(default_factory=tuple)

    def palette(self) -> dict[str, str]:
        """Managed key -> final hex for enabled targets only."""
        return {detail.key.value: detail.final_hex for detail in self.keys if detail.enabled}

    def status_colors(self) -> TintColors:
        values: dict[str, str] = {}
        for detail in self.keys:
            if detail.enabled and detail.key in _STATUS_FIELDS:
                values[_STATUS_FIELDS[detail.key]] = detail.final_hex
        return TintColors(base_tint=self.base_tint_hex, **values)


# =============================================================================
# Computation
# =============================================================================


def compute_base_tint_hex(base_hue: float, theme_type: ThemeType) -> str:
    lightness = BASE_TINT_LIGHTNESS_LIGHT if theme_type.is_light else BASE_TINT_LIGHTNESS_DARK
    chroma = max_chroma(lightness, base_hue) * BASE_TINT_CHROMA_FACTOR
    return oklch_to_hex(OKLCH(lightness, chroma, base_hue))


def compute_tint(
    *,
    targets: Iterable[TintTarget],
    theme_type: ThemeType,
    identifier: str | None = None,
    seed: int = 0,
    base_hue: float | None = None,
    style: ColorStyle = DEFAULT_COLOR_STYLE,
    harmony: ColorHarmony = DEFAULT_COLOR_HARMONY,
    blend_method: BlendMethod = DEFAULT_BLEND_METHOD,
    theme_colors: Mapping[str, str] | None = None,
    theme_blend_factor: float | None = None,
    target_blend_factors: Mapping[TintTarget, float] | None = None,
) -> TintResult:
    """Compute every managed key, enabled or not.

    Either ``base_hue`` or ``identifier`` must be given; ``base_hue`` wins.

    Raises:
        ValueError: If neither a base hue nor an identifier is supplied.
    """
    if base_hue is None:
        if identifier is None:
            raise ValueError("compute_tint requires either base_hue or identifier")
        base_hue = compute_base_hue(identifier, seed)

    enabled = set(targets)
    resolver = get_style_resolver(style)
    default_factor = DEFAULT_BLEND_FACTOR if theme_blend_factor is None else theme_blend_factor
    overrides = target_blend_factors or {}

    # Direction is voted from the pre-offset base hue so all keys rotate together.
    majority = majority_hue_direction(base_hue, theme_colors) if theme_colors else None
    blend = get_blend_function(blend_method, majority)

    details: list[TintKeyDetail] = []
    for key, info in KEY_INFO.items():
        element_hue = apply_hue_offset(base_hue, hue_offset(harmony, info.element))
        resolved = resolver(theme_type, key, StyleContext(element_hue, theme_colors))
        tint_hex = oklch_to_hex(resolved.tint)

        theme_color = color_for_key(key, theme_colors)
        factor = overrides.get(info.element, default_factor)

        final_hex = tint_hex
        if info.role is ColorRole.BACKGROUND and theme_color and factor > 0:
            final_hex = blend(resolved.tint, tint_hex, theme_color, factor, resolved.hue_only_blend)

        details.append(
            TintKeyDetail(
                key=key,
                element=info.element,
                role=info.role,
                tint_hex=tint_hex,
                final_hex=final_hex,
                theme_color=theme_color,
                blend_factor=factor,
                enabled=info.element in enabled,
            )
        )

    return TintResult(
        base_hue=base_hue,
        base_tint_hex=compute_base_tint_hex(base_hue, theme_type),
        keys=tuple(details),
    )


def generate_palette(
    identifier: str,
    seed: int,
    targets: Iterable[TintTarget],
    theme_context: ThemeContext,
    style: ColorStyle = DEFAULT_COLOR_STYLE,
    harmony: ColorHarmony = DEFAULT_COLOR_HARMONY,
    blend_method: BlendMethod = DEFAULT_BLEND_METHOD,
    theme_colors: Mapping[str, str] | None = None,
    theme_blend_factor: float | None = None,
    target_blend_factors: Mapping[TintTarget, float] | None = None,
) -> dict[str, str]:
    """Managed key -> hex for the requested targets.

    ``theme_colors`` defaults to the colors carried by ``theme_context``.
    Zero targets yields an empty dict.
    """
    targets = list(targets)
    if not targets:
        return {}
    result = compute_tint(
        targets=targets,
        theme_type=theme_context.type,
        identifier=identifier,
        seed=seed,
        style=style,
        harmony=harmony,
        blend_method=blend_method,
        theme_colors=theme_colors if theme_colors is not None else theme_context.colors,
        theme_blend_factor=theme_blend_factor,
        target_blend_factors=target_blend_factors,
    )
    return result.palette()

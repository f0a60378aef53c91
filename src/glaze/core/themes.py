"""
Theme color resolution.

Built-in theme colors ship as YAML next to this module. Custom themes from
glaze.yaml take precedence over built-ins with the same name.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from .ir import CustomThemeSpec, ThemeContext, ThemeMode, ThemeType

logger = logging.getLogger(__name__)

BUILTIN_THEMES_FILE = Path(__file__).parent / "builtin_themes.yaml"


@lru_cache(maxsize=1)
def load_builtin_themes() -> dict[str, CustomThemeSpec]:
    """Load the built-in theme table. Invalid entries are skipped with a warning."""
    with open(BUILTIN_THEMES_FILE, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    themes: dict[str, CustomThemeSpec] = {}
    for name, entry in data.items():
        try:
            themes[str(name)] = CustomThemeSpec.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping built-in theme %r: %s", name, e)
    return themes


def builtin_theme_names() -> list[str]:
    return sorted(load_builtin_themes())


def lookup_theme(
    name: str | None, custom: Mapping[str, CustomThemeSpec] | None = None
) -> CustomThemeSpec | None:
    """Find colors for a theme name, custom definitions first."""
    if not name:
        return None
    if custom and name in custom:
        return custom[name]
    return load_builtin_themes().get(name)


def resolve_theme_context(
    name: str | None,
    detected_type: ThemeType = ThemeType.DARK,
    mode: ThemeMode = ThemeMode.AUTO,
    custom: Mapping[str, CustomThemeSpec] | None = None,
) -> ThemeContext:
    """Build the ThemeContext for one reconcile.

    Args:
        name: Active theme display name, if known.
        detected_type: Theme type reported by the editor.
        mode: User override; ``auto`` keeps the detected type.
        custom: Custom theme colors from configuration.

    Returns:
        ThemeContext; ``colors`` is None for unknown themes.
    """
    if mode is ThemeMode.AUTO:
        tint_type = detected_type
        auto = True
    else:
        tint_type = ThemeType(mode.value)
        auto = False

    info = lookup_theme(name, custom)
    if name and info is None:
        logger.debug("No colors known for theme %r", name)

    return ThemeContext(
        type=tint_type,
        name=name,
        is_auto_detected=auto,
        colors=dict(info.colors) if info else None,
    )

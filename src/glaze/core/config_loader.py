"""
Configuration persistence for Glaze.

Reads and writes GlazeConfig to glaze.yaml in the project root. The file
is re-read on every reconcile, so edits take effect without a restart.

Default location: {project_root}/glaze.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import ConfigError, make_config_error
from .ir import GlazeConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "glaze.yaml"


# =============================================================================
# Path helpers
# =============================================================================


def get_config_path(project_root: Path) -> Path:
    """Get the glaze.yaml file path."""
    return project_root / CONFIG_FILE


def config_exists(project_root: Path) -> bool:
    """Check if a glaze.yaml exists in the project."""
    return get_config_path(project_root).exists()


# =============================================================================
# Loading
# =============================================================================


def _first_error_key(error: ValidationError) -> str | None:
    errors = error.errors()
    if not errors:
        return None
    return ".".join(str(part) for part in errors[0]["loc"]) or None


def load_config(project_root: Path, *, use_defaults: bool = True) -> GlazeConfig:
    """Load GlazeConfig from glaze.yaml.

    Args:
        project_root: Directory containing glaze.yaml.
        use_defaults: If True, return the default config when the file is missing or empty.

    Returns:
        GlazeConfig instance.

    Raises:
        ConfigError: If the file is missing (when use_defaults=False), not valid
            YAML, or fails validation.
    """
    config_path = get_config_path(project_root)

    if not config_path.exists():
        if use_defaults:
            logger.debug("No glaze.yaml found, using defaults")
            return GlazeConfig()
        raise make_config_error("Configuration not found", file=config_path)

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise make_config_error(f"Invalid YAML: {e}", file=config_path) from e

    if not data:
        if use_defaults:
            logger.warning("Empty glaze.yaml at %s, using defaults", config_path)
            return GlazeConfig()
        raise make_config_error("Empty configuration", file=config_path)

    if not isinstance(data, dict):
        raise make_config_error("Top level must be a mapping", file=config_path)

    try:
        return GlazeConfig.model_validate(data)
    except ValidationError as e:
        raise make_config_error(
            f"Invalid configuration: {e}", file=config_path, key=_first_error_key(e)
        ) from e


def save_config(project_root: Path, config: GlazeConfig) -> Path:
    """Save GlazeConfig to glaze.yaml.

    Returns:
        Path to the saved file.
    """
    config_path = get_config_path(project_root)
    data = config.model_dump(mode="json", exclude_defaults=True)

    try:
        config_path.write_text(
            yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
    except OSError as e:
        raise ConfigError(f"Cannot write {config_path}: {e}") from e

    logger.info("Saved configuration to %s", config_path)
    return config_path

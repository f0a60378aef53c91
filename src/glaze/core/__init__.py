"""Core Glaze functionality: IR, hue derivation, color math, palette generation, configuration."""

from . import ir
from .blend import get_blend_function, majority_hue_direction
from .config_loader import config_exists, load_config, save_config
from .errors import ConfigError, ErrorContext, GlazeError, InvalidColorError, SettingsStoreError
from .hue import HUE_HASH_VERSION, apply_hue_offset, compute_base_hue, hash_string
from .keys import MANAGED_KEYS, ManagedKey, color_for_key
from .themes import lookup_theme, resolve_theme_context
from .tint import TintColors, TintKeyDetail, TintResult, compute_tint, generate_palette
from .workspace import WorkspaceFolder, workspace_identifier

__all__ = [
    "ir",
    "GlazeError",
    "ConfigError",
    "ErrorContext",
    "InvalidColorError",
    "SettingsStoreError",
    "HUE_HASH_VERSION",
    "apply_hue_offset",
    "compute_base_hue",
    "hash_string",
    "MANAGED_KEYS",
    "ManagedKey",
    "color_for_key",
    "get_blend_function",
    "majority_hue_direction",
    "TintColors",
    "TintKeyDetail",
    "TintResult",
    "compute_tint",
    "generate_palette",
    "lookup_theme",
    "resolve_theme_context",
    "WorkspaceFolder",
    "workspace_identifier",
    "config_exists",
    "load_config",
    "save_config",
]

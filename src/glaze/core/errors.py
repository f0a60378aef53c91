"""
Error types for Glaze color generation, configuration, and settings I/O.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class GlazeError(Exception):
    """Base exception for all Glaze errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class InvalidColorError(GlazeError, ValueError):
    """
    Raised when a color string cannot be parsed.

    Examples:
    - Missing or extra hex digits
    - Non-hex characters
    - Shorthand (#RGB) or alpha (#RRGGBBAA) forms
    """

    pass


class ConfigError(GlazeError):
    """
    Raised when glaze.yaml cannot be loaded or fails validation.

    Examples:
    - Malformed YAML
    - Unknown style or harmony names
    - Seed outside the signed 32-bit range
    """

    pass


class SettingsStoreError(GlazeError):
    """
    Raised when the external settings document cannot be read or written.

    Examples:
    - Settings file is not valid JSON
    - Color customization section is not an object
    - Permission denied on write
    """

    pass


@dataclass
class ErrorContext:
    """
    Location information for an error.

    Attributes:
        file: Path to the file involved
        key: Optional dotted key or section within the file
    """

    file: Path
    key: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "glaze.yaml (reconcile.debounce_ms)"
        """
        if self.key:
            return f"{self.file} ({self.key})"
        return str(self.file)


def make_config_error(message: str, file: Path | None = None, key: str | None = None) -> ConfigError:
    """
    Helper to create a ConfigError with optional file context.

    Args:
        message: Error description
        file: Optional config file path
        key: Optional offending key

    Returns:
        ConfigError with context if a file was provided
    """
    if file is not None:
        return ConfigError(message, ErrorContext(file=file, key=key))
    return ConfigError(message)

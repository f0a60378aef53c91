"""Shared pytest fixtures for Glaze tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from glaze.core.ir import GlazeConfig, ThemeContext, ThemeType
from glaze.core.themes import resolve_theme_context
from glaze.logging import ROOT_LOGGER

DARK_THEME = "Default Dark Modern"


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty project root (no glaze.yaml)."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def dark_context() -> ThemeContext:
    return resolve_theme_context(DARK_THEME, ThemeType.DARK)


@pytest.fixture
def default_config() -> GlazeConfig:
    return GlazeConfig()


@pytest.fixture(autouse=True)
def _reset_glaze_logging() -> Iterator[None]:
    """Drop handlers installed by setup_logging so streams do not leak between tests."""
    yield
    glaze_logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(glaze_logger.handlers):
        glaze_logger.removeHandler(handler)
        handler.close()
    glaze_logger.setLevel(logging.NOTSET)

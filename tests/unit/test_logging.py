"""Tests for Glaze logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from glaze.logging import (
    ROOT_LOGGER,
    ConsoleFormatter,
    JSONLFormatter,
    log_with_context,
    setup_logging,
)


def make_record(name: str = "glaze.reconcile.engine", level: int = logging.INFO, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 10, msg, None, None)


class TestFormatters:
    def test_jsonl_fields(self) -> None:
        entry = json.loads(JSONLFormatter().format(make_record()))
        assert entry["level"] == "INFO"
        assert entry["component"] == "reconcile"
        assert entry["message"] == "hello"
        assert entry["timestamp"].endswith("Z")
        assert "source" not in entry

    def test_jsonl_warning_has_source(self) -> None:
        entry = json.loads(JSONLFormatter().format(make_record(level=logging.WARNING)))
        assert entry["source"]["line"] == 10

    def test_jsonl_context(self) -> None:
        record = make_record()
        record.context = {"theme": "Nord"}
        entry = json.loads(JSONLFormatter().format(record))
        assert entry["context"] == {"theme": "Nord"}

    def test_console_plain(self) -> None:
        line = ConsoleFormatter(use_color=False).format(make_record(level=logging.WARNING))
        assert "[reconcile]" in line
        assert "WARNING: hello" in line
        assert "\033[" not in line

    def test_console_info_has_no_level(self) -> None:
        line = ConsoleFormatter(use_color=False).format(make_record())
        assert "INFO" not in line
        assert line.endswith("[reconcile] hello")

    def test_component_for_foreign_logger(self) -> None:
        line = ConsoleFormatter(use_color=False).format(make_record(name="asyncio"))
        assert "[asyncio]" in line


class TestSetupLogging:
    def test_console_only(self) -> None:
        logger = setup_logging(logging.DEBUG)
        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeat_calls_replace_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_jsonl_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "glaze.jsonl"
        logger = setup_logging(logging.INFO, log_file=log_file)
        log_with_context(
            logging.getLogger("glaze.settings.store"), logging.WARNING, "write failed", path="x.json"
        )
        for handler in logger.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        entry = json.loads(lines[-1])
        assert entry["component"] == "settings"
        assert entry["message"] == "write failed"
        assert entry["context"] == {"path": "x.json"}

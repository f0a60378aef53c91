"""Tests for file watching."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import pytest

from glaze.watch import FileWatcher, watch_engine


class FakeEngine:
    def __init__(self) -> None:
        self.requests = 0

    def request_reconcile(self, force: bool = False) -> None:
        self.requests += 1


class TestFileWatcher:
    def test_detects_create_modify_delete(self, tmp_path: Path) -> None:
        path = tmp_path / "glaze.yaml"
        watcher = FileWatcher([path], on_change=lambda p: None)
        watcher._file_mtimes = watcher._scan_files()
        assert watcher.poll() == []

        path.write_text("seed: 1\n")
        assert watcher.poll() == [path]
        assert watcher.poll() == []

        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 5))
        assert watcher.poll() == [path]

        path.unlink()
        assert watcher.poll() == [path]
        assert watcher.poll() == []

    def test_only_changed_paths_reported(self, tmp_path: Path) -> None:
        a = tmp_path / "a.json"
        b = tmp_path / "b.json"
        a.write_text("{}")
        b.write_text("{}")
        watcher = FileWatcher([a, b], on_change=lambda p: None)
        watcher._file_mtimes = watcher._scan_files()
        stat = b.stat()
        os.utime(b, (stat.st_atime, stat.st_mtime + 5))
        assert watcher.poll() == [b]

    def test_thread_calls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        seen: list[Path] = []
        watcher = FileWatcher([path], on_change=seen.append, poll_interval=0.01)
        watcher.start()
        try:
            path.write_text("{}")
            for _ in range(200):
                if seen:
                    break
                watcher._stop_event.wait(0.01)
        finally:
            watcher.stop()
        assert seen
        assert all(changed == path for changed in seen)

    def test_callback_errors_do_not_stop_watcher(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        calls: list[Path] = []

        def flaky(changed: Path) -> None:
            calls.append(changed)
            raise RuntimeError("boom")

        watcher = FileWatcher([path], on_change=flaky, poll_interval=0.01)
        watcher.start()
        try:
            path.write_text("{}")
            for _ in range(200):
                if calls:
                    break
                watcher._stop_event.wait(0.01)
            stat = path.stat()
            os.utime(path, (stat.st_atime, stat.st_mtime + 5))
            for _ in range(200):
                if len(calls) >= 2:
                    break
                watcher._stop_event.wait(0.01)
        finally:
            watcher.stop()
        assert len(calls) >= 2


class TestWatchEngine:
    @pytest.mark.asyncio
    async def test_change_requests_reconcile(self, tmp_path: Path) -> None:
        path = tmp_path / "glaze.yaml"
        engine = FakeEngine()
        watcher = watch_engine(engine, [path], asyncio.get_running_loop(), poll_interval=0.01)  # type: ignore[arg-type]
        try:
            path.write_text("seed: 3\n")
            for _ in range(200):
                if engine.requests:
                    break
                await asyncio.sleep(0.01)
        finally:
            watcher.stop()
        assert engine.requests >= 1

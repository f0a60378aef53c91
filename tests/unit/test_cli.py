"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from glaze.cli import app
from glaze.core.config_loader import load_config
from glaze.core.ir import ColorStyle
from glaze.settings.merge import MARKER_KEY
from glaze.settings.store import COLOR_CUSTOMIZATIONS_SECTION

THEME = "Default Dark Modern"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings_path(project_dir: Path) -> Path:
    return project_dir / ".vscode" / "settings.json"


def read_section(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8")).get(COLOR_CUSTOMIZATIONS_SECTION)


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "Glaze" in result.stdout


class TestPalette:
    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["palette", "code/app", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert 0 <= data["base_hue"] < 360
        assert len(data["colors"]) == 8

    def test_json_is_deterministic(self, cli_runner: CliRunner) -> None:
        args = ["palette", "code/app", "--seed", "5", "--style", "neon", "--json"]
        first = cli_runner.invoke(app, args)
        second = cli_runner.invoke(app, args)
        assert first.stdout == second.stdout

    def test_targets(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            app, ["palette", "code/app", "-t", "statusBar", "-t", "sideBar", "--json"]
        )
        assert result.exit_code == 0, result.output
        colors = json.loads(result.stdout)["colors"]
        assert set(colors) == {
            "statusBar.background",
            "statusBar.foreground",
            "sideBar.background",
            "sideBar.foreground",
            "sideBarSectionHeader.background",
            "sideBarSectionHeader.foreground",
        }

    def test_theme_blending_changes_output(self, cli_runner: CliRunner) -> None:
        plain = cli_runner.invoke(app, ["palette", "code/app", "--json"])
        themed = cli_runner.invoke(app, ["palette", "code/app", "--theme", "Dracula Theme", "--json"])
        assert json.loads(plain.stdout)["colors"] != json.loads(themed.stdout)["colors"]

    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["palette", "code/app"])
        assert result.exit_code == 0, result.output
        assert "statusBar.background" in result.stdout

    def test_css_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["palette", "code/app", "--css", "--harmony", "triadic"])
        assert result.exit_code == 0, result.output

    def test_invalid_style(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["palette", "code/app", "--style", "glitter"])
        assert result.exit_code != 0


class TestApply:
    def test_writes_settings(self, cli_runner: CliRunner, project_dir: Path, settings_path: Path) -> None:
        result = cli_runner.invoke(app, ["apply", "-p", str(project_dir), "--theme", THEME])
        assert result.exit_code == 0, result.output
        section = read_section(settings_path)
        assert section[MARKER_KEY] == THEME
        assert "statusBar.background" in section[f"[{THEME}]"]

    def test_custom_settings_path(self, cli_runner: CliRunner, project_dir: Path, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere.json"
        result = cli_runner.invoke(app, ["apply", "-p", str(project_dir), "--settings", str(target)])
        assert result.exit_code == 0, result.output
        assert MARKER_KEY in read_section(target)

    def test_refuses_foreign_colors(self, cli_runner: CliRunner, project_dir: Path, settings_path: Path) -> None:
        settings_path.parent.mkdir()
        settings_path.write_text(
            json.dumps({COLOR_CUSTOMIZATIONS_SECTION: {"statusBar.background": "#000000"}}),
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["apply", "-p", str(project_dir)])
        assert result.exit_code == 1
        assert "--force" in result.output
        assert read_section(settings_path) == {"statusBar.background": "#000000"}

        forced = cli_runner.invoke(app, ["apply", "-p", str(project_dir), "--force"])
        assert forced.exit_code == 0, forced.output
        assert read_section(settings_path)[MARKER_KEY] == THEME

    def test_invalid_config(self, cli_runner: CliRunner, project_dir: Path) -> None:
        (project_dir / "glaze.yaml").write_text("seed: not-a-number\n", encoding="utf-8")
        result = cli_runner.invoke(app, ["apply", "-p", str(project_dir)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_settings_json(self, cli_runner: CliRunner, project_dir: Path, settings_path: Path) -> None:
        settings_path.parent.mkdir()
        settings_path.write_text("{broken", encoding="utf-8")
        result = cli_runner.invoke(app, ["apply", "-p", str(project_dir)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output


    def test_non_object_theme_block(self, cli_runner: CliRunner, project_dir: Path, settings_path: Path) -> None:
        settings_path.parent.mkdir()
        original = {COLOR_CUSTOMIZATIONS_SECTION: {f"[{THEME}]": "#abcdef"}}
        settings_path.write_text(json.dumps(original), encoding="utf-8")
        result = cli_runner.invoke(app, ["apply", "-p", str(project_dir), "--force"])
        assert result.exit_code == 1
        assert "not an object" in result.output
        assert json.loads(settings_path.read_text(encoding="utf-8")) == original


class TestClearAndStatus:
    def test_clear(self, cli_runner: CliRunner, project_dir: Path, settings_path: Path) -> None:
        cli_runner.invoke(app, ["apply", "-p", str(project_dir)])
        result = cli_runner.invoke(app, ["clear", "-p", str(project_dir)])
        assert result.exit_code == 0, result.output
        assert read_section(settings_path) == {}

    def test_clear_refuses_foreign_colors(
        self, cli_runner: CliRunner, project_dir: Path, settings_path: Path
    ) -> None:
        settings_path.parent.mkdir()
        settings_path.write_text(
            json.dumps({COLOR_CUSTOMIZATIONS_SECTION: {"statusBar.background": "#000000"}}),
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["clear", "-p", str(project_dir)])
        assert result.exit_code == 1

    def test_status_after_apply(self, cli_runner: CliRunner, project_dir: Path) -> None:
        cli_runner.invoke(app, ["apply", "-p", str(project_dir)])
        result = cli_runner.invoke(app, ["status", "-p", str(project_dir)])
        assert result.exit_code == 0, result.output
        assert f"Owned theme:  {THEME}" in result.stdout
        assert "Managed keys: 8 in theme block, 0 at root" in result.stdout
        assert "Customized outside Glaze: no" in result.stdout

    def test_status_without_settings(self, cli_runner: CliRunner, project_dir: Path) -> None:
        result = cli_runner.invoke(app, ["status", "-p", str(project_dir)])
        assert result.exit_code == 0, result.output
        assert "Owned theme:  (none)" in result.stdout

    def test_status_reports_foreign_colors(
        self, cli_runner: CliRunner, project_dir: Path, settings_path: Path
    ) -> None:
        settings_path.parent.mkdir()
        settings_path.write_text(
            json.dumps({COLOR_CUSTOMIZATIONS_SECTION: {"titleBar.activeBackground": "#000000"}}),
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["status", "-p", str(project_dir)])
        assert "Customized outside Glaze: yes" in result.stdout


class TestInitAndThemes:
    def test_init_writes_config(self, cli_runner: CliRunner, project_dir: Path) -> None:
        result = cli_runner.invoke(app, ["init", "-p", str(project_dir), "--seed", "4", "--style", "muted"])
        assert result.exit_code == 0, result.output
        config = load_config(project_dir)
        assert config.seed == 4
        assert config.style is ColorStyle.MUTED

    def test_init_refuses_overwrite(self, cli_runner: CliRunner, project_dir: Path) -> None:
        (project_dir / "glaze.yaml").write_text("seed: 1\n", encoding="utf-8")
        result = cli_runner.invoke(app, ["init", "-p", str(project_dir)])
        assert result.exit_code == 1
        assert load_config(project_dir).seed == 1

        forced = cli_runner.invoke(app, ["init", "-p", str(project_dir), "--force"])
        assert forced.exit_code == 0, forced.output
        assert load_config(project_dir).seed == 0

    def test_init_rejects_out_of_range_seed(self, cli_runner: CliRunner, project_dir: Path) -> None:
        result = cli_runner.invoke(app, ["init", "-p", str(project_dir), "--seed", str(2**31)])
        assert result.exit_code == 1
        assert not (project_dir / "glaze.yaml").exists()

    def test_palette_rejects_out_of_range_seed(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["palette", "code/app", "--seed", str(2**31), "--json"])
        assert result.exit_code == 1

    def test_palette_unknown_theme_warns(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["palette", "code/app", "--theme", "Mystery", "--json"])
        assert result.exit_code == 0
        assert "glaze themes" in result.output

    def test_themes(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["themes"])
        assert result.exit_code == 0, result.output
        assert "Nord" in result.stdout

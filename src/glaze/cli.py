"""
Glaze CLI.

Commands:
- palette: print the palette for an identifier
- apply: reconcile a project's settings file once
- clear: remove Glaze colors from a settings file
- status: show who owns the colors in a settings file
- init: write a starter glaze.yaml
- themes: list themes with built-in colors
- watch: keep a settings file in sync while glaze.yaml or the file changes
"""

from __future__ import annotations

import asyncio
import json
import logging
import platform
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from glaze import __version__
from glaze.core.config_loader import config_exists, get_config_path, load_config, save_config
from glaze.core.errors import GlazeError
from glaze.core.ir import (
    DEFAULT_BLEND_FACTOR,
    BlendMethod,
    ColorHarmony,
    ColorStyle,
    GlazeConfig,
    ThemeType,
    TintTarget,
)
from glaze.core.keys import MANAGED_KEYS
from glaze.core.oklch import hex_to_oklch, oklch_to_css
from glaze.core.themes import builtin_theme_names, load_builtin_themes, resolve_theme_context
from glaze.core.tint import compute_tint
from glaze.core.workspace import WorkspaceFolder
from glaze.logging import setup_logging
from glaze.reconcile.engine import ReconcileEngine
from glaze.reconcile.state import CachedReconcileState
from glaze.settings.merge import has_managed_keys_without_marker, owned_theme, theme_block_key
from glaze.settings.store import JsonSettingsStore
from glaze.watch import watch_engine

DEFAULT_THEME = "Default Dark Modern"
DEFAULT_SETTINGS = Path(".vscode") / "settings.json"

console = Console()


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"Glaze {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="""Glaze - deterministic workspace tinting

Commands:
  • palette: preview the colors for any identifier
  • apply, clear, status: operate on a project's settings file
  • init, themes: set up a project
  • watch: keep the settings file in sync
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Path | None = typer.Option(  # noqa: B008
        None, "--log-file", help="Also write JSONL logs to this file"
    ),
) -> None:
    """Glaze CLI main callback for global options."""
    setup_logging(logging.DEBUG if verbose else logging.INFO, log_file=log_file)


# =============================================================================
# Helpers
# =============================================================================


def _resolve_paths(project: Path | None, settings: Path | None) -> tuple[Path, Path]:
    project_root = (project or Path.cwd()).resolve()
    settings_path = settings if settings is not None else project_root / DEFAULT_SETTINGS
    return project_root, settings_path


def _build_engine(
    project_root: Path, settings_path: Path, theme: str, theme_type: ThemeType
) -> ReconcileEngine:
    try:
        return ReconcileEngine.for_project(
            project_root,
            JsonSettingsStore(settings_path),
            folders=[WorkspaceFolder.from_path(project_root)],
            theme_name=theme,
            theme_type=theme_type,
        )
    except GlazeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


def _report(state: CachedReconcileState, action: str) -> None:
    if state.last_error:
        typer.echo(f"Error: {state.last_error}", err=True)
        raise typer.Exit(code=1)
    if state.customized_outside_owner:
        typer.echo(
            "Colors in the settings file were customized outside Glaze; "
            "nothing was changed. Re-run with --force to take over.",
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo(action)


def _swatch(hex_value: str) -> Text:
    return Text("      ", style=f"on {hex_value}")


# =============================================================================
# Commands
# =============================================================================


@app.command()
def palette(
    identifier: str = typer.Argument(..., help="Workspace identifier (path or name)"),
    seed: int = typer.Option(0, "--seed", help="Seed that shifts the hue"),
    style: ColorStyle = typer.Option(ColorStyle.PASTEL, "--style", help="Color style"),  # noqa: B008
    harmony: ColorHarmony = typer.Option(  # noqa: B008
        ColorHarmony.UNIFORM, "--harmony", help="Color harmony"
    ),
    theme: str | None = typer.Option(None, "--theme", help="Theme name to blend toward"),
    theme_type: ThemeType = typer.Option(ThemeType.DARK, "--theme-type", help="Theme type"),  # noqa: B008
    blend_method: BlendMethod = typer.Option(  # noqa: B008
        BlendMethod.OVERLAY, "--blend-method", help="Blend method"
    ),
    blend_factor: float = typer.Option(
        DEFAULT_BLEND_FACTOR, "--blend-factor", min=0.0, max=1.0, help="Pull toward theme colors"
    ),
    target: list[TintTarget] | None = typer.Option(  # noqa: B008
        None, "--target", "-t", help="Element to tint (repeatable)"
    ),
    css: bool = typer.Option(False, "--css", help="Show oklch() CSS values"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """
    Print the palette Glaze would apply for IDENTIFIER.
    """
    overrides: dict[str, object] = {
        "seed": seed,
        "style": style,
        "harmony": harmony,
        "blend_method": blend_method,
        "blend_factor": blend_factor,
    }
    if target:
        overrides["targets"] = target
    try:
        config = GlazeConfig().with_overrides(**overrides)
    except ValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    context = resolve_theme_context(theme, theme_type)
    if theme and context.colors is None:
        typer.echo(
            f"Warning: no colors known for theme {theme!r}, not blending. "
            "Run 'glaze themes' for the built-in list.",
            err=True,
        )
    result = compute_tint(
        targets=config.targets,
        theme_type=context.type,
        identifier=identifier,
        seed=config.seed,
        style=config.style,
        harmony=config.harmony,
        blend_method=config.blend_method,
        theme_colors=context.colors,
        theme_blend_factor=config.blend_factor,
    )
    colors = result.palette()

    if as_json:
        typer.echo(json.dumps({"base_hue": result.base_hue, "colors": colors}, indent=2))
        return

    table = Table(title=f"{identifier} (hue {result.base_hue:g})")
    table.add_column("Key")
    table.add_column("Hex")
    table.add_column("")
    if css:
        table.add_column("OKLCH")
    for key, hex_value in colors.items():
        row: list[str | Text] = [key, hex_value, _swatch(hex_value)]
        if css:
            color = hex_to_oklch(hex_value)
            row.append(oklch_to_css(color.l, color.c, color.h))
        table.add_row(*row)
    console.print(table)


@app.command()
def apply(
    project: Path | None = typer.Option(  # noqa: B008
        None, "--project", "-p", help="Project root (default: current directory)"
    ),
    settings: Path | None = typer.Option(  # noqa: B008
        None, "--settings", help="Settings file (default: .vscode/settings.json)"
    ),
    theme: str = typer.Option(DEFAULT_THEME, "--theme", help="Active theme name"),
    theme_type: ThemeType = typer.Option(ThemeType.DARK, "--theme-type", help="Theme type"),  # noqa: B008
    force: bool = typer.Option(False, "--force", help="Overwrite colors Glaze does not own"),
) -> None:
    """
    Apply the project's palette to its settings file.
    """
    project_root, settings_path = _resolve_paths(project, settings)
    engine = _build_engine(project_root, settings_path, theme, theme_type)
    asyncio.run(engine.do_reconcile(force=force))
    _report(engine.state, f"Applied colors to {settings_path}")


@app.command()
def clear(
    project: Path | None = typer.Option(  # noqa: B008
        None, "--project", "-p", help="Project root (default: current directory)"
    ),
    settings: Path | None = typer.Option(  # noqa: B008
        None, "--settings", help="Settings file (default: .vscode/settings.json)"
    ),
    theme: str = typer.Option(DEFAULT_THEME, "--theme", help="Active theme name"),
    force: bool = typer.Option(False, "--force", help="Remove colors Glaze does not own"),
) -> None:
    """
    Remove Glaze colors from the settings file.
    """
    project_root, settings_path = _resolve_paths(project, settings)
    engine = _build_engine(project_root, settings_path, theme, ThemeType.DARK)
    asyncio.run(engine.clear(force=force))
    _report(engine.state, f"Cleared colors from {settings_path}")


@app.command()
def status(
    project: Path | None = typer.Option(  # noqa: B008
        None, "--project", "-p", help="Project root (default: current directory)"
    ),
    settings: Path | None = typer.Option(  # noqa: B008
        None, "--settings", help="Settings file (default: .vscode/settings.json)"
    ),
    theme: str = typer.Option(DEFAULT_THEME, "--theme", help="Active theme name"),
) -> None:
    """
    Show ownership of the colors in the settings file.
    """
    project_root, settings_path = _resolve_paths(project, settings)
    try:
        document = JsonSettingsStore(settings_path).read_sync() or {}
    except GlazeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    owner = owned_theme(document)
    root_keys = sorted(key for key in document if key in MANAGED_KEYS)
    block = document.get(theme_block_key(owner)) if owner else None
    block_keys = sorted(key for key in block if key in MANAGED_KEYS) if isinstance(block, dict) else []

    typer.echo(f"Settings:     {settings_path}")
    typer.echo(f"Config:       {get_config_path(project_root)}")
    typer.echo(f"Owned theme:  {owner or '(none)'}")
    typer.echo(f"Managed keys: {len(block_keys)} in theme block, {len(root_keys)} at root")
    if has_managed_keys_without_marker(document, theme):
        typer.echo("Customized outside Glaze: yes (use --force to take over)")
    else:
        typer.echo("Customized outside Glaze: no")


@app.command()
def init(
    project: Path | None = typer.Option(  # noqa: B008
        None, "--project", "-p", help="Project root (default: current directory)"
    ),
    seed: int = typer.Option(0, "--seed", help="Seed that shifts the hue"),
    style: ColorStyle = typer.Option(ColorStyle.PASTEL, "--style", help="Color style"),  # noqa: B008
    harmony: ColorHarmony = typer.Option(  # noqa: B008
        ColorHarmony.UNIFORM, "--harmony", help="Color harmony"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing glaze.yaml"),
) -> None:
    """
    Create glaze.yaml in the project.
    """
    project_root = (project or Path.cwd()).resolve()
    if config_exists(project_root) and not force:
        typer.echo(f"{get_config_path(project_root)} already exists (use --force)", err=True)
        raise typer.Exit(code=1)

    try:
        config = GlazeConfig().with_overrides(seed=seed, style=style, harmony=harmony)
        path = save_config(project_root, config)
    except (ValidationError, GlazeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"Created {path}")


@app.command()
def themes() -> None:
    """
    List themes with built-in colors.
    """
    builtin = load_builtin_themes()
    table = Table(title="Built-in themes")
    table.add_column("Theme")
    table.add_column("Type")
    table.add_column("Background")
    table.add_column("")
    for name in builtin_theme_names():
        spec = builtin[name]
        background = spec.colors["editor.background"]
        table.add_row(name, spec.type.value, background, _swatch(background))
    console.print(table)


@app.command()
def watch(
    project: Path | None = typer.Option(  # noqa: B008
        None, "--project", "-p", help="Project root (default: current directory)"
    ),
    settings: Path | None = typer.Option(  # noqa: B008
        None, "--settings", help="Settings file (default: .vscode/settings.json)"
    ),
    theme: str = typer.Option(DEFAULT_THEME, "--theme", help="Active theme name"),
    theme_type: ThemeType = typer.Option(ThemeType.DARK, "--theme-type", help="Theme type"),  # noqa: B008
    interval: float = typer.Option(0.5, "--interval", min=0.05, help="Poll interval (seconds)"),
) -> None:
    """
    Reconcile whenever glaze.yaml or the settings file changes.
    """
    project_root, settings_path = _resolve_paths(project, settings)
    try:
        load_config(project_root)
    except GlazeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    engine = _build_engine(project_root, settings_path, theme, theme_type)

    async def run() -> None:
        engine.guard.arm()
        loop = asyncio.get_running_loop()
        watcher = watch_engine(
            engine, [get_config_path(project_root), settings_path], loop, poll_interval=interval
        )
        engine.request_reconcile()
        try:
            await asyncio.Event().wait()
        finally:
            watcher.stop()
            await engine.aclose()

    typer.echo(f"Watching {project_root} (Ctrl+C to stop)")
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        typer.echo("\nStopped.")


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    app(args=argv)


if __name__ == "__main__":
    main()

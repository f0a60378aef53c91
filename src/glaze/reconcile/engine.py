"""
Reconcile engine.

Keeps the settings document in sync with the palette for the current
workspace, theme and configuration.

Flow:
    request_reconcile() -> debounce -> chained step -> do_reconcile()

Requests inside the debounce window collapse into one reconcile, and a
``force`` flag set by any of them survives until that reconcile runs.
Steps run strictly one at a time in the order their windows closed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from glaze.core.config_loader import load_config
from glaze.core.errors import GlazeError
from glaze.core.ir import GlazeConfig, ThemeContext, ThemeType
from glaze.core.themes import resolve_theme_context
from glaze.core.tint import compute_tint
from glaze.core.workspace import WorkspaceFolder, workspace_identifier
from glaze.logging import log_with_context
from glaze.settings.merge import documents_equal, has_managed_keys_without_marker, merge, remove
from glaze.settings.store import SettingsStore

from .guard import ConflictGuard, GuardVerdict
from .state import EMPTY_STATE, CachedReconcileState

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.075

ConfigProvider = Callable[[], GlazeConfig]
ThemeProvider = Callable[[GlazeConfig], ThemeContext]
IdentifierProvider = Callable[[GlazeConfig], str | None]
StateListener = Callable[[CachedReconcileState], None]


class ReconcileEngine:
    """Debounced, single-flight synchronizer for one settings document.

    Collaborators are injected as callables so every reconcile sees fresh
    configuration, theme and workspace state.

    Args:
        store: Settings document store.
        config: Returns the current configuration.
        theme: Returns the active theme context for a configuration.
        identifier: Returns the workspace identifier, or None when no
            folder is open.
        guard: Write-loop guard; a disarmed default is created if omitted.
        debounce: Debounce window in seconds.
        on_state_change: Called with every new cached state.
    """

    def __init__(
        self,
        store: SettingsStore,
        *,
        config: ConfigProvider,
        theme: ThemeProvider,
        identifier: IdentifierProvider,
        guard: ConflictGuard | None = None,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        on_state_change: StateListener | None = None,
    ) -> None:
        self.store = store
        self.guard = guard or ConflictGuard()
        self.debounce = debounce
        self._config = config
        self._theme = theme
        self._identifier = identifier
        self._on_state_change = on_state_change

        self._state = EMPTY_STATE
        self._timer: asyncio.TimerHandle | None = None
        self._pending_force = False
        self._chain: asyncio.Task[None] | None = None

    @classmethod
    def for_project(
        cls,
        project_root: Path,
        store: SettingsStore,
        *,
        folders: Sequence[WorkspaceFolder],
        theme_name: str | None,
        theme_type: ThemeType = ThemeType.DARK,
        home: str | None = None,
        workspace_file: str | None = None,
        **kwargs: Any,
    ) -> ReconcileEngine:
        """Engine that re-reads glaze.yaml from ``project_root`` on every reconcile."""
        initial = load_config(project_root)
        if "guard" not in kwargs:
            kwargs["guard"] = ConflictGuard.from_settings(initial.reconcile)
        kwargs.setdefault("debounce", initial.reconcile.debounce_ms / 1000)

        return cls(
            store,
            config=lambda: load_config(project_root),
            theme=lambda cfg: resolve_theme_context(
                theme_name, theme_type, cfg.mode, cfg.theme_colors
            ),
            identifier=lambda cfg: workspace_identifier(
                folders, cfg.identifier, home, workspace_file
            ),
            **kwargs,
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> CachedReconcileState:
        return self._state

    @property
    def pending(self) -> bool:
        """True while a debounced reconcile has not fired yet."""
        return self._timer is not None

    @property
    def busy(self) -> bool:
        return self._timer is not None or (self._chain is not None and not self._chain.done())

    def _set_state(self, **changes: Any) -> None:
        new_state = self._state.update(**changes)
        if new_state == self._state:
            return
        self._state = new_state
        if self._on_state_change is not None:
            self._on_state_change(new_state)

    def _reset_state(self) -> None:
        self._set_state(
            workspace_identifier=None,
            tint_colors=None,
            customized_outside_owner=False,
            last_error=None,
        )

    # =========================================================================
    # Scheduling
    # =========================================================================

    def request_reconcile(self, force: bool = False) -> None:
        """Schedule a reconcile after the debounce window, restarting the window.

        Must be called from the event loop thread.
        """
        loop = asyncio.get_running_loop()
        if force:
            self._pending_force = True
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self.debounce, self._fire)

    def _fire(self) -> None:
        self._timer = None
        force = self._pending_force
        self._pending_force = False
        previous = self._chain
        self._chain = asyncio.get_running_loop().create_task(self._run_step(previous, force))

    async def _run_step(self, previous: asyncio.Task[None] | None, force: bool) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        await self.do_reconcile(force=force)

    def cancel_pending(self) -> None:
        """Cancel a reconcile that has not fired yet. In-flight work continues."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending_force = False

    async def wait_idle(self) -> None:
        """Wait until no reconcile is pending or running."""
        loop = asyncio.get_running_loop()
        while True:
            if self._chain is not None and not self._chain.done():
                await asyncio.wait([self._chain])
                continue
            if self._timer is not None:
                await asyncio.sleep(max(0.0, self._timer.when() - loop.time()))
                await asyncio.sleep(0)
                continue
            return

    async def aclose(self) -> None:
        """Cancel pending work and wait for the in-flight reconcile."""
        self.cancel_pending()
        if self._chain is not None and not self._chain.done():
            await asyncio.wait([self._chain])

    # =========================================================================
    # Reconcile
    # =========================================================================

    async def do_reconcile(self, force: bool = False) -> None:
        """Run one reconcile immediately, bypassing the debounce.

        Never raises; failures end up in ``state.last_error``.
        """
        try:
            await self._reconcile(force)
        except Exception as e:
            logger.exception("Reconcile failed")
            self._set_state(last_error=str(e))

    async def clear(self, force: bool = False) -> None:
        """Remove managed colors now, whatever the configuration says."""
        try:
            config = self._config()
        except GlazeError as e:
            logger.error("Cannot load configuration: %s", e)
            self._set_state(last_error=str(e))
            return
        try:
            await self._clear(config, force)
        except Exception as e:
            logger.exception("Clearing colors failed")
            self._set_state(last_error=str(e))

    async def _reconcile(self, force: bool) -> None:
        verdict = self.guard.check(force)
        if verdict is GuardVerdict.TRIPPED:
            self._set_state(last_error=self.guard.trip_message())
            return
        if verdict is GuardVerdict.BLOCKED:
            logger.debug("Reconcile skipped: guard cooling down")
            return
        if verdict is GuardVerdict.RESUMED:
            self._set_state(last_error=None)

        try:
            config = self._config()
        except GlazeError as e:
            logger.error("Cannot load configuration: %s", e)
            self._set_state(last_error=str(e))
            return

        if not config.enabled or not config.targets:
            await self._clear(config, force)
            return

        identifier = self._identifier(config)
        if not identifier:
            self._reset_state()
            return

        await self._apply(config, identifier, force)

    async def _read(self) -> tuple[bool, dict[str, Any] | None]:
        try:
            return True, await self.store.read()
        except Exception as e:
            logger.error("Failed to read settings: %s", e)
            self._set_state(last_error=str(e))
            return False, None

    async def _write_if_changed(
        self, current: dict[str, Any] | None, updated: dict[str, Any]
    ) -> bool:
        """Write ``updated`` unless it matches ``current``. False on failure."""
        if documents_equal(current, updated):
            logger.debug("Settings unchanged, skipping write")
            return True
        try:
            await self.store.write(updated)
        except Exception as e:
            logger.error("Failed to write color customizations: %s", e)
            self._set_state(last_error=str(e))
            return False
        self.guard.record_write()
        log_with_context(
            logger,
            logging.DEBUG,
            "Wrote color customizations",
            keys=len(updated),
            recent_writes=self.guard.recent_writes,
        )
        return True

    async def _apply(self, config: GlazeConfig, identifier: str, force: bool) -> None:
        theme = self._theme(config)
        if not theme.name:
            logger.warning("Active theme name could not be resolved, skipping write")
            return

        result = compute_tint(
            targets=config.targets,
            theme_type=theme.type,
            identifier=identifier,
            seed=config.seed,
            base_hue=config.base_hue_override,
            style=config.style,
            harmony=config.harmony,
            blend_method=config.blend_method,
            theme_colors=theme.colors,
            theme_blend_factor=config.blend_factor,
            target_blend_factors=config.target_blend_factors,
        )

        ok, existing = await self._read()
        if not ok:
            return

        if not force and has_managed_keys_without_marker(existing, theme.name):
            logger.info("Managed colors were customized outside Glaze, not overwriting")
            self._set_state(workspace_identifier=identifier, customized_outside_owner=True)
            return

        try:
            merged = merge(existing, result.palette(), theme.name)
        except GlazeError as e:
            logger.warning("Cannot merge color customizations: %s", e)
            self._set_state(workspace_identifier=identifier, last_error=str(e))
            return
        if await self._write_if_changed(existing, merged):
            self._set_state(
                workspace_identifier=identifier,
                tint_colors=result.status_colors(),
                customized_outside_owner=False,
                last_error=None,
            )

    async def _clear(self, config: GlazeConfig, force: bool) -> None:
        ok, existing = await self._read()
        if not ok:
            return

        theme_name = self._theme(config).name
        if not force and has_managed_keys_without_marker(existing, theme_name):
            logger.info("Managed colors were customized outside Glaze, not removing")
            self._set_state(
                workspace_identifier=None,
                tint_colors=None,
                customized_outside_owner=True,
                last_error=None,
            )
            return

        remaining = remove(existing) or {}
        if await self._write_if_changed(existing, remaining):
            self._reset_state()

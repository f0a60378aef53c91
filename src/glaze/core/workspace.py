"""
Workspace identifier derivation.

Paths are compared as strings with forward slashes so the same folder
yields the same identifier on every platform.
"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .ir import IdentifierConfig, IdentifierSource, MultiRootSource


@dataclass(frozen=True)
class WorkspaceFolder:
    """One folder of an open workspace."""

    path: str
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or posixpath.basename(normalize_path(self.path).rstrip("/"))

    @classmethod
    def from_path(cls, path: Path | str) -> WorkspaceFolder:
        return cls(path=str(path))


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def expand_home(path: str, home: str | None = None) -> str:
    """Expand a leading ``~`` or ``$HOME``."""
    home = home if home is not None else os.path.expanduser("~")
    if path == "~" or path.startswith(("~/", "~\\")):
        return normalize_path(home).rstrip("/") + "/" + path[1:].lstrip("/\\")
    if path == "$HOME" or path.startswith(("$HOME/", "$HOME\\")):
        return normalize_path(home).rstrip("/") + "/" + path[5:].lstrip("/\\")
    return path


def relative_path(base: str, target: str) -> str | None:
    """``target`` relative to ``base``, or None when it lies outside it."""
    base_norm = posixpath.normpath(normalize_path(base))
    target_norm = posixpath.normpath(normalize_path(target))
    if target_norm == base_norm:
        return "."
    prefix = base_norm if base_norm.endswith("/") else base_norm + "/"
    if not target_norm.startswith(prefix):
        return None
    return target_norm[len(prefix) :]


def folder_identifier(
    folder: WorkspaceFolder, config: IdentifierConfig, home: str | None = None
) -> str:
    folder_path = normalize_path(folder.path)
    source = config.source

    if source is IdentifierSource.NAME:
        return folder.display_name
    if source is IdentifierSource.PATH_ABSOLUTE:
        return folder_path
    if source is IdentifierSource.PATH_RELATIVE_TO_HOME:
        home_dir = home if home is not None else os.path.expanduser("~")
        return relative_path(home_dir, folder_path) or folder_path
    # pathRelativeToCustom
    if not config.custom_base_path:
        return folder_path
    base = expand_home(config.custom_base_path, home)
    return relative_path(base, folder_path) or folder_path


def workspace_identifier(
    folders: Sequence[WorkspaceFolder],
    config: IdentifierConfig | None = None,
    home: str | None = None,
    workspace_file: str | None = None,
) -> str | None:
    """Identifier for a workspace, or None when no folder is open.

    Multi-folder workspaces use the first folder unless ``multi_root`` says
    otherwise: ``allFolders`` joins every folder's identifier with newlines,
    ``workspaceFile`` derives it from the ``.code-workspace`` file and falls
    back to ``allFolders`` when there is none.
    """
    if not folders:
        return None
    config = config or IdentifierConfig()
    multi_root = config.multi_root
    if len(folders) > 1 and multi_root is MultiRootSource.WORKSPACE_FILE:
        if workspace_file:
            return folder_identifier(WorkspaceFolder.from_path(workspace_file), config, home)
        multi_root = MultiRootSource.ALL_FOLDERS
    if len(folders) > 1 and multi_root is MultiRootSource.ALL_FOLDERS:
        return "\n".join(folder_identifier(folder, config, home) for folder in folders)
    return folder_identifier(folders[0], config, home)

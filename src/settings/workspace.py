"""Workspace-level configuration lookups."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from settings.config import NamespacesConfig, load_config

if TYPE_CHECKING:
    from collections.abc import Sequence


def find_workspace_folder(path: Path | None, workspace_folders: Sequence[Path]) -> Path | None:
    """Return the first workspace folder containing ``path``."""
    if path is None:
        return None
    resolved = path.resolve()
    for folder in workspace_folders:
        try:
            resolved.relative_to(Path(folder).resolve())
        except ValueError:
            continue
        return Path(folder)
    return None


def find_workspace_config(
    path: Path | None, workspace_folders: Sequence[Path]
) -> NamespacesConfig:
    """Configuration of the workspace folder owning ``path``, or the defaults."""
    folder = find_workspace_folder(path, workspace_folders)
    if folder is None:
        return NamespacesConfig()
    return load_config(folder)


__all__ = ["find_workspace_config", "find_workspace_folder"]

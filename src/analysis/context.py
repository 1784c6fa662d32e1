"""Explicit collaborators threaded into every engine entry point."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from analysis.document import TextDocument
from analysis.versions import infer_compiler_version
from settings.workspace import find_workspace_config

PrefixProvider = Callable[[TextDocument, Sequence[Path]], Awaitable[str]]
VersionProvider = Callable[[TextDocument, Sequence[Path]], Awaitable[str]]


async def get_namespace_prefix(
    document: TextDocument, workspace_folders: Sequence[Path]
) -> str:
    """Namespace prefix configured for the workspace owning ``document``."""
    return find_workspace_config(document.path, workspace_folders).namespace_prefix


@dataclass(frozen=True)
class AnalysisContext:
    document: TextDocument
    workspace_folders: tuple[Path, ...] = ()
    namespace_prefix_provider: PrefixProvider = field(default=get_namespace_prefix)
    compiler_version_provider: VersionProvider = field(default=infer_compiler_version)

    async def namespace_prefix(self) -> str:
        return await self.namespace_prefix_provider(self.document, self.workspace_folders)

    async def compiler_version(self) -> str:
        return await self.compiler_version_provider(self.document, self.workspace_folders)


__all__ = ["AnalysisContext", "PrefixProvider", "VersionProvider", "get_namespace_prefix"]

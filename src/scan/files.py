"""Solidity source discovery that respects .gitignore and include/exclude globs."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator
    from pathlib import Path

# Installed dependencies of Hardhat and Foundry projects.
DEFAULT_SKIP_DIRS = ("node_modules", "lib")


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _is_source_file(
    path: Path,
    root: Path,
    *,
    skip_dirs: Collection[str],
    ignored: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if not path.is_file() or path.is_symlink() or not _is_within_root(path, root):
        return False

    relative = path.relative_to(root)
    if any(part in skip_dirs for part in relative.parts[:-1]):
        return False

    if ignored is not None and ignored(str(path)):
        return False

    relative_str = relative.as_posix()
    if include_patterns and not any(fnmatch(relative_str, p) for p in include_patterns):
        return False
    return not (exclude_patterns and any(fnmatch(relative_str, p) for p in exclude_patterns))


def _gitignore_files(root: Path, *, nested: bool) -> list[Path]:
    candidates = [root / ".gitignore"]
    if nested:
        candidates.extend(root.rglob(".gitignore"))
    unique = {path for path in candidates if path.is_file()}
    return sorted(unique, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(root: Path, *, nested_gitignore: bool) -> Callable[[str], bool] | None:
    matchers = [
        cast("Callable[[str], bool]", parse_gitignore(path))
        for path in _gitignore_files(root, nested=nested_gitignore)
    ]
    if not matchers:
        return None
    if len(matchers) == 1:
        return matchers[0]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Raised for paths outside the matcher's own directory.
                continue
        return False

    return matches


def find_solidity_files(
    directory: Path,
    *,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
    skip_dirs: Collection[str] = DEFAULT_SKIP_DIRS,
) -> Iterator[Path]:
    """Find all ``.sol`` files under ``directory``.

    Files ignored by git, files under ``skip_dirs`` and files filtered out by
    the fnmatch ``include_patterns``/``exclude_patterns`` (matched against the
    path relative to ``directory``) are left out. Results are sorted by
    relative path.
    """
    ignored = _build_gitignore_matcher(directory, nested_gitignore=nested_gitignore)

    found = [
        path
        for path in directory.rglob("*.sol")
        if _is_source_file(
            path,
            directory,
            skip_dirs=skip_dirs,
            ignored=ignored,
            include_patterns=include_patterns,
            exclude_patterns=exclude_patterns,
        )
    ]
    found.sort(key=lambda p: p.relative_to(directory).as_posix())
    yield from found


__all__ = ["DEFAULT_SKIP_DIRS", "find_solidity_files"]

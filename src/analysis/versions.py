"""Compiler version inference from ``pragma solidity`` constraints."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from semantic_version import NpmSpec, Version

from settings.workspace import find_workspace_config
from syntax.ast import iter_terminals
from syntax.kinds import NonterminalKind, TerminalKind, is_trivia_kind
from syntax.parser import Language
from syntax.query import run_query

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from pathlib import Path

    from analysis.document import TextDocument
    from syntax.tree import Node

logger = logging.getLogger(__name__)

_PRAGMA_QUERY = "(pragma_directive) @pragma"

_OPERATOR_GAP = re.compile(r"(?<=[<>=^~])\s+(?=[0-9xX*])")


def max_satisfying(versions: Iterable[str], constraint: str) -> str | None:
    """Highest of ``versions`` satisfying an npm-style ``constraint``."""
    normalized = _OPERATOR_GAP.sub("", constraint.strip().strip("\"'"))
    try:
        spec = NpmSpec(normalized)
    except ValueError:
        logger.debug("Ignoring unparseable version constraint %r", constraint)
        return None
    best = spec.select(Version(version) for version in versions)
    return str(best) if best is not None else None


def iter_version_constraints(pragma: Node) -> Iterator[str]:
    """Split a ``pragma solidity`` directive into single version constraints.

    Each comparator and version becomes one constraint with its tokens joined
    without separators, so ``>= 0.6.0 < 0.8.0`` yields ``>=0.6.0`` and
    ``<0.8.0``. Hyphen ranges stay whole as ``0.6.0 - 0.8.0``.
    """
    tokens = [t for t in iter_terminals(pragma) if not is_trivia_kind(t.kind)]
    kinds = [token.kind for token in tokens]
    if TerminalKind.SOLIDITY_KEYWORD not in kinds:
        return
    tokens = tokens[kinds.index(TerminalKind.SOLIDITY_KEYWORD) + 1 :]

    parts: list[str] = []
    for index, token in enumerate(tokens):
        if token.kind in (TerminalKind.SEMICOLON, TerminalKind.BAR_BAR):
            if parts:
                yield "".join(parts)
                parts = []
            continue
        if token.kind == TerminalKind.MINUS:
            parts.append(" - ")
            continue
        parts.append(token.text.strip("\"'"))
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if token.kind == TerminalKind.SOLIDITY_VERSION and (
            following is None or following.kind != TerminalKind.MINUS
        ):
            yield "".join(parts)
            parts = []
    if parts:
        yield "".join(parts)


def get_highest_supported_pragma_version(text: str) -> str | None:
    """Highest supported version allowed by any single pragma constraint in ``text``."""
    supported = Language.supported_versions()
    output = Language.latest().parse(NonterminalKind.SOURCE_FILE, text)

    maxima: list[Version] = []
    for match in run_query(output, _PRAGMA_QUERY):
        for cursor in match.captures.get("pragma", []):
            for constraint in iter_version_constraints(cursor.node):
                best = max_satisfying(supported, constraint)
                if best is None:
                    logger.info("No supported compiler version satisfies %r", constraint)
                    continue
                maxima.append(Version(best))

    return str(max(maxima)) if maxima else None


async def infer_compiler_version(
    document: TextDocument, workspace_folders: Sequence[Path]
) -> str:
    """Grammar version for ``document``.

    A ``compiler_version`` pinned in the workspace configuration wins, then
    the pragma-derived version, then the newest supported version.
    """
    config = find_workspace_config(document.path, workspace_folders)
    if config.compiler_version is not None:
        return config.compiler_version

    inferred = get_highest_supported_pragma_version(document.text)
    if inferred is not None:
        return inferred
    return Language.supported_versions()[-1]


__all__ = [
    "get_highest_supported_pragma_version",
    "infer_compiler_version",
    "iter_version_constraints",
    "max_satisfying",
]

"""Tree-sitter queries over parsed Solidity, answered with tree cursors."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cache
from typing import TYPE_CHECKING

from tree_sitter import Query, QueryCursor

from syntax.treesitter import get_language, node_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tree_sitter import Node as TSNode

    from syntax.cursor import Cursor
    from syntax.parser import ParseOutput


@dataclass(frozen=True)
class QueryMatch:
    pattern_index: int
    captures: dict[str, list[Cursor]] = field(default_factory=dict)


@cache
def compile_query(source: str) -> Query:
    """Compile a tree-sitter query against the Solidity grammar."""
    return Query(get_language(), source)


def _capture_nodes(value: object) -> Iterable[TSNode]:
    if isinstance(value, list):
        return value
    return [value]


def _cursors_by_identity(root: Cursor, wanted: set[int]) -> dict[int, Cursor]:
    found: dict[int, Cursor] = {}
    walker = root.spawn()
    while len(found) < len(wanted):
        if id(walker.node) in wanted:
            found[id(walker.node)] = walker.clone()
        if not walker.go_to_next():
            break
    return found


def run_query(output: ParseOutput, source: str) -> list[QueryMatch]:
    """Run the query ``source`` over ``output`` and return its matches.

    Captured nodes come back as cursors into ``output.tree``; matches keep
    the order tree-sitter reports them in, which is document order.
    """
    syntax = output.syntax
    if syntax is None:
        msg = "Parse output carries no tree-sitter tree"
        raise ValueError(msg)

    raw = list(QueryCursor(compile_query(source)).matches(syntax.ts_node))

    wanted: set[int] = set()
    for _, captures in raw:
        for value in captures.values():
            for ts_node in _capture_nodes(value):
                node = syntax.nodes.get(node_key(ts_node))
                if node is not None:
                    wanted.add(id(node))
    cursors = _cursors_by_identity(output.create_tree_cursor(), wanted)

    matches: list[QueryMatch] = []
    for pattern_index, captures in raw:
        match = QueryMatch(pattern_index=pattern_index)
        for name, value in captures.items():
            for ts_node in _capture_nodes(value):
                node = syntax.nodes.get(node_key(ts_node))
                if node is not None and id(node) in cursors:
                    match.captures.setdefault(name, []).append(cursors[id(node)].clone())
        matches.append(match)
    return matches


__all__ = ["QueryMatch", "compile_query", "run_query"]

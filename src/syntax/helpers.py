"""Cursor utilities for trivia-aware navigation and range trimming."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from syntax.kinds import COMMENT_KINDS, NAT_SPEC_KINDS, NonterminalKind, is_trivia_kind
from syntax.tree import NonterminalNode, TerminalNode

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator

    from syntax.cursor import Cursor
    from syntax.tree import Node, TextRange


@dataclass(frozen=True)
class TriviaSpan:
    """A trivia terminal captured together with its position."""

    text: str
    range: TextRange
    kind: str


def is_trivia(node: Node) -> bool:
    return isinstance(node, TerminalNode) and is_trivia_kind(node.kind)


def _is_significant_terminal(node: Node) -> bool:
    return isinstance(node, TerminalNode) and not is_trivia_kind(node.kind)


def go_to_last_terminal(cursor: Cursor) -> None:
    """Move ``cursor`` to the last terminal of its subtree."""
    while cursor.clone().go_to_next_terminal():
        cursor.go_to_next_terminal()


def go_to_first_non_trivia(cursor: Cursor) -> bool:
    """Move ``cursor`` to the first non-trivia terminal at or after its position.

    Returns False when only trivia remains; the cursor then rests on the last
    terminal it could reach.
    """
    if _is_significant_terminal(cursor.node):
        return True
    while cursor.clone().go_to_next_terminal():
        cursor.go_to_next_terminal()
        if _is_significant_terminal(cursor.node):
            return True
    return False


def get_trimmed_range(cursor: Cursor) -> TextRange:
    """Range of the cursor's node without leading and trailing trivia.

    A subtree made only of trivia keeps its raw range.
    """
    start = cursor.spawn()
    if not go_to_first_non_trivia(start):
        return cursor.text_range

    end = cursor.spawn()
    go_to_last_terminal(end)
    while not _is_significant_terminal(end.node):
        if not end.go_to_previous():
            break

    return cursor.line_index.range(
        start.text_range.start.offset,
        end.text_range.end.offset,
    )


def get_last_preceding_trivia_with_kinds(
    cursor: Cursor, kinds: Collection[str]
) -> TriviaSpan | None:
    """Find the trivia of one of ``kinds`` closest before the node's first token.

    Walks back over the terminals that precede the first token within the
    node's subtree. Trivia written before a declaration, in the preceding
    sibling or ancestor positions of the document, is attached there as the
    first token's leading trivia, so it is found without leaving the node.
    """
    for kind in kinds:
        if not is_trivia_kind(kind):
            msg = f"{kind!r} is not a trivia kind"
            raise AssertionError(msg)

    walker = cursor.spawn()
    if not go_to_first_non_trivia(walker):
        return None

    while walker.go_to_previous():
        node = walker.node
        if isinstance(node, TerminalNode) and node.kind in kinds:
            return TriviaSpan(text=node.text, range=walker.text_range, kind=node.kind)
    return None


def iter_contract_members(cursor: Cursor) -> Iterator[Cursor]:
    """Yield a cursor for each member nonterminal of the contract at ``cursor``."""
    members = cursor.spawn()
    if not members.go_to_next_nonterminal_with_kind(NonterminalKind.CONTRACT_BODY):
        return
    child = members.spawn()
    if not child.go_to_first_child():
        return
    while True:
        if isinstance(child.node, NonterminalNode):
            yield child.clone()
        if not child.go_to_next_sibling():
            return


def get_natspec(cursor: Cursor) -> TriviaSpan | None:
    """The documentation comment attached to the cursor's declaration, if any."""
    return get_last_preceding_trivia_with_kinds(cursor, NAT_SPEC_KINDS)


def get_preceding_comment(cursor: Cursor) -> TriviaSpan | None:
    """The plain comment attached to the cursor's declaration, if any."""
    return get_last_preceding_trivia_with_kinds(cursor, COMMENT_KINDS)


__all__ = [
    "TriviaSpan",
    "get_last_preceding_trivia_with_kinds",
    "get_natspec",
    "get_preceding_comment",
    "get_trimmed_range",
    "go_to_first_non_trivia",
    "go_to_last_terminal",
    "is_trivia",
    "iter_contract_members",
]

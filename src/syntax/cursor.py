"""Tree cursor over a concrete syntax tree.

A cursor is a position value: the chain of (node, child index, offset) frames
from the cursor root down to the current node. Copying a cursor copies that
chain only, never tree content, so looking ahead with ``clone()`` is cheap.

``go_to_next`` and ``go_to_previous`` walk the subtree in pre-order. When
either runs out of nodes the cursor becomes *completed* and refuses any
further movement; callers that need to test for a next node without losing
their position try the move on a clone first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from syntax.tree import LineIndex, NonterminalNode, TerminalNode

if TYPE_CHECKING:
    from collections.abc import Collection

    from syntax.tree import Node, TextRange


@dataclass(frozen=True)
class _Frame:
    node: Node
    index: int
    offset: int


def _first_child(frames: list[_Frame]) -> bool:
    top = frames[-1]
    node = top.node
    if isinstance(node, NonterminalNode) and node.children:
        frames.append(_Frame(node.children[0], 0, top.offset))
        return True
    return False


def _last_child(frames: list[_Frame]) -> bool:
    top = frames[-1]
    node = top.node
    if isinstance(node, NonterminalNode) and node.children:
        last = node.children[-1]
        offset = top.offset + node.text_length - last.text_length
        frames.append(_Frame(last, len(node.children) - 1, offset))
        return True
    return False


def _next_sibling(frames: list[_Frame]) -> bool:
    if len(frames) < 2:
        return False
    parent = frames[-2].node
    assert isinstance(parent, NonterminalNode)
    top = frames[-1]
    index = top.index + 1
    if index >= len(parent.children):
        return False
    frames[-1] = _Frame(parent.children[index], index, top.offset + top.node.text_length)
    return True


def _previous_sibling(frames: list[_Frame]) -> bool:
    if len(frames) < 2:
        return False
    parent = frames[-2].node
    assert isinstance(parent, NonterminalNode)
    top = frames[-1]
    index = top.index - 1
    if index < 0:
        return False
    sibling = parent.children[index]
    frames[-1] = _Frame(sibling, index, top.offset - sibling.text_length)
    return True


class Cursor:
    """A movable position inside one syntax (sub)tree."""

    def __init__(
        self,
        root: Node,
        *,
        offset: int = 0,
        line_index: LineIndex | None = None,
    ) -> None:
        self._frames: list[_Frame] = [_Frame(root, -1, offset)]
        self._line_index = line_index if line_index is not None else LineIndex(root.unparse())
        self._completed = False

    @property
    def node(self) -> Node:
        return self._frames[-1].node

    @property
    def depth(self) -> int:
        return len(self._frames) - 1

    @property
    def is_completed(self) -> bool:
        return self._completed

    @property
    def text_offset(self) -> int:
        return self._frames[-1].offset

    @property
    def text_range(self) -> TextRange:
        top = self._frames[-1]
        return self._line_index.range(top.offset, top.offset + top.node.text_length)

    @property
    def line_index(self) -> LineIndex:
        return self._line_index

    def clone(self) -> Cursor:
        """Copy this cursor, keeping its current position."""
        copy = Cursor.__new__(Cursor)
        copy._frames = list(self._frames)
        copy._line_index = self._line_index
        copy._completed = self._completed
        return copy

    def spawn(self) -> Cursor:
        """Create an independent cursor rooted at the current node."""
        top = self._frames[-1]
        return Cursor(top.node, offset=top.offset, line_index=self._line_index)

    def _commit(self, frames: list[_Frame]) -> bool:
        self._frames = frames
        return True

    def go_to_next(self) -> bool:
        if self._completed:
            return False
        frames = list(self._frames)
        if _first_child(frames):
            return self._commit(frames)
        while True:
            if _next_sibling(frames):
                return self._commit(frames)
            if len(frames) == 1:
                self._completed = True
                return False
            frames.pop()

    def go_to_previous(self) -> bool:
        if self._completed:
            return False
        frames = list(self._frames)
        if _previous_sibling(frames):
            while _last_child(frames):
                pass
            return self._commit(frames)
        if len(frames) > 1:
            frames.pop()
            return self._commit(frames)
        self._completed = True
        return False

    def go_to_parent(self) -> bool:
        if self._completed or len(self._frames) == 1:
            return False
        self._frames = self._frames[:-1]
        return True

    def go_to_first_child(self) -> bool:
        if self._completed:
            return False
        frames = list(self._frames)
        return _first_child(frames) and self._commit(frames)

    def go_to_next_sibling(self) -> bool:
        if self._completed:
            return False
        frames = list(self._frames)
        return _next_sibling(frames) and self._commit(frames)

    def go_to_previous_sibling(self) -> bool:
        if self._completed:
            return False
        frames = list(self._frames)
        return _previous_sibling(frames) and self._commit(frames)

    def go_to_next_terminal(self) -> bool:
        while self.go_to_next():
            if isinstance(self.node, TerminalNode):
                return True
        return False

    def go_to_next_terminal_with_kind(self, kind: str) -> bool:
        return self.go_to_next_terminal_with_kinds((kind,))

    def go_to_next_terminal_with_kinds(self, kinds: Collection[str]) -> bool:
        while self.go_to_next_terminal():
            if self.node.kind in kinds:
                return True
        return False

    def go_to_next_nonterminal_with_kind(self, kind: str) -> bool:
        while self.go_to_next():
            node = self.node
            if isinstance(node, NonterminalNode) and node.kind == kind:
                return True
        return False


__all__ = ["Cursor"]

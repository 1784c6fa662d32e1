"""Concrete syntax tree nodes and text positions.

The tree is lossless: concatenating the text of every terminal, in document
order, reproduces the parsed source exactly. Nodes are immutable and can be
shared freely between cursors.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from functools import cached_property
from typing import Union

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TextIndex:
    """A position in the source: character offset plus zero-based line/column."""

    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class TextRange:
    start: TextIndex
    end: TextIndex


class LineIndex:
    """Maps character offsets of one document to line/column positions."""

    def __init__(self, text: str) -> None:
        self._line_starts = [0] + [m.end() for m in _LINE_BREAK.finditer(text)]

    def position(self, offset: int) -> TextIndex:
        line = bisect_right(self._line_starts, offset) - 1
        return TextIndex(offset=offset, line=line, column=offset - self._line_starts[line])

    def range(self, start: int, end: int) -> TextRange:
        return TextRange(start=self.position(start), end=self.position(end))


@dataclass(frozen=True)
class TerminalNode:
    kind: str
    text: str

    def unparse(self) -> str:
        return self.text

    @property
    def text_length(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class NonterminalNode:
    kind: str
    children: tuple[Node, ...]

    @cached_property
    def _text(self) -> str:
        return "".join(child.unparse() for child in self.children)

    def unparse(self) -> str:
        return self._text

    @cached_property
    def text_length(self) -> int:
        return len(self._text)


Node = Union[TerminalNode, NonterminalNode]


__all__ = [
    "LineIndex",
    "Node",
    "NonterminalNode",
    "TerminalNode",
    "TextIndex",
    "TextRange",
]

"""Lossless syntax trees built from tree-sitter's Solidity parse.

Tree-sitter drops whitespace and keeps comments as extra nodes wherever the
parser happened to be. The lowering here turns its tree into the lossless
form used by :mod:`syntax.cursor`: every leaf becomes a terminal of kind
``node.type``, comments and the whitespace found in the byte gaps between
leaves become trivia, and trivia is attached to the surrounding tokens.

A token's trailing trivia is ``[whitespace] [single-line comment]
end-of-line`` when its line ends right after it; all other trivia leads the
next token. Trivia left after the last token is appended to the root.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from tree_sitter import Language, Parser
from tree_sitter_language_pack import get_language as get_pack_language

from syntax.kinds import TerminalKind
from syntax.tree import NonterminalNode, TerminalNode

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node as TSNode

    from syntax.tree import Node

_LANGUAGE: Language | None = None
_PARSER: Parser | None = None

_GAP_PATTERN = re.compile(
    r"(?P<eol>\r\n|\r|\n)|(?P<whitespace>[ \t\f\v]+)|(?P<other>[^ \t\f\v\r\n]+)"
)

# Literals whose inner text is not split into whitespace-separated leaves.
_ATOMIC_TYPES = frozenset(
    {"hex_string_literal", "string", "string_literal", "unicode_string_literal"}
)

NodeKey = tuple[str, int, int]


def get_language() -> Language:
    """Return the tree-sitter Solidity language."""
    global _LANGUAGE
    if _LANGUAGE is None:
        _LANGUAGE = get_pack_language("solidity")

    return _LANGUAGE


def get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Solidity language."""
    global _PARSER
    if _PARSER is None:
        _PARSER = Parser(get_language())

    return _PARSER


def node_key(node: TSNode) -> NodeKey:
    return (node.type, node.start_byte, node.end_byte)


@dataclass(frozen=True)
class SyntaxIssue:
    message: str
    offset: int


@dataclass(frozen=True)
class Token:
    """A significant token with its character offset in the lowered text."""

    kind: str
    text: str
    offset: int


@dataclass
class LoweredTree:
    root: NonterminalNode
    ts_node: TSNode
    nodes: dict[NodeKey, Node] = field(default_factory=dict)
    tokens: list[Token] = field(default_factory=list)
    issues: list[SyntaxIssue] = field(default_factory=list)


@dataclass
class _Leaf:
    kind: str
    start: int
    end: int
    key: NodeKey | None = None


@dataclass
class _Branch:
    kind: str
    key: NodeKey
    children: list[Union[_Branch, int]]


@dataclass
class _Lexeme:
    kind: str
    text: str
    leaf: int | None = None


def _is_atomic(node: TSNode, data: bytes) -> bool:
    if node.type in _ATOMIC_TYPES:
        return True
    position = node.start_byte
    for child in node.children:
        if data[position : child.start_byte].strip():
            return True
        position = child.end_byte
    return bool(data[position : node.end_byte].strip())


def _skeleton(
    node: TSNode, data: bytes, start: int, end: int, leaves: list[_Leaf]
) -> _Branch:
    branch = _Branch(node.type, node_key(node), [])
    for child in node.children:
        if child.type == "comment" or child.start_byte == child.end_byte:
            continue
        if child.end_byte <= start or child.start_byte >= end:
            continue
        if child.child_count == 0 or _is_atomic(child, data):
            # tokens straddling the span edge are left to the gap text
            if start <= child.start_byte and child.end_byte <= end:
                leaves.append(_Leaf(child.type, child.start_byte, child.end_byte, node_key(child)))
                branch.children.append(len(leaves) - 1)
            continue
        branch.children.append(_skeleton(child, data, start, end, leaves))
    return branch


def iter_comment_nodes(node: TSNode) -> Iterator[TSNode]:
    if node.type == "comment":
        yield node
        return
    for child in node.children:
        yield from iter_comment_nodes(child)


def comment_kind(text: str) -> str:
    """Classify a comment by its opening delimiter."""
    if text.startswith("//"):
        if text.startswith("///") and not text.startswith("////"):
            return TerminalKind.SINGLE_LINE_NAT_SPEC_COMMENT
        return TerminalKind.SINGLE_LINE_COMMENT
    if text.startswith("/**") and not text.startswith("/**/"):
        return TerminalKind.MULTI_LINE_NAT_SPEC_COMMENT
    return TerminalKind.MULTI_LINE_COMMENT


def _gap_lexemes(text: str) -> Iterator[_Lexeme]:
    for match in _GAP_PATTERN.finditer(text):
        group = match.lastgroup
        if group == "eol":
            yield _Lexeme(TerminalKind.END_OF_LINE, match.group())
        elif group == "whitespace":
            yield _Lexeme(TerminalKind.WHITESPACE, match.group())
        else:
            yield _Lexeme(TerminalKind.UNRECOGNIZED, match.group())


def _lexemes(
    data: bytes, leaves: list[_Leaf], comments: list[_Leaf], start: int, end: int
) -> list[_Lexeme]:
    pieces = sorted(
        [(leaf.start, leaf.end, index) for index, leaf in enumerate(leaves)]
        + [(comment.start, comment.end, None) for comment in comments],
        key=lambda piece: piece[0],
    )

    lexemes: list[_Lexeme] = []
    position = start
    for piece_start, piece_end, index in pieces:
        if piece_start < position:
            continue
        lexemes.extend(_gap_lexemes(data[position:piece_start].decode("utf8")))
        text = data[piece_start:piece_end].decode("utf8")
        if index is None:
            lexemes.append(_Lexeme(comment_kind(text), text))
        else:
            lexemes.append(_Lexeme(leaves[index].kind, text, index))
        position = piece_end
    lexemes.extend(_gap_lexemes(data[position:end].decode("utf8")))
    return lexemes


def _take_trailing(lexemes: list[_Lexeme], index: int) -> tuple[list[TerminalNode], int]:
    trailing: list[TerminalNode] = []
    position = index
    for expected in (TerminalKind.WHITESPACE, TerminalKind.SINGLE_LINE_COMMENT):
        if position < len(lexemes) and lexemes[position].kind == expected:
            trailing.append(TerminalNode(expected, lexemes[position].text))
            position += 1
    if position < len(lexemes) and lexemes[position].kind == TerminalKind.END_OF_LINE:
        trailing.append(TerminalNode(TerminalKind.END_OF_LINE, lexemes[position].text))
        return trailing, position + 1
    return [], index


def lower(data: bytes, node: TSNode, tree_root: TSNode, *, start: int, end: int) -> LoweredTree:
    """Lower ``node`` into a lossless tree over the bytes ``data[start:end]``.

    ``tree_root`` is the root of the tree-sitter parse; comments are taken
    from anywhere in it as long as they lie inside the span.
    """
    leaves: list[_Leaf] = []
    skeleton = _skeleton(node, data, start, end, leaves)

    comments = []
    for comment in iter_comment_nodes(tree_root):
        if comment.start_byte < start or comment.end_byte > end:
            continue
        comment_end = comment.end_byte
        # the carriage return of a CRLF line break is not part of the comment
        if data[comment.start_byte : comment.start_byte + 2] == b"//":
            while comment_end > comment.start_byte and data[comment_end - 1 : comment_end] == b"\r":
                comment_end -= 1
        comments.append(_Leaf("comment", comment.start_byte, comment_end))

    lowered = LoweredTree(root=NonterminalNode(node.type, ()), ts_node=node)
    terminals: dict[int, tuple[list[TerminalNode], TerminalNode, list[TerminalNode]]] = {}

    lexemes = _lexemes(data, leaves, comments, start, end)
    leading: list[TerminalNode] = []
    offset = 0
    index = 0
    while index < len(lexemes):
        lexeme = lexemes[index]
        index += 1
        if lexeme.leaf is None:
            if lexeme.kind == TerminalKind.UNRECOGNIZED:
                lowered.issues.append(SyntaxIssue(f"unrecognized text {lexeme.text!r}", offset))
            leading.append(TerminalNode(lexeme.kind, lexeme.text))
            offset += len(lexeme.text)
            continue
        lowered.tokens.append(Token(lexeme.kind, lexeme.text, offset))
        trailing, index = _take_trailing(lexemes, index)
        terminals[lexeme.leaf] = (leading, TerminalNode(lexeme.kind, lexeme.text), trailing)
        offset += len(lexeme.text) + sum(t.text_length for t in trailing)
        leading = []

    def build(branch: _Branch, tail: tuple[TerminalNode, ...] = ()) -> NonterminalNode:
        children: list[Node] = []
        for child in branch.children:
            if isinstance(child, int):
                before, terminal, after = terminals[child]
                children.extend(before)
                children.append(terminal)
                children.extend(after)
                key = leaves[child].key
                if key is not None:
                    lowered.nodes[key] = terminal
            else:
                children.append(build(child))
        built = NonterminalNode(branch.kind, tuple(children) + tail)
        lowered.nodes[branch.key] = built
        return built

    lowered.root = build(skeleton, tuple(leading))
    return lowered


__all__ = [
    "LoweredTree",
    "NodeKey",
    "SyntaxIssue",
    "Token",
    "comment_kind",
    "get_language",
    "get_parser",
    "lower",
    "node_key",
]

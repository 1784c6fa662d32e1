from __future__ import annotations

import pytest

from syntax.ast import iter_terminals
from syntax.kinds import NonterminalKind, TerminalKind
from syntax.parser import Language
from syntax.treesitter import comment_kind
from syntax.tree import NonterminalNode, TerminalNode


def _parse(source: str):
    return Language.latest().parse(NonterminalKind.SOURCE_FILE, source)


def _terminal_after(node: NonterminalNode, text: str) -> list[TerminalNode]:
    terminals = list(iter_terminals(node))
    index = next(i for i, t in enumerate(terminals) if t.text == text)
    return terminals[index + 1 :]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("// plain", TerminalKind.SINGLE_LINE_COMMENT),
        ("/// @notice doc", TerminalKind.SINGLE_LINE_NAT_SPEC_COMMENT),
        ("//// banner", TerminalKind.SINGLE_LINE_COMMENT),
        ("/* block */", TerminalKind.MULTI_LINE_COMMENT),
        ("/** @dev doc */", TerminalKind.MULTI_LINE_NAT_SPEC_COMMENT),
        ("/**/", TerminalKind.MULTI_LINE_COMMENT),
    ],
)
def test_comment_kind(text: str, expected: str) -> None:
    assert comment_kind(text) == expected


def test_crlf_source_with_comments_round_trips() -> None:
    source = (
        "// SPDX-License-Identifier: MIT\r\n"
        "pragma solidity ^0.8.20;\r\n"
        "\r\n"
        "/**\r\n * @title A\r\n */\r\n"
        "contract A {\r\n"
        "    uint256 x; // trailing\r\n"
        "    string s = \"a  b // not a comment\";\r\n"
        "}\r\n"
    )
    output = _parse(source)

    assert output.is_valid, output.errors
    assert output.tree.unparse() == source
    kinds = [t.kind for t in iter_terminals(output.tree)]
    assert TerminalKind.MULTI_LINE_NAT_SPEC_COMMENT in kinds
    assert all(t.text != "\r" for t in iter_terminals(output.tree))


def test_same_line_comment_trails_the_previous_token() -> None:
    output = _parse("contract A {\n    uint256 x; // about x\n    uint256 y;\n}\n")

    following = _terminal_after(output.tree, ";")

    assert [(t.kind, t.text) for t in following[:3]] == [
        (TerminalKind.WHITESPACE, " "),
        (TerminalKind.SINGLE_LINE_COMMENT, "// about x"),
        (TerminalKind.END_OF_LINE, "\n"),
    ]


def test_comment_on_its_own_line_leads_the_next_declaration() -> None:
    source = "contract A {\n    // about y\n    uint256 y;\n}\n"
    output = _parse(source)
    cursor = output.create_tree_cursor()
    assert cursor.go_to_next_nonterminal_with_kind(NonterminalKind.STATE_VARIABLE_DECLARATION)

    variable = cursor.node
    assert isinstance(variable, NonterminalNode)
    leading = [t for t in iter_terminals(variable)][:4]
    assert [t.kind for t in leading] == [
        TerminalKind.WHITESPACE,
        TerminalKind.SINGLE_LINE_COMMENT,
        TerminalKind.END_OF_LINE,
        TerminalKind.WHITESPACE,
    ]


def test_trailing_trivia_at_end_of_file_stays_in_the_tree() -> None:
    source = "contract A {}\n\n// end\n"
    output = _parse(source)

    assert output.tree.unparse() == source
    last = output.tree.children[-1]
    assert isinstance(last, TerminalNode)
    assert last.kind == TerminalKind.END_OF_LINE


def test_offsets_count_characters_not_bytes() -> None:
    source = "// héllo wörld ✓\ncontract A {}\n"
    output = _parse(source)
    cursor = output.create_tree_cursor()

    assert cursor.go_to_next_terminal_with_kind(TerminalKind.CONTRACT_KEYWORD)
    assert cursor.text_offset == source.index("contract")
    assert output.tree.unparse() == source

"""Node kinds of the Solidity syntax tree.

Tokens and inner nodes keep the type names of tree-sitter's Solidity grammar
(``contract_declaration``, ``identifier``, ``;``...). Trivia is not part of
that grammar, so whitespace, line breaks and classified comments get kinds
of their own.
"""

from __future__ import annotations


class TerminalKind:
    """Kinds of leaf tokens, including trivia."""

    # trivia
    WHITESPACE = "whitespace"
    END_OF_LINE = "end_of_line"
    SINGLE_LINE_COMMENT = "single_line_comment"
    MULTI_LINE_COMMENT = "multi_line_comment"
    SINGLE_LINE_NAT_SPEC_COMMENT = "single_line_natspec_comment"
    MULTI_LINE_NAT_SPEC_COMMENT = "multi_line_natspec_comment"

    IDENTIFIER = "identifier"
    SOLIDITY_VERSION = "solidity_version"
    EQUAL = "="
    SEMICOLON = ";"
    OPEN_PAREN = "("
    BAR_BAR = "||"
    MINUS = "-"
    CLOSE_BRACE = "}"
    CONTRACT_KEYWORD = "contract"
    SOLIDITY_KEYWORD = "solidity"

    # text outside any token, only produced for broken input
    UNRECOGNIZED = "unrecognized"


class NonterminalKind:
    """Inner node kinds the analysis reads."""

    SOURCE_FILE = "source_file"
    PRAGMA_DIRECTIVE = "pragma_directive"
    CONTRACT_DECLARATION = "contract_declaration"
    INTERFACE_DECLARATION = "interface_declaration"
    LIBRARY_DECLARATION = "library_declaration"
    INHERITANCE_SPECIFIER = "inheritance_specifier"
    CONTRACT_BODY = "contract_body"
    STRUCT_DECLARATION = "struct_declaration"
    STATE_VARIABLE_DECLARATION = "state_variable_declaration"
    FUNCTION_DEFINITION = "function_definition"
    PARAMETER = "parameter"


TRIVIA_KINDS = frozenset(
    {
        TerminalKind.END_OF_LINE,
        TerminalKind.MULTI_LINE_COMMENT,
        TerminalKind.MULTI_LINE_NAT_SPEC_COMMENT,
        TerminalKind.SINGLE_LINE_COMMENT,
        TerminalKind.SINGLE_LINE_NAT_SPEC_COMMENT,
        TerminalKind.WHITESPACE,
    }
)

NAT_SPEC_KINDS = (
    TerminalKind.MULTI_LINE_NAT_SPEC_COMMENT,
    TerminalKind.SINGLE_LINE_NAT_SPEC_COMMENT,
)

COMMENT_KINDS = (
    TerminalKind.SINGLE_LINE_COMMENT,
    TerminalKind.MULTI_LINE_COMMENT,
)

CONTRACT_LIKE_KINDS = frozenset(
    {
        NonterminalKind.CONTRACT_DECLARATION,
        NonterminalKind.INTERFACE_DECLARATION,
        NonterminalKind.LIBRARY_DECLARATION,
    }
)


def is_trivia_kind(kind: str) -> bool:
    return kind in TRIVIA_KINDS


__all__ = [
    "COMMENT_KINDS",
    "CONTRACT_LIKE_KINDS",
    "NAT_SPEC_KINDS",
    "NonterminalKind",
    "TRIVIA_KINDS",
    "TerminalKind",
    "is_trivia_kind",
]

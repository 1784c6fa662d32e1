"""Solidity parsing entry points.

Text is parsed with tree-sitter's Solidity grammar and lowered into the
lossless tree of :mod:`syntax.tree`. Keywords that a given compiler version
does not know yet are reported on top of the grammar's own errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cache
from typing import TYPE_CHECKING

from semantic_version import Version

from syntax.cursor import Cursor
from syntax.kinds import CONTRACT_LIKE_KINDS, NonterminalKind
from syntax.treesitter import get_parser, lower

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node as TSNode

    from syntax.tree import NonterminalNode
    from syntax.treesitter import LoweredTree

logger = logging.getLogger(__name__)

_SUPPORTED_VERSION_SERIES = (
    ("0.4", 11, 26),
    ("0.5", 0, 17),
    ("0.6", 0, 12),
    ("0.7", 0, 6),
    ("0.8", 0, 30),
)

# Keywords that only exist from a given compiler version on.
_KEYWORD_MIN_VERSIONS = {
    "constructor": Version("0.4.22"),
    "emit": Version("0.4.21"),
    "fallback": Version("0.6.0"),
    "immutable": Version("0.6.5"),
    "override": Version("0.6.0"),
    "receive": Version("0.6.0"),
    "unchecked": Version("0.8.0"),
    "virtual": Version("0.6.0"),
}

_FRAGMENT_PREFIX = "contract __Fragment__ {\n"
_FRAGMENT_SUFFIX = "\n}\n"

_ENTRY_POINTS = frozenset(
    {
        NonterminalKind.SOURCE_FILE,
        NonterminalKind.CONTRACT_DECLARATION,
        NonterminalKind.STATE_VARIABLE_DECLARATION,
    }
)


class UnsupportedLanguageVersionError(ValueError):
    """Raised when a Language is requested for an unknown compiler version."""


@dataclass(frozen=True)
class ParseError:
    message: str
    offset: int


@dataclass(frozen=True)
class ParseOutput:
    """Result of parsing one text at one entry point."""

    tree: NonterminalNode
    errors: tuple[ParseError, ...]
    syntax: LoweredTree | None = field(default=None, repr=False, compare=False)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def create_tree_cursor(self) -> Cursor:
        return Cursor(self.tree)


def _iter_error_nodes(node: TSNode) -> Iterator[TSNode]:
    if node.is_error or node.is_missing:
        yield node
        return
    if not node.has_error:
        return
    for child in node.children:
        yield from _iter_error_nodes(child)


def _significant_children(node: TSNode) -> list[TSNode]:
    return [child for child in node.named_children if child.type != "comment"]


def _single_contract(root: TSNode) -> TSNode | None:
    members = _significant_children(root)
    if len(members) == 1 and members[0].type in CONTRACT_LIKE_KINDS:
        return members[0]
    return None


def _single_state_variable(root: TSNode) -> TSNode | None:
    contract = _single_contract(root)
    if contract is None:
        return None
    body = next((c for c in contract.children if c.type == NonterminalKind.CONTRACT_BODY), None)
    if body is None:
        return None
    members = _significant_children(body)
    if len(members) == 1 and members[0].type == NonterminalKind.STATE_VARIABLE_DECLARATION:
        return members[0]
    return None


@cache
def _supported_versions() -> tuple[str, ...]:
    return tuple(
        f"{series}.{patch}"
        for series, first, last in _SUPPORTED_VERSION_SERIES
        for patch in range(first, last + 1)
    )


class Language:
    """A Solidity grammar bound to one compiler version."""

    def __init__(self, version: str) -> None:
        if version not in _supported_versions():
            msg = f"Unsupported Solidity version: {version}"
            raise UnsupportedLanguageVersionError(msg)
        self.version = version
        self._version = Version(version)

    @staticmethod
    def supported_versions() -> tuple[str, ...]:
        """All supported compiler versions, oldest first."""
        return _supported_versions()

    @classmethod
    def latest(cls) -> Language:
        return cls(_supported_versions()[-1])

    def _keyword_errors(self, lowered: LoweredTree) -> list[ParseError]:
        errors = []
        for token in lowered.tokens:
            min_version = _KEYWORD_MIN_VERSIONS.get(token.kind)
            if min_version is not None and self._version < min_version:
                errors.append(
                    ParseError(
                        f"'{token.kind}' is not a keyword in Solidity {self.version}",
                        token.offset,
                    )
                )
        return errors

    def parse(self, kind: str, text: str) -> ParseOutput:
        """Parse ``text`` starting at the grammar rule ``kind``.

        Supported entry points are source files, contract declarations and
        state variable declarations. A contract declaration must be the only
        declaration in ``text``; a state variable is parsed as the only
        member of a contract body.
        """
        if kind not in _ENTRY_POINTS:
            msg = f"Unsupported parse entry point: {kind}"
            raise ValueError(msg)

        prefix = _FRAGMENT_PREFIX if kind == NonterminalKind.STATE_VARIABLE_DECLARATION else ""
        suffix = _FRAGMENT_SUFFIX if prefix else ""
        data = f"{prefix}{text}{suffix}".encode("utf8")
        start = len(prefix.encode("utf8"))
        end = len(data) - len(suffix.encode("utf8"))

        ts_tree = get_parser().parse(data)
        root = ts_tree.root_node

        errors = []
        for node in _iter_error_nodes(root):
            message = f"missing {node.type}" if node.is_missing else "invalid syntax"
            offset = len(data[start : max(node.start_byte, start)].decode("utf8", errors="ignore"))
            errors.append(ParseError(message, min(offset, len(text))))

        target: TSNode | None = root
        if kind == NonterminalKind.CONTRACT_DECLARATION:
            target = _single_contract(root)
            if target is None:
                errors.append(ParseError("expected a single contract declaration", 0))
        elif kind == NonterminalKind.STATE_VARIABLE_DECLARATION:
            target = _single_state_variable(root)
            if target is None:
                errors.append(ParseError("expected a single state variable declaration", 0))

        lowered = lower(data, target or root, root, start=start, end=end)
        errors.extend(ParseError(issue.message, issue.offset) for issue in lowered.issues)
        errors.extend(self._keyword_errors(lowered))
        errors.sort(key=lambda error: error.offset)

        if errors:
            logger.debug("Parsed %s with %d error(s)", kind, len(errors))
        return ParseOutput(tree=lowered.root, errors=tuple(errors), syntax=lowered)


__all__ = [
    "Language",
    "ParseError",
    "ParseOutput",
    "UnsupportedLanguageVersionError",
]

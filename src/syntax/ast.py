"""Typed read-only views over syntax tree nonterminals.

Views locate their parts by position among the node's significant children,
so they keep working across grammar revisions that wrap or unwrap inner
nodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from syntax.kinds import NonterminalKind, TerminalKind, is_trivia_kind
from syntax.tree import NonterminalNode, TerminalNode

if TYPE_CHECKING:
    from collections.abc import Iterator

    from syntax.tree import Node


def iter_terminals(node: Node) -> Iterator[TerminalNode]:
    """Yield the terminals of ``node`` in document order."""
    match node:
        case TerminalNode():
            yield node
        case NonterminalNode(children=children):
            for child in children:
                yield from iter_terminals(child)


def normalized_text(node: Node) -> str:
    """Join the significant tokens of ``node``, one space where trivia separated them."""
    parts: list[str] = []
    pending_space = False
    for terminal in iter_terminals(node):
        if is_trivia_kind(terminal.kind):
            pending_space = bool(parts)
            continue
        if pending_space:
            parts.append(" ")
            pending_space = False
        parts.append(terminal.text)
    return "".join(parts)


def _significant_children(node: NonterminalNode) -> list[Node]:
    return [
        child
        for child in node.children
        if not (isinstance(child, TerminalNode) and is_trivia_kind(child.kind))
    ]


def _children_with_kind(node: NonterminalNode, kind: str) -> list[NonterminalNode]:
    return [
        child
        for child in node.children
        if isinstance(child, NonterminalNode) and child.kind == kind
    ]


def _first_terminal_text(node: NonterminalNode, kind: str) -> str | None:
    for child in node.children:
        if isinstance(child, TerminalNode) and child.kind == kind:
            return child.text
    return None


def _first_token(node: Node) -> TerminalNode | None:
    return next((t for t in iter_terminals(node) if not is_trivia_kind(t.kind)), None)


def _is_token(node: Node, kind: str) -> bool:
    return isinstance(node, TerminalNode) and node.kind == kind


@dataclass(frozen=True)
class Parameter:
    node: NonterminalNode

    @property
    def type_name(self) -> Node | None:
        children = _significant_children(self.node)
        return children[0] if children else None

    @property
    def name(self) -> str | None:
        return _first_terminal_text(self.node, TerminalKind.IDENTIFIER)


@dataclass(frozen=True)
class FunctionDefinition:
    node: NonterminalNode

    @property
    def name(self) -> str | None:
        return _first_terminal_text(self.node, TerminalKind.IDENTIFIER)

    @property
    def parameters(self) -> list[Parameter]:
        """Declared parameters, not counting return parameters."""
        return [Parameter(child) for child in _children_with_kind(self.node, NonterminalKind.PARAMETER)]


@dataclass(frozen=True)
class StructDefinition:
    node: NonterminalNode

    @property
    def name(self) -> str | None:
        return _first_terminal_text(self.node, TerminalKind.IDENTIFIER)


@dataclass(frozen=True)
class StateVariableDefinition:
    """A state variable declaration: type, attributes, name, optional value."""

    node: NonterminalNode

    def _parts(self) -> tuple[list[Node], int | None, int]:
        children = _significant_children(self.node)
        stop = next(
            (
                index
                for index, child in enumerate(children)
                if _is_token(child, TerminalKind.EQUAL) or _is_token(child, TerminalKind.SEMICOLON)
            ),
            len(children),
        )
        name_index = next(
            (
                index
                for index in range(stop - 1, 0, -1)
                if _is_token(children[index], TerminalKind.IDENTIFIER)
            ),
            None,
        )
        return children, name_index, stop

    @property
    def type_name(self) -> Node | None:
        children = _significant_children(self.node)
        return children[0] if children else None

    @property
    def attributes(self) -> list[Node]:
        """Visibility, mutability and override specifiers, without trivia."""
        children, name_index, _ = self._parts()
        if name_index is None:
            return []
        return children[1:name_index]

    @property
    def attribute_kinds(self) -> set[str]:
        """The leading keyword of each attribute, e.g. ``{"public", "constant"}``."""
        keywords = set()
        for attribute in self.attributes:
            token = _first_token(attribute)
            if token is not None:
                keywords.add(token.text)
        return keywords

    @property
    def name(self) -> str | None:
        children, name_index, _ = self._parts()
        if name_index is None:
            return None
        name = children[name_index]
        assert isinstance(name, TerminalNode)
        return name.text

    @property
    def value(self) -> Node | None:
        """The initializer expression, if any."""
        children, _, stop = self._parts()
        if stop + 1 >= len(children) or not _is_token(children[stop], TerminalKind.EQUAL):
            return None
        value = children[stop + 1]
        if _is_token(value, TerminalKind.SEMICOLON):
            return None
        return value


ContractMember = Union[StructDefinition, StateVariableDefinition, FunctionDefinition]


def contract_member(node: Node) -> ContractMember | None:
    """Wrap a contract member node in its view, or None for other members."""
    match node:
        case NonterminalNode(kind=NonterminalKind.STRUCT_DECLARATION):
            return StructDefinition(node)
        case NonterminalNode(kind=NonterminalKind.STATE_VARIABLE_DECLARATION):
            return StateVariableDefinition(node)
        case NonterminalNode(kind=NonterminalKind.FUNCTION_DEFINITION):
            return FunctionDefinition(node)
        case _:
            return None


@dataclass(frozen=True)
class ContractDefinition:
    node: NonterminalNode

    @property
    def name(self) -> str | None:
        return _first_terminal_text(self.node, TerminalKind.IDENTIFIER)

    @property
    def inheritance_types(self) -> list[tuple[str, ...]]:
        """Base type paths in declaration order, e.g. ``[("Initializable",)]``."""
        paths: list[tuple[str, ...]] = []
        for specifier in _children_with_kind(self.node, NonterminalKind.INHERITANCE_SPECIFIER):
            segments: list[str] = []
            for terminal in iter_terminals(specifier):
                if terminal.kind == TerminalKind.OPEN_PAREN:
                    break
                if terminal.kind == TerminalKind.IDENTIFIER:
                    segments.append(terminal.text)
            if segments:
                paths.append(tuple(segments))
        return paths

    @property
    def members(self) -> list[NonterminalNode]:
        bodies = _children_with_kind(self.node, NonterminalKind.CONTRACT_BODY)
        if not bodies:
            return []
        return [child for child in bodies[0].children if isinstance(child, NonterminalNode)]

    def iter_members(self) -> Iterator[ContractMember]:
        for node in self.members:
            view = contract_member(node)
            if view is not None:
                yield view

    @property
    def functions(self) -> list[FunctionDefinition]:
        return [m for m in self.iter_members() if isinstance(m, FunctionDefinition)]

    @property
    def state_variables(self) -> list[StateVariableDefinition]:
        return [m for m in self.iter_members() if isinstance(m, StateVariableDefinition)]

    @property
    def structs(self) -> list[StructDefinition]:
        return [m for m in self.iter_members() if isinstance(m, StructDefinition)]


__all__ = [
    "ContractDefinition",
    "ContractMember",
    "FunctionDefinition",
    "Parameter",
    "StateVariableDefinition",
    "StructDefinition",
    "contract_member",
    "iter_terminals",
    "normalized_text",
]

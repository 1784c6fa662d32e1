"""Classification of state variables that could move to namespaced storage."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from analysis.diagnostics import (
    VARIABLE_CAN_BE_NAMESPACED,
    VARIABLE_HAS_INITIAL_VALUE,
    AccessorStub,
    NamespaceableVariable,
    Range,
    Severity,
    add_diagnostic,
)
from syntax.ast import StateVariableDefinition, normalized_text
from syntax.helpers import get_trimmed_range, iter_contract_members
from syntax.kinds import NonterminalKind

if TYPE_CHECKING:
    from analysis.diagnostics import DiagnosticSink
    from syntax.cursor import Cursor
    from syntax.parser import Language

logger = logging.getLogger(__name__)

_EXCLUDED_ATTRIBUTES = frozenset({"constant", "immutable"})


def _reparse(language: Language, text: str) -> StateVariableDefinition | None:
    output = language.parse(NonterminalKind.STATE_VARIABLE_DECLARATION, text)
    if not output.is_valid:
        logger.warning(
            "Skipping state variable that does not parse at %s: %r (%s)",
            language.version,
            text,
            output.errors[0].message,
        )
        return None
    return StateVariableDefinition(output.tree)


def classify_state_variables(
    cursor: Cursor,
    language: Language,
    sink: DiagnosticSink,
    *,
    report: bool,
) -> list[NamespaceableVariable]:
    """Collect the namespaceable state variables of the contract at ``cursor``.

    Per-variable diagnostics go to ``sink`` only when ``report`` is set;
    variables are collected either way.
    """
    variables: list[NamespaceableVariable] = []

    for member in iter_contract_members(cursor):
        if member.node.kind != NonterminalKind.STATE_VARIABLE_DECLARATION:
            continue

        variable = _reparse(language, normalized_text(member.node))
        if variable is None:
            continue

        attribute_kinds = variable.attribute_kinds
        if attribute_kinds & _EXCLUDED_ATTRIBUTES:
            continue

        type_name = variable.type_name
        name = variable.name
        if type_name is None or name is None:
            continue
        type_text = normalized_text(type_name)

        if attribute_kinds:
            content = f"{type_text} {name};"
        else:
            content = normalized_text(variable.node)
        public_getter = (
            AccessorStub(type_name=type_text)
            if "public" in attribute_kinds
            else None
        )
        text_range = get_trimmed_range(member)

        if variable.value is not None:
            if report:
                add_diagnostic(
                    sink,
                    text_range,
                    "Variable has initial value",
                    "If this contract is an upgradeable contract, consider moving "
                    "this variable to namespaced storage and setting it in an initializer.",
                    Severity.WARNING,
                    VARIABLE_HAS_INITIAL_VALUE,
                )
            continue

        if report:
            add_diagnostic(
                sink,
                text_range,
                "Variable can be namespaced.",
                "If this contract is an upgradeable contract, consider moving "
                "this variable to namespaced storage.",
                Severity.INFORMATION,
                VARIABLE_CAN_BE_NAMESPACED,
            )
        variables.append(
            NamespaceableVariable(
                content=content,
                name=name,
                range=Range.from_text_range(text_range),
                public_getter=public_getter,
            )
        )

    return variables


__all__ = ["classify_state_variables"]

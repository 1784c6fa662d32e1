"""Cross-checks between a namespace id, its formula comment and its slot constant."""

from __future__ import annotations

from typing import TYPE_CHECKING

from analysis.diagnostics import (
    NAMESPACE_HASH_MISMATCH,
    NAMESPACE_ID_MISMATCH_HASH_COMMENT,
    NAMESPACE_STANDALONE_HASH_MISMATCH,
    Replacement,
    Severity,
    add_diagnostic,
)
from namespaces.annotations import is_storage_location_name, match_storage_location_formula
from namespaces.erc7201 import calculate_storage_location, format_storage_location_formula
from syntax.ast import StateVariableDefinition, normalized_text
from syntax.helpers import get_preceding_comment, get_trimmed_range, iter_contract_members
from syntax.kinds import NonterminalKind

if TYPE_CHECKING:
    from analysis.diagnostics import DiagnosticSink
    from syntax.cursor import Cursor


def _value_cursor(member: Cursor, variable: StateVariableDefinition) -> Cursor | None:
    value = variable.value
    if value is None:
        return None
    child = member.spawn()
    if not child.go_to_first_child():
        return None
    while child.node is not value:
        if not child.go_to_next_sibling():
            return None
    return child


def _validate_storage_location(
    member: Cursor,
    variable: StateVariableDefinition,
    namespace_id: str,
    canonical_id: str,
    sink: DiagnosticSink,
) -> None:
    comment = get_preceding_comment(member)
    formula_id = match_storage_location_formula(comment.text) if comment else None

    comment_mismatch = False
    formula_hash: str | None = None
    if comment is not None and formula_id is not None:
        if formula_id != namespace_id:
            add_diagnostic(
                sink,
                comment.range,
                "Comment does not match namespace id",
                f"Expected namespace id `{namespace_id}`",
                Severity.WARNING,
                NAMESPACE_ID_MISMATCH_HASH_COMMENT,
                Replacement(replacement=format_storage_location_formula(namespace_id)),
            )
            comment_mismatch = True
        formula_hash = calculate_storage_location(formula_id)

    value_cursor = _value_cursor(member, variable)
    if value_cursor is None:
        return
    value_range = get_trimmed_range(value_cursor)
    value_text = normalized_text(value_cursor.node).lower()

    if formula_hash is not None and formula_hash not in value_text:
        add_diagnostic(
            sink,
            value_range,
            "ERC7201 storage location hash does not match comment",
            "Hash does not match formula in comment",
            Severity.WARNING,
            NAMESPACE_HASH_MISMATCH,
            Replacement(replacement=formula_hash),
        )

    canonical_hash = calculate_storage_location(canonical_id)
    if (
        not comment_mismatch
        and canonical_hash != formula_hash
        and canonical_hash not in value_text
    ):
        add_diagnostic(
            sink,
            value_range,
            "ERC7201 storage location hash does not match expected namespace id",
            f"Expected hash to be based on `{canonical_id}`",
            Severity.WARNING,
            NAMESPACE_STANDALONE_HASH_MISMATCH,
            Replacement(replacement=canonical_hash),
        )


def validate_namespace_hashes(
    cursor: Cursor,
    namespace_id: str,
    canonical_id: str,
    sink: DiagnosticSink,
) -> None:
    """Check every ``*_STORAGE_LOCATION`` / ``*StorageLocation`` variable of a contract.

    ``namespace_id`` is the id annotated on the contract's namespace struct and
    is what the formula comment must name; ``canonical_id`` is the id expected
    for the contract, which the slot constant must encode.
    """
    for member in iter_contract_members(cursor):
        if member.node.kind != NonterminalKind.STATE_VARIABLE_DECLARATION:
            continue
        variable = StateVariableDefinition(member.node)
        if variable.name is None or not is_storage_location_name(variable.name):
            continue
        _validate_storage_location(member, variable, namespace_id, canonical_id, sink)


__all__ = ["validate_namespace_hashes"]

"""Validation of ``@custom:storage-location`` struct annotations."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from analysis.diagnostics import (
    DUPLICATE_NAMESPACE_ID,
    MULTIPLE_NAMESPACES,
    NAMESPACE_ID_MISMATCH,
    NamespaceIdAndRange,
    Range,
    Replacement,
    Severity,
    add_diagnostic,
)
from namespaces.annotations import match_storage_location
from namespaces.erc7201 import format_storage_location_annotation, get_namespace_id
from syntax.helpers import get_natspec, iter_contract_members
from syntax.kinds import NonterminalKind

if TYPE_CHECKING:
    from analysis.diagnostics import DiagnosticSink
    from syntax.cursor import Cursor

logger = logging.getLogger(__name__)


def find_namespace_annotations(cursor: Cursor) -> list[NamespaceIdAndRange]:
    """Namespace ids annotated on the structs of the contract at ``cursor``."""
    found: list[NamespaceIdAndRange] = []
    for member in iter_contract_members(cursor):
        if member.node.kind != NonterminalKind.STRUCT_DECLARATION:
            continue
        natspec = get_natspec(member)
        if natspec is None:
            continue
        namespace_id = match_storage_location(natspec.text, natspec.kind)
        if namespace_id is None:
            continue
        logger.debug("Found namespace annotation %r", namespace_id)
        found.append(
            NamespaceIdAndRange(
                namespace_id=namespace_id, range=Range.from_text_range(natspec.range)
            )
        )
    return found


def validate_namespace_annotations(
    cursor: Cursor,
    contract_name: str,
    namespace_prefix: str,
    sink: DiagnosticSink,
) -> NamespaceIdAndRange | None:
    """Check struct annotations against ``<prefix>.<contract name>``.

    Returns the annotation when the contract has exactly one, else None.
    """
    expected = get_namespace_id(namespace_prefix, contract_name)
    found = find_namespace_annotations(cursor)
    counts = Counter(item.namespace_id for item in found)

    for item in found:
        if counts[item.namespace_id] == 1 and item.namespace_id != expected:
            add_diagnostic(
                sink,
                item.range,
                "Namespace id does not match contract name",
                f"Namespace id does not match prefix `{namespace_prefix}` "
                f"and contract name `{contract_name}`",
                Severity.INFORMATION,
                NAMESPACE_ID_MISMATCH,
                Replacement(replacement=format_storage_location_annotation(expected)),
            )

    if len(found) > 1:
        duplicates = {namespace_id for namespace_id, count in counts.items() if count > 1}
        if duplicates:
            for item in found:
                if item.namespace_id in duplicates:
                    add_diagnostic(
                        sink,
                        item.range,
                        "Duplicate namespaces",
                        "Namespace ids must be unique",
                        Severity.ERROR,
                        DUPLICATE_NAMESPACE_ID,
                    )
        else:
            for item in found:
                add_diagnostic(
                    sink,
                    item.range,
                    "Multiple namespaces",
                    "Only one namespace per contract is recommended",
                    Severity.WARNING,
                    MULTIPLE_NAMESPACES,
                )

    return found[0] if len(found) == 1 else None


__all__ = ["find_namespace_annotations", "validate_namespace_annotations"]

"""Namespace diagnostic engine: per-contract pipeline and document driver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from analysis.annotations import validate_namespace_annotations
from analysis.diagnostics import (
    CONTRACT_CAN_BE_NAMESPACED,
    ContractRecord,
    DiagnosticCollector,
    Severity,
    add_diagnostic,
)
from analysis.hashes import validate_namespace_hashes
from analysis.upgradeability import infer_upgradeable
from analysis.variables import classify_state_variables
from namespaces.erc7201 import get_namespace_id
from syntax.ast import ContractDefinition
from syntax.helpers import get_trimmed_range
from syntax.kinds import NonterminalKind, TerminalKind
from syntax.parser import Language
from syntax.query import run_query
from syntax.tree import NonterminalNode

if TYPE_CHECKING:
    from analysis.context import AnalysisContext
    from analysis.diagnostics import DiagnosticRecord, DiagnosticSink
    from syntax.cursor import Cursor
    from syntax.parser import ParseOutput
    from syntax.tree import TextRange

logger = logging.getLogger(__name__)

_CONTRACT_QUERY = "(contract_declaration) @contract"


def _contract_name_to_end_range(cursor: Cursor) -> TextRange:
    name = cursor.spawn()
    trimmed = get_trimmed_range(cursor)
    if not name.go_to_next_terminal_with_kind(TerminalKind.IDENTIFIER):
        return trimmed
    return cursor.line_index.range(name.text_range.start.offset, trimmed.end.offset)


def validate_namespaceable_contract(
    cursor: Cursor,
    language: Language,
    namespace_prefix: str,
    sink: DiagnosticSink,
) -> None:
    """Run every namespace check on the contract definition at ``cursor``."""
    node = cursor.node
    assert isinstance(node, NonterminalNode)
    contract = ContractDefinition(node)
    name = contract.name
    if name is None:
        return

    fragment = language.parse(NonterminalKind.CONTRACT_DECLARATION, node.unparse())
    if not fragment.is_valid:
        logger.warning(
            "Skipping contract %s that does not parse at %s: %s",
            name,
            language.version,
            fragment.errors[0].message,
        )
        return

    upgradeable = infer_upgradeable(cursor, contract)
    logger.debug("Contract %s upgradeable: %s", name, upgradeable)

    found = validate_namespace_annotations(cursor, name, namespace_prefix, sink)
    if found is not None:
        validate_namespace_hashes(
            cursor,
            found.namespace_id,
            get_namespace_id(namespace_prefix, name),
            sink,
        )

    variables = classify_state_variables(cursor, language, sink, report=upgradeable)

    if variables:
        add_diagnostic(
            sink,
            _contract_name_to_end_range(cursor),
            "Contract can be namespaced.",
            "If this contract is an upgradeable contract, consider moving its "
            "variables to namespaced storage.",
            Severity.HINT,
            CONTRACT_CAN_BE_NAMESPACED,
            ContractRecord(name=name, variables=tuple(variables)),
        )


async def validate_namespaces(
    parse_output: ParseOutput,
    language: Language | None,
    context: AnalysisContext,
    sink: DiagnosticSink,
) -> None:
    """Validate every contract of a parsed document, in document order.

    Without ``language`` the grammar for isolated re-parses is requested from
    the context for each contract.
    """
    namespace_prefix = await context.namespace_prefix()
    for match in run_query(parse_output, _CONTRACT_QUERY):
        for cursor in match.captures["contract"]:
            contract_language = language
            if contract_language is None:
                contract_language = Language(await context.compiler_version())
            validate_namespaceable_contract(cursor, contract_language, namespace_prefix, sink)


async def analyze_document(context: AnalysisContext) -> list[DiagnosticRecord]:
    """Parse ``context.document`` and return its namespace diagnostics."""
    version = await context.compiler_version()
    language = Language(version)
    output = language.parse(NonterminalKind.SOURCE_FILE, context.document.text)
    if not output.is_valid:
        # contracts are re-parsed on their own, so errors elsewhere do not hide them
        logger.info(
            "%s has %d syntax error(s) at %s, first at offset %d",
            context.document.uri,
            len(output.errors),
            version,
            output.errors[0].offset,
        )

    collector = DiagnosticCollector()
    await validate_namespaces(output, language, context, collector)
    return collector.records


__all__ = ["analyze_document", "validate_namespaceable_contract", "validate_namespaces"]

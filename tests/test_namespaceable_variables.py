from __future__ import annotations

import logging

import pytest

from analysis.diagnostics import (
    VARIABLE_CAN_BE_NAMESPACED,
    VARIABLE_HAS_INITIAL_VALUE,
    AccessorStub,
    DiagnosticCollector,
    Severity,
)
from analysis.variables import classify_state_variables
from syntax.cursor import Cursor
from syntax.kinds import NonterminalKind
from syntax.parser import Language

_SOURCE = """\
contract Bank {
    uint256 public a;
    uint256 private b = 1;
    uint256 constant C = 2;
    address immutable owner;
    mapping(address => uint256) internal balances;
    // plain
    uint256 c;

    constructor() {
        owner = msg.sender;
    }
}
"""


def _contract_cursor(source: str) -> Cursor:
    output = Language.latest().parse(NonterminalKind.SOURCE_FILE, source)
    cursor = output.create_tree_cursor()
    assert cursor.go_to_next_nonterminal_with_kind(NonterminalKind.CONTRACT_DECLARATION)
    return cursor


def test_reported_variables() -> None:
    collector = DiagnosticCollector()

    variables = classify_state_variables(
        _contract_cursor(_SOURCE), Language.latest(), collector, report=True
    )

    assert [v.name for v in variables] == ["a", "balances", "c"]
    assert [v.content for v in variables] == [
        "uint256 a;",
        "mapping(address => uint256) balances;",
        "uint256 c;",
    ]
    assert variables[0].public_getter == AccessorStub(type_name="uint256")
    assert variables[1].public_getter is None
    assert [(r.code, r.severity) for r in collector.records] == [
        (VARIABLE_CAN_BE_NAMESPACED, Severity.INFORMATION),
        (VARIABLE_HAS_INITIAL_VALUE, Severity.WARNING),
        (VARIABLE_CAN_BE_NAMESPACED, Severity.INFORMATION),
        (VARIABLE_CAN_BE_NAMESPACED, Severity.INFORMATION),
    ]


def test_variable_ranges_are_trimmed() -> None:
    collector = DiagnosticCollector()

    variables = classify_state_variables(
        _contract_cursor(_SOURCE), Language.latest(), collector, report=True
    )

    texts = [_SOURCE[v.range.start.offset : v.range.end.offset] for v in variables]
    assert texts == [
        "uint256 public a;",
        "mapping(address => uint256) internal balances;",
        "uint256 c;",
    ]
    initial = collector.with_code(VARIABLE_HAS_INITIAL_VALUE)[0]
    assert initial.range.start.line == 2
    assert initial.range.start.column == 4


def test_unreported_variables_are_still_collected() -> None:
    collector = DiagnosticCollector()

    variables = classify_state_variables(
        _contract_cursor(_SOURCE), Language.latest(), collector, report=False
    )

    assert [v.name for v in variables] == ["a", "balances", "c"]
    assert collector.records == []


def test_constant_with_initializer_is_never_reported() -> None:
    collector = DiagnosticCollector()
    source = "contract K {\n    bytes32 public constant ROLE = keccak256(\"ROLE\");\n}\n"

    variables = classify_state_variables(
        _contract_cursor(source), Language.latest(), collector, report=True
    )

    assert variables == []
    assert collector.records == []


def test_variable_not_parsing_at_inferred_version_is_skipped(
    caplog: pytest.LogCaptureFixture,
) -> None:
    collector = DiagnosticCollector()
    source = "contract K {\n    uint256 public override x;\n}\n"

    with caplog.at_level(logging.WARNING, logger="analysis.variables"):
        variables = classify_state_variables(
            _contract_cursor(source), Language("0.5.0"), collector, report=True
        )

    assert variables == []
    assert collector.records == []
    assert "Skipping state variable" in caplog.text

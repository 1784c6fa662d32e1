"""Diagnostic records and sinks.

Records are immutable pydantic models so they can be compared in tests and
serialized by the CLI with ``model_dump``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from syntax.tree import TextRange

VARIABLE_CAN_BE_NAMESPACED = "VariableCanBeNamespaced"
CONTRACT_CAN_BE_NAMESPACED = "ContractCanBeNamespaced"
NAMESPACE_ID_MISMATCH = "NamespaceIdMismatch"
NAMESPACE_ID_MISMATCH_HASH_COMMENT = "NamespaceIdMismatchHashComment"
NAMESPACE_HASH_MISMATCH = "NamespaceHashMismatch"
NAMESPACE_STANDALONE_HASH_MISMATCH = "NamespaceStandaloneHashMismatch"
VARIABLE_HAS_INITIAL_VALUE = "VariableHasInitialValue"
MULTIPLE_NAMESPACES = "MultipleNamespaces"
DUPLICATE_NAMESPACE_ID = "DuplicateNamespaceId"

DIAGNOSTIC_CODES = frozenset(
    {
        VARIABLE_CAN_BE_NAMESPACED,
        CONTRACT_CAN_BE_NAMESPACED,
        NAMESPACE_ID_MISMATCH,
        NAMESPACE_ID_MISMATCH_HASH_COMMENT,
        NAMESPACE_HASH_MISMATCH,
        NAMESPACE_STANDALONE_HASH_MISMATCH,
        VARIABLE_HAS_INITIAL_VALUE,
        MULTIPLE_NAMESPACES,
        DUPLICATE_NAMESPACE_ID,
    }
)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Position(_Frozen):
    """A zero-based line/column position plus the character offset."""

    offset: int
    line: int
    column: int


class Range(_Frozen):
    start: Position
    end: Position

    @classmethod
    def from_text_range(cls, text_range: TextRange) -> Range:
        return cls(
            start=Position(
                offset=text_range.start.offset,
                line=text_range.start.line,
                column=text_range.start.column,
            ),
            end=Position(
                offset=text_range.end.offset,
                line=text_range.end.line,
                column=text_range.end.column,
            ),
        )


class Replacement(_Frozen):
    """Quick fix: replace the diagnostic's range with ``replacement``."""

    replacement: str


class AccessorStub(_Frozen):
    """Type of a public variable whose getter must be recreated."""

    type_name: str


class NamespaceableVariable(_Frozen):
    """A state variable that can move into a namespace struct."""

    content: str = Field(description="Declaration without attributes, e.g. 'uint256 x;'")
    name: str
    range: Range
    public_getter: AccessorStub | None = None


class ContractRecord(_Frozen):
    """Quick-fix payload for moving a contract's variables into a namespace."""

    name: str
    variables: tuple[NamespaceableVariable, ...] = ()


class NamespaceIdAndRange(_Frozen):
    namespace_id: str
    range: Range


class DiagnosticRecord(_Frozen):
    range: Range
    message: str
    explanation: str
    severity: Severity
    code: str
    data: Union[Replacement, ContractRecord, None] = None


class DiagnosticSink(Protocol):
    def add(self, record: DiagnosticRecord) -> None: ...


class DiagnosticCollector:
    """In-memory sink keeping records in emission order."""

    def __init__(self) -> None:
        self.records: list[DiagnosticRecord] = []

    def add(self, record: DiagnosticRecord) -> None:
        self.records.append(record)

    def with_code(self, code: str) -> list[DiagnosticRecord]:
        return [record for record in self.records if record.code == code]

    def __len__(self) -> int:
        return len(self.records)


def add_diagnostic(
    sink: DiagnosticSink,
    text_range: TextRange | Range,
    message: str,
    explanation: str,
    severity: Severity,
    code: str,
    data: Replacement | ContractRecord | None = None,
) -> DiagnosticRecord:
    record = DiagnosticRecord(
        range=text_range if isinstance(text_range, Range) else Range.from_text_range(text_range),
        message=message,
        explanation=explanation,
        severity=severity,
        code=code,
        data=data,
    )
    sink.add(record)
    return record


__all__ = [
    "CONTRACT_CAN_BE_NAMESPACED",
    "DIAGNOSTIC_CODES",
    "DUPLICATE_NAMESPACE_ID",
    "MULTIPLE_NAMESPACES",
    "NAMESPACE_HASH_MISMATCH",
    "NAMESPACE_ID_MISMATCH",
    "NAMESPACE_ID_MISMATCH_HASH_COMMENT",
    "NAMESPACE_STANDALONE_HASH_MISMATCH",
    "VARIABLE_CAN_BE_NAMESPACED",
    "VARIABLE_HAS_INITIAL_VALUE",
    "AccessorStub",
    "ContractRecord",
    "DiagnosticCollector",
    "DiagnosticRecord",
    "DiagnosticSink",
    "NamespaceIdAndRange",
    "NamespaceableVariable",
    "Position",
    "Range",
    "Replacement",
    "Severity",
    "add_diagnostic",
]

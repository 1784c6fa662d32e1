"""Namespace diagnostic engine for ERC-7201 namespaced storage."""

from analysis.context import AnalysisContext, get_namespace_prefix
from analysis.diagnostics import (
    DIAGNOSTIC_CODES,
    DiagnosticCollector,
    DiagnosticRecord,
    DiagnosticSink,
    Severity,
)
from analysis.document import TextDocument
from analysis.engine import analyze_document, validate_namespaceable_contract, validate_namespaces
from analysis.versions import get_highest_supported_pragma_version, infer_compiler_version

__all__ = [
    "DIAGNOSTIC_CODES",
    "AnalysisContext",
    "DiagnosticCollector",
    "DiagnosticRecord",
    "DiagnosticSink",
    "Severity",
    "TextDocument",
    "analyze_document",
    "get_highest_supported_pragma_version",
    "get_namespace_prefix",
    "infer_compiler_version",
    "validate_namespaceable_contract",
    "validate_namespaces",
]

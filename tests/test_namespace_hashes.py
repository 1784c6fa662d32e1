from __future__ import annotations

from analysis.diagnostics import (
    NAMESPACE_HASH_MISMATCH,
    NAMESPACE_ID_MISMATCH_HASH_COMMENT,
    NAMESPACE_STANDALONE_HASH_MISMATCH,
    DiagnosticCollector,
    Replacement,
)
from analysis.hashes import validate_namespace_hashes
from namespaces.erc7201 import calculate_storage_location, format_storage_location_formula
from syntax.kinds import NonterminalKind
from syntax.parser import Language

_MAIN_SLOT = "0x183a6125c38840424c4a85fa12bab2ab606c4b6d0e7cc73c0c06ba5300eab500"
_WRONG_SLOT = "0x0000000000000000000000000000000000000000000000000000000000000100"


def _source(comment: str | None, literal: str, name: str = "MAIN_STORAGE_LOCATION") -> str:
    comment_line = f"    {comment}\n" if comment is not None else ""
    return (
        "contract Foo {\n"
        "    /// @custom:storage-location erc7201:example.main\n"
        "    struct MainStorage {\n"
        "        uint256 value;\n"
        "    }\n"
        "\n"
        f"{comment_line}"
        f"    bytes32 private constant {name} = {literal};\n"
        "}\n"
    )


def _validate(source: str, namespace_id: str, canonical_id: str) -> DiagnosticCollector:
    output = Language.latest().parse(NonterminalKind.SOURCE_FILE, source)
    cursor = output.create_tree_cursor()
    assert cursor.go_to_next_nonterminal_with_kind(NonterminalKind.CONTRACT_DECLARATION)
    collector = DiagnosticCollector()
    validate_namespace_hashes(cursor, namespace_id, canonical_id, collector)
    return collector


def test_consistent_comment_and_hash() -> None:
    source = _source(format_storage_location_formula("example.main"), _MAIN_SLOT)

    assert _validate(source, "example.main", "example.main").records == []


def test_hash_comparison_ignores_hex_case() -> None:
    source = _source(
        format_storage_location_formula("example.main"), "0x" + _MAIN_SLOT[2:].upper()
    )

    assert _validate(source, "example.main", "example.main").records == []


def test_comment_naming_another_namespace() -> None:
    comment = format_storage_location_formula("example.other")
    source = _source(comment, _MAIN_SLOT)

    collector = _validate(source, "example.main", "example.main")

    assert [r.code for r in collector.records] == [
        NAMESPACE_ID_MISMATCH_HASH_COMMENT,
        NAMESPACE_HASH_MISMATCH,
    ]
    comment_record, hash_record = collector.records
    assert source[comment_record.range.start.offset : comment_record.range.end.offset] == comment
    assert comment_record.data == Replacement(
        replacement=format_storage_location_formula("example.main")
    )
    assert hash_record.data == Replacement(
        replacement=calculate_storage_location("example.other")
    )


def test_hash_not_matching_comment_or_canonical_id() -> None:
    source = _source(format_storage_location_formula("foo.storage.Other"), _WRONG_SLOT)

    collector = _validate(source, "foo.storage.Other", "foo.storage.Foo")

    assert [r.code for r in collector.records] == [
        NAMESPACE_HASH_MISMATCH,
        NAMESPACE_STANDALONE_HASH_MISMATCH,
    ]
    for record in collector.records:
        assert source[record.range.start.offset : record.range.end.offset] == _WRONG_SLOT
    assert collector.records[1].data == Replacement(
        replacement=calculate_storage_location("foo.storage.Foo")
    )


def test_hash_without_comment_is_checked_against_canonical_id() -> None:
    source = _source(None, _WRONG_SLOT)

    collector = _validate(source, "example.main", "example.main")

    [record] = collector.records
    assert record.code == NAMESPACE_STANDALONE_HASH_MISMATCH
    assert record.data == Replacement(replacement=_MAIN_SLOT)


def test_unrelated_comment_does_not_count_as_formula() -> None:
    source = _source("// slot for main storage", _MAIN_SLOT)

    assert _validate(source, "example.main", "example.main").records == []


def test_only_storage_location_variables_are_checked() -> None:
    source = _source(None, _WRONG_SLOT, name="MAIN_SLOT")

    assert _validate(source, "example.main", "example.main").records == []


def test_camel_case_storage_location_name() -> None:
    source = _source(None, _WRONG_SLOT, name="MainStorageLocation")

    collector = _validate(source, "example.main", "example.main")

    assert [r.code for r in collector.records] == [NAMESPACE_STANDALONE_HASH_MISMATCH]

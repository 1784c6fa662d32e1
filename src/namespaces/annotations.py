"""Parsers for the structured comments around namespaced storage.

Each comment shape gets its own anchored matcher; they return the captured
value, or None when the comment does not have that shape.
"""

from __future__ import annotations

import re

from syntax.kinds import TerminalKind

_SINGLE_LINE_STORAGE_LOCATION = re.compile(r"@custom:storage-location erc7201:(\S+)")
_MULTI_LINE_STORAGE_LOCATION = re.compile(
    r"@custom:storage-location erc7201:(\S+?)(?=\s|\*/)"
)
_STORAGE_LOCATION_FORMULA = re.compile(
    r'keccak256\(abi\.encode\(uint256\(keccak256\("(.*)"\)\) *- *1\)\)'
    r" *& *~bytes32\(uint256\(0xff\)\)"
)

_UPGRADES_TAGS = frozenset({"@custom:oz-upgrades", "@custom:oz-upgrades-from"})
_STORAGE_LOCATION_SUFFIXES = ("_STORAGE_LOCATION", "StorageLocation")


def match_single_line_storage_location(comment: str) -> str | None:
    """Namespace id of a ``///`` annotation; it runs to the next whitespace."""
    match = _SINGLE_LINE_STORAGE_LOCATION.search(comment)
    return match.group(1) if match else None


def match_multi_line_storage_location(comment: str) -> str | None:
    """Namespace id of a ``/** */`` annotation; it also stops at ``*/``."""
    match = _MULTI_LINE_STORAGE_LOCATION.search(comment)
    return match.group(1) if match else None


def match_storage_location(comment: str, kind: str) -> str | None:
    if kind == TerminalKind.SINGLE_LINE_NAT_SPEC_COMMENT:
        return match_single_line_storage_location(comment)
    if kind == TerminalKind.MULTI_LINE_NAT_SPEC_COMMENT:
        return match_multi_line_storage_location(comment)
    return None


def match_storage_location_formula(comment: str) -> str | None:
    """Namespace id inside an ERC-7201 slot formula comment."""
    match = _STORAGE_LOCATION_FORMULA.search(comment)
    return match.group(1) if match else None


def has_upgrades_annotation(natspec: str) -> bool:
    return any(token in _UPGRADES_TAGS for token in natspec.split())


def is_storage_location_name(name: str) -> bool:
    return name.endswith(_STORAGE_LOCATION_SUFFIXES)


__all__ = [
    "has_upgrades_annotation",
    "is_storage_location_name",
    "match_multi_line_storage_location",
    "match_single_line_storage_location",
    "match_storage_location",
    "match_storage_location_formula",
]

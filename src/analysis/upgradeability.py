"""Heuristics deciding whether a contract is meant to be upgradeable."""

from __future__ import annotations

from typing import TYPE_CHECKING

from namespaces.annotations import has_upgrades_annotation
from syntax.ast import normalized_text
from syntax.helpers import get_natspec

if TYPE_CHECKING:
    from syntax.ast import ContractDefinition
    from syntax.cursor import Cursor

UPGRADEABLE_BASES = frozenset({"Initializable", "UUPSUpgradeable"})
AUTHORIZE_UPGRADE = "_authorizeUpgrade"


def inherits_upgradeable_base(contract: ContractDefinition) -> bool:
    return any(path and path[-1] in UPGRADEABLE_BASES for path in contract.inheritance_types)


def defines_authorize_upgrade(contract: ContractDefinition) -> bool:
    """True for a ``_authorizeUpgrade(address)`` function of any visibility."""
    for function in contract.functions:
        if function.name != AUTHORIZE_UPGRADE:
            continue
        parameters = function.parameters
        if len(parameters) != 1:
            continue
        type_name = parameters[0].type_name
        if type_name is not None and normalized_text(type_name) == "address":
            return True
    return False


def has_upgrades_natspec(cursor: Cursor) -> bool:
    natspec = get_natspec(cursor)
    return natspec is not None and has_upgrades_annotation(natspec.text)


def infer_upgradeable(cursor: Cursor, contract: ContractDefinition) -> bool:
    """Whether the contract at ``cursor`` looks upgradeable."""
    return (
        inherits_upgradeable_base(contract)
        or defines_authorize_upgrade(contract)
        or has_upgrades_natspec(cursor)
    )


__all__ = [
    "defines_authorize_upgrade",
    "has_upgrades_natspec",
    "infer_upgradeable",
    "inherits_upgradeable_base",
]

from __future__ import annotations

from analysis.upgradeability import (
    defines_authorize_upgrade,
    infer_upgradeable,
    inherits_upgradeable_base,
)
from syntax.ast import ContractDefinition
from syntax.cursor import Cursor
from syntax.kinds import NonterminalKind
from syntax.parser import Language
from syntax.tree import NonterminalNode


def _contract(source: str) -> tuple[Cursor, ContractDefinition]:
    output = Language.latest().parse(NonterminalKind.SOURCE_FILE, source)
    cursor = output.create_tree_cursor()
    assert cursor.go_to_next_nonterminal_with_kind(NonterminalKind.CONTRACT_DECLARATION)
    assert isinstance(cursor.node, NonterminalNode)
    return cursor, ContractDefinition(cursor.node)


def _authorize_upgrade(parameters: str) -> str:
    return (
        "contract Proxy {\n"
        f"    function _authorizeUpgrade({parameters}) internal override {{}}\n"
        "}\n"
    )


def test_initializable_base_is_upgradeable() -> None:
    cursor, contract = _contract("contract Token is ERC20, Initializable {}")

    assert inherits_upgradeable_base(contract)
    assert infer_upgradeable(cursor, contract)


def test_uups_base_is_upgradeable() -> None:
    cursor, contract = _contract("contract Token is UUPSUpgradeable {}")

    assert infer_upgradeable(cursor, contract)


def test_base_names_must_match_exactly() -> None:
    cursor, contract = _contract("contract Token is InitializableLike, MyUUPSUpgradeable {}")

    assert not infer_upgradeable(cursor, contract)


def test_authorize_upgrade_with_address_parameter() -> None:
    cursor, contract = _contract(_authorize_upgrade("address newImplementation"))

    assert defines_authorize_upgrade(contract)
    assert infer_upgradeable(cursor, contract)


def test_authorize_upgrade_with_other_parameter_types() -> None:
    for parameters in (
        "address payable newImplementation",
        "uint256 version",
        "address newImplementation, bytes memory data",
        "",
    ):
        cursor, contract = _contract(_authorize_upgrade(parameters))

        assert not infer_upgradeable(cursor, contract), parameters


def test_upgrades_natspec_annotation() -> None:
    cursor, contract = _contract("/// @custom:oz-upgrades-from TokenV1\ncontract Token {}")

    assert infer_upgradeable(cursor, contract)


def test_plain_contract_is_not_upgradeable() -> None:
    cursor, contract = _contract("/// @title Token\ncontract Token { uint256 x; }")

    assert not infer_upgradeable(cursor, contract)

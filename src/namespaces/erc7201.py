"""ERC-7201 namespace ids and storage locations."""

from __future__ import annotations

from eth_utils import keccak

_UINT256_MODULUS = 1 << 256
_LOW_BYTE_MASK = ~0xFF


def get_namespace_id(prefix: str, contract_name: str) -> str:
    """Canonical namespace id of a contract, e.g. ``myProject.storage.Vault``."""
    return f"{prefix}.{contract_name}"


def calculate_storage_location(namespace_id: str) -> str:
    """Storage slot of ``namespace_id`` as a ``0x``-prefixed 64-digit hex string.

    Computes ``keccak256(abi.encode(uint256(keccak256(id)) - 1)) &
    ~bytes32(uint256(0xff))``.
    """
    inner = int.from_bytes(keccak(text=namespace_id), "big")
    encoded = ((inner - 1) % _UINT256_MODULUS).to_bytes(32, "big")
    slot = int.from_bytes(keccak(encoded), "big") & _LOW_BYTE_MASK
    return "0x" + format(slot, "064x")


def format_storage_location_formula(namespace_id: str) -> str:
    return (
        f'// keccak256(abi.encode(uint256(keccak256("{namespace_id}")) - 1))'
        " & ~bytes32(uint256(0xff))"
    )


def format_storage_location_annotation(namespace_id: str) -> str:
    return f"/// @custom:storage-location erc7201:{namespace_id}"


__all__ = [
    "calculate_storage_location",
    "format_storage_location_annotation",
    "format_storage_location_formula",
    "get_namespace_id",
]

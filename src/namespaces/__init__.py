"""ERC-7201 namespaced storage: ids, slot hashes and annotation comments."""

from namespaces.annotations import (
    has_upgrades_annotation,
    is_storage_location_name,
    match_storage_location,
    match_storage_location_formula,
)
from namespaces.erc7201 import (
    calculate_storage_location,
    format_storage_location_annotation,
    format_storage_location_formula,
    get_namespace_id,
)

__all__ = [
    "calculate_storage_location",
    "format_storage_location_annotation",
    "format_storage_location_formula",
    "get_namespace_id",
    "has_upgrades_annotation",
    "is_storage_location_name",
    "match_storage_location",
    "match_storage_location_formula",
]

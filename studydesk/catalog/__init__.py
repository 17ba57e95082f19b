"""Catalog reads, cache and invariants."""

from .invariants import check, validate_course, validate_item, validate_provider
from .state import CatalogState, generate_id

__all__ = [
    "check",
    "validate_course",
    "validate_item",
    "validate_provider",
    "CatalogState",
    "generate_id",
]

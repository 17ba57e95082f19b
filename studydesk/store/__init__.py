"""Persistent catalog store."""

from .base import COLLECTIONS, CatalogStore
from .json_store import JsonCatalogStore
from .memory import MemoryCatalogStore

__all__ = [
    "COLLECTIONS",
    "CatalogStore",
    "JsonCatalogStore",
    "MemoryCatalogStore",
]

# studydesk/store/base.py
"""
Keyed collections for the catalog.

Rows go in and come out as pydantic models; the store keeps its own
serialised copy so callers never share mutable state with it.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from pydantic import BaseModel

from ..errors import UnknownCollectionError
from ..models.catalog import Category, ConfigEntry, Course, Item, Provider


COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "categories": Category,
    "providers": Provider,
    "courses": Course,
    "items": Item,
    "config": ConfigEntry,
}


def model_for(collection: str) -> Type[BaseModel]:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise UnknownCollectionError(collection) from None


class CatalogStore(ABC):
    """Persistent store interface used by the sync and study services."""

    @abstractmethod
    async def get(self, collection: str, key: str) -> Optional[BaseModel]:
        """Get a single row by key."""

    @abstractmethod
    async def get_all(self, collection: str) -> List[BaseModel]:
        """Get every row of a collection."""

    @abstractmethod
    async def get_by_parent(
        self, collection: str, parent_field: str, parent_key: str
    ) -> List[BaseModel]:
        """Get rows whose parent field equals `parent_key`."""

    @abstractmethod
    async def put(self, collection: str, row: BaseModel) -> str:
        """Insert or replace a row; returns its key."""

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        """Delete a row; returns False when it did not exist."""

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Count rows in a collection."""

    @abstractmethod
    async def count_by_parent(
        self, collection: str, parent_field: str, parent_key: str
    ) -> int:
        """Count rows whose parent field equals `parent_key`."""

    @abstractmethod
    async def clear(self, collection: str) -> None:
        """Remove every row of a collection."""

    async def close(self) -> None:
        """Release resources held by the store."""

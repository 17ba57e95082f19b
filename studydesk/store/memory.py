# studydesk/store/memory.py

from typing import Any, Dict, List, Optional

import anyio
import anyio.lowlevel
from pydantic import BaseModel

from .base import COLLECTIONS, CatalogStore, model_for


class MemoryCatalogStore(CatalogStore):
    """
    Dict-backed store.

    Every operation yields to the scheduler once, so code under test sees
    the same suspension points it would against a real backend.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {
            name: {} for name in COLLECTIONS
        }

    def _rows(self, collection: str) -> Dict[str, Dict[str, Any]]:
        model_for(collection)
        return self._data[collection]

    def _load(self, collection: str, raw: Dict[str, Any]) -> BaseModel:
        return model_for(collection).model_validate(raw)

    async def _persist(self, collection: str) -> None:
        """Hook for durable subclasses; called after each mutation."""

    async def get(self, collection: str, key: str) -> Optional[BaseModel]:
        await anyio.lowlevel.checkpoint()
        raw = self._rows(collection).get(key)
        return self._load(collection, raw) if raw is not None else None

    async def get_all(self, collection: str) -> List[BaseModel]:
        await anyio.lowlevel.checkpoint()
        return [self._load(collection, raw) for raw in self._rows(collection).values()]

    async def get_by_parent(
        self, collection: str, parent_field: str, parent_key: str
    ) -> List[BaseModel]:
        await anyio.lowlevel.checkpoint()
        return [
            self._load(collection, raw)
            for raw in self._rows(collection).values()
            if raw.get(parent_field) == parent_key
        ]

    async def put(self, collection: str, row: BaseModel) -> str:
        await anyio.lowlevel.checkpoint()
        rows = self._rows(collection)
        # Round-trip through the collection model so a wrong row type fails here
        raw = model_for(collection).model_validate(row.model_dump()).model_dump(mode="json")
        rows[raw["id"]] = raw
        await self._persist(collection)
        return raw["id"]

    async def delete(self, collection: str, key: str) -> bool:
        await anyio.lowlevel.checkpoint()
        rows = self._rows(collection)
        if key not in rows:
            return False
        del rows[key]
        await self._persist(collection)
        return True

    async def count(self, collection: str) -> int:
        await anyio.lowlevel.checkpoint()
        return len(self._rows(collection))

    async def count_by_parent(
        self, collection: str, parent_field: str, parent_key: str
    ) -> int:
        await anyio.lowlevel.checkpoint()
        return sum(
            1 for raw in self._rows(collection).values()
            if raw.get(parent_field) == parent_key
        )

    async def clear(self, collection: str) -> None:
        await anyio.lowlevel.checkpoint()
        self._rows(collection).clear()
        await self._persist(collection)

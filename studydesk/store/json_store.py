# studydesk/store/json_store.py
"""
Catalog persistence using JSON files.

One document per collection (`providers.json`, `items.json`, ...), each a
mapping of key to row. Writes go to a temp file that is then renamed over
the previous document. Writes to one collection are serialised.
"""

import json
import logging
from pathlib import Path

import anyio

from ..errors import StoreError
from .base import COLLECTIONS
from .memory import MemoryCatalogStore


logger = logging.getLogger(__name__)


class JsonCatalogStore(MemoryCatalogStore):
    """Persist the catalog as JSON documents in a directory."""

    def __init__(self, store_path: str = "./data/catalog"):
        super().__init__()
        self.store_path = Path(store_path)
        self._write_locks = {name: anyio.Lock() for name in COLLECTIONS}

    def _collection_file(self, collection: str) -> Path:
        return self.store_path / f"{collection}.json"

    async def ensure_directory(self) -> None:
        """Ensure the store directory exists."""
        await anyio.Path(self.store_path).mkdir(parents=True, exist_ok=True)

    async def open(self) -> "JsonCatalogStore":
        """Load every collection document that exists on disk."""
        await self.ensure_directory()

        for collection in COLLECTIONS:
            file_path = anyio.Path(self._collection_file(collection))
            if not await file_path.exists():
                continue

            text = await file_path.read_text()
            try:
                data = json.loads(text) if text.strip() else {}
            except json.JSONDecodeError as e:
                raise StoreError(
                    f"Corrupted catalog document: {file_path}",
                    "Restore the file from a backup or delete it to rebuild from the next sync",
                ) from e

            self._data[collection] = data
            logger.debug("Loaded %d %s from %s", len(data), collection, file_path)

        return self

    async def _persist(self, collection: str) -> None:
        async with self._write_locks[collection]:
            # Serialise inside the lock so the last writer stores the newest rows
            payload = json.dumps(self._data[collection], indent=2, default=str)

            await self.ensure_directory()
            file_path = anyio.Path(self._collection_file(collection))
            temp_path = anyio.Path(f"{file_path}.tmp")

            await temp_path.write_text(payload)
            await temp_path.rename(file_path)

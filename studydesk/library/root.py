# studydesk/library/root.py
"""
Master folder selection and restore.

The selected capability is serialised into the config collection. On restart
it is rebuilt and its permission re-queried; if that fails the app behaves as
if no master folder were configured until access is granted again.
"""

import logging
from typing import Optional

from ..errors import PermissionDeniedError, RootNotConfiguredError
from ..fs.capability import (
    DirectoryCapability,
    LocalDirectoryCapability,
    PermissionMode,
    PermissionState,
    capability_from_config,
)
from ..models.catalog import ConfigEntry
from ..store.base import CatalogStore


logger = logging.getLogger(__name__)

ROOT_CONFIG_KEY = "library_root"


class LibraryRoot:
    """Holds the active master folder capability."""

    def __init__(self, store: CatalogStore, follow_symlinks: bool = False):
        self.store = store
        self.follow_symlinks = follow_symlinks
        self.capability: Optional[DirectoryCapability] = None

    @property
    def has_root(self) -> bool:
        return self.capability is not None

    @property
    def name(self) -> Optional[str]:
        return self.capability.name if self.capability else None

    def require(self) -> DirectoryCapability:
        if self.capability is None:
            raise RootNotConfiguredError()
        return self.capability

    async def _load_saved(self) -> Optional[DirectoryCapability]:
        entry = await self.store.get("config", ROOT_CONFIG_KEY)
        if entry is None:
            return None
        try:
            return capability_from_config(entry.value)
        except (KeyError, ValueError) as e:
            logger.warning("Ignoring unreadable master folder config: %s", e)
            return None

    async def restore(self) -> bool:
        """
        Restore the saved master folder if access is still granted.

        Returns:
            True when a usable root is now active
        """
        capability = await self._load_saved()
        if capability is None:
            return False

        permission = await capability.query_permission(PermissionMode.READ)
        if permission != PermissionState.GRANTED:
            logger.info("Saved master folder %s needs permission again", capability.name)
            self.capability = None
            return False

        self.capability = capability
        logger.info("Restored master folder access: %s", capability.name)
        return True

    async def select(self, path: str) -> DirectoryCapability:
        """
        Select a local folder as the master folder.

        Raises:
            PermissionDeniedError: the folder is missing or unreadable
        """
        capability = LocalDirectoryCapability(path, follow_symlinks=self.follow_symlinks)
        if await capability.query_permission(PermissionMode.READ) != PermissionState.GRANTED:
            raise PermissionDeniedError(capability.name)

        await self.adopt(capability)
        return capability

    async def adopt(self, capability: DirectoryCapability) -> None:
        """Make a capability the active root and persist it."""
        await self.store.put(
            "config", ConfigEntry(id=ROOT_CONFIG_KEY, value=capability.to_config())
        )
        self.capability = capability
        logger.info("Master folder selected: %s", capability.name)

    async def request_permission(self) -> bool:
        """
        Ask again for access to the active (or last saved) master folder.

        Raises:
            RootNotConfiguredError: nothing was ever selected
        """
        capability = self.capability or await self._load_saved()
        if capability is None:
            raise RootNotConfiguredError()

        state = await capability.request_permission(PermissionMode.READ)
        if state != PermissionState.GRANTED:
            return False

        self.capability = capability
        return True

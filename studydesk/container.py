"""Service container holding one application's runtime services.

Built once per app instance and hung on `app.state`; tests build their own
with an in-memory store and fake capabilities.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .catalog.state import CatalogState
from .config import Config
from .errors import PermissionDeniedError
from .library.categories import CategoryManager
from .library.classify import FileClassifier
from .library.root import LibraryRoot
from .store.base import CatalogStore
from .store.json_store import JsonCatalogStore
from .study.resolver import LiveResolver
from .study.session import StudySession
from .sync.service import SyncService

logger = logging.getLogger(__name__)


@dataclass
class StudyDeskServices:
    """
    Runtime service instances.

    Usage:
        services = await build_services(config)
        report = await services.sync.sync()
        await services.shutdown()
    """

    config: Config
    store: CatalogStore
    root: LibraryRoot
    categories: CategoryManager
    state: CatalogState
    sync: SyncService
    resolver: LiveResolver
    study: StudySession
    classifier: FileClassifier = field(default_factory=FileClassifier)

    def get_service_status(self) -> dict:
        """Return a readiness summary for the health endpoint."""
        return {
            "store": self.store is not None,
            "library_root": self.root.has_root,
            "study_open": self.study.current_item is not None,
        }

    async def shutdown(self) -> None:
        """Save the open item's position and close the store."""
        logger.info("Shutting down study desk services...")

        await self.study.close()
        logger.debug("Study session closed")

        await self.store.close()
        logger.debug("Catalog store closed")

        logger.info("Study desk services shutdown complete")


def assemble_services(config: Config, store: CatalogStore) -> StudyDeskServices:
    """Wire services around an already opened store."""
    classifier = FileClassifier(
        video_extensions=config.scan.video_extensions,
        document_extensions=config.scan.document_extensions,
    )
    root = LibraryRoot(store, follow_symlinks=config.library.follow_symlinks)
    categories = CategoryManager(store, config.categories.seed_file)
    state = CatalogState(store)
    resolver = LiveResolver(state, classifier)

    return StudyDeskServices(
        config=config,
        store=store,
        root=root,
        categories=categories,
        state=state,
        sync=SyncService(root, categories, state, classifier),
        resolver=resolver,
        study=StudySession(
            state, resolver, root, open_timeout=config.study.open_timeout_seconds
        ),
        classifier=classifier,
    )


async def build_services(
    config: Config, store: Optional[CatalogStore] = None
) -> StudyDeskServices:
    """
    Open the store, seed categories and restore the master folder.

    A configured `library.root` takes precedence over the saved one.
    """
    if store is None:
        json_store = JsonCatalogStore(config.store.path)
        await json_store.open()
        store = json_store

    services = assemble_services(config, store)
    await services.categories.seed()

    if config.library_root:
        try:
            await services.root.select(config.library_root)
        except PermissionDeniedError as e:
            logger.warning("Configured master folder is not usable: %s", e.message)
            await services.root.restore()
    else:
        await services.root.restore()

    logger.info(
        "Services ready (master folder: %s)", services.root.name or "not configured"
    )
    return services

# studydesk/study/resolver.py
"""
Live lookup of an item's backing file.

The stored filename can go stale between syncs when files are renamed on
disk. The resolver re-lists the course folder at open time and binds the
item to its file, repairing the stored filename when the file at the item's
position has a new name. It never runs a full reconciliation.
"""

import logging
from typing import Callable, Optional

from ..catalog.state import CatalogState
from ..fs.capability import DirectoryCapability, DirRef
from ..library.classify import FileClassifier, title_from_filename
from ..library.scanner import list_classified_files
from ..models.catalog import Item
from ..models.scan import ScannedFile


logger = logging.getLogger(__name__)


class LiveResolver:
    """Bind an Item to the file currently on disk."""

    def __init__(self, state: CatalogState, classifier: Optional[FileClassifier] = None):
        self.state = state
        self.classifier = classifier or FileClassifier()

    async def _course_folder(
        self, capability: DirectoryCapability, source_path: str
    ) -> Optional[DirRef]:
        ref = capability.root()
        for name in DirRef.from_path(source_path).parts:
            try:
                ref = await capability.get_or_create_subdirectory(ref, name, create=False)
            except (FileNotFoundError, NotADirectoryError):
                logger.info("Course folder no longer exists: %s", source_path)
                return None
        return ref

    async def resolve(
        self,
        item: Item,
        capability: DirectoryCapability,
        is_current: Optional[Callable[[], bool]] = None,
    ) -> Optional[ScannedFile]:
        """
        Find the file backing `item`.

        An exact filename match wins. Otherwise the file at position
        `item.rank` is taken as a rename of the stored file, and the item's
        filename and title are updated in place. A file already bound to a
        sibling item by name is never taken over.

        Args:
            item: Item to resolve
            capability: Active master folder
            is_current: Checked before repairing the stored row; a False
                result leaves the store untouched

        Returns:
            The scanned file, or None when nothing suitable is on disk
        """
        course = await self.state.get_course(item.course_id)
        if course is None or not course.source_path:
            logger.info("Item %s has no course folder to resolve against", item.id)
            return None

        try:
            folder = await self._course_folder(capability, course.source_path)
            if folder is None:
                return None
            files = await list_classified_files(capability, folder, self.classifier)
        except OSError as e:
            logger.warning("Could not list %s: %s", course.source_path, e)
            return None

        for scanned in files:
            if scanned.name == item.filename:
                return scanned

        if item.rank < 0 or item.rank >= len(files):
            logger.info("No file at position %d for item %s", item.rank, item.id)
            return None

        candidate = files[item.rank]
        siblings = await self.state.store.get_by_parent("items", "course_id", item.course_id)
        if any(s.filename == candidate.name and s.id != item.id for s in siblings):
            logger.info(
                "File %s at position %d belongs to another item; not rebinding %s",
                candidate.name,
                item.rank,
                item.id,
            )
            return None

        if is_current is not None and not is_current():
            return None

        healed = await self.state.update_item(
            item.id,
            is_current=is_current,
            filename=candidate.name,
            title=title_from_filename(candidate.name),
        )
        if healed is None:
            return None

        logger.info("Detected rename: %s -> %s", item.filename, candidate.name)
        return candidate

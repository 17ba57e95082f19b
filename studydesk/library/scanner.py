# studydesk/library/scanner.py
"""
Master folder scanning.

Walks Category/Provider/Course folders through a DirectoryCapability and
returns a ScanTree value. The scanner never writes to the folder or the
catalog.
"""

import logging
from typing import List, Optional

from ..errors import PermissionDeniedError, RootUnavailableError
from ..fs.capability import (
    DirectoryCapability,
    DirEntry,
    DirRef,
    EntryKind,
    PermissionMode,
    PermissionState,
)
from ..models.scan import (
    CategoryNode,
    CourseNode,
    DiagnosticKind,
    ProviderNode,
    ScanDiagnostic,
    ScannedFile,
    ScanResult,
    ScanTree,
)
from .classify import FileClassifier, natural_key


logger = logging.getLogger(__name__)


def _visible(entries: List[DirEntry], kind: EntryKind) -> List[DirEntry]:
    """Entries of one kind, hidden names dropped, in natural order."""
    return sorted(
        (e for e in entries if e.kind == kind and not e.name.startswith(".")),
        key=lambda e: natural_key(e.name),
    )


async def list_classified_files(
    capability: DirectoryCapability,
    dir_ref: DirRef,
    classifier: FileClassifier,
) -> List[ScannedFile]:
    """
    List the recognised files directly inside a folder, sorted naturally.

    Raises OSError when the folder cannot be listed.
    """
    entries = await capability.list_entries(dir_ref)

    files = []
    for entry in _visible(entries, EntryKind.FILE):
        kind = classifier.classify(entry.name)
        if kind is not None:
            files.append(ScannedFile(name=entry.name, kind=kind, ref=dir_ref.file(entry.name)))
    return files


class DirectoryScanner:
    """Scan the master folder into a ScanTree."""

    def __init__(
        self,
        capability: DirectoryCapability,
        classifier: Optional[FileClassifier] = None,
    ):
        self.capability = capability
        self.classifier = classifier or FileClassifier()

    async def scan(self) -> ScanResult:
        """
        Scan the entire folder structure.

        Returns:
            ScanResult with the tree and a diagnostic for every branch that
            could not be listed.

        Raises:
            PermissionDeniedError: access to the root is not granted
            RootUnavailableError: the root itself cannot be listed
        """
        name = self.capability.name
        permission = await self.capability.query_permission(PermissionMode.READ)
        if permission != PermissionState.GRANTED:
            raise PermissionDeniedError(name)

        root = self.capability.root()
        try:
            entries = await self.capability.list_entries(root)
        except PermissionError as e:
            raise PermissionDeniedError(name) from e
        except OSError as e:
            raise RootUnavailableError(name, str(e)) from e

        tree = ScanTree(root_name=name)
        diagnostics: List[ScanDiagnostic] = []

        for entry in _visible(entries, EntryKind.DIRECTORY):
            node = await self._scan_category(root.child(entry.name), diagnostics)
            tree.categories[entry.name] = node

        logger.debug(
            "Scanned %s: %d top-level folders, %d files, %d failed branches",
            name,
            len(tree.categories),
            tree.file_count(),
            len(diagnostics),
        )
        return ScanResult(tree=tree, diagnostics=diagnostics)

    async def _list(
        self, ref: DirRef, diagnostics: List[ScanDiagnostic]
    ) -> Optional[List[DirEntry]]:
        """List a branch, recording a diagnostic instead of raising."""
        try:
            return await self.capability.list_entries(ref)
        except OSError as e:
            logger.warning("Skipping unreadable folder %s: %s", ref.path, e)
            diagnostics.append(
                ScanDiagnostic(kind=DiagnosticKind.BRANCH_FAILED, path=ref.path, message=str(e))
            )
            return None

    async def _scan_category(
        self, ref: DirRef, diagnostics: List[ScanDiagnostic]
    ) -> CategoryNode:
        node = CategoryNode(name=ref.name, ref=ref)
        entries = await self._list(ref, diagnostics)
        if entries is None:
            node.readable = False
            return node

        for entry in _visible(entries, EntryKind.DIRECTORY):
            node.providers[entry.name] = await self._scan_provider(
                ref.child(entry.name), diagnostics
            )
        return node

    async def _scan_provider(
        self, ref: DirRef, diagnostics: List[ScanDiagnostic]
    ) -> ProviderNode:
        node = ProviderNode(name=ref.name, ref=ref)
        entries = await self._list(ref, diagnostics)
        if entries is None:
            node.readable = False
            return node

        for entry in _visible(entries, EntryKind.DIRECTORY):
            node.courses[entry.name] = await self._scan_course(ref.child(entry.name), diagnostics)
        return node

    async def _scan_course(
        self, ref: DirRef, diagnostics: List[ScanDiagnostic]
    ) -> CourseNode:
        node = CourseNode(name=ref.name, ref=ref)
        try:
            node.files = await list_classified_files(self.capability, ref, self.classifier)
        except OSError as e:
            logger.warning("Skipping unreadable folder %s: %s", ref.path, e)
            diagnostics.append(
                ScanDiagnostic(kind=DiagnosticKind.BRANCH_FAILED, path=ref.path, message=str(e))
            )
            node.readable = False
        return node

# studydesk/sync/service.py
"""Scan -> match -> reconcile, one pass at a time."""

import logging
from typing import Optional

import anyio

from ..catalog.state import CatalogState
from ..library.categories import CategoryManager, match_scan_tree
from ..library.classify import FileClassifier
from ..library.root import LibraryRoot
from ..library.scanner import DirectoryScanner
from ..models.scan import DiagnosticKind, ScanDiagnostic
from ..models.sync import SyncReport
from .reconciler import Reconciler


logger = logging.getLogger(__name__)


class SyncService:
    """
    Runs reconciliation passes against the active master folder.

    Passes are serialised by a lock; a second caller waits for the first
    pass to finish and then runs its own.
    """

    def __init__(
        self,
        root: LibraryRoot,
        categories: CategoryManager,
        state: CatalogState,
        classifier: Optional[FileClassifier] = None,
        reconciler: Optional[Reconciler] = None,
    ):
        self.root = root
        self.categories = categories
        self.state = state
        self.classifier = classifier or FileClassifier()
        self.reconciler = reconciler or Reconciler(state)
        self.last_report: Optional[SyncReport] = None
        self._lock = anyio.Lock()

    async def sync(self) -> SyncReport:
        """
        Run one full pass.

        Returns:
            The pass report; with no master folder configured, an empty report
            carrying a single no-root diagnostic

        Raises:
            PermissionDeniedError: access to the master folder was revoked
            RootUnavailableError: the master folder cannot be listed
        """
        async with self._lock:
            started = anyio.current_time()
            if not self.root.has_root:
                logger.info("No master folder configured, skipping sync")
                return SyncReport(
                    diagnostics=[
                        ScanDiagnostic(
                            kind=DiagnosticKind.NO_ROOT,
                            path="",
                            message="No master folder configured",
                        )
                    ]
                )

            scanner = DirectoryScanner(self.root.require(), self.classifier)
            result = await scanner.scan()

            categories = await self.categories.load_categories()
            matches, skipped = match_scan_tree(result.tree, categories)

            try:
                report = await self.reconciler.reconcile(result.tree, matches)
            finally:
                self.state.invalidate_cache()

            report.diagnostics = result.diagnostics + skipped + report.diagnostics
            self.last_report = report

            logger.info(
                "Sync pass complete: %s",
                report.counts(),
                extra={"extra_data": {
                    **report.counts(),
                    "duration_ms": (anyio.current_time() - started) * 1000,
                }},
            )
            return report

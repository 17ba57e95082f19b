# studydesk/sync/reconciler.py
"""
Apply a reconcile plan to the catalog store.

The catalog becomes a mirror of the master folder: providers, courses and
items that disappeared from disk are deleted along with their user state
(completion, last position). Only matched top-level folders are ever
garbage-collected. Pointing the app at an incomplete copy of the library
therefore deletes progress for everything missing from it.
"""

import logging
from typing import Callable, Dict, Mapping, Set, Type

from ..catalog.state import CatalogState, generate_id
from ..errors import IntegrityViolationError
from ..models.catalog import Course, Item, Provider
from ..models.scan import DiagnosticKind, ScanDiagnostic, ScanTree
from ..models.sync import SyncReport
from .planner import CatalogSnapshot, Row, plan_reconcile


logger = logging.getLogger(__name__)

_COLLECTION_OF: Dict[Type, str] = {
    Provider: "providers",
    Course: "courses",
    Item: "items",
}


class Reconciler:
    """Bring the stored catalog in line with one ScanTree."""

    def __init__(self, state: CatalogState, id_factory: Callable[[], str] = generate_id):
        self.state = state
        self.store = state.store
        self.id_factory = id_factory

    async def reconcile(self, tree: ScanTree, matches: Mapping[str, str]) -> SyncReport:
        """
        Create, update and delete rows so the catalog matches `tree`.

        Args:
            tree: Scan of the master folder
            matches: Top-level folder name -> category id

        Returns:
            SyncReport with created/updated/deleted counts and a diagnostic
            for every row refused by an invariant check
        """
        snapshot = await CatalogSnapshot.load(self.store)
        plan = plan_reconcile(snapshot, tree, matches, self.id_factory)
        report = SyncReport()
        if plan.is_empty:
            logger.debug("Catalog already matches the scanned tree")
            return report

        # Parent ids a new row of each type may reference
        parents: Dict[Type, Set[str]] = {
            Provider: set(plan.valid_categories),
            Course: set(plan.valid_providers),
            Item: set(plan.valid_courses),
        }

        for row in plan.creates:
            try:
                await self.state.create(row, parents[type(row)])
            except IntegrityViolationError as e:
                report.failed += 1
                report.diagnostics.append(
                    ScanDiagnostic(
                        kind=DiagnosticKind.INTEGRITY_VIOLATION,
                        path=_describe(row),
                        message=e.message,
                    )
                )
                continue

            report.created += 1
            if isinstance(row, Provider):
                parents[Course].add(row.id)
            elif isinstance(row, Course):
                parents[Item].add(row.id)

        for row in plan.updates:
            await self.store.put(_COLLECTION_OF[type(row)], row)
            report.updated += 1

        for collection, key in plan.deletes:
            if await self.store.delete(collection, key):
                report.deleted += 1

        logger.debug(
            "Reconciled catalog: %d created, %d updated, %d deleted, %d failed",
            report.created,
            report.updated,
            report.deleted,
            report.failed,
        )
        return report


def _describe(row: Row) -> str:
    if isinstance(row, Item):
        return row.filename
    return row.name

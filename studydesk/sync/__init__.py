"""Catalog reconciliation against the master folder."""

from .planner import CatalogSnapshot, ReconcilePlan, plan_reconcile
from .reconciler import Reconciler
from .service import SyncService

__all__ = [
    "CatalogSnapshot",
    "ReconcilePlan",
    "plan_reconcile",
    "Reconciler",
    "SyncService",
]

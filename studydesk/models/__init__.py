"""Data models for the Study Desk catalog."""

from .catalog import (
    Category,
    ConfigEntry,
    Course,
    CourseProgress,
    Item,
    MediaKind,
    Provider,
    RecentItem,
)
from .scan import (
    CategoryNode,
    CourseNode,
    DiagnosticKind,
    ProviderNode,
    ScanDiagnostic,
    ScannedFile,
    ScanResult,
    ScanTree,
)
from .study import OpenOutcome, OpenResult
from .sync import SyncReport

__all__ = [
    "Category",
    "ConfigEntry",
    "Course",
    "CourseProgress",
    "Item",
    "MediaKind",
    "Provider",
    "RecentItem",
    "CategoryNode",
    "CourseNode",
    "DiagnosticKind",
    "ProviderNode",
    "ScanDiagnostic",
    "ScannedFile",
    "ScanResult",
    "ScanTree",
    "OpenOutcome",
    "OpenResult",
    "SyncReport",
]

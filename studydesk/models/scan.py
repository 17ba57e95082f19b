# studydesk/models/scan.py
"""
In-memory value produced by one directory walk.

Nothing here is persisted: a ScanTree lives for the duration of a sync pass.
"""

from dataclasses import dataclass, field
from enum import Enum

from ..fs.capability import DirRef, FileRef
from .catalog import MediaKind


@dataclass
class ScannedFile:
    """A classified leaf file inside a course folder."""

    name: str
    kind: MediaKind
    ref: FileRef


@dataclass
class CourseNode:
    name: str
    ref: DirRef
    files: list[ScannedFile] = field(default_factory=list)
    readable: bool = True

    @property
    def path(self) -> str:
        return self.ref.path


@dataclass
class ProviderNode:
    name: str
    ref: DirRef
    courses: dict[str, CourseNode] = field(default_factory=dict)
    readable: bool = True


@dataclass
class CategoryNode:
    name: str
    ref: DirRef
    providers: dict[str, ProviderNode] = field(default_factory=dict)
    readable: bool = True


@dataclass
class ScanTree:
    root_name: str
    categories: dict[str, CategoryNode] = field(default_factory=dict)

    def file_count(self) -> int:
        return sum(
            len(course.files)
            for category in self.categories.values()
            for provider in category.providers.values()
            for course in provider.courses.values()
        )


class DiagnosticKind(str, Enum):
    BRANCH_FAILED = "branch_failed"
    UNMATCHED_FOLDER = "unmatched_folder"
    INTEGRITY_VIOLATION = "integrity_violation"
    NO_ROOT = "no_root"


@dataclass
class ScanDiagnostic:
    kind: DiagnosticKind
    path: str
    message: str


@dataclass
class ScanResult:
    tree: ScanTree
    diagnostics: list[ScanDiagnostic] = field(default_factory=list)

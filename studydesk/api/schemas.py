# studydesk/api/schemas.py
"""API request and response schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.catalog import Item
from ..models.scan import ScanDiagnostic, ScannedFile
from ..models.study import OpenResult
from ..models.sync import SyncReport


# =============================================================================
# Generic Responses
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    suggestion: Optional[str] = None


# =============================================================================
# Library Root
# =============================================================================


class SelectRootRequest(BaseModel):
    """Request to select the master folder."""
    path: str = Field(..., min_length=1)


class RootResponse(BaseModel):
    configured: bool
    name: Optional[str] = None


class PermissionResponse(BaseModel):
    granted: bool
    name: Optional[str] = None


# =============================================================================
# Sync
# =============================================================================


class DiagnosticResponse(BaseModel):
    kind: str
    path: str
    message: str

    @classmethod
    def from_diagnostic(cls, diagnostic: ScanDiagnostic) -> "DiagnosticResponse":
        return cls(
            kind=diagnostic.kind.value,
            path=diagnostic.path,
            message=diagnostic.message,
        )


class SyncReportResponse(BaseModel):
    """Counts and diagnostics of one reconciliation pass."""
    created: int
    updated: int
    deleted: int
    failed: int
    skipped_folders: List[str] = Field(default_factory=list)
    failed_branches: List[str] = Field(default_factory=list)
    diagnostics: List[DiagnosticResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: SyncReport) -> "SyncReportResponse":
        return cls(
            created=report.created,
            updated=report.updated,
            deleted=report.deleted,
            failed=report.failed,
            skipped_folders=report.skipped_folders,
            failed_branches=report.failed_branches,
            diagnostics=[DiagnosticResponse.from_diagnostic(d) for d in report.diagnostics],
        )


# =============================================================================
# Study
# =============================================================================


class FileResponse(BaseModel):
    name: str
    kind: str
    path: str

    @classmethod
    def from_file(cls, scanned: ScannedFile) -> "FileResponse":
        return cls(name=scanned.name, kind=scanned.kind.value, path=scanned.ref.path)


class OpenResponse(BaseModel):
    """Outcome of an open request."""
    token: int
    outcome: str
    render: bool
    item: Optional[Item] = None
    file: Optional[FileResponse] = None

    @classmethod
    def from_result(cls, result: OpenResult) -> "OpenResponse":
        return cls(
            token=result.token,
            outcome=result.outcome.value,
            render=result.should_render,
            item=result.item,
            file=FileResponse.from_file(result.file) if result.file else None,
        )


class PositionRequest(BaseModel):
    """Playback or page position of the open item."""
    position: float = Field(..., ge=0)
    token: Optional[int] = None


class PositionResponse(BaseModel):
    saved: bool


class CurrentResponse(BaseModel):
    token: int
    item: Optional[Item] = None
    file: Optional[FileResponse] = None
    position: float = 0

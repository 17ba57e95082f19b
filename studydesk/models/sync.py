# studydesk/models/sync.py

from pydantic import BaseModel, Field

from .scan import DiagnosticKind, ScanDiagnostic


class SyncReport(BaseModel):
    """
    Aggregate outcome of one reconciliation pass.

    `failed` counts rows whose creation was refused by an invariant check;
    they are counted as neither created nor updated.
    """

    created: int = 0
    updated: int = 0
    deleted: int = 0
    failed: int = 0
    diagnostics: list[ScanDiagnostic] = Field(default_factory=list)

    @property
    def skipped_folders(self) -> list[str]:
        return [
            d.path for d in self.diagnostics
            if d.kind == DiagnosticKind.UNMATCHED_FOLDER
        ]

    @property
    def failed_branches(self) -> list[str]:
        return [
            d.path for d in self.diagnostics
            if d.kind == DiagnosticKind.BRANCH_FAILED
        ]

    def counts(self) -> dict[str, int]:
        return {"created": self.created, "updated": self.updated, "deleted": self.deleted}

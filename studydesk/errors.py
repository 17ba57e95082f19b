# studydesk/errors.py
"""Error types with friendly, actionable messages."""

from typing import Optional


class StudyDeskError(Exception):
    """Base exception for all Study Desk errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class RootNotConfiguredError(StudyDeskError):
    """No master folder has been selected (or it failed re-validation)."""

    def __init__(self) -> None:
        super().__init__(
            "No master folder configured",
            "Select the master folder that holds your Category/Provider/Course folders",
        )


class PermissionDeniedError(StudyDeskError):
    """The root capability is unusable because access was not granted."""

    def __init__(self, root_name: str, mode: str = "read") -> None:
        self.root_name = root_name
        self.mode = mode
        super().__init__(
            f"Permission to {mode} '{root_name}' was not granted",
            "Grant access to the master folder again and retry the sync",
        )


class RootUnavailableError(StudyDeskError):
    """The root directory could not be listed at all."""

    def __init__(self, root_name: str, reason: str) -> None:
        self.root_name = root_name
        super().__init__(
            f"Master folder '{root_name}' is unavailable: {reason}",
            "Check that the drive is mounted and the folder still exists",
        )


class IntegrityViolationError(StudyDeskError):
    """A row references a parent that does not exist."""

    def __init__(self, entity: str, message: str) -> None:
        self.entity = entity
        super().__init__(f"Invariant violation ({entity}): {message}")


class StoreError(StudyDeskError):
    """Persistent store failure."""

    pass


class UnknownCollectionError(StoreError):
    """Collection name is not one of the catalog collections."""

    def __init__(self, collection: str) -> None:
        super().__init__(f"Unknown collection: {collection}")

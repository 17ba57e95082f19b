# studydesk/api/errors.py
"""Standardized API error responses."""

from fastapi import HTTPException, status

from ..errors import (
    IntegrityViolationError,
    PermissionDeniedError,
    RootNotConfiguredError,
    RootUnavailableError,
    StudyDeskError,
)


class APIError:
    """Helper class for standardized API error responses."""

    @staticmethod
    def not_found(resource: str, identifier: str = "") -> HTTPException:
        """Return a 404 Not Found error."""
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} not found: {identifier}"
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )

    @staticmethod
    def bad_request(message: str) -> HTTPException:
        """Return a 400 Bad Request error."""
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )

    @staticmethod
    def conflict(message: str) -> HTTPException:
        """Return a 409 Conflict error."""
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=message,
        )


def status_for(exc: StudyDeskError) -> int:
    """HTTP status for a domain error."""
    if isinstance(exc, PermissionDeniedError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, RootNotConfiguredError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, RootUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, IntegrityViolationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_500_INTERNAL_SERVER_ERROR

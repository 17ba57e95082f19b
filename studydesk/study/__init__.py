"""Opening items for study: live file lookup and session cancellation."""

from .guard import SessionGuard
from .resolver import LiveResolver
from .session import MediaEngine, StudySession

__all__ = ["SessionGuard", "LiveResolver", "MediaEngine", "StudySession"]

# studydesk/api/routes/__init__.py
"""API route modules."""

from . import catalog, library, study

__all__ = ["catalog", "library", "study"]

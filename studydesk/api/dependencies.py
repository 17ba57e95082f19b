# studydesk/api/dependencies.py
"""FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from ..catalog.state import CatalogState
from ..container import StudyDeskServices
from ..library.root import LibraryRoot
from ..study.session import StudySession
from ..sync.service import SyncService


def get_services(request: Request) -> StudyDeskServices:
    """Services built by the app lifespan (or injected by tests)."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Services are not initialized",
        )
    return services


ServicesDep = Annotated[StudyDeskServices, Depends(get_services)]


def get_library_root(services: ServicesDep) -> LibraryRoot:
    return services.root


def get_catalog_state(services: ServicesDep) -> CatalogState:
    return services.state


def get_sync_service(services: ServicesDep) -> SyncService:
    return services.sync


def get_study_session(services: ServicesDep) -> StudySession:
    return services.study


LibraryRootDep = Annotated[LibraryRoot, Depends(get_library_root)]
CatalogStateDep = Annotated[CatalogState, Depends(get_catalog_state)]
SyncServiceDep = Annotated[SyncService, Depends(get_sync_service)]
StudySessionDep = Annotated[StudySession, Depends(get_study_session)]

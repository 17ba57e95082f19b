# studydesk/api/routes/library.py
"""Master folder selection routes."""

from fastapi import APIRouter

from ..dependencies import LibraryRootDep
from ..schemas import PermissionResponse, RootResponse, SelectRootRequest


router = APIRouter()


@router.get("/root", response_model=RootResponse)
async def get_root(root: LibraryRootDep):
    """Get the active master folder."""
    return RootResponse(configured=root.has_root, name=root.name)


@router.put("/root", response_model=RootResponse)
async def select_root(request: SelectRootRequest, root: LibraryRootDep):
    """Select a local folder as the master folder."""
    capability = await root.select(request.path)
    return RootResponse(configured=True, name=capability.name)


@router.post("/root/permission", response_model=PermissionResponse)
async def request_permission(root: LibraryRootDep):
    """Ask again for access to the saved master folder."""
    granted = await root.request_permission()
    return PermissionResponse(granted=granted, name=root.name)

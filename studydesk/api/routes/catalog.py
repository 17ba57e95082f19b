# studydesk/api/routes/catalog.py
"""Catalog sync and browsing routes."""

from typing import Optional

from fastapi import APIRouter, Query

from ...models.catalog import Category, Course, CourseProgress, Item, Provider, RecentItem
from ..dependencies import CatalogStateDep, SyncServiceDep
from ..errors import APIError
from ..schemas import SyncReportResponse


router = APIRouter()


# =============================================================================
# Sync
# =============================================================================


@router.post("/sync", response_model=SyncReportResponse)
async def sync_catalog(sync: SyncServiceDep):
    """Reconcile the catalog with the master folder."""
    report = await sync.sync()
    return SyncReportResponse.from_report(report)


# =============================================================================
# Browsing
# =============================================================================


@router.get("/categories", response_model=list[Category])
async def list_categories(state: CatalogStateDep):
    return await state.get_categories()


@router.get("/categories/{category_id}/providers", response_model=list[Provider])
async def list_providers(category_id: str, state: CatalogStateDep):
    if await state.get_category(category_id) is None:
        raise APIError.not_found("Category", category_id)
    return await state.get_providers(category_id)


@router.get("/providers/{provider_id}/courses", response_model=list[Course])
async def list_courses(provider_id: str, state: CatalogStateDep):
    if await state.get_provider(provider_id) is None:
        raise APIError.not_found("Provider", provider_id)
    return await state.get_courses(provider_id)


@router.get("/courses/{course_id}/items", response_model=list[Item])
async def list_items(course_id: str, state: CatalogStateDep):
    if await state.get_course(course_id) is None:
        raise APIError.not_found("Course", course_id)
    return await state.get_items(course_id)


@router.get("/courses/{course_id}/progress", response_model=CourseProgress)
async def course_progress(course_id: str, state: CatalogStateDep):
    if await state.get_course(course_id) is None:
        raise APIError.not_found("Course", course_id)
    return await state.get_course_progress(course_id)


@router.get("/recent", response_model=list[RecentItem])
async def recent_items(
    state: CatalogStateDep,
    limit: int = Query(3, ge=1, le=50),
    category_id: Optional[str] = None,
):
    """Recently opened items, newest first."""
    return await state.get_recent_items(limit=limit, category_id=category_id)

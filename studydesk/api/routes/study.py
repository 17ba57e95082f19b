# studydesk/api/routes/study.py
"""Study view routes: open, track position, move on, close."""

from fastapi import APIRouter

from ..dependencies import StudySessionDep
from ..errors import APIError
from ..schemas import (
    CurrentResponse,
    FileResponse,
    OpenResponse,
    PositionRequest,
    PositionResponse,
)


router = APIRouter()


@router.post("/open/{item_id}", response_model=OpenResponse)
async def open_item(item_id: str, study: StudySessionDep):
    """Open an item, superseding any open still in progress."""
    result = await study.open_item(item_id)
    return OpenResponse.from_result(result)


@router.post("/position", response_model=PositionResponse)
async def save_position(request: PositionRequest, study: StudySessionDep):
    saved = await study.save_position(request.position, token=request.token)
    return PositionResponse(saved=saved)


@router.post("/next", response_model=OpenResponse)
async def open_next(study: StudySessionDep):
    """Open the next incomplete item of the current course."""
    if study.current_item is None:
        raise APIError.conflict("No item is open")

    result = await study.open_next()
    if result is None:
        raise APIError.not_found("Next incomplete item")
    return OpenResponse.from_result(result)


@router.post("/close", response_model=CurrentResponse)
async def close_session(study: StudySessionDep):
    await study.close()
    return CurrentResponse(token=study.guard.current)


@router.get("/current", response_model=CurrentResponse)
async def current_item(study: StudySessionDep):
    return CurrentResponse(
        token=study.guard.current,
        item=study.current_item,
        file=FileResponse.from_file(study.current_file) if study.current_file else None,
        position=study.position(),
    )

"""
Selection API - Bulk selection over the caller's current ranked view

The caller focuses a job (its ranked matches or its ranked applicants), then
toggles ids, selects all, and moves the selection to shortlisted or rejected.
Shortlist/reject also update the status of any matching applications.
"""

import logging
from fastapi import APIRouter, Depends
from workbridge.auth import CallerContext, get_current_caller
from workbridge.api.deps import effective_limit, get_board
from workbridge.config import Settings, get_settings
from workbridge.domain import ApplicationStatus, UserRole
from workbridge.errors import InvalidInput
from workbridge.schemas import (
    SelectionActionResponse,
    SelectionFocusRequest,
    SelectionResponse,
)
from workbridge.services.board import JobBoard, require_role
from workbridge.services.selection import SelectionRegistry, get_selection_registry

logger = logging.getLogger(__name__)
router = APIRouter()


def employer_caller(caller: CallerContext = Depends(get_current_caller)) -> CallerContext:
    require_role(caller, UserRole.EMPLOYER)
    return caller


@router.get("", response_model=SelectionResponse)
async def get_selection(
    caller: CallerContext = Depends(employer_caller),
    registry: SelectionRegistry = Depends(get_selection_registry),
):
    with registry.lock:
        return SelectionResponse(**registry.get(caller.user_id).to_dict())


@router.post("/focus", response_model=SelectionResponse)
async def focus_selection(
    request: SelectionFocusRequest,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(employer_caller),
    registry: SelectionRegistry = Depends(get_selection_registry),
    settings: Settings = Depends(get_settings),
):
    limit = effective_limit(request.limit, settings)
    if request.source == "applicants":
        candidates = await board.ranked_applicants(caller, request.job_id, limit)
    else:
        candidates = await board.rank_workers(caller, request.job_id, limit)

    with registry.lock:
        tracker = registry.get(caller.user_id)
        tracker.focus(request.job_id, [c.profile.id for c in candidates])
        return SelectionResponse(**tracker.to_dict())


@router.post("/toggle/{worker_id}", response_model=SelectionResponse)
async def toggle_selection(
    worker_id: str,
    caller: CallerContext = Depends(employer_caller),
    registry: SelectionRegistry = Depends(get_selection_registry),
):
    with registry.lock:
        tracker = registry.get(caller.user_id)
        tracker.toggle(worker_id)
        return SelectionResponse(**tracker.to_dict())


@router.post("/select-all", response_model=SelectionResponse)
async def select_all(
    caller: CallerContext = Depends(employer_caller),
    registry: SelectionRegistry = Depends(get_selection_registry),
):
    with registry.lock:
        tracker = registry.get(caller.user_id)
        tracker.select_all()
        return SelectionResponse(**tracker.to_dict())


@router.delete("", response_model=SelectionResponse)
async def clear_selection(
    caller: CallerContext = Depends(employer_caller),
    registry: SelectionRegistry = Depends(get_selection_registry),
):
    with registry.lock:
        tracker = registry.get(caller.user_id)
        tracker.clear()
        return SelectionResponse(**tracker.to_dict())


async def _mark_selection(
    status: ApplicationStatus,
    board: JobBoard,
    caller: CallerContext,
    registry: SelectionRegistry,
) -> SelectionActionResponse:
    with registry.lock:
        tracker = registry.get(caller.user_id)
        if tracker.job_id is None:
            raise InvalidInput("Focus a job before changing its selection")
        job_id = tracker.job_id
        moved = tracker.selected

    # Marks change only after storage accepts the status update.
    updated = 0
    if moved:
        updated = await board.set_applicant_status(caller, job_id, sorted(moved), status)

    with registry.lock:
        tracker = registry.get(caller.user_id)
        if tracker.job_id == job_id:
            if status == ApplicationStatus.SHORTLISTED:
                tracker.shortlist(moved)
            else:
                tracker.reject(moved)
        state = tracker.to_dict()
    logger.info(f"Job {job_id}: {len(moved)} selected workers marked {status.value}")
    return SelectionActionResponse(**state, moved=sorted(moved), applications_updated=updated)


@router.post("/shortlist", response_model=SelectionActionResponse)
async def shortlist_selection(
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(employer_caller),
    registry: SelectionRegistry = Depends(get_selection_registry),
):
    return await _mark_selection(ApplicationStatus.SHORTLISTED, board, caller, registry)


@router.post("/reject", response_model=SelectionActionResponse)
async def reject_selection(
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(employer_caller),
    registry: SelectionRegistry = Depends(get_selection_registry),
):
    return await _mark_selection(ApplicationStatus.REJECTED, board, caller, registry)

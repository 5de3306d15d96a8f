from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from workbridge.auth import CallerContext, get_current_caller
from workbridge.api.deps import effective_limit, get_board
from workbridge.api.matches import to_candidate_match
from workbridge.config import Settings, get_settings
from workbridge.schemas import (
    ApplicationResponse,
    ApplicationStatusResult,
    ApplicationStatusUpdate,
    MatchListResponse,
)
from workbridge.services.board import JobBoard

router = APIRouter()


@router.post(
    "/{job_id}/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_job(
    job_id: str,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    application = await board.apply(caller, job_id)
    return ApplicationResponse.model_validate(application)


@router.get("/{job_id}/applications", response_model=MatchListResponse)
async def list_applicants(
    job_id: str,
    limit: Optional[int] = Query(None, ge=0),
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
    settings: Settings = Depends(get_settings),
):
    """Applicants for one of the caller's jobs, ranked by match score."""
    candidates = await board.ranked_applicants(caller, job_id, effective_limit(limit, settings))
    return MatchListResponse(
        job_id=job_id,
        results=[to_candidate_match(c) for c in candidates],
        total=len(candidates),
    )


@router.post("/{job_id}/applications/status", response_model=ApplicationStatusResult)
async def update_applicant_status(
    job_id: str,
    update: ApplicationStatusUpdate,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    updated = await board.set_applicant_status(caller, job_id, update.worker_ids, update.status)
    return ApplicationStatusResult(job_id=job_id, status=update.status, updated=updated)

import logging
from fastapi import APIRouter, Depends, Query
from typing import Optional
from workbridge.auth import CallerContext, get_current_caller
from workbridge.api.deps import effective_limit, get_board
from workbridge.config import Settings, get_settings
from workbridge.schemas import (
    CandidateMatch,
    MatchListResponse,
    ScoreBreakdownResponse,
    WorkerProfileResponse,
)
from workbridge.services.board import JobBoard, RankedCandidate

logger = logging.getLogger(__name__)
router = APIRouter()


def to_candidate_match(candidate: RankedCandidate) -> CandidateMatch:
    application = candidate.application
    return CandidateMatch(
        rank=candidate.result.rank,
        score=candidate.result.score,
        worker=WorkerProfileResponse.model_validate(candidate.profile),
        breakdown=ScoreBreakdownResponse(**candidate.result.breakdown.to_dict()),
        application_id=application.id if application else None,
        application_status=application.status if application else None,
    )


@router.get("/{job_id}/matches", response_model=MatchListResponse)
async def match_workers(
    job_id: str,
    limit: Optional[int] = Query(None, ge=0),
    trade: Optional[str] = Query(None, max_length=200),
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
    settings: Settings = Depends(get_settings),
):
    """Workers ranked for one of the caller's jobs (best first)."""
    candidates = await board.rank_workers(caller, job_id, effective_limit(limit, settings), trade=trade)
    logger.debug(f"Job {job_id}: returning {len(candidates)} ranked workers")
    return MatchListResponse(
        job_id=job_id,
        results=[to_candidate_match(c) for c in candidates],
        total=len(candidates),
    )

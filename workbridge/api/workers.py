from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from workbridge.auth import CallerContext, get_current_caller
from workbridge.api.deps import effective_limit, get_board
from workbridge.config import Settings, get_settings
from workbridge.schemas import (
    JobRecommendation,
    JobResponse,
    RecommendationListResponse,
    ScoreBreakdownResponse,
    WorkerListResponse,
    WorkerProfileResponse,
    WorkerProfileUpdate,
)
from workbridge.services.board import JobBoard

router = APIRouter()


@router.get("", response_model=WorkerListResponse)
async def search_workers(
    trade: Optional[str] = Query(None, max_length=200),
    country: Optional[str] = Query(None, max_length=200),
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    workers = await board.search_workers(caller, trade=trade, country=country)
    return WorkerListResponse(
        workers=[WorkerProfileResponse.model_validate(w) for w in workers],
        total=len(workers),
    )


@router.get("/me", response_model=WorkerProfileResponse)
async def get_my_profile(
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    profile = await board.my_profile(caller)

    if not profile:
        raise HTTPException(status_code=404, detail="Worker profile not found")

    return WorkerProfileResponse.model_validate(profile)


@router.put("/me", response_model=WorkerProfileResponse)
async def save_my_profile(
    update: WorkerProfileUpdate,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    profile = await board.save_my_profile(caller, update.model_dump())
    return WorkerProfileResponse.model_validate(profile)


@router.get("/me/recommendations", response_model=RecommendationListResponse)
async def recommend_jobs(
    limit: Optional[int] = Query(None, ge=0),
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
    settings: Settings = Depends(get_settings),
):
    results = await board.recommend_jobs(caller, effective_limit(limit, settings))

    jobs = {job.id: job for job in await board.search_jobs()}
    recommendations = [
        JobRecommendation(
            rank=r.rank,
            score=r.score,
            job=JobResponse.model_validate(jobs[r.job_id]),
            breakdown=ScoreBreakdownResponse(**r.breakdown.to_dict()),
        )
        for r in results
        if r.job_id in jobs
    ]
    return RecommendationListResponse(results=recommendations, total=len(recommendations))

from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from workbridge.auth import CallerContext, get_current_caller
from workbridge.api.deps import get_board
from workbridge.domain import UserRole
from workbridge.schemas import (
    JobCreate,
    JobDraftRequest,
    JobDraftResponse,
    JobListResponse,
    JobResponse,
    JobStatusUpdate,
    SampleJobsRequest,
    SampleJobsResponse,
)
from workbridge.services.board import JobBoard, require_role
from workbridge.services.enrichment import JobEnricher, get_enricher

router = APIRouter()


@router.get("", response_model=JobListResponse)
async def search_jobs(
    search: Optional[str] = Query(None, max_length=200),
    board: JobBoard = Depends(get_board),
):
    jobs = await board.search_jobs(search)
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        total=len(jobs),
    )


@router.get("/mine", response_model=JobListResponse)
async def my_jobs(
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    jobs = await board.employer_jobs(caller)
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        total=len(jobs),
    )


@router.post("/draft", response_model=JobDraftResponse)
async def draft_job(
    request: JobDraftRequest,
    caller: CallerContext = Depends(get_current_caller),
    enricher: JobEnricher = Depends(get_enricher),
):
    require_role(caller, UserRole.EMPLOYER)
    draft = await enricher.draft_job_details(request.title, request.company)
    return JobDraftResponse(description=draft.description, required_skills=draft.required_skills)


@router.post("/generate", response_model=SampleJobsResponse)
async def generate_jobs(
    request: SampleJobsRequest,
    _: CallerContext = Depends(get_current_caller),
    enricher: JobEnricher = Depends(get_enricher),
):
    jobs = await enricher.generate_sample_jobs(request.query, request.count)
    return SampleJobsResponse(jobs=[asdict(job) for job in jobs], query=request.query)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    job = await board.get_job(caller, job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return JobResponse.model_validate(job)


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job: JobCreate,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    created = await board.create_job(caller, job.model_dump())
    return JobResponse.model_validate(created)


@router.patch("/{job_id}/status", response_model=JobResponse)
async def update_job_status(
    job_id: str,
    update: JobStatusUpdate,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    job = await board.set_job_status(caller, job_id, update.status)
    return JobResponse.model_validate(job)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: str,
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    await board.delete_job(caller, job_id)

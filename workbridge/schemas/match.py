from pydantic import BaseModel
from typing import Optional

from workbridge.domain import ApplicationStatus
from workbridge.schemas.job import JobResponse
from workbridge.schemas.worker import WorkerProfileResponse


class ScoreBreakdownResponse(BaseModel):
    skill_overlap: float
    experience: float
    locale: float
    matched_skills: list[str]
    missing_skills: list[str]
    weights: dict[str, float]
    score: int
    reasons: list[str]


class CandidateMatch(BaseModel):
    rank: int
    score: int
    worker: WorkerProfileResponse
    breakdown: ScoreBreakdownResponse
    application_id: Optional[str] = None
    application_status: Optional[ApplicationStatus] = None


class MatchListResponse(BaseModel):
    job_id: str
    results: list[CandidateMatch]
    total: int


class JobRecommendation(BaseModel):
    rank: int
    score: int
    job: JobResponse
    breakdown: ScoreBreakdownResponse


class RecommendationListResponse(BaseModel):
    results: list[JobRecommendation]
    total: int

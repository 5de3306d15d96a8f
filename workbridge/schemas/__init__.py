from workbridge.schemas.job import (
    JobCreate,
    JobStatusUpdate,
    JobResponse,
    JobListResponse,
    JobDraftRequest,
    JobDraftResponse,
    SampleJobsRequest,
    SampleJobsResponse,
)
from workbridge.schemas.worker import WorkerProfileUpdate, WorkerProfileResponse, WorkerListResponse
from workbridge.schemas.match import (
    ScoreBreakdownResponse,
    CandidateMatch,
    MatchListResponse,
    JobRecommendation,
    RecommendationListResponse,
)
from workbridge.schemas.application import (
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationStatusResult,
)
from workbridge.schemas.selection import (
    SelectionFocusRequest,
    SelectionResponse,
    SelectionActionResponse,
)

__all__ = [
    "JobCreate",
    "JobStatusUpdate",
    "JobResponse",
    "JobListResponse",
    "JobDraftRequest",
    "JobDraftResponse",
    "SampleJobsRequest",
    "SampleJobsResponse",
    "WorkerProfileUpdate",
    "WorkerProfileResponse",
    "WorkerListResponse",
    "ScoreBreakdownResponse",
    "CandidateMatch",
    "MatchListResponse",
    "JobRecommendation",
    "RecommendationListResponse",
    "ApplicationResponse",
    "ApplicationStatusUpdate",
    "ApplicationStatusResult",
    "SelectionFocusRequest",
    "SelectionResponse",
    "SelectionActionResponse",
]

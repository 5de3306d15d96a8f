from pydantic import BaseModel, Field

from workbridge.domain import ApplicationStatus


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    worker_id: str
    status: ApplicationStatus

    class Config:
        from_attributes = True


class ApplicationStatusUpdate(BaseModel):
    worker_ids: list[str] = Field(..., min_length=1, max_length=500)
    status: ApplicationStatus


class ApplicationStatusResult(BaseModel):
    job_id: str
    status: ApplicationStatus
    updated: int

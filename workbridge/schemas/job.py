from pydantic import BaseModel, Field

from workbridge.domain import JobStatus


class JobBase(BaseModel):
    employer_name: str = ""
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    required_skills: list[str] = Field(default_factory=list)
    location: str = ""
    country: str = ""
    salary_min: int = Field(0, ge=0)
    salary_max: int = Field(0, ge=0)


class JobCreate(JobBase):
    status: JobStatus = JobStatus.ACTIVE


class JobStatusUpdate(BaseModel):
    status: JobStatus


class JobResponse(JobBase):
    id: str
    employer_id: str
    status: JobStatus

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    total: int


class JobDraftRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field("", max_length=200)


class JobDraftResponse(BaseModel):
    description: str
    required_skills: list[str]


class SampleJobsRequest(BaseModel):
    query: str = Field("construction, plumbing, and electrical jobs", min_length=1, max_length=200)
    count: int = Field(5, ge=1, le=10)


class SampleJobsResponse(BaseModel):
    jobs: list[JobBase]
    query: str

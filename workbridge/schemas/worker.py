from pydantic import BaseModel, Field
from typing import Optional


class WorkerProfileUpdate(BaseModel):
    full_name: str = ""
    trade_or_skill: str = Field(..., min_length=1, max_length=500)
    experience_years: int = Field(..., ge=0)
    country_of_origin: str = ""
    experience_in_country: int = Field(0, ge=0)
    summary: Optional[str] = None
    cv_url: Optional[str] = None


class WorkerProfileResponse(WorkerProfileUpdate):
    id: str
    user_id: str
    composite_score: Optional[int] = None

    class Config:
        from_attributes = True


class WorkerListResponse(BaseModel):
    workers: list[WorkerProfileResponse]
    total: int

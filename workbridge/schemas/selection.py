from pydantic import BaseModel, Field
from typing import Literal, Optional


class SelectionFocusRequest(BaseModel):
    job_id: str = Field(..., min_length=1)
    source: Literal["matches", "applicants"] = "matches"
    limit: Optional[int] = Field(None, ge=0)


class SelectionResponse(BaseModel):
    job_id: Optional[str] = None
    displayed: list[str]
    selected: list[str]
    shortlisted: list[str]
    rejected: list[str]
    all_selected: bool


class SelectionActionResponse(SelectionResponse):
    moved: list[str]
    applications_updated: int

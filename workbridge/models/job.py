"""
Job Model - SQLAlchemy ORM model for job postings

Stores jobs posted by employers. Rows are converted to validated
JobPosting records (workbridge.domain) before any matching happens.

Status Flow (any → any):
    Active ⇄ On Hold ⇄ Closed
"""

from sqlalchemy import Column, String, Integer, Text, DateTime, JSON
from sqlalchemy.sql import func
from workbridge.database import Base
from workbridge.domain import JobPosting
import uuid


class Job(Base):
    """
    Job posting entity.

    Attributes:
        id: UUID primary key
        employer_id: user_id of the owning employer (indexed)
        employer_name: Employer display name
        title: Job title (max 500 chars)
        description: Full job description text
        required_skills: JSON list of skill tags
        status: Active / On Hold / Closed (indexed)
        location: City / region
        country: Country of the job
        salary_min/max: Salary range
    """

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    employer_id = Column(String, nullable=False, index=True)
    employer_name = Column(String(500), nullable=False, default="")
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    required_skills = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="Active", index=True)
    location = Column(String(500), nullable=False, default="")
    country = Column(String(200), nullable=False, default="")
    salary_min = Column(Integer, nullable=False, default=0)
    salary_max = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def to_posting(self) -> JobPosting:
        return JobPosting(
            id=self.id,
            employer_id=self.employer_id,
            employer_name=self.employer_name or "",
            title=self.title,
            description=self.description or "",
            required_skills=tuple(self.required_skills or ()),
            status=self.status,
            location=self.location or "",
            country=self.country or "",
            salary_min=self.salary_min or 0,
            salary_max=self.salary_max or 0,
        )

    def apply(self, posting: JobPosting) -> None:
        """Copy a validated posting onto this row."""
        self.employer_id = posting.employer_id
        self.employer_name = posting.employer_name
        self.title = posting.title
        self.description = posting.description
        self.required_skills = list(posting.required_skills)
        self.status = posting.status.value
        self.location = posting.location
        self.country = posting.country
        self.salary_min = posting.salary_min
        self.salary_max = posting.salary_max

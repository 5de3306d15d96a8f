"""
Domain Records - Fixed-shape, validated job board entities

Records arriving from storage or the API are converted into these frozen
dataclasses before any scoring or ranking happens. Construction validates
every invariant and raises InvalidInput, so an instance in hand is always
well-formed.

Invariants:
    JobPosting:    title non-empty, 0 <= salary_min <= salary_max
    SkillPassport: trade non-empty, 0 <= experience_in_country <= experience_years
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Tuple

from workbridge.errors import InvalidInput


class JobStatus(str, Enum):
    """Job lifecycle. Any status may move to any other."""

    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    CLOSED = "Closed"


class ApplicationStatus(str, Enum):
    SUBMITTED = "Submitted"
    VIEWED = "Viewed"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"


class UserRole(str, Enum):
    WORKER = "WORKER"
    EMPLOYER = "EMPLOYER"


def normalize_key(text: str) -> str:
    """Case-insensitive comparison key for trades, skills and countries."""
    return " ".join(text.split()).lower()


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _require_text(value: Any, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{name} must be a non-empty string")


def _require_str(record: Any, *names: str, optional: bool = False) -> None:
    for name in names:
        value = getattr(record, name)
        if optional and value is None:
            continue
        if not isinstance(value, str):
            raise InvalidInput(f"{name} must be a string")


def _dedupe_skills(skills: Any) -> Tuple[str, ...]:
    if isinstance(skills, str) or skills is None:
        raise InvalidInput("required_skills must be a list of strings")

    seen = set()
    result = []
    for skill in skills:
        if not isinstance(skill, str):
            raise InvalidInput("required_skills must be a list of strings")
        cleaned = " ".join(skill.split())
        key = cleaned.lower()
        if cleaned and key not in seen:
            seen.add(key)
            result.append(cleaned)
    return tuple(result)


@dataclass(frozen=True)
class JobPosting:
    """
    A job posted by an employer.

    Attributes:
        id: Job identifier
        employer_id: user_id of the owning employer
        employer_name: Display name shown on listings
        title: Job title (non-empty)
        description: Free-text description
        required_skills: Ordered skill tags, de-duplicated case-insensitively
        status: Lifecycle status (Active / On Hold / Closed)
        location: City / region string
        country: Country the job is located in
        salary_min/max: Salary range, both >= 0 and min <= max
    """

    id: str
    employer_id: str
    employer_name: str
    title: str
    description: str = ""
    required_skills: Tuple[str, ...] = ()
    status: JobStatus = JobStatus.ACTIVE
    location: str = ""
    country: str = ""
    salary_min: int = 0
    salary_max: int = 0

    def __post_init__(self):
        object.__setattr__(self, "required_skills", _dedupe_skills(self.required_skills))
        try:
            object.__setattr__(self, "status", JobStatus(self.status))
        except ValueError:
            raise InvalidInput(f"Unknown job status: {self.status!r}")
        self.check()

    def check(self) -> None:
        """Raise InvalidInput if any invariant is violated."""
        _require_text(self.id, "id")
        _require_text(self.employer_id, "employer_id")
        _require_text(self.title, "title")
        _require_str(self, "employer_name", "description", "location", "country")
        if not _is_count(self.salary_min) or not _is_count(self.salary_max):
            raise InvalidInput("salary_min and salary_max must be non-negative integers")
        if self.salary_min > self.salary_max:
            raise InvalidInput(
                f"salary_min ({self.salary_min}) exceeds salary_max ({self.salary_max})"
            )

    @property
    def is_public(self) -> bool:
        return self.status == JobStatus.ACTIVE

    def with_status(self, status: JobStatus) -> "JobPosting":
        return replace(self, status=status)


@dataclass(frozen=True)
class SkillPassport:
    """
    A worker's profile: trade, experience and locale history.

    composite_score is transient. It is filled in per search and never
    treated as ground truth.
    """

    id: str
    user_id: str
    full_name: str
    trade_or_skill: str
    experience_years: int
    country_of_origin: str
    experience_in_country: int = 0
    summary: Optional[str] = None
    cv_url: Optional[str] = None
    composite_score: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        self.check()

    def check(self) -> None:
        """Raise InvalidInput if any invariant is violated."""
        _require_text(self.id, "id")
        _require_text(self.user_id, "user_id")
        _require_text(self.trade_or_skill, "trade_or_skill")
        _require_str(self, "full_name", "country_of_origin")
        _require_str(self, "summary", "cv_url", optional=True)
        if not _is_count(self.experience_years):
            raise InvalidInput("experience_years must be a non-negative integer")
        if not _is_count(self.experience_in_country):
            raise InvalidInput("experience_in_country must be a non-negative integer")
        if self.experience_in_country > self.experience_years:
            raise InvalidInput(
                f"experience_in_country ({self.experience_in_country}) exceeds "
                f"experience_years ({self.experience_years})"
            )
        if self.composite_score is not None and not 0 <= self.composite_score <= 100:
            raise InvalidInput("composite_score must be between 0 and 100")

    def with_score(self, score: int) -> "SkillPassport":
        return replace(self, composite_score=score)


@dataclass(frozen=True)
class JobApplication:
    id: str
    job_id: str
    worker_id: str
    status: ApplicationStatus = ApplicationStatus.SUBMITTED

    def __post_init__(self):
        try:
            object.__setattr__(self, "status", ApplicationStatus(self.status))
        except ValueError:
            raise InvalidInput(f"Unknown application status: {self.status!r}")

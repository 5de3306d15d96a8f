"""
Shared fixtures and record factories for the test suite.
"""

import pytest
from jose import jwt

from workbridge.auth import CallerContext
from workbridge.config import get_settings
from workbridge.domain import JobPosting, SkillPassport, UserRole


def make_job(**overrides) -> JobPosting:
    fields = dict(
        id="job-1",
        employer_id="employer-1",
        employer_name="Acme Build",
        title="Electrician",
        description="Commercial fit-out work",
        required_skills=("wiring", "panel install"),
        location="Austin",
        country="USA",
        salary_min=50000,
        salary_max=70000,
    )
    fields.update(overrides)
    return JobPosting(**fields)


def make_worker(**overrides) -> SkillPassport:
    fields = dict(
        id="worker-1",
        user_id="user-1",
        full_name="Ana Lopez",
        trade_or_skill="Electrician",
        experience_years=5,
        country_of_origin="USA",
        experience_in_country=5,
    )
    fields.update(overrides)
    return SkillPassport(**fields)


def make_token(user_id: str, role: str = "WORKER", section: str = "user_metadata", **claims) -> str:
    settings = get_settings()
    payload = {"sub": user_id, "aud": settings.identity_jwt_audience, section: {"role": role}}
    payload.update(claims)
    return jwt.encode(payload, settings.identity_jwt_secret, algorithm=settings.identity_jwt_algorithm)


def auth_headers(user_id: str, role: str = "WORKER") -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture
def employer():
    return CallerContext(user_id="employer-1", role=UserRole.EMPLOYER)


@pytest.fixture
def other_employer():
    return CallerContext(user_id="employer-2", role=UserRole.EMPLOYER)


@pytest.fixture
def worker_caller():
    return CallerContext(user_id="user-1", role=UserRole.WORKER)

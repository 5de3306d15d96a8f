"""
Tests for the storage backends.

Every behavioural test runs against both SQLStorage (SQLite file via
aiosqlite) and InMemoryStorage so the two stay in step.
"""
import pytest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from conftest import make_job, make_worker
from workbridge.database import init_db
from workbridge.domain import ApplicationStatus, JobStatus
from workbridge.errors import CollaboratorUnavailable, InvalidInput
from workbridge.services.storage import (
    InMemoryStorage,
    JobFilter,
    ProfileFilter,
    SQLStorage,
)

BACKENDS = ["sql", "memory"]


@asynccontextmanager
async def open_storage(kind, tmp_path):
    if kind == "memory":
        yield InMemoryStorage()
        return

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'storage.db'}")
    await init_db(engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_factory() as session:
            yield SQLStorage(session)
    finally:
        await engine.dispose()


@pytest.mark.parametrize("kind", BACKENDS)
class TestJobStorage:
    """Job CRUD and search."""

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            saved = await storage.upsert_job(make_job())
            fetched = await storage.get_job("job-1")

            assert saved == fetched
            assert fetched.required_skills == ("wiring", "panel install")
            assert await storage.get_job("missing") is None

    @pytest.mark.asyncio
    async def test_upsert_replaces_existing(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.upsert_job(make_job())
            await storage.upsert_job(make_job(status=JobStatus.CLOSED))

            jobs = await storage.list_jobs()
            assert len(jobs) == 1
            assert jobs[0].status == JobStatus.CLOSED

    @pytest.mark.asyncio
    async def test_list_jobs_filters(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.upsert_job(make_job(id="a", title="Electrician"))
            await storage.upsert_job(make_job(id="b", title="Electrical Helper", status=JobStatus.ON_HOLD))
            await storage.upsert_job(make_job(
                id="c", title="Plumber", description="", required_skills=("pipefitting",),
                employer_id="employer-2",
            ))

            active = await storage.list_jobs(JobFilter(status=JobStatus.ACTIVE))
            electric = await storage.list_jobs(JobFilter(query="ELECTRIC"))
            by_skill = await storage.list_jobs(JobFilter(query="pipe"))
            mine = await storage.list_jobs(JobFilter(employer_id="employer-2"))

            assert sorted(j.id for j in active) == ["a", "c"]
            assert sorted(j.id for j in electric) == ["a", "b"]
            assert [j.id for j in by_skill] == ["c"]
            assert [j.id for j in mine] == ["c"]

    @pytest.mark.asyncio
    async def test_delete_job_removes_applications(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.upsert_job(make_job())
            await storage.add_application("job-1", "worker-1")

            assert await storage.delete_job("job-1") is True
            assert await storage.delete_job("job-1") is False
            assert await storage.list_applications() == []

    @pytest.mark.asyncio
    async def test_invalid_job_rejected(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            job = make_job()
            object.__setattr__(job, "title", "")

            with pytest.raises(InvalidInput):
                await storage.upsert_job(job)


@pytest.mark.parametrize("kind", BACKENDS)
class TestProfileStorage:
    """Worker profile persistence and filtering."""

    @pytest.mark.asyncio
    async def test_upsert_and_lookup_by_user(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.upsert_worker_profile(make_worker(summary="wiring"))

            by_id = await storage.get_worker_profile("worker-1")
            by_user = await storage.get_worker_profile_for_user("user-1")

            assert by_id == by_user
            assert by_id.summary == "wiring"
            assert await storage.get_worker_profile_for_user("nobody") is None

    @pytest.mark.asyncio
    async def test_one_profile_per_user(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.upsert_worker_profile(make_worker(id="w1"))

            with pytest.raises(InvalidInput):
                await storage.upsert_worker_profile(make_worker(id="w2"))

    @pytest.mark.asyncio
    async def test_filters_and_order(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.upsert_worker_profile(make_worker(id="w3", user_id="u3", trade_or_skill="Electrician"))
            await storage.upsert_worker_profile(make_worker(
                id="w1", user_id="u1", trade_or_skill="Master Electrician",
                country_of_origin="Poland", experience_years=4, experience_in_country=1,
            ))
            await storage.upsert_worker_profile(make_worker(
                id="w2", user_id="u2", trade_or_skill="Electrician",
                country_of_origin="Canada", experience_years=4, experience_in_country=0,
            ))
            await storage.upsert_worker_profile(make_worker(id="w4", user_id="u4", trade_or_skill="Welder"))

            everyone = await storage.list_worker_profiles()
            electricians = await storage.list_worker_profiles(ProfileFilter(trade="electric"))
            in_usa = await storage.list_worker_profiles(ProfileFilter(trade="electric", country="usa"))

            assert [p.id for p in everyone] == ["w1", "w2", "w3", "w4"]
            assert [p.id for p in electricians] == ["w1", "w2", "w3"]
            # Poland with in-country experience passes the inclusive-OR filter
            assert [p.id for p in in_usa] == ["w1", "w3"]


class TestFilterParity:
    """Both backends answer literal, whitespace-insensitive text filters the same way."""

    PROFILE_CASES = [
        ("_", []),
        ("%", []),
        ("master  electrician", ["w1"]),
        ("  ELECTRICIAN ", ["w1", "w2"]),
        ("electrician master", []),
        ("ma\u00eetre", ["w3"]),
    ]

    JOB_CASES = [
        ("%", []),
        ("a_b", []),
        ("100%", ["b"]),
        ("panel   install", ["a"]),
        ("install panel", []),
        ("caf\u00c9", ["c"]),
    ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("trade,expected", PROFILE_CASES)
    async def test_trade_filter(self, tmp_path, trade, expected):
        results = {}
        for kind in BACKENDS:
            (tmp_path / kind).mkdir()
            async with open_storage(kind, tmp_path / kind) as storage:
                await storage.upsert_worker_profile(make_worker(id="w1", user_id="u1", trade_or_skill="Master Electrician"))
                await storage.upsert_worker_profile(make_worker(id="w2", user_id="u2", trade_or_skill="Electrician"))
                await storage.upsert_worker_profile(make_worker(id="w3", user_id="u3", trade_or_skill="Ma\u00eetre Soudeur"))
                profiles = await storage.list_worker_profiles(ProfileFilter(trade=trade))
                results[kind] = [p.id for p in profiles]

        assert results == {"sql": expected, "memory": expected}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query,expected", JOB_CASES)
    async def test_job_query(self, tmp_path, query, expected):
        results = {}
        for kind in BACKENDS:
            (tmp_path / kind).mkdir()
            async with open_storage(kind, tmp_path / kind) as storage:
                await storage.upsert_job(make_job(id="a", title="Electrician"))
                await storage.upsert_job(make_job(id="b", title="Roofer", description="100% outdoor", required_skills=("shingles",)))
                await storage.upsert_job(make_job(id="c", title="Cook", description="", required_skills=("Caf\u00e9 line",)))
                jobs = await storage.list_jobs(JobFilter(query=query))
                results[kind] = sorted(j.id for j in jobs)

        assert results == {"sql": expected, "memory": expected}


@pytest.mark.parametrize("kind", BACKENDS)
class TestApplicationStorage:
    """Applications and their status updates."""

    @pytest.mark.asyncio
    async def test_add_and_list(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            application = await storage.add_application("job-1", "worker-1")
            await storage.add_application("job-2", "worker-1")

            assert application.status == ApplicationStatus.SUBMITTED
            assert [a.id for a in await storage.list_applications("job-1")] == [application.id]
            assert len(await storage.list_applications()) == 2

    @pytest.mark.asyncio
    async def test_duplicate_application_rejected(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.add_application("job-1", "worker-1")

            with pytest.raises(InvalidInput):
                await storage.add_application("job-1", "worker-1")

    @pytest.mark.asyncio
    async def test_set_status(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            await storage.add_application("job-1", "w1")
            await storage.add_application("job-1", "w2")
            await storage.add_application("job-2", "w1")

            changed = await storage.set_application_status("job-1", ["w1", "missing"], ApplicationStatus.SHORTLISTED)
            statuses = {
                (a.job_id, a.worker_id): a.status for a in await storage.list_applications()
            }

            assert changed == 1
            assert statuses[("job-1", "w1")] == ApplicationStatus.SHORTLISTED
            assert statuses[("job-1", "w2")] == ApplicationStatus.SUBMITTED
            assert statuses[("job-2", "w1")] == ApplicationStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_set_status_with_no_workers(self, kind, tmp_path):
        async with open_storage(kind, tmp_path) as storage:
            assert await storage.set_application_status("job-1", [], ApplicationStatus.REJECTED) == 0


class TestStorageFailures:
    """Backend failures surface as CollaboratorUnavailable."""

    @pytest.mark.asyncio
    async def test_query_failure(self):
        session = AsyncMock()
        session.execute.side_effect = SQLAlchemyError("database is locked")

        with pytest.raises(CollaboratorUnavailable):
            await SQLStorage(session).list_jobs()

    @pytest.mark.asyncio
    async def test_write_failure_rolls_back(self):
        session = AsyncMock()
        session.add = lambda row: None
        session.get.return_value = None
        session.commit.side_effect = SQLAlchemyError("disk I/O error")

        with pytest.raises(CollaboratorUnavailable):
            await SQLStorage(session).upsert_job(make_job())

        session.rollback.assert_awaited_once()

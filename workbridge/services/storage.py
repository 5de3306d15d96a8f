"""
Storage Collaborator - Persistence boundary for jobs, profiles and applications

The matching core never talks to a database directly; it goes through a
StorageBackend. Every call is atomic and either returns a value or raises a
single CollaboratorUnavailable. There is no retry at this layer.

Provider Options:
    - SQLStorage: SQLAlchemy async session (SQLite via aiosqlite by default)
    - InMemoryStorage: Profile/Job indexes in process (development and tests)

Both backends apply the same filter semantics (see services/indexes.py):
case-insensitive substring matching, and the inclusive-OR country filter.

Key Classes:
    - JobFilter / ProfileFilter: query parameters
    - StorageBackend: abstract interface
    - SQLStorage / InMemoryStorage: implementations
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

from sqlalchemy import String, and_, cast, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workbridge.domain import (
    ApplicationStatus,
    JobApplication,
    JobPosting,
    JobStatus,
    SkillPassport,
    normalize_key,
)
from workbridge.errors import CollaboratorUnavailable, InvalidInput
from workbridge.models import Application, Job, WorkerProfile
from workbridge.services.indexes import (
    JobIndex,
    ProfileIndex,
    all_of,
    job_matches_query,
    profile_matches_country,
    profile_matches_trade,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobFilter:
    status: Optional[JobStatus] = None
    employer_id: Optional[str] = None
    query: Optional[str] = None


@dataclass(frozen=True)
class ProfileFilter:
    trade: Optional[str] = None
    country: Optional[str] = None
    user_id: Optional[str] = None


class StorageBackend(ABC):
    """
    Abstract storage boundary.

    Expected lookups (get_*) return None on a miss; only backend failures
    raise (CollaboratorUnavailable).
    """

    @abstractmethod
    async def list_jobs(self, job_filter: JobFilter = JobFilter()) -> List[JobPosting]:
        pass

    @abstractmethod
    async def get_job(self, job_id: str) -> Optional[JobPosting]:
        pass

    @abstractmethod
    async def upsert_job(self, job: JobPosting) -> JobPosting:
        pass

    @abstractmethod
    async def delete_job(self, job_id: str) -> bool:
        """Delete a job (and its applications). Returns False if it did not exist."""
        pass

    @abstractmethod
    async def list_worker_profiles(self, profile_filter: ProfileFilter = ProfileFilter()) -> List[SkillPassport]:
        pass

    @abstractmethod
    async def get_worker_profile(self, profile_id: str) -> Optional[SkillPassport]:
        pass

    @abstractmethod
    async def upsert_worker_profile(self, profile: SkillPassport) -> SkillPassport:
        pass

    @abstractmethod
    async def add_application(self, job_id: str, worker_id: str) -> JobApplication:
        """Record an application. Raises InvalidInput if the worker already applied."""
        pass

    @abstractmethod
    async def list_applications(self, job_id: Optional[str] = None) -> List[JobApplication]:
        pass

    @abstractmethod
    async def set_application_status(
        self,
        job_id: str,
        worker_ids: Sequence[str],
        status: ApplicationStatus,
    ) -> int:
        """Update the status of the given workers' applications. Returns rows changed."""
        pass

    async def get_worker_profile_for_user(self, user_id: str) -> Optional[SkillPassport]:
        profiles = await self.list_worker_profiles(ProfileFilter(user_id=user_id))
        return profiles[0] if profiles else None


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _prefilter_words(text: Optional[str]) -> List[str]:
    """
    Words usable in a LIKE pre-filter, or [] when SQL cannot pre-filter safely.

    SQLite only case-folds ASCII, and JSON-encoded skills escape quotes,
    backslashes, control and non-ASCII characters, so such needles skip the
    SQL pre-filter and rely on the in-Python predicates alone.
    """
    key = normalize_key(text or "")
    if not key.isascii() or not key.isprintable() or '"' in key or "\\" in key:
        return []
    return key.split()


def _contains_words(column, words: List[str]):
    """Every word occurs in the column (case-insensitive, wildcards escaped)."""
    return and_(*[column.ilike(f"%{_escape_like(word)}%", escape="\\") for word in words])


def _unavailable(operation: str, error: Exception) -> CollaboratorUnavailable:
    logger.error(f"Storage {operation} failed: {error}")
    return CollaboratorUnavailable(f"Storage unavailable during {operation}")


class SQLStorage(StorageBackend):
    """
    SQLAlchemy-backed storage.

    Attributes:
        session: Async session; each mutating call commits (or rolls back)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_jobs(self, job_filter: JobFilter = JobFilter()) -> List[JobPosting]:
        query = select(Job)

        if job_filter.status:
            query = query.where(Job.status == job_filter.status.value)

        if job_filter.employer_id:
            query = query.where(Job.employer_id == job_filter.employer_id)

        words = _prefilter_words(job_filter.query)
        if words:
            query = query.where(or_(
                _contains_words(Job.title, words),
                _contains_words(Job.description, words),
                _contains_words(cast(Job.required_skills, String), words),
            ))

        query = query.order_by(Job.created_at.desc(), Job.id)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise _unavailable("list_jobs", e)

        # The LIKE pre-filter over-matches (words in any order); re-apply exact semantics
        matches = job_matches_query(job_filter.query)
        return [job for job in (row.to_posting() for row in result.scalars().all()) if matches(job)]

    async def get_job(self, job_id: str) -> Optional[JobPosting]:
        try:
            row = await self.session.get(Job, job_id)
        except SQLAlchemyError as e:
            raise _unavailable("get_job", e)
        return row.to_posting() if row else None

    async def upsert_job(self, job: JobPosting) -> JobPosting:
        job.check()
        try:
            row = await self.session.get(Job, job.id)
            if row is None:
                row = Job(id=job.id)
                self.session.add(row)
            row.apply(job)
            await self.session.commit()
            await self.session.refresh(row)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _unavailable("upsert_job", e)
        return row.to_posting()

    async def delete_job(self, job_id: str) -> bool:
        try:
            row = await self.session.get(Job, job_id)
            if row is None:
                return False
            await self.session.delete(row)
            await self.session.execute(delete(Application).where(Application.job_id == job_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _unavailable("delete_job", e)
        return True

    async def list_worker_profiles(self, profile_filter: ProfileFilter = ProfileFilter()) -> List[SkillPassport]:
        query = select(WorkerProfile)

        if profile_filter.user_id:
            query = query.where(WorkerProfile.user_id == profile_filter.user_id)

        trade_words = _prefilter_words(profile_filter.trade)
        if trade_words:
            query = query.where(_contains_words(WorkerProfile.trade_or_skill, trade_words))

        country_words = _prefilter_words(profile_filter.country)
        if country_words:
            query = query.where(or_(
                _contains_words(WorkerProfile.country_of_origin, country_words),
                WorkerProfile.experience_in_country > 0,
            ))

        query = query.order_by(WorkerProfile.id)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise _unavailable("list_worker_profiles", e)

        matches = all_of(
            profile_matches_trade(profile_filter.trade),
            profile_matches_country(profile_filter.country),
        )
        return [p for p in (row.to_passport() for row in result.scalars().all()) if matches(p)]

    async def get_worker_profile(self, profile_id: str) -> Optional[SkillPassport]:
        try:
            row = await self.session.get(WorkerProfile, profile_id)
        except SQLAlchemyError as e:
            raise _unavailable("get_worker_profile", e)
        return row.to_passport() if row else None

    async def upsert_worker_profile(self, profile: SkillPassport) -> SkillPassport:
        profile.check()
        try:
            row = await self.session.get(WorkerProfile, profile.id)
            if row is None:
                row = WorkerProfile(id=profile.id)
                self.session.add(row)
            row.apply(profile)
            await self.session.commit()
            await self.session.refresh(row)
        except IntegrityError:
            await self.session.rollback()
            raise InvalidInput(f"User {profile.user_id} already has a worker profile")
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _unavailable("upsert_worker_profile", e)
        return row.to_passport()

    async def add_application(self, job_id: str, worker_id: str) -> JobApplication:
        row = Application(
            id=str(uuid.uuid4()),
            job_id=job_id,
            worker_id=worker_id,
            status=ApplicationStatus.SUBMITTED.value,
        )
        try:
            self.session.add(row)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise InvalidInput(f"Worker {worker_id} already applied to job {job_id}")
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _unavailable("add_application", e)
        return JobApplication(id=row.id, job_id=job_id, worker_id=worker_id, status=row.status)

    async def list_applications(self, job_id: Optional[str] = None) -> List[JobApplication]:
        query = (
            select(Application)
            .order_by(Application.created_at, Application.id)
            .execution_options(populate_existing=True)
        )
        if job_id:
            query = query.where(Application.job_id == job_id)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise _unavailable("list_applications", e)
        return [
            JobApplication(id=row.id, job_id=row.job_id, worker_id=row.worker_id, status=row.status)
            for row in result.scalars().all()
        ]

    async def set_application_status(
        self,
        job_id: str,
        worker_ids: Sequence[str],
        status: ApplicationStatus,
    ) -> int:
        if not worker_ids:
            return 0
        statement = (
            update(Application)
            .where(Application.job_id == job_id, Application.worker_id.in_(list(worker_ids)))
            .values(status=status.value, updated_at=func.now())
        )
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _unavailable("set_application_status", e)
        return result.rowcount or 0


class InMemoryStorage(StorageBackend):
    """
    Index-backed storage for development and testing.

    Jobs and profiles live in JobIndex / ProfileIndex; applications in a dict
    guarded by its own lock.
    """

    def __init__(self) -> None:
        self.jobs = JobIndex()
        self.profiles = ProfileIndex()
        self._applications: Dict[str, JobApplication] = {}
        self._lock = threading.RLock()

    async def list_jobs(self, job_filter: JobFilter = JobFilter()) -> List[JobPosting]:
        if job_filter.status == JobStatus.ACTIVE and not job_filter.employer_id:
            return self.jobs.public_search(job_filter.query)
        return self.jobs.search(job_filter.status, job_filter.employer_id, job_filter.query)

    async def get_job(self, job_id: str) -> Optional[JobPosting]:
        return self.jobs.get(job_id)

    async def upsert_job(self, job: JobPosting) -> JobPosting:
        return self.jobs.upsert(job)

    async def delete_job(self, job_id: str) -> bool:
        with self._lock:
            deleted = self.jobs.delete(job_id)
            if deleted:
                self._applications = {
                    key: app for key, app in self._applications.items() if app.job_id != job_id
                }
        return deleted

    async def list_worker_profiles(self, profile_filter: ProfileFilter = ProfileFilter()) -> List[SkillPassport]:
        return self.profiles.search(profile_filter.trade, profile_filter.country, profile_filter.user_id)

    async def get_worker_profile(self, profile_id: str) -> Optional[SkillPassport]:
        return self.profiles.get(profile_id)

    async def upsert_worker_profile(self, profile: SkillPassport) -> SkillPassport:
        with self._lock:
            existing = self.profiles.for_user(profile.user_id)
            if existing is not None and existing.id != profile.id:
                raise InvalidInput(f"User {profile.user_id} already has a worker profile")
            return self.profiles.upsert(profile)

    async def add_application(self, job_id: str, worker_id: str) -> JobApplication:
        with self._lock:
            if any(a.job_id == job_id and a.worker_id == worker_id for a in self._applications.values()):
                raise InvalidInput(f"Worker {worker_id} already applied to job {job_id}")
            application = JobApplication(id=str(uuid.uuid4()), job_id=job_id, worker_id=worker_id)
            self._applications[application.id] = application
            return application

    async def list_applications(self, job_id: Optional[str] = None) -> List[JobApplication]:
        with self._lock:
            applications = list(self._applications.values())
        return [a for a in applications if job_id is None or a.job_id == job_id]

    async def set_application_status(
        self,
        job_id: str,
        worker_ids: Sequence[str],
        status: ApplicationStatus,
    ) -> int:
        targets = set(worker_ids)
        changed = 0
        with self._lock:
            for key, application in list(self._applications.items()):
                if application.job_id == job_id and application.worker_id in targets:
                    self._applications[key] = replace(application, status=status)
                    changed += 1
        return changed

"""
Job Board Service - Caller-scoped operations over storage and the matching core

Every operation takes the resolved CallerContext explicitly; nothing reads
ambient session state. Authorization is limited to role checks and
"job.employer_id == caller.user_id" for operations on a job.

Operations:
    Jobs:          search_jobs, get_job, employer_jobs, create_job,
                   set_job_status, delete_job
    Passports:     my_profile, save_my_profile, search_workers
    Matching:      rank_workers, recommend_jobs
    Applications:  apply, ranked_applicants, set_applicant_status
    Dashboard:     stats
"""

import logging
import time
import uuid
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from workbridge.auth import CallerContext
from workbridge.domain import (
    ApplicationStatus,
    JobApplication,
    JobPosting,
    JobStatus,
    SkillPassport,
    UserRole,
)
from workbridge.errors import Forbidden, InvalidInput, NotFound
from workbridge.middleware.metrics import record_ranking
from workbridge.services.ranker import MatchResult, Ranker
from workbridge.services.storage import JobFilter, ProfileFilter, StorageBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedCandidate:
    """A ranked worker plus the records needed to display it."""

    result: MatchResult
    profile: SkillPassport
    application: Optional[JobApplication] = None


def require_role(caller: CallerContext, role: UserRole) -> None:
    if caller.role != role:
        raise Forbidden(f"This action requires the {role.value.lower()} role")


def ensure_owner(job: JobPosting, caller: CallerContext) -> None:
    if job.employer_id != caller.user_id:
        raise Forbidden("Only the employer who posted this job can do that")


def _posting_defaults(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Fill a blank description and empty skill list from the title."""
    title = fields.get("title")
    if not isinstance(title, str) or not title.strip():
        return fields
    title = title.strip()
    filled = dict(fields)
    description = filled.get("description", "")
    if isinstance(description, str) and not description.strip():
        company = filled.get("employer_name") or "our company"
        filled["description"] = (
            f"We are looking for a skilled {title} to join our team at {company}. "
            "This is an excellent opportunity for an experienced professional."
        )
    skills = filled.get("required_skills", ())
    if isinstance(skills, (list, tuple)) and not skills:
        filled["required_skills"] = [title.lower()]
    return filled


class JobBoard:
    """
    Job board operations.

    Attributes:
        storage: Storage collaborator
        ranker: Ranker (wrapping the configured Scorer)
    """

    def __init__(self, storage: StorageBackend, ranker: Optional[Ranker] = None):
        self.storage = storage
        self.ranker = ranker or Ranker()

    # ==================== Jobs ====================

    async def search_jobs(self, query: Optional[str] = None) -> List[JobPosting]:
        """Public search: Active jobs only."""
        return await self.storage.list_jobs(JobFilter(status=JobStatus.ACTIVE, query=query))

    async def get_job(self, caller: CallerContext, job_id: str) -> Optional[JobPosting]:
        """A job is visible if it is public or the caller owns it."""
        job = await self.storage.get_job(job_id)
        if job is None or (not job.is_public and job.employer_id != caller.user_id):
            return None
        return job

    async def _owned_job(self, caller: CallerContext, job_id: str) -> JobPosting:
        job = await self.storage.get_job(job_id)
        if job is None:
            raise NotFound(f"Job {job_id} not found")
        ensure_owner(job, caller)
        return job

    async def employer_jobs(self, caller: CallerContext) -> List[JobPosting]:
        require_role(caller, UserRole.EMPLOYER)
        return await self.storage.list_jobs(JobFilter(employer_id=caller.user_id))

    async def create_job(self, caller: CallerContext, fields: Dict[str, Any]) -> JobPosting:
        require_role(caller, UserRole.EMPLOYER)
        job = JobPosting(id=str(uuid.uuid4()), employer_id=caller.user_id, **_posting_defaults(fields))
        saved = await self.storage.upsert_job(job)
        logger.info(f"Employer {caller.user_id} posted job {saved.id} ({saved.title})")
        return saved

    async def set_job_status(self, caller: CallerContext, job_id: str, status: JobStatus) -> JobPosting:
        job = await self._owned_job(caller, job_id)
        if job.status == status:
            return job
        saved = await self.storage.upsert_job(job.with_status(status))
        logger.info(f"Job {job_id} status {job.status.value} -> {status.value}")
        return saved

    async def delete_job(self, caller: CallerContext, job_id: str) -> None:
        await self._owned_job(caller, job_id)
        if not await self.storage.delete_job(job_id):
            raise NotFound(f"Job {job_id} not found")
        logger.info(f"Job {job_id} deleted by {caller.user_id}")

    # ==================== Skill passports ====================

    async def my_profile(self, caller: CallerContext) -> Optional[SkillPassport]:
        return await self.storage.get_worker_profile_for_user(caller.user_id)

    async def save_my_profile(self, caller: CallerContext, fields: Dict[str, Any]) -> SkillPassport:
        """Create or replace the caller's own passport."""
        require_role(caller, UserRole.WORKER)
        existing = await self.storage.get_worker_profile_for_user(caller.user_id)
        profile_id = existing.id if existing else str(uuid.uuid4())
        passport = SkillPassport(id=profile_id, user_id=caller.user_id, **fields)
        return await self.storage.upsert_worker_profile(passport)

    async def search_workers(
        self,
        caller: CallerContext,
        trade: Optional[str] = None,
        country: Optional[str] = None,
    ) -> List[SkillPassport]:
        require_role(caller, UserRole.EMPLOYER)
        return await self.storage.list_worker_profiles(ProfileFilter(trade=trade, country=country))

    # ==================== Matching ====================

    def _rank(
        self,
        kind: str,
        job: JobPosting,
        candidates: Sequence[SkillPassport],
        limit: Optional[int],
    ) -> List[MatchResult]:
        started = time.perf_counter()
        results = self.ranker.rank(job, candidates, limit)
        record_ranking(kind, time.perf_counter() - started, len(candidates))
        return results

    async def rank_workers(
        self,
        caller: CallerContext,
        job_id: str,
        limit: Optional[int] = None,
        trade: Optional[str] = None,
    ) -> List[RankedCandidate]:
        """
        Rank worker profiles for one of the caller's jobs.

        Candidates are profiles whose trade contains `trade` (default: the job
        title) and that pass the job-country filter.
        """
        job = await self._owned_job(caller, job_id)
        candidates = await self.storage.list_worker_profiles(
            ProfileFilter(trade=trade if trade is not None else job.title, country=job.country)
        )
        by_id = {profile.id: profile for profile in candidates}
        results = self._rank("workers", job, candidates, limit)
        return [
            RankedCandidate(result=r, profile=by_id[r.worker_id].with_score(r.score))
            for r in results
        ]

    async def recommend_jobs(self, caller: CallerContext, limit: Optional[int] = None) -> List[MatchResult]:
        profile = await self.storage.get_worker_profile_for_user(caller.user_id)
        if profile is None:
            raise NotFound("Create a worker profile before asking for recommendations")
        jobs = await self.search_jobs()
        started = time.perf_counter()
        results = self.ranker.recommend(profile, jobs, limit)
        record_ranking("jobs", time.perf_counter() - started, len(jobs))
        return results

    # ==================== Applications ====================

    async def apply(self, caller: CallerContext, job_id: str) -> JobApplication:
        profile = await self.storage.get_worker_profile_for_user(caller.user_id)
        if profile is None:
            raise NotFound("Create a worker profile before applying")
        job = await self.storage.get_job(job_id)
        if job is None:
            raise NotFound(f"Job {job_id} not found")
        if not job.is_public:
            raise InvalidInput(f"Job {job_id} is not accepting applications ({job.status.value})")
        application = await self.storage.add_application(job_id, profile.id)
        logger.info(f"Worker {profile.id} applied to job {job_id}")
        return application

    async def ranked_applicants(
        self,
        caller: CallerContext,
        job_id: str,
        limit: Optional[int] = None,
    ) -> List[RankedCandidate]:
        job = await self._owned_job(caller, job_id)
        applications = await self.storage.list_applications(job_id)

        profiles: Dict[str, SkillPassport] = {}
        by_worker: Dict[str, JobApplication] = {}
        for application in applications:
            profile = await self.storage.get_worker_profile(application.worker_id)
            if profile is None:
                logger.warning(f"Application {application.id} references missing profile {application.worker_id}")
                continue
            profiles[profile.id] = profile
            by_worker[profile.id] = application

        results = self._rank("applicants", job, list(profiles.values()), limit)
        return [
            RankedCandidate(
                result=r,
                profile=profiles[r.worker_id].with_score(r.score),
                application=by_worker[r.worker_id],
            )
            for r in results
        ]

    async def set_applicant_status(
        self,
        caller: CallerContext,
        job_id: str,
        worker_ids: Sequence[str],
        status: ApplicationStatus,
    ) -> int:
        await self._owned_job(caller, job_id)
        changed = await self.storage.set_application_status(job_id, worker_ids, status)
        logger.info(f"Job {job_id}: {changed} applications set to {status.value}")
        return changed

    # ==================== Dashboard ====================

    async def stats(self, caller: CallerContext) -> Dict[str, Any]:
        """Counts for the caller's dashboard (employers see their own jobs)."""
        if caller.is_employer:
            jobs = await self.storage.list_jobs(JobFilter(employer_id=caller.user_id))
        else:
            jobs = await self.search_jobs()
        job_ids = {job.id for job in jobs}

        applications = [a for a in await self.storage.list_applications() if a.job_id in job_ids]
        workers = await self.storage.list_worker_profiles()

        jobs_by_status = Counter(job.status.value for job in jobs)
        applications_by_status = Counter(a.status.value for a in applications)

        return {
            "total_jobs": len(jobs),
            "jobs_by_status": {s.value: jobs_by_status.get(s.value, 0) for s in JobStatus},
            "total_workers": len(workers),
            "total_applications": len(applications),
            "applications_by_status": {
                s.value: applications_by_status.get(s.value, 0) for s in ApplicationStatus
            },
        }

"""
Profile and Job Indexes - In-memory, predicate-queryable collections

The indexes hold validated domain records keyed by id. Queries take a
predicate and return matching records in insertion order; there is no
pagination here, callers post-filter and truncate.

Matching semantics (shared with the SQL storage backend):
    - Jobs: case-insensitive substring on title, description or any skill
    - Profiles by trade: case-insensitive substring on trade_or_skill
    - Profiles by country: substring on country_of_origin OR any positive
      experience_in_country

Thread safety:
    Writers take an RLock; readers copy the values under the same lock and
    filter the snapshot outside it.
"""

import threading
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from workbridge.domain import JobPosting, JobStatus, SkillPassport, normalize_key

T = TypeVar("T", JobPosting, SkillPassport)


# ==================== Job predicates ====================

def job_matches_query(query: Optional[str]) -> Callable[[JobPosting], bool]:
    """Substring match on title, description or required skills."""
    needle = normalize_key(query or "")

    def predicate(job: JobPosting) -> bool:
        if not needle:
            return True
        if needle in normalize_key(job.title) or needle in normalize_key(job.description):
            return True
        return any(needle in normalize_key(skill) for skill in job.required_skills)

    return predicate


def job_has_status(status: JobStatus) -> Callable[[JobPosting], bool]:
    return lambda job: job.status == status


def job_owned_by(employer_id: str) -> Callable[[JobPosting], bool]:
    return lambda job: job.employer_id == employer_id


# ==================== Profile predicates ====================

def profile_matches_trade(text: Optional[str]) -> Callable[[SkillPassport], bool]:
    needle = normalize_key(text or "")
    return lambda profile: not needle or needle in normalize_key(profile.trade_or_skill)


def profile_matches_country(country: Optional[str]) -> Callable[[SkillPassport], bool]:
    """
    Country filter, kept as an inclusive OR.

    A worker matches when their country of origin contains the country OR
    they have any in-country experience at all (for any country). This
    over-matches; see DESIGN.md.
    """
    needle = normalize_key(country or "")

    def predicate(profile: SkillPassport) -> bool:
        if not needle:
            return True
        return needle in normalize_key(profile.country_of_origin) or profile.experience_in_country > 0

    return predicate


def all_of(*predicates: Callable[[T], bool]) -> Callable[[T], bool]:
    return lambda item: all(p(item) for p in predicates)


# ==================== Indexes ====================

class _Index(Generic[T]):
    """Id-keyed collection with single-writer discipline."""

    def __init__(self, items: Iterable[T] = ()):
        self._lock = threading.RLock()
        self._items: Dict[str, T] = {}
        for item in items:
            self.upsert(item)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, item_id: str) -> bool:
        with self._lock:
            return item_id in self._items

    def get(self, item_id: str) -> Optional[T]:
        with self._lock:
            return self._items.get(item_id)

    def upsert(self, item: T) -> T:
        item.check()
        with self._lock:
            self._items[item.id] = item
        return item

    def delete(self, item_id: str) -> bool:
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def all(self) -> List[T]:
        with self._lock:
            return list(self._items.values())

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        return [item for item in self.all() if predicate(item)]


class JobIndex(_Index[JobPosting]):
    """Job postings, queryable by status, owner and text."""

    def search(
        self,
        status: Optional[JobStatus] = None,
        employer_id: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[JobPosting]:
        predicates = [job_matches_query(query)]
        if status:
            predicates.append(job_has_status(status))
        if employer_id:
            predicates.append(job_owned_by(employer_id))
        return self.find(all_of(*predicates))

    def public_search(self, query: Optional[str] = None) -> List[JobPosting]:
        """Active jobs matching the query. Closed (and On Hold) jobs never appear."""
        return self.search(status=JobStatus.ACTIVE, query=query)


class ProfileIndex(_Index[SkillPassport]):
    """Worker profiles, queryable by trade and locale."""

    def search(
        self,
        trade: Optional[str] = None,
        country: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> List[SkillPassport]:
        """Profiles matching every given filter, ordered by id."""
        predicates = [profile_matches_trade(trade), profile_matches_country(country)]
        if user_id:
            predicates.append(lambda profile: profile.user_id == user_id)
        return sorted(self.find(all_of(*predicates)), key=lambda profile: profile.id)

    def for_user(self, user_id: str) -> Optional[SkillPassport]:
        matches = self.search(user_id=user_id)
        return matches[0] if matches else None

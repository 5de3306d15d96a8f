"""
Candidate Ranker - Ordering workers for a job (and jobs for a worker)

Scores each candidate with the Scorer and returns MatchResults in a fully
deterministic order:

    1. score descending
    2. experience_years descending
    3. worker id ascending

Zero-score candidates are kept (they sort last). Results are derived on
every call and never persisted.

Architecture:
    Candidates (N) → Scorer (N breakdowns) → sort → truncate(limit) → MatchResult[1..k]
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from workbridge.domain import JobPosting, SkillPassport
from workbridge.errors import InvalidInput
from workbridge.services.scorer import ScoreBreakdown, Scorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """
    One ranked (job, worker) pair.

    Attributes:
        job_id: Job being matched
        worker_id: Worker (skill passport) id
        score: Composite score (0-100)
        rank: 1-based position within this result set
        breakdown: Sub-scores behind the score
    """

    job_id: str
    worker_id: str
    score: int
    rank: int
    breakdown: ScoreBreakdown


def _check_limit(limit: Optional[int]) -> None:
    if limit is not None and limit < 0:
        raise InvalidInput(f"limit must be >= 0, got {limit}")


class Ranker:
    """
    Orders candidate sets by match score.

    Pure over its inputs: no caching, no shared mutable state.

    Example:
        >>> ranker = Ranker(Scorer())
        >>> results = ranker.rank(job, [a, b, c], limit=2)
        >>> [r.worker_id for r in results]  # ["a", "c"]
    """

    def __init__(self, scorer: Optional[Scorer] = None):
        self.scorer = scorer or Scorer()

    def rank(
        self,
        job: JobPosting,
        candidates: Sequence[SkillPassport],
        limit: Optional[int] = None,
    ) -> List[MatchResult]:
        """
        Rank workers for a job.

        Args:
            job: Job to match against
            candidates: Worker profiles to evaluate (may be empty)
            limit: Maximum results to return (None = all)

        Returns:
            MatchResults ordered best first, ranks starting at 1

        Raises:
            InvalidInput: for a negative limit or any invalid record; nothing
                is returned for a partially valid candidate set
        """
        _check_limit(limit)
        if not candidates:
            return []

        scored = [(self.scorer.score(job, worker), worker) for worker in candidates]
        scored.sort(key=lambda pair: (-pair[0].score, -pair[1].experience_years, pair[1].id))

        if limit is not None:
            scored = scored[:limit]

        logger.debug(f"Ranked {len(candidates)} candidates for job {job.id}, returning {len(scored)}")

        return [
            MatchResult(
                job_id=job.id,
                worker_id=worker.id,
                score=breakdown.score,
                rank=position,
                breakdown=breakdown,
            )
            for position, (breakdown, worker) in enumerate(scored, start=1)
        ]

    def recommend(
        self,
        worker: SkillPassport,
        jobs: Sequence[JobPosting],
        limit: Optional[int] = None,
    ) -> List[MatchResult]:
        """
        Rank jobs for a worker: score descending, then job id ascending.
        """
        _check_limit(limit)
        if not jobs:
            return []

        scored = [self.scorer.score(job, worker) for job in jobs]
        scored.sort(key=lambda breakdown: (-breakdown.score, breakdown.job_id))

        if limit is not None:
            scored = scored[:limit]

        return [
            MatchResult(
                job_id=breakdown.job_id,
                worker_id=worker.id,
                score=breakdown.score,
                rank=position,
                breakdown=breakdown,
            )
            for position, breakdown in enumerate(scored, start=1)
        ]

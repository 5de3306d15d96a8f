"""
Match Scorer - Deterministic Job/Worker Match Scoring

This module computes how well a worker's skill passport matches a job
posting. Every sub-score is retained so a score can be explained and
audited; the same inputs always produce the same score.

Match Score Composition (default weights):
    - Skill Overlap (50%): share of the job's required skills found in the
      worker's trade and summary (case-insensitive, exact token or substring)
    - Experience (30%): min(experience_years / target_experience, 1.0)
    - Locale Fit (20%): 1.0 for same country of origin, otherwise the share of
      the worker's experience spent in the job's country

Score Range: 0-100 (integer) where higher = better match

Jobs without required skills fall back to comparing the job title with the
worker's trade (1.0 when either contains the other, else 0.0).
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from workbridge.domain import JobPosting, SkillPassport, normalize_key
from workbridge.errors import InvalidInput

DEFAULT_TARGET_EXPERIENCE = 5
MAX_REASONS = 5

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+(?:[-'][a-z0-9]+)*")


@dataclass(frozen=True)
class ScoringWeights:
    """Relative weight of each sub-score; must be non-negative and sum to 1."""

    skills: float = 0.5
    experience: float = 0.3
    locale: float = 0.2

    def __post_init__(self):
        values = (self.skills, self.experience, self.locale)
        if any(w < 0 for w in values):
            raise InvalidInput("Score weights must be non-negative")
        if abs(sum(values) - 1.0) > 1e-6:
            raise InvalidInput(f"Score weights must sum to 1.0, got {sum(values):.3f}")

    def to_dict(self) -> dict:
        return {"skills": self.skills, "experience": self.experience, "locale": self.locale}


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Auditable result of scoring one (job, worker) pair.

    Attributes:
        job_id / worker_id: The scored pair
        skill_overlap: Skill sub-score (0-1)
        experience: Experience sub-score (0-1)
        locale: Locale sub-score (0-1)
        matched_skills: Required skills found in the passport
        missing_skills: Required skills not found
        weights: Weights used for the composite
        score: Composite integer score (0-100)
        reasons: Up to 5 human-readable explanations
    """

    job_id: str
    worker_id: str
    skill_overlap: float
    experience: float
    locale: float
    matched_skills: Tuple[str, ...]
    missing_skills: Tuple[str, ...]
    weights: ScoringWeights
    score: int
    reasons: Tuple[str, ...] = field(default=())

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "skill_overlap": round(self.skill_overlap, 3),
            "experience": round(self.experience, 3),
            "locale": round(self.locale, 3),
            "matched_skills": list(self.matched_skills),
            "missing_skills": list(self.missing_skills),
            "weights": self.weights.to_dict(),
            "score": self.score,
            "reasons": list(self.reasons),
        }


def tokenize(text: Optional[str]) -> List[str]:
    """Lowercase word tokens from free text."""
    if not text:
        return []
    return _TOKEN_PATTERN.findall(text.lower())


def skill_present(skill: str, haystack: str, tokens: set) -> bool:
    """True if the skill is a token of, or a substring of, the passport text."""
    key = normalize_key(skill)
    if not key:
        return False
    return key in tokens or key in haystack


def match_skills(job: JobPosting, worker: SkillPassport) -> Tuple[float, List[str], List[str]]:
    """
    Calculate the skill overlap sub-score.

    Returns:
        Tuple of (score 0-1, matched skills, missing skills)
    """
    haystack = normalize_key(f"{worker.trade_or_skill} {worker.summary or ''}")
    tokens = set(tokenize(haystack))

    if not job.required_skills:
        title = normalize_key(job.title)
        trade = normalize_key(worker.trade_or_skill)
        score = 1.0 if (title in trade or trade in title) else 0.0
        return score, [], []

    matched = [s for s in job.required_skills if skill_present(s, haystack, tokens)]
    missing = [s for s in job.required_skills if s not in matched]
    return len(matched) / len(job.required_skills), matched, missing


def match_experience(experience_years: int, target_experience: int = DEFAULT_TARGET_EXPERIENCE) -> float:
    """Experience adequacy (0-1), saturating at the target."""
    return min(experience_years / target_experience, 1.0)


def match_locale(job: JobPosting, worker: SkillPassport) -> float:
    """Locale fit (0-1): same origin country, else share of in-country experience."""
    if job.country.strip() and normalize_key(worker.country_of_origin) == normalize_key(job.country):
        return 1.0
    if worker.experience_years == 0:
        return 0.0
    return worker.experience_in_country / worker.experience_years


class Scorer:
    """
    Weighted composite scorer.

    Stateless after construction and safe to share across threads.

    Example:
        >>> scorer = Scorer()
        >>> breakdown = scorer.score(job, passport)
        >>> breakdown.score  # 74
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        target_experience: int = DEFAULT_TARGET_EXPERIENCE,
    ):
        if target_experience <= 0:
            raise InvalidInput("target_experience must be positive")
        self.weights = weights or ScoringWeights()
        self.target_experience = target_experience

    def score(self, job: JobPosting, worker: SkillPassport) -> ScoreBreakdown:
        """
        Score one (job, worker) pair.

        Raises:
            InvalidInput: if either record violates its invariants
        """
        job.check()
        worker.check()

        skills_score, matched, missing = match_skills(job, worker)
        experience_score = match_experience(worker.experience_years, self.target_experience)
        locale_score = match_locale(job, worker)

        composite = (
            skills_score * self.weights.skills +
            experience_score * self.weights.experience +
            locale_score * self.weights.locale
        )
        final_score = max(0, min(100, int(round(composite * 100))))

        return ScoreBreakdown(
            job_id=job.id,
            worker_id=worker.id,
            skill_overlap=skills_score,
            experience=experience_score,
            locale=locale_score,
            matched_skills=tuple(matched),
            missing_skills=tuple(missing),
            weights=self.weights,
            score=final_score,
            reasons=tuple(self._reasons(job, worker, skills_score, matched, experience_score, locale_score)),
        )

    def _reasons(
        self,
        job: JobPosting,
        worker: SkillPassport,
        skills_score: float,
        matched: List[str],
        experience_score: float,
        locale_score: float,
    ) -> List[str]:
        reasons = []
        if matched:
            reasons.append(f"Skills: {', '.join(matched[:3])}")
        elif not job.required_skills and skills_score == 1.0:
            reasons.append(f"Trade: {worker.trade_or_skill}")

        if experience_score >= 1.0:
            reasons.append(f"Experience: {worker.experience_years} years")

        if locale_score == 1.0 and job.country:
            reasons.append(f"Locale: from {job.country}")
        elif worker.experience_in_country > 0:
            reasons.append(f"Locale: {worker.experience_in_country} years in-country")

        return reasons[:MAX_REASONS]

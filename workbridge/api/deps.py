"""
Shared FastAPI dependencies: storage, ranker, board and rank limits.
"""

from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workbridge.config import Settings, get_settings
from workbridge.database import get_db
from workbridge.services.board import JobBoard
from workbridge.services.ranker import Ranker
from workbridge.services.scorer import Scorer, ScoringWeights
from workbridge.services.storage import SQLStorage, StorageBackend


async def get_storage(db: AsyncSession = Depends(get_db)) -> StorageBackend:
    return SQLStorage(db)


def get_ranker(settings: Settings = Depends(get_settings)) -> Ranker:
    weights = ScoringWeights(
        skills=settings.score_weight_skills,
        experience=settings.score_weight_experience,
        locale=settings.score_weight_locale,
    )
    return Ranker(Scorer(weights, target_experience=settings.target_experience_years))


def get_board(
    storage: StorageBackend = Depends(get_storage),
    ranker: Ranker = Depends(get_ranker),
) -> JobBoard:
    return JobBoard(storage, ranker)


def effective_limit(limit: Optional[int], settings: Settings) -> int:
    """Default when unset, capped at the configured maximum."""
    if limit is None:
        limit = settings.default_rank_limit
    return min(limit, settings.max_rank_limit)

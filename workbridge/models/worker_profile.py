"""
Worker Profile Model - The worker's "skill passport"

One row per worker user. composite_score is not stored: it is computed per
search by the Scorer.
"""

from sqlalchemy import Column, String, Integer, Text, DateTime
from sqlalchemy.sql import func
from workbridge.database import Base
from workbridge.domain import SkillPassport
import uuid


class WorkerProfile(Base):
    """
    Worker profile for matching.

    Attributes:
        user_id: Identity-provider user id (unique)
        trade_or_skill: Primary trade, compared case-insensitively
        experience_years: Total years of experience
        country_of_origin: Worker's country of origin
        experience_in_country: Years worked in the target country
            (never more than experience_years)
        summary: Free-text summary used for skill matching
        cv_url: Reference to an externally stored CV
    """

    __tablename__ = "worker_profiles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, unique=True, index=True)
    full_name = Column(String(500), nullable=False, default="")
    trade_or_skill = Column(String(500), nullable=False, index=True)
    experience_years = Column(Integer, nullable=False, default=0)
    country_of_origin = Column(String(200), nullable=False, default="")
    experience_in_country = Column(Integer, nullable=False, default=0)
    summary = Column(Text, nullable=True)
    cv_url = Column(String(2000), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def to_passport(self) -> SkillPassport:
        return SkillPassport(
            id=self.id,
            user_id=self.user_id,
            full_name=self.full_name or "",
            trade_or_skill=self.trade_or_skill,
            experience_years=self.experience_years or 0,
            country_of_origin=self.country_of_origin or "",
            experience_in_country=self.experience_in_country or 0,
            summary=self.summary,
            cv_url=self.cv_url,
        )

    def apply(self, passport: SkillPassport) -> None:
        self.user_id = passport.user_id
        self.full_name = passport.full_name
        self.trade_or_skill = passport.trade_or_skill
        self.experience_years = passport.experience_years
        self.country_of_origin = passport.country_of_origin
        self.experience_in_country = passport.experience_in_country
        self.summary = passport.summary
        self.cv_url = passport.cv_url

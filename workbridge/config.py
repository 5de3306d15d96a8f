from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/workbridge.db"
    log_level: str = "INFO"

    # Identity provider (tokens are issued elsewhere, only verified here)
    identity_jwt_secret: str = "dev-secret-key-change-in-production"
    identity_jwt_algorithm: str = "HS256"
    identity_jwt_audience: str = "authenticated"

    # Optional text enrichment for job postings
    openai_api_key: str = ""
    enrichment_model: str = "gpt-4o-mini"

    # Scorer settings
    score_weight_skills: float = 0.5
    score_weight_experience: float = 0.3
    score_weight_locale: float = 0.2
    target_experience_years: int = 5

    # Ranking limits for the HTTP layer
    default_rank_limit: int = 20
    max_rank_limit: int = 100

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()

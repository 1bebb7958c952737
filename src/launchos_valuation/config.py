from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LAUNCHOS_", env_file=".env", extra="ignore")

    app_name: str = "LaunchOS Valuation Engine"
    version: str = "0.1.0"
    log_level: str = "INFO"

    berkus_max_per_factor: float = Field(500_000.0, description="Ceiling per Berkus factor, at most 500,000")
    scorecard_base_valuation: float = Field(1_500_000.0, description="Average regional pre-seed valuation")
    weighting_strategy: str = Field("equal", description="Default aggregation weighting")


@lru_cache
def get_settings() -> Settings:
    return Settings()

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str = "sqlite:///./data/assets.db"
    app_name: str = "asset-depreciation"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"
    ending_soon_horizon_months: int = 12

    model_config = {"env_prefix": "ASSETDEP_", "env_file": ".env"}


@lru_cache
def get_settings() -> Settings:
    return Settings()

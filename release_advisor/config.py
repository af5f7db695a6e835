"""Application configuration."""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    database_url: str

    # API Security
    api_secret_key: str

    # Advisor windows
    lookback_days: int = 14  # Covers the 7-day current and 7-day prior windows

    # Rule thresholds
    momentum_threshold: float = 0.10
    decline_threshold: float = 0.10  # Applied as growth <= -decline_threshold
    skip_rate_threshold: float = 0.35

    # Insights cache (0 disables)
    insights_cache_ttl_seconds: int = 300
    insights_cache_size: int = 256

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./dev.db"

    # App settings
    app_name: str = "RE Portfolio Manager"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Financing defaults for hold strategies (rent / airbnb)
    loan_to_value_percent: float = 75.0
    loan_term_months: int = 360

    # Operating expense assumptions, percent of gross monthly income
    management_fee_percent: float = 0.0
    vacancy_reserve_percent: float = 0.0
    maintenance_reserve_percent: float = 0.0
    platform_fee_percent: float = 0.0  # short-term rental booking fees

    # Short-term rental
    days_per_month: float = 30.4

    # Engine limits
    max_hold_months: int = 1200

    # Annual rate cash flows are discounted at for NPV
    discount_rate_percent: float = 10.0

    # Comparison / sensitivity defaults
    default_rank_metric: str = "roi"
    sensitivity_variation_percent: float = 10.0

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

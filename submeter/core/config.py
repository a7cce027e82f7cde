"""Application configuration settings."""

import os
from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_database_url() -> str:
    """SQLite file on the /data volume when mounted, else in the working directory."""
    if os.path.isdir("/data"):
        return "sqlite:////data/submeter.db"
    return "sqlite:///./submeter.db"


class Settings(BaseSettings):
    """Settings read from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Submeter"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = Field(default_factory=_default_database_url)

    # Percentage (2 or 0.02) used when a billing request gives no penalty_rate
    DEFAULT_PENALTY_RATE: Decimal = Field(default=Decimal("0"), ge=0)
    # Length of the rolling windows that label rate-of-change output
    ROC_DISPLAY_WINDOW_DAYS: int = Field(default=31, ge=1)


settings = Settings()

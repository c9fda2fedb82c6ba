"""Application configuration loaded from environment variables and .env file."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./companion_bonds.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Persistence retry policy
    PERSISTENCE_RETRY_ATTEMPTS: int = 3
    PERSISTENCE_RETRY_BACKOFF: float = 0.05

    # Attitude tuning
    SEED_MAX_OFFSET: float = 15.0
    ATTITUDE_MEMORY_THRESHOLD: float = 10.0

    # Primary user's display name, never tracked as a third party
    USER_NAME: Optional[str] = None


settings = Settings()

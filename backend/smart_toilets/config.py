from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # Application config
    APP_NAME: str = "NHAI Smart Toilet Management System API"
    APP_VERSION: str = "1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: list[str] = ["*"]

    # Simulation
    FACILITY_COUNT: int = 20
    ANALYSIS_DELAY_SECONDS: float = 2.0  # fake image-processing latency
    RANDOM_SEED: int | None = None       # unset = nondeterministic readings

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()

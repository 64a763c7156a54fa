"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "Kid To Adult AI Backend"
    environment: str = "development"
    debug: bool = True

    api_prefix: str = "/api"
    cors_allowed_origins: List[str] = ["*"]

    replicate_api_key: Optional[str] = None
    replicate_api_url: str = "https://api.replicate.com/v1/predictions"
    replicate_model_version: str = "google/imagen-4"
    image_dimensions: str = "768x768"
    num_inference_steps: int = 50
    num_outputs: int = 1

    gateway_timeout_seconds: float = 120.0
    # Attempts per job made by the gateway; 1 disables retries.
    gateway_max_attempts: int = 1

    worker_pool_size: int = 4

    job_retention_hours: int = 24
    sweep_interval_seconds: float = 3600.0

    default_target_age: int = 30


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()

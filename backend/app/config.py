"""
Runtime settings, read from the environment and an optional .env file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Persistence and files
    database_url: str = "sqlite:///./cv_helper.db"
    redis_url: str = "redis://localhost:6379"
    storage_dir: str = "./storage"
    signed_url_ttl_seconds: int = 3600
    max_cv_size_bytes: int = 5 * 1024 * 1024
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # LLM providers; missing keys only fail when a model is actually called
    openai_api_key: SecretStr | None = Field(default=None, description="Primary LLM provider")
    gemini_api_key: SecretStr | None = Field(default=None, description="Fallback LLM provider")

    openai_model: str = "gpt-4o"
    gemini_model: str = "gemini-2.0-flash-lite"
    max_retries: int = 1
    timeout_seconds: int = 30

    # Job page scraping
    fetch_timeout_seconds: float = 20.0

    # MLflow tracking of model calls
    mlflow_tracking_uri: str = "file:./mlruns"
    experiment_name: str = "job_assistant"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

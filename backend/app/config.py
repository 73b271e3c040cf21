"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

SERVICE_NAME = "hawaii-beach-agent"
SERVICE_VERSION = "0.1.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Generative model
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    model_timeout_ms: int = 12_000

    # External data providers
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    marine_url: str = "https://marine-api.open-meteo.com/v1/marine"
    noaa_tides_url: str = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    provider_timezone: str = "Pacific/Honolulu"
    http_timeout_s: float = 8.0

    # Timeouts (milliseconds)
    tool_hard_timeout_ms: int = 8_000

    # Retries
    tool_retry_count: int = 1
    retry_jitter_min_ms: int = 200
    retry_jitter_max_ms: int = 500

    # Response cache
    cache_sweep_threshold: int = 100

    # Template phrasing (None = seed from the template context)
    template_seed: int | None = None

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Configuration management for the Varuna status monitor.

Settings come from environment variables (or a .env file). When VARUNA_ENV
names a profile (development / production / test), that profile fills in
every field the environment did not set explicitly. Without it the field
defaults below apply as they are.
"""

from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueueBackend(str, Enum):
    """Message queue transport."""
    MEMORY = "memory"
    REDIS = "redis"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


# Cloud provider status feeds
STATUS_SOURCES: Dict[str, str] = {
    "aws": "https://status.aws.amazon.com/rss/all.rss",
    "azure": "https://azure.status.microsoft.com/en-us/status/feed/",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # None: no profile, field defaults apply unchanged
    environment: Optional[Environment] = Field(default=None, alias="VARUNA_ENV")

    # ── Collection ──
    rss_sources: Dict[str, str] = Field(default_factory=lambda: dict(STATUS_SOURCES), alias="RSS_SOURCES")
    rss_collection_interval_ms: int = Field(default=15 * 60 * 1000, alias="RSS_COLLECTION_INTERVAL_MS")
    max_retries: int = Field(default=3, ge=1, alias="MAX_RETRIES")
    # Fixed delay between attempts, not exponential
    retry_delay_ms: int = Field(default=5000, ge=0, alias="RETRY_DELAY_MS")
    fetch_timeout_ms: int = Field(default=10_000, gt=0, alias="FETCH_TIMEOUT_MS")
    user_agent: str = Field(default="Varuna-Monitor/1.0.0", alias="RSS_USER_AGENT")

    # ── Message queue ──
    queue_backend: QueueBackend = Field(default=QueueBackend.MEMORY, alias="QUEUE_BACKEND")
    queue_poll_interval_ms: int = Field(default=1000, gt=0, alias="QUEUE_POLL_INTERVAL_MS")
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")

    # ── Logging ──
    log_level: str = Field(default="info", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")  # json | simple
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")

    # ── Risk scoring ──
    # score = min(cap, critical*50 + warning*20 + informational*5)
    risk_weight_critical: int = Field(default=50, ge=0, alias="RISK_WEIGHT_CRITICAL")
    risk_weight_warning: int = Field(default=20, ge=0, alias="RISK_WEIGHT_WARNING")
    risk_weight_informational: int = Field(default=5, ge=0, alias="RISK_WEIGHT_INFORMATIONAL")
    risk_score_cap: int = Field(default=100, ge=0, alias="RISK_SCORE_CAP")

    # ── System runner ──
    # Stability target: 48 cycles = 12 hours at the default interval. 0 disables.
    target_cycles: int = Field(default=48, ge=0, alias="TARGET_CYCLES")
    status_interval_ms: int = Field(default=5 * 60 * 1000, gt=0, alias="STATUS_INTERVAL_MS")

    # ── HTTP ──
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def collection_interval_seconds(self) -> float:
        return self.rss_collection_interval_ms / 1000

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000

    @property
    def fetch_timeout_seconds(self) -> float:
        return self.fetch_timeout_ms / 1000

    @property
    def queue_poll_interval_seconds(self) -> float:
        return self.queue_poll_interval_ms / 1000


# Per-environment overrides. Only applied to fields the environment left unset.
ENVIRONMENT_PROFILES: Dict[Environment, Dict[str, Any]] = {
    Environment.DEVELOPMENT: {
        "rss_collection_interval_ms": 5 * 60 * 1000,
        "retry_delay_ms": 2000,
        "log_level": "debug",
        "log_format": "simple",
    },
    Environment.PRODUCTION: {
        "rss_sources": {
            "aws": "https://status.aws.amazon.com/rss/all.rss",
            "gcp": "https://status.cloud.google.com/feed.atom",
            "azure": "https://azure.status.microsoft/en-us/status/feed",
        },
        "fetch_timeout_ms": 60_000,
        "max_retries": 5,
        "retry_delay_ms": 10_000,
        "log_level": "info",
        "log_format": "json",
    },
    Environment.TEST: {
        "rss_sources": {"test": "https://httpbin.org/xml"},
        "rss_collection_interval_ms": 1000,
        "max_retries": 1,
        "retry_delay_ms": 100,
        "fetch_timeout_ms": 5000,
        "log_level": "error",
        "log_format": "simple",
        "queue_backend": QueueBackend.MEMORY,
    },
}


def apply_environment_profile(settings: Settings) -> Settings:
    """Fill unset fields from the profile of ``settings.environment``, if any."""
    if settings.environment is None:
        return settings

    explicit = settings.model_fields_set
    profile = ENVIRONMENT_PROFILES.get(settings.environment, {})
    overrides = {k: v for k, v in profile.items() if k not in explicit}

    # Production switches to Redis whenever a broker URL is configured
    if (
        settings.environment == Environment.PRODUCTION
        and settings.redis_url
        and "queue_backend" not in explicit
    ):
        overrides["queue_backend"] = QueueBackend.REDIS

    if not overrides:
        return settings
    return settings.model_copy(update=overrides)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return apply_environment_profile(Settings())

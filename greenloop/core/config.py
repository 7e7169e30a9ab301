"""Configuration management for the GreenLoop proof store service.

Configuration is loaded from environment variables, grouped by prefix.
"""

from __future__ import annotations

import os
from enum import StrEnum
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnvironment(StrEnum):
    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseSettings):
    name: str = Field(default="greenloop-yield-proof-store")
    env: AppEnvironment = Field(default=AppEnvironment.LOCAL)
    version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    log_level: LogLevel = Field(default=LogLevel.INFO)
    api_prefix: str = Field(default="/api/v1")

    model_config = SettingsConfigDict(env_prefix="APP_")

    @field_validator("env", mode="before")
    @classmethod
    def validate_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        if isinstance(v, AppEnvironment):
            return v
        return AppEnvironment(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        return LogLevel(v.upper())


class ServerConfig(BaseSettings):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    model_config = SettingsConfigDict(env_prefix="SERVER_")


class SecurityConfig(BaseSettings):
    cors_allowed_origins: str = Field(default="http://localhost:5173,http://localhost:3000")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: list[str] = Field(default=["GET", "POST", "DELETE"])
    cors_allow_headers: list[str] = Field(default=["Content-Type", "X-Request-ID"])

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    @field_validator("cors_allowed_origins", mode="after")
    @classmethod
    def validate_cors_allowed_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class ObservabilityConfig(BaseSettings):
    service_name: str = Field(default="greenloop-yield-proof-store")
    otlp_endpoint: str | None = Field(
        default=None,
        validation_alias=AliasChoices("exporter_otlp_endpoint", "otlp_endpoint"),
    )
    otlp_insecure: bool = Field(
        default=True,
        validation_alias=AliasChoices("exporter_otlp_insecure", "otlp_insecure"),
    )
    log_record_format: str = Field(default="json")

    model_config = SettingsConfigDict(env_prefix="OTEL_")

    @model_validator(mode="after")
    def apply_exporter_env_fallbacks(self) -> ObservabilityConfig:
        """Support standard OpenTelemetry env names used in container orchestration."""
        if not self.otlp_endpoint:
            endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or os.getenv("OTEL_OTLP_ENDPOINT")
            if endpoint:
                self.otlp_endpoint = endpoint

        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE")
        if insecure is not None:
            self.otlp_insecure = insecure.strip().lower() in {"1", "true", "yes", "on"}

        return self


class LedgerConfig(BaseSettings):
    """Evidence ledger bound and local storage database.

    ``storage_url`` is a SQLAlchemy URL such as ``sqlite:///./greenloop.db``.
    An empty URL keeps the ledger in process memory only.
    """

    max_items: int = Field(default=100)
    storage_url: str = Field(default="")
    storage_key: str = Field(default="greenloop_proof_store")
    storage_quota_bytes: int = Field(default=5 * 1024 * 1024)

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    @field_validator("max_items")
    @classmethod
    def validate_max_items(cls, v: int) -> int:
        if v < 1:
            raise ValueError("LEDGER_MAX_ITEMS must be at least 1")
        return v


class LiveFeedConfig(BaseSettings):
    enabled: bool = Field(default=True)
    url: str = Field(default="http://localhost:8000/api/mirror-feed")
    interval_seconds: float = Field(default=30.0)
    timeout_seconds: float = Field(default=10.0)
    retry_attempts: int = Field(default=3)

    model_config = SettingsConfigDict(env_prefix="LIVE_FEED_")

    @field_validator("interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("LIVE_FEED_INTERVAL_SECONDS must be positive")
        return v


class ToastConfig(BaseSettings):
    duration_seconds: float = Field(default=6.0)
    surface_persistence_failures: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="TOAST_")


class HashscanConfig(BaseSettings):
    base_url: str = Field(default="https://hashscan.io/testnet")

    model_config = SettingsConfigDict(env_prefix="HASHSCAN_")


class Settings(BaseSettings):
    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    live_feed: LiveFeedConfig = Field(default_factory=LiveFeedConfig)
    toast: ToastConfig = Field(default_factory=ToastConfig)
    hashscan: HashscanConfig = Field(default_factory=HashscanConfig)
    metrics_token: str | None = Field(default=None)

    @model_validator(mode="after")
    def validate_environment_settings(self) -> Settings:
        if self.app.env == AppEnvironment.PROD and self.observability.otlp_insecure:
            raise ValueError("OTLP insecure mode is not allowed in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()

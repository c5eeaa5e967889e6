from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from messaging.errors import ConfigurationError


class CircuitBreakerConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    failure_threshold: int = Field(default=5, ge=1)
    reset_timeout_seconds: int = Field(default=10, ge=1)


class RetryConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    wait_duration_ms: int = Field(default=10, ge=0)
    max_wait_duration_ms: int = Field(default=1000, ge=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, env_nested_delimiter="__")

    # Core
    LOG_LEVEL: str = Field(default="INFO")

    # Own bulk SMS gateway
    OWN_SMS_ACCOUNT_NAME: str = Field(default="")
    OWN_SMS_ACCOUNT_PASSWORD: str = Field(default="")
    OWN_SMS_ACCOUNT_FROM: str = Field(default="")
    OWN_SMS_BASE_URL: str = Field(default="")
    OWN_SMS_CIRCUIT_BREAKER: CircuitBreakerConfiguration = Field(default_factory=CircuitBreakerConfiguration)
    OWN_SMS_RETRY: RetryConfiguration = Field(default_factory=RetryConfiguration)

    # Transport
    OWN_SMS_CONNECT_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    OWN_SMS_REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # Worker pool (fail-fast when full)
    OWN_SMS_WORKERS: int = Field(default=10, ge=1)
    OWN_SMS_QUEUE_SIZE: int = Field(default=100, ge=0)

    # Fail the whole delivery instead of sending a blank parameter
    OWN_SMS_STRICT_ENCODING: bool = Field(default=False)


class OwnSmsSenderConfiguration(BaseModel):
    """Account and transport settings for the own bulk SMS gateway.

    Immutable once built. Missing or blank account fields raise
    ``ConfigurationError`` listing every offending field.
    """

    model_config = ConfigDict(frozen=True)

    account_name: str = ""
    account_password: str = ""
    account_from: str = ""
    base_url: str = ""
    circuit_breaker: CircuitBreakerConfiguration = Field(default_factory=CircuitBreakerConfiguration)
    retry: RetryConfiguration = Field(default_factory=RetryConfiguration)
    connect_timeout_seconds: float = Field(default=10.0, gt=0)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    workers: int = Field(default=10, ge=1)
    queue_size: int = Field(default=100, ge=0)
    strict_encoding: bool = False

    @model_validator(mode="after")
    def _require_account(self) -> "OwnSmsSenderConfiguration":
        missing: List[str] = [
            name
            for name in ("account_name", "account_password", "account_from", "base_url")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise ConfigurationError(f"own sms sender configuration incomplete: {', '.join(missing)}")
        return self

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "OwnSmsSenderConfiguration":
        s = s or settings
        return cls(
            account_name=s.OWN_SMS_ACCOUNT_NAME,
            account_password=s.OWN_SMS_ACCOUNT_PASSWORD,
            account_from=s.OWN_SMS_ACCOUNT_FROM,
            base_url=s.OWN_SMS_BASE_URL,
            circuit_breaker=s.OWN_SMS_CIRCUIT_BREAKER,
            retry=s.OWN_SMS_RETRY,
            connect_timeout_seconds=s.OWN_SMS_CONNECT_TIMEOUT_SECONDS,
            request_timeout_seconds=s.OWN_SMS_REQUEST_TIMEOUT_SECONDS,
            workers=s.OWN_SMS_WORKERS,
            queue_size=s.OWN_SMS_QUEUE_SIZE,
            strict_encoding=s.OWN_SMS_STRICT_ENCODING,
        )


settings = Settings()

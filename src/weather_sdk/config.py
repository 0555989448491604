"""Configuration for weather SDK instances and the OpenWeather client."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SDKMode(StrEnum):
    """How an SDK instance keeps its cached entries fresh."""

    ON_DEMAND = "on_demand"
    POLLING = "polling"


class SDKSettings(BaseSettings):
    """Settings shared by every instance created in the process."""

    api_key: str | None = Field(
        default=None,
        description="Default OpenWeatherMap API key used by the command line",
    )
    base_url: str = Field(
        default="https://api.openweathermap.org",
        description="Base URL of the OpenWeatherMap API",
    )
    units: str = Field(
        default="metric",
        description="Unit system requested from the API (standard, metric or imperial)",
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout (seconds) for weather API requests",
    )
    max_retries: int = Field(
        default=0,
        ge=0,
        description="Number of retries for rate-limited or transient HTTP errors",
    )
    retry_backoff_seconds: float = Field(
        default=0.5,
        gt=0,
        description="Base delay (seconds) for exponential backoff between retries",
    )
    cache_max_size: int = Field(
        default=10,
        ge=1,
        description="Maximum number of cities cached per instance",
    )
    cache_ttl: float = Field(
        default=600.0,
        gt=0,
        description="Seconds a cached entry stays valid",
    )
    poll_interval: float = Field(
        default=600.0,
        gt=0,
        description="Seconds between background refresh cycles in polling mode",
    )
    shutdown_grace: float = Field(
        default=5.0,
        ge=0,
        description="Seconds to wait for an in-flight refresh cycle when stopping",
    )
    log_level: str = Field(default="INFO", description="Log level used by the command line")

    model_config = SettingsConfigDict(
        env_prefix="OPENWEATHER_",
        env_file=".env",
        extra="ignore",
    )


class SDKConfig(BaseModel):
    """Per-instance configuration: which credential and which mode."""

    credential: str = Field(..., min_length=1, description="API key identifying the instance")
    mode: SDKMode

    model_config = ConfigDict(frozen=True)

    @field_validator("credential")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("credential must not be blank")
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_")
        return value


__all__ = ["SDKConfig", "SDKMode", "SDKSettings"]

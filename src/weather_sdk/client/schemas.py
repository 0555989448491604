"""Pydantic schemas mirroring the OpenWeatherMap current weather response."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class WeatherCondition(_Payload):
    """One entry of the ``weather`` array, e.g. ``Clouds`` / ``scattered clouds``."""

    main: str
    description: str


class Temperature(_Payload):
    temp: float
    feels_like: float


class Wind(_Payload):
    speed: float


class SunTimes(_Payload):
    sunrise: int
    sunset: int


class WeatherData(_Payload):
    """Current weather for one city."""

    weather: list[WeatherCondition] = Field(default_factory=list)
    main: Temperature | None = None
    visibility: int = 0
    wind: Wind | None = None
    dt: int
    sys: SunTimes | None = None
    timezone: int = 0
    name: str

    @property
    def condition(self) -> WeatherCondition | None:
        return self.weather[0] if self.weather else None

    @property
    def observed_at(self) -> datetime:
        return datetime.fromtimestamp(self.dt, tz=timezone.utc)

    def summary(self) -> dict[str, Any]:
        """Compact, JSON-friendly view of the payload."""

        condition = self.condition
        return {
            "weather": {
                "main": condition.main if condition else None,
                "description": condition.description if condition else None,
            },
            "temperature": {
                "temp": self.main.temp if self.main else None,
                "feels_like": self.main.feels_like if self.main else None,
            },
            "visibility": self.visibility,
            "wind": {"speed": self.wind.speed if self.wind else None},
            "datetime": self.dt,
            "sys": {
                "sunrise": self.sys.sunrise if self.sys else None,
                "sunset": self.sys.sunset if self.sys else None,
            },
            "timezone": self.timezone,
            "name": self.name,
        }


__all__ = [
    "SunTimes",
    "Temperature",
    "WeatherCondition",
    "WeatherData",
    "Wind",
]

"""Exception hierarchy shared by the cache core and the OpenWeather client."""

from __future__ import annotations


class WeatherSDKError(Exception):
    """Base error raised for any weather SDK related issue."""


class InvalidKeyError(WeatherSDKError, ValueError):
    """Raised when a lookup key is empty or blank."""


class NotRegisteredError(WeatherSDKError):
    """Reported when destroying an instance the registry no longer holds."""


class WeatherAPIError(WeatherSDKError):
    """Raised when the weather API returns an unexpected response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(WeatherAPIError):
    """Raised when the API rejects the credential."""


class CityNotFoundError(WeatherAPIError):
    """Raised when the API does not know the requested city."""


class RateLimitedError(WeatherAPIError):
    """Raised when the API rate limit for the credential is exceeded."""


class MalformedResponseError(WeatherAPIError):
    """Raised when a response body cannot be decoded into weather data."""


class UnreachableError(WeatherSDKError):
    """Raised when the weather API cannot be reached."""


__all__ = [
    "CityNotFoundError",
    "InvalidKeyError",
    "MalformedResponseError",
    "NotRegisteredError",
    "RateLimitedError",
    "UnauthorizedError",
    "UnreachableError",
    "WeatherAPIError",
    "WeatherSDKError",
]

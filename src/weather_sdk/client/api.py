"""HTTP client for the OpenWeatherMap current weather endpoint."""

from __future__ import annotations

import logging
import threading
import time
from typing import Final

import httpx
from pydantic import ValidationError

from ..config import SDKSettings
from ..exceptions import (
    CityNotFoundError,
    MalformedResponseError,
    RateLimitedError,
    UnauthorizedError,
    UnreachableError,
    WeatherAPIError,
)
from .schemas import WeatherData

WEATHER_PATH: Final[str] = "/data/2.5/weather"

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Fetches and parses current weather for a city name.

    :meth:`fetch` is the fetcher plugged into SDK instances: it blocks on
    network I/O and raises one of the SDK's typed errors on failure.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openweathermap.org",
        units: str = "metric",
        timeout: float = 10.0,
        max_retries: int = 0,
        retry_backoff_seconds: float = 0.5,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("API key cannot be empty")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._units = units
        self._timeout = timeout
        self._max_retries = max(0, max_retries)
        self._retry_backoff_seconds = retry_backoff_seconds
        self._transport = transport
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        api_key: str,
        settings: SDKSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> OpenWeatherClient:
        return cls(
            api_key,
            base_url=settings.base_url,
            units=settings.units,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            retry_backoff_seconds=settings.retry_backoff_seconds,
            transport=transport,
        )

    def fetch(self, city: str) -> WeatherData:
        """Return parsed current weather for ``city``."""

        response = self._request_with_retry(city)
        return self.parse(response)

    def parse(self, response: httpx.Response) -> WeatherData:
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Failed to decode weather response", extra={"body": response.text[:200]})
            raise MalformedResponseError("Failed to parse weather data from API response.") from exc
        try:
            return WeatherData.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Weather payload did not match the expected schema: {exc.error_count()} error(s)"
            ) from exc

    def close(self) -> None:
        """Close the underlying HTTP client."""

        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _request_with_retry(self, city: str) -> httpx.Response:
        max_attempts = self._max_retries + 1
        attempt = 0
        params = {"q": city, "appid": self._api_key, "units": self._units}

        while attempt < max_attempts:
            attempt += 1
            try:
                logger.debug("Making API request", extra={"city": city, "attempt": attempt})
                response = self._get_client().get(WEATHER_PATH, params=params)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                logger.warning(
                    "API request failed",
                    extra={"city": city, "status": status, "body": exc.response.text[:200]},
                )
                if status == httpx.codes.UNAUTHORIZED:
                    raise UnauthorizedError(
                        "Unauthorized: Invalid API key provided.", status_code=status
                    ) from exc
                if status == httpx.codes.NOT_FOUND:
                    raise CityNotFoundError(f"City not found: {city}", status_code=status) from exc
                if status == httpx.codes.TOO_MANY_REQUESTS or 500 <= status < 600:
                    if attempt < max_attempts:
                        time.sleep(self._retry_delay(attempt))
                        continue
                if status == httpx.codes.TOO_MANY_REQUESTS:
                    raise RateLimitedError("API rate limit exceeded.", status_code=status) from exc
                raise WeatherAPIError(
                    f"Unexpected API response: {status} - {exc.response.text}",
                    status_code=status,
                ) from exc
            except httpx.RequestError as exc:
                if attempt < max_attempts:
                    time.sleep(self._retry_delay(attempt))
                    continue
                logger.error("Network error while fetching weather", extra={"city": city})
                raise UnreachableError(
                    f"Network error while fetching weather data for city: {city}"
                ) from exc

        raise UnreachableError("Exceeded retry limit when contacting the weather API")

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self._base_url,
                        timeout=self._timeout,
                        headers={"Accept": "application/json"},
                        transport=self._transport,
                    )
        return self._client

    def _retry_delay(self, attempt: int) -> float:
        return self._retry_backoff_seconds * (2 ** (attempt - 1))


__all__ = ["OpenWeatherClient", "WEATHER_PATH"]

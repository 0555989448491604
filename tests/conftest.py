from __future__ import annotations

import threading
from typing import Any

import pytest

from weather_sdk.config import SDKSettings
from weather_sdk.core import InstanceRegistry


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingFetcher:
    """Fetcher returning ``"<key>#<n>"`` and recording every call."""

    def __init__(self, errors: dict[str, Exception] | None = None) -> None:
        self.calls: list[str] = []
        self.errors = errors or {}
        self._lock = threading.Lock()

    def __call__(self, key: str) -> str:
        with self._lock:
            self.calls.append(key)
            count = self.calls.count(key)
        error = self.errors.get(key.lower())
        if error is not None:
            raise error
        return f"{key.lower()}#{count}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher() -> RecordingFetcher:
    return RecordingFetcher()


@pytest.fixture
def make_fetcher():
    return RecordingFetcher


@pytest.fixture
def settings() -> SDKSettings:
    return SDKSettings(_env_file=None, api_key=None)


@pytest.fixture
def registry(settings: SDKSettings):
    reg = InstanceRegistry(settings)
    yield reg
    reg.destroy_all()


@pytest.fixture
def weather_payload() -> dict[str, Any]:
    return {
        "coord": {"lon": 139.69, "lat": 35.69},
        "weather": [{"id": 802, "main": "Clouds", "description": "scattered clouds", "icon": "03d"}],
        "main": {"temp": 18.4, "feels_like": 17.9, "pressure": 1016, "humidity": 60},
        "visibility": 10000,
        "wind": {"speed": 4.12, "deg": 150},
        "dt": 1700000000,
        "sys": {"country": "JP", "sunrise": 1699994000, "sunset": 1700032000},
        "timezone": 32400,
        "name": "Tokyo",
    }

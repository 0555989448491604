"""Cached, per-credential access to OpenWeatherMap current weather."""

from .cache import CacheEntry, CacheManager, EntryStore
from .client import OpenWeatherClient, WeatherData
from .config import SDKConfig, SDKMode, SDKSettings
from .core import (
    FetchResult,
    InstanceRegistry,
    PollingManager,
    RefreshReport,
    WeatherSDK,
    get_instance,
    get_registry,
)
from .exceptions import (
    CityNotFoundError,
    InvalidKeyError,
    MalformedResponseError,
    NotRegisteredError,
    RateLimitedError,
    UnauthorizedError,
    UnreachableError,
    WeatherAPIError,
    WeatherSDKError,
)

__all__ = [
    "CacheEntry",
    "CacheManager",
    "CityNotFoundError",
    "EntryStore",
    "FetchResult",
    "InstanceRegistry",
    "InvalidKeyError",
    "MalformedResponseError",
    "NotRegisteredError",
    "OpenWeatherClient",
    "PollingManager",
    "RateLimitedError",
    "RefreshReport",
    "SDKConfig",
    "SDKMode",
    "SDKSettings",
    "UnauthorizedError",
    "UnreachableError",
    "WeatherAPIError",
    "WeatherData",
    "WeatherSDK",
    "WeatherSDKError",
    "get_instance",
    "get_registry",
]

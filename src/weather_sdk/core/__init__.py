"""Instance lifecycle: registry, façade and background polling."""

from .polling import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_SHUTDOWN_GRACE_SECONDS,
    PollingManager,
    RefreshReport,
)
from .registry import InstanceRegistry, get_instance, get_registry
from .results import FetchResult, Fetcher, call_fetcher
from .sdk import WeatherSDK, credential_fingerprint

__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_SHUTDOWN_GRACE_SECONDS",
    "FetchResult",
    "Fetcher",
    "InstanceRegistry",
    "PollingManager",
    "RefreshReport",
    "WeatherSDK",
    "call_fetcher",
    "credential_fingerprint",
    "get_instance",
    "get_registry",
]

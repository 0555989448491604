"""Per-credential façade combining the cache, optional poller and fetcher."""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar

from ..cache import CacheManager
from ..config import SDKMode, SDKSettings
from ..exceptions import InvalidKeyError, NotRegisteredError
from .polling import PollingManager
from .results import FetchResult, Fetcher, call_fetcher

if TYPE_CHECKING:
    from .registry import InstanceRegistry

T = TypeVar("T")

logger = logging.getLogger(__name__)


def credential_fingerprint(credential: str) -> str:
    """Short, non-reversible identifier safe to put in log records."""

    return hashlib.sha256(credential.encode("utf-8")).hexdigest()[:12]


class WeatherSDK(Generic[T]):
    """Serves weather lookups for one credential.

    Instances are created and torn down by an :class:`InstanceRegistry`; use
    :func:`weather_sdk.get_instance` (or ``InstanceRegistry.get_or_create``)
    rather than calling the constructor directly.
    """

    def __init__(
        self,
        credential: str,
        mode: SDKMode,
        fetcher: Fetcher[T],
        *,
        registry: InstanceRegistry,
        settings: SDKSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        settings = settings or SDKSettings()
        self._credential = credential
        self._mode = SDKMode(mode)
        self._fetcher = fetcher
        self._registry = registry
        self._on_close = on_close
        self._cache: CacheManager[T] = CacheManager(
            maxsize=settings.cache_max_size,
            ttl_seconds=settings.cache_ttl,
            clock=clock,
        )
        self._poller: PollingManager[T] | None = None
        if self._mode is SDKMode.POLLING:
            self._poller = PollingManager(
                self._cache,
                fetcher,
                interval=settings.poll_interval,
                shutdown_grace=settings.shutdown_grace,
                name=f"weather-sdk-poller-{self.fingerprint}",
            )

    @property
    def credential(self) -> str:
        return self._credential

    @property
    def fingerprint(self) -> str:
        return credential_fingerprint(self._credential)

    @property
    def mode(self) -> SDKMode:
        return self._mode

    @property
    def fetcher(self) -> Fetcher[T]:
        return self._fetcher

    @property
    def cache(self) -> CacheManager[T]:
        return self._cache

    @property
    def poller(self) -> PollingManager[T] | None:
        return self._poller

    def get_weather(self, city: str) -> T:
        """Return weather for ``city``, from cache when fresh, else from the API.

        Raises :class:`InvalidKeyError` for a blank city and re-raises whatever
        the fetcher raised on a cache miss.
        """

        return self.lookup(city).unwrap()

    def lookup(self, city: str) -> FetchResult[T]:
        """Like :meth:`get_weather`, but fetch failures are returned, not raised."""

        if city is None or not city.strip():
            return FetchResult.failure(InvalidKeyError("City name cannot be empty."))
        city = city.strip()

        cached = self._cache.get_if_valid(city)
        if cached is not None:
            logger.debug("Returning cached weather data", extra={"city": city})
            return FetchResult.success(cached)

        logger.debug("Cache miss; fetching from API", extra={"city": city, "mode": self._mode.value})
        result = call_fetcher(self._fetcher, city)
        if result.ok:
            self._cache.put(city, result.value)  # type: ignore[arg-type]
        return result

    def destroy(self) -> NotRegisteredError | None:
        """Remove this instance from its registry and stop background work."""

        return self._registry.destroy(self)

    def _start(self) -> None:
        if self._poller is not None:
            self._poller.start()

    def _close(self) -> None:
        if self._poller is not None:
            self._poller.stop()
        if self._on_close is not None:
            self._on_close()

    def __repr__(self) -> str:
        return f"WeatherSDK(mode={self._mode.value!r}, credential_fingerprint={self.fingerprint!r})"


__all__ = ["WeatherSDK", "credential_fingerprint"]

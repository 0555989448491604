"""Process-wide registry guaranteeing one live SDK instance per credential."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from ..client import OpenWeatherClient
from ..config import SDKConfig, SDKMode, SDKSettings
from ..exceptions import NotRegisteredError
from .results import Fetcher
from .sdk import WeatherSDK, credential_fingerprint

logger = logging.getLogger(__name__)

_default_registry: InstanceRegistry | None = None
_default_registry_lock = threading.Lock()


class InstanceRegistry:
    """Maps credentials to live :class:`WeatherSDK` instances.

    Creation and removal are serialized by one mutex, so concurrent
    ``get_or_create`` calls for a credential build exactly one instance.
    Stopping a removed instance's poller happens outside the mutex because it
    may wait for an in-flight refresh cycle.
    """

    def __init__(self, settings: SDKSettings | None = None) -> None:
        self._settings = settings
        self._instances: dict[str, WeatherSDK[Any]] = {}
        self._lock = threading.Lock()

    def get_or_create(
        self,
        credential: str,
        mode: SDKMode,
        fetcher: Fetcher[Any],
        *,
        settings: SDKSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_close: Callable[[], None] | None = None,
    ) -> WeatherSDK[Any]:
        """Return the instance registered for ``credential``, creating it if absent.

        ``mode``, ``fetcher`` and ``settings`` only apply when a new instance
        is built; an existing instance is returned as-is.
        """

        if not credential or not credential.strip():
            raise ValueError("credential must not be empty")

        with self._lock:
            existing = self._instances.get(credential)
            if existing is not None:
                return existing
            instance: WeatherSDK[Any] = WeatherSDK(
                credential,
                SDKMode(mode),
                fetcher,
                registry=self,
                settings=settings or self._settings,
                clock=clock,
                on_close=on_close,
            )
            self._instances[credential] = instance
            instance._start()

        logger.info(
            "WeatherSDK initialized",
            extra={"mode": instance.mode.value, "credential_fingerprint": instance.fingerprint},
        )
        return instance

    def get(self, credential: str) -> WeatherSDK[Any] | None:
        with self._lock:
            return self._instances.get(credential)

    def destroy(self, instance: WeatherSDK[Any]) -> NotRegisteredError | None:
        """Unregister ``instance`` and stop its background work.

        Destroying an instance that is no longer registered is a no-op; the
        returned :class:`NotRegisteredError` reports it instead of raising.
        """

        with self._lock:
            registered = self._instances.get(instance.credential)
            if registered is instance:
                del self._instances[instance.credential]
            else:
                registered = None

        if registered is None:
            logger.warning(
                "Attempted to destroy SDK instance that was not found in the registry.",
                extra={"credential_fingerprint": instance.fingerprint},
            )
            return NotRegisteredError(
                f"No SDK instance registered for credential {instance.fingerprint}"
            )

        instance._close()
        logger.info(
            "WeatherSDK instance destroyed",
            extra={"credential_fingerprint": instance.fingerprint},
        )
        return None

    def destroy_all(self) -> None:
        """Destroy every registered instance."""

        with self._lock:
            instances = list(self._instances.values())
        for instance in instances:
            self.destroy(instance)

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)

    def __contains__(self, credential: object) -> bool:
        with self._lock:
            return credential in self._instances


def get_registry() -> InstanceRegistry:
    """Return the process-wide registry, creating it on first use."""

    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = InstanceRegistry()
    return _default_registry


def get_instance(
    config: SDKConfig,
    *,
    fetcher: Fetcher[Any] | None = None,
    settings: SDKSettings | None = None,
    registry: InstanceRegistry | None = None,
) -> WeatherSDK[Any]:
    """Return the SDK instance for ``config.credential``.

    Without an explicit ``fetcher`` the instance talks to OpenWeatherMap
    through an :class:`~weather_sdk.client.OpenWeatherClient` that is closed
    when the instance is destroyed.
    """

    if registry is None:
        registry = get_registry()
    existing = registry.get(config.credential)
    if existing is not None:
        return existing

    settings = settings or SDKSettings()
    on_close: Callable[[], None] | None = None
    if fetcher is None:
        client = OpenWeatherClient.from_settings(config.credential, settings)
        fetcher = client.fetch
        on_close = client.close

    logger.debug(
        "Resolving SDK instance",
        extra={"credential_fingerprint": credential_fingerprint(config.credential)},
    )
    instance = registry.get_or_create(
        config.credential,
        config.mode,
        fetcher,
        settings=settings,
        on_close=on_close,
    )
    if on_close is not None and instance.fetcher is not fetcher:
        # Another caller registered the credential first.
        on_close()
    return instance


__all__ = ["InstanceRegistry", "get_instance", "get_registry"]

"""Background refresh of every city held in an instance's cache."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ..cache import CacheManager
from .results import Fetcher, call_fetcher

T = TypeVar("T")

DEFAULT_POLL_INTERVAL_SECONDS = 10 * 60
DEFAULT_SHUTDOWN_GRACE_SECONDS = 5.0

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RefreshReport:
    """Keys touched by one refresh cycle."""

    refreshed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    cancelled: bool = False


class PollingManager(Generic[T]):
    """Re-fetches all cached keys on a fixed period from a dedicated thread.

    The first cycle runs as soon as :meth:`start` is called. :meth:`stop` waits
    up to ``shutdown_grace`` seconds for a running cycle; past that, the cycle
    is cancelled and drops its remaining keys, including any value it was
    still fetching when cancellation happened.
    """

    def __init__(
        self,
        cache: CacheManager[T],
        fetcher: Fetcher[T],
        *,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        shutdown_grace: float = DEFAULT_SHUTDOWN_GRACE_SECONDS,
        name: str = "weather-sdk-poller",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._cache = cache
        self._fetcher = fetcher
        self._interval = float(interval)
        self._shutdown_grace = max(0.0, float(shutdown_grace))
        self._name = name
        self._state_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._orphan: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._cancel_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None

    @property
    def interval(self) -> float:
        return self._interval

    def start(self) -> None:
        """Start the refresh thread; a no-op if it is already running.

        Raises :class:`RuntimeError` if a cycle cancelled by an earlier
        :meth:`stop` is still stuck in its fetch after one more grace period.
        """

        with self._state_lock:
            if self._thread is not None:
                return
            orphan = self._orphan
            if orphan is not None:
                orphan.join(self._shutdown_grace)
                if orphan.is_alive():
                    raise RuntimeError("cancelled refresh cycle is still running")
                self._orphan = None
            self._stop_event = threading.Event()
            self._cancel_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(self._stop_event, self._cancel_event),
                name=self._name,
                daemon=True,
            )
            self._thread = thread
            thread.start()
        logger.info("Polling manager started", extra={"interval": self._interval})

    def stop(self) -> None:
        with self._state_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            if thread is not threading.current_thread():
                thread.join(self._shutdown_grace)
            if thread.is_alive() and thread is not threading.current_thread():
                self._cancel_event.set()
                self._orphan = thread
                logger.warning(
                    "Refresh cycle did not finish within grace period; cancelled",
                    extra={"grace_seconds": self._shutdown_grace},
                )
            self._thread = None
        logger.info("Polling manager stopped.")

    def refresh_all(self) -> RefreshReport:
        """Run one refresh cycle synchronously on the calling thread."""

        return self._refresh_cycle(threading.Event())

    def _run(self, stop_event: threading.Event, cancel_event: threading.Event) -> None:
        while not stop_event.is_set():
            self._refresh_cycle(cancel_event)
            if stop_event.wait(self._interval):
                break

    def _refresh_cycle(self, cancel_event: threading.Event) -> RefreshReport:
        report = RefreshReport()
        keys = self._cache.keys()
        if not keys:
            logger.debug("No cities in cache to poll.")
            return report

        logger.debug("Starting polling cycle", extra={"key_count": len(keys)})
        for key in sorted(keys):
            if cancel_event.is_set():
                report.cancelled = True
                break
            try:
                result = call_fetcher(self._fetcher, key)
            except Exception:
                logger.exception("Unexpected error while polling", extra={"cache_key": key})
                report.failed.append(key)
                continue

            if cancel_event.is_set():
                report.cancelled = True
                break
            if result.ok:
                if self._cache.replace(key, result.value):  # type: ignore[arg-type]
                    report.refreshed.append(key)
                else:
                    logger.debug("Key left the cache during refresh", extra={"cache_key": key})
                    report.skipped.append(key)
            else:
                logger.warning(
                    "Failed to poll weather for %s: %s",
                    key,
                    result.error,
                    extra={"cache_key": key, "error_type": type(result.error).__name__},
                )
                report.failed.append(key)

        logger.debug(
            "Polling cycle completed",
            extra={"refreshed": len(report.refreshed), "failed": len(report.failed)},
        )
        return report


__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_SHUTDOWN_GRACE_SECONDS",
    "PollingManager",
    "RefreshReport",
]

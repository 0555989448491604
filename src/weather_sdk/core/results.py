"""Typed value-or-error results passed between the fetcher, cache and registry."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

from ..exceptions import WeatherSDKError

T = TypeVar("T")

Fetcher: TypeAlias = Callable[[str], T]


@dataclass(frozen=True, slots=True)
class FetchResult(Generic[T]):
    """Outcome of one lookup: exactly one of ``value`` or ``error`` is meaningful."""

    value: T | None = None
    error: WeatherSDKError | None = None

    @classmethod
    def success(cls, value: T) -> FetchResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: WeatherSDKError) -> FetchResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error unchanged."""

        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def call_fetcher(fetcher: Fetcher[T], key: str) -> FetchResult[T]:
    """Invoke ``fetcher`` and fold SDK errors into a :class:`FetchResult`.

    Anything that is not a :class:`WeatherSDKError` is a bug in the fetcher
    and is left to propagate.
    """

    try:
        return FetchResult.success(fetcher(key))
    except WeatherSDKError as exc:
        return FetchResult.failure(exc)


__all__ = ["FetchResult", "Fetcher", "call_fetcher"]

"""In-process TTL cache for the upstream station list."""

import asyncio
import time
from typing import Generic, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Holds one value until its time-to-live runs out.

    The station list is fetched at most once per TTL; callers coordinate
    refreshes through ``lock`` and re-check the cache after acquiring it.
    Nothing is persisted between process runs.
    """

    def __init__(self, ttl: float = 3600.0):
        self._ttl = ttl
        self._value: T | None = None
        self._expires_at: float = 0
        self._lock = asyncio.Lock()

    def get(self) -> T | None:
        """Return the value, or None once it has expired or was never set."""
        if self._value is not None and time.monotonic() < self._expires_at:
            return self._value
        return None

    def set(self, value: T) -> None:
        self._value = value
        self._expires_at = time.monotonic() + self._ttl

    def clear(self) -> None:
        self._value = None
        self._expires_at = 0

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

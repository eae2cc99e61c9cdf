"""In-memory TTL cache for resolved prices and balances."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from .constants import DEFAULT_CACHE_TTL_SECONDS
from .domain import ResolvedValue


@dataclass(frozen=True)
class CacheEntry:
    value: ResolvedValue
    fetched_at: float  # clock() at store time


class TTLCache:
    """Key -> (value, fetched_at) store with lazy expiry.

    An entry is fresh while ``clock() - fetched_at <= ttl``. Stale entries are
    never swept; ``get`` treats them as a miss and the next ``put`` replaces
    them. Entries are immutable and swapped in whole, so readers never see a
    value paired with another write's timestamp.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be non-negative, got {ttl_seconds}")
        self._ttl = ttl_seconds
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> ResolvedValue | None:
        """Return the cached value, or ``None`` if missing or expired."""
        with self._lock:
            entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at > self._ttl:
            return None
        return entry.value

    def put(self, key: str, value: ResolvedValue) -> None:
        """Store *value* under *key*, overwriting any previous entry."""
        entry = CacheEntry(value=value, fetched_at=self._clock())
        with self._lock:
            self._store[key] = entry

    def invalidate(self, key: str) -> None:
        """Remove a single key (no-op if absent)."""
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

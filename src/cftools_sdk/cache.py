"""Response cache used by the caching CFTools client."""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

DEFAULT_EXPIRY_SECONDS = 3600
DEFAULT_SWEEP_INTERVAL_SECONDS = 60


class Cache(Protocol):
    """Key/value store with per-entry expiry in seconds."""

    def get(self, cache_key: str, default: Any = None) -> Any:
        """Return the value for the key, or ``default`` when absent or expired."""
        ...

    def set(self, cache_key: str, value: Any, expiry: Optional[int] = None) -> None:
        """Store the value; implementations document their default expiry."""
        ...


@dataclass
class CacheEntry:
    value: Any
    not_after: float


class InMemoryCache:
    """Process-local cache. Entries default to one hour of lifetime.

    Expired entries are dropped when read, and in a sweep over all entries
    that ``set()`` runs at most once per ``sweep_interval`` seconds.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ):
        self._entries: Dict[str, CacheEntry] = {}
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    def get(self, cache_key: str, default: Any = None) -> Any:
        entry = self._entries.get(cache_key)
        if entry is None:
            return default
        if entry.not_after <= self._clock():
            del self._entries[cache_key]
            return default
        return entry.value

    def set(self, cache_key: str, value: Any, expiry: Optional[int] = None) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self.evict_expired()
        self._entries[cache_key] = CacheEntry(
            value=value, not_after=now + (expiry or DEFAULT_EXPIRY_SECONDS)
        )

    def evict_expired(self) -> int:
        """Drop every expired entry and return how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.not_after <= now]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self._sweep_interval
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

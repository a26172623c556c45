"""In-memory TTL cache keyed by colon-delimited namespaces.

Keys look like ``stocks:all`` or ``portfolio:stocks:transactions:25:AAPL``.
All durations are milliseconds measured on ``time.monotonic``. An entry is
live while ``now - stored_at <= ttl``; once it is not, reads treat it as
absent whether or not it has been removed yet.
"""

from __future__ import annotations

import fnmatch
import logging
import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from portfolio_dash.services.ttl_policy import resolve_default_ttl

log = logging.getLogger(__name__)

KeyMatcher = Callable[[str], bool]

WARM_THRESHOLD = 5


def _now_ms() -> float:
    return time.monotonic() * 1000


def regex_matcher(pattern: str) -> KeyMatcher:
    """Unanchored regex search. Raises ``re.error`` for a bad pattern."""
    regex = re.compile(pattern)
    return lambda key: regex.search(key) is not None


def prefix_matcher(prefix: str) -> KeyMatcher:
    return lambda key: key.startswith(prefix)


def glob_matcher(pattern: str) -> KeyMatcher:
    return lambda key: fnmatch.fnmatchcase(key, pattern)


@dataclass(slots=True)
class CacheEntry:
    value: Any
    stored_at: float  # ms, monotonic
    ttl: float  # ms

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_live(self, now: float) -> bool:
        return now - self.stored_at <= self.ttl


class CacheStats(BaseModel):
    size: int = 0
    keys: list[str] = Field(default_factory=list)


class EntryInfo(BaseModel):
    exists: bool
    age: float | None = None
    ttl: float | None = None
    expires_in: float | None = None


class TTLCache:
    """Key-value store with per-entry TTL and namespace-based default TTLs.

    ``default_ttl`` picks the TTL when ``set`` is called without one; it is
    ``resolve_default_ttl`` unless a configured ``TTLPolicy`` is injected.
    Every ``set`` sweeps expired entries of all keys (O(n)); pass
    ``sweep_on_write=False`` to rely on lazy expiry on read only.

    ``get_stats`` reports the raw map without sweeping, so it can include
    expired entries that nothing has touched yet.
    """

    def __init__(
        self,
        default_ttl: Callable[[str], float] = resolve_default_ttl,
        *,
        sweep_on_write: bool = True,
    ) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._default_ttl = default_ttl
        self._sweep_on_write = sweep_on_write

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        if ttl is None:
            ttl = self._default_ttl(key)
        with self._lock:
            now = _now_ms()
            self._store[key] = CacheEntry(value=value, stored_at=now, ttl=ttl)
            if self._sweep_on_write:
                self._purge(now)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._live_entry(key)
            return entry.value if entry is not None else None

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def invalidate_pattern(self, pattern: str) -> int:
        """Drop every key the regex ``pattern`` finds a match in.

        The search is unanchored: ``"stocks:"`` removes ``stocks:all`` and
        ``portfolio:stocks:positions`` alike. A malformed pattern raises
        ``re.error`` before anything is removed.
        """
        return self.invalidate_matching(regex_matcher(pattern))

    def invalidate_matching(self, matcher: KeyMatcher) -> int:
        with self._lock:
            doomed = [key for key in self._store if matcher(key)]
            for key in doomed:
                del self._store[key]
        if doomed:
            log.debug("Invalidated %d cache keys", len(doomed))
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def purge_expired(self) -> int:
        """Remove every expired entry now. Returns how many were removed."""
        with self._lock:
            return self._purge(_now_ms())

    def get_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._store), keys=list(self._store))

    def get_info(self, key: str) -> EntryInfo:
        """Age and remaining life of ``key``. Never evicts."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return EntryInfo(exists=False)
            age = entry.age(_now_ms())
        return EntryInfo(
            exists=True,
            age=age,
            ttl=entry.ttl,
            expires_in=max(0.0, entry.ttl - age),
        )

    # Callers must hold self._lock.

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if not entry.is_live(_now_ms()):
            del self._store[key]
            return None
        return entry

    def _purge(self, now: float) -> int:
        expired = [k for k, e in self._store.items() if not e.is_live(now)]
        for key in expired:
            del self._store[key]
        return len(expired)


def cache_status(stats: CacheStats) -> str:
    """Coarse fill level for status displays: empty, warming or warm."""
    if stats.size == 0:
        return "empty"
    if stats.size < WARM_THRESHOLD:
        return "warming"
    return "warm"

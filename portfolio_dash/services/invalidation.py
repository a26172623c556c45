"""Eviction helpers used by mutating calls to keep the cache honest."""

from __future__ import annotations

import logging

from portfolio_dash.services.cache import KeyMatcher, TTLCache

log = logging.getLogger(__name__)


class Invalidator:
    """Exact-key and pattern eviction over a ``TTLCache``.

    Every method removes synchronously: once it returns, reads of the
    matched keys come back empty.
    """

    def __init__(self, cache: TTLCache) -> None:
        self.cache = cache

    def key(self, key: str) -> None:
        self.cache.invalidate(key)

    def keys(self, *keys: str) -> None:
        for key in keys:
            self.cache.invalidate(key)

    def pattern(self, pattern: str) -> int:
        """Regex eviction; ``re.error`` propagates for a bad pattern."""
        removed = self.cache.invalidate_pattern(pattern)
        log.debug("Pattern %r evicted %d keys", pattern, removed)
        return removed

    def namespace(self, prefix: str) -> int:
        """Evict a logical namespace such as ``"stocks:"``.

        ``prefix`` is passed through as a regex, matching anywhere in the key.
        """
        return self.pattern(prefix)

    def matching(self, matcher: KeyMatcher) -> int:
        return self.cache.invalidate_matching(matcher)

    def everything(self) -> None:
        self.cache.clear()

"""Cache-aside wrapper around async producers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from portfolio_dash.services.cache import TTLCache

log = logging.getLogger(__name__)

T = TypeVar("T")

Producer = Callable[[], Awaitable[T]]

STALE_SUFFIX = ":stale"


def stale_key(key: str) -> str:
    return key + STALE_SUFFIX


class CachedRequester:
    """Serve ``key`` from the cache, calling ``producer`` only on a miss.

    On producer failure the value at ``key + ":stale"`` is returned if one is
    live, otherwise the producer's exception propagates unchanged. Nothing
    writes that slot unless ``stale_ttl`` is given, in which case every
    successful fetch also stores a shadow copy there for ``stale_ttl`` ms.

    Concurrent misses for the same key each call the producer and the last
    write wins. With ``coalesce=True`` they share one in-flight fetch.
    """

    def __init__(
        self,
        cache: TTLCache,
        *,
        stale_ttl: float | None = None,
        coalesce: bool = False,
    ) -> None:
        self.cache = cache
        self.stale_ttl = stale_ttl
        self.coalesce = coalesce
        self._inflight: dict[str, asyncio.Future[Any]] = {}

    async def __call__(
        self, key: str, producer: Producer[T], ttl: float | None = None
    ) -> T:
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("Cache HIT for %s", key)
            return cached

        log.debug("Cache MISS for %s - calling producer", key)
        if not self.coalesce:
            return await self._fetch(key, producer, ttl)

        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(key, producer, ttl))
            self._inflight[key] = pending
            pending.add_done_callback(lambda _: self._inflight.pop(key, None))
        else:
            log.debug("Joining in-flight fetch for %s", key)
        return await asyncio.shield(pending)

    @property
    def inflight(self) -> list[str]:
        return list(self._inflight)

    async def _fetch(self, key: str, producer: Producer[T], ttl: float | None) -> T:
        try:
            result = await producer()
        except Exception:
            stale = self.cache.get(stale_key(key))
            if stale is not None:
                log.warning("Producer failed, using stale cache for %s", key)
                return stale
            raise

        self.cache.set(key, result, ttl)
        if self.stale_ttl is not None:
            self.cache.set(stale_key(key), result, self.stale_ttl)
        return result


async def cached_request(
    cache: TTLCache, key: str, producer: Producer[T], ttl: float | None = None
) -> T:
    """One-off cache-aside call with the default (uncoalesced, no shadow) gate."""
    return await CachedRequester(cache)(key, producer, ttl)

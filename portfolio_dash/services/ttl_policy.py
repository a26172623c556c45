"""Default TTL selection by key namespace."""

from __future__ import annotations

from collections.abc import Mapping

MINUTE_MS = 60 * 1000

# Order matters: the first namespace found anywhere in the key wins.
DEFAULT_TTL_TABLE: tuple[tuple[str, int], ...] = (
    ("stocks", 5 * MINUTE_MS),
    ("cryptos", 3 * MINUTE_MS),
    ("positions", 2 * MINUTE_MS),
    ("summary", 1 * MINUTE_MS),
)
DEFAULT_TTL = 5 * MINUTE_MS


def resolve_default_ttl(
    key: str,
    table: tuple[tuple[str, int], ...] = DEFAULT_TTL_TABLE,
    fallback: int = DEFAULT_TTL,
) -> int:
    """Return the TTL in milliseconds for a key written without an explicit one.

    Classification is plain substring membership, not prefix parsing, so
    ``"autotrader:summary"`` lands in ``summary`` and ``"portfolio:stocks:x"``
    lands in ``stocks``.
    """
    for namespace, ttl in table:
        if namespace in key:
            return ttl
    return fallback


class TTLPolicy:
    """A namespace table plus fallback, injectable into the cache."""

    def __init__(
        self,
        table: tuple[tuple[str, int], ...] = DEFAULT_TTL_TABLE,
        fallback: int = DEFAULT_TTL,
    ) -> None:
        self.table = tuple(table)
        self.fallback = fallback

    @classmethod
    def with_overrides(
        cls, overrides: Mapping[str, int], fallback: int = DEFAULT_TTL
    ) -> TTLPolicy:
        """Override TTLs of known namespaces; unknown ones are appended last."""
        table = [(ns, overrides.get(ns, ttl)) for ns, ttl in DEFAULT_TTL_TABLE]
        known = {ns for ns, _ in DEFAULT_TTL_TABLE}
        table.extend((ns, ttl) for ns, ttl in overrides.items() if ns not in known)
        return cls(tuple(table), fallback)

    def __call__(self, key: str) -> int:
        return resolve_default_ttl(key, self.table, self.fallback)

"""Shared test fixtures."""

from __future__ import annotations

import pytest

import portfolio_dash.services.cache as cache_mod
from portfolio_dash.services.cache import TTLCache


class FakeClock:
    """Millisecond clock the cache reads instead of time.monotonic."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(cache_mod, "_now_ms", fake)
    return fake


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache()


@pytest.fixture
def sample_stock() -> dict:
    return {
        "id": "1",
        "symbol": "AAPL",
        "name": "Apple Inc.",
        "current_price": 190.5,
        "score": 8.2,
        "change": 1.5,
        "change_percent": 0.79,
        "volume": 1_000_000,
        "market_cap": 2.9e12,
        "sector": "Technology",
    }


@pytest.fixture
def sample_position() -> dict:
    return {
        "id": "p1",
        "symbol": "BTC",
        "name": "Bitcoin",
        "type": "crypto",
        "quantity": 0.5,
        "entryPrice": 60000,
        "currentPrice": 65000,
        "value": 32500,
        "pnl": 2500,
        "pnlPercent": 8.33,
        "source": "manual",
        "positionSide": "LONG",
    }

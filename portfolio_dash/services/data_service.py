"""Orchestrator: cached reads and invalidating writes against the portfolio API."""

from __future__ import annotations

import logging
from typing import Any

from portfolio_dash.api import endpoints
from portfolio_dash.api.client import PortfolioAPIClient
from portfolio_dash.api.models import (
    Alert,
    AlertConfig,
    AssetType,
    AutotraderRunResult,
    AutotraderSummary,
    Crypto,
    HealthStatus,
    ManualPosition,
    Position,
    Stock,
)
from portfolio_dash.config import Settings
from portfolio_dash.services import cache_keys as keys
from portfolio_dash.services.cache import TTLCache
from portfolio_dash.services.cached_request import CachedRequester
from portfolio_dash.services.invalidation import Invalidator

log = logging.getLogger(__name__)


class DataService:
    """Serves dashboard data through one cache and keeps it consistent on writes.

    Reads go through the cache-aside gate. Every mutation evicts the affected
    key or namespace before the API round-trip, so a failed mutation still
    leaves the cache clean.
    """

    def __init__(
        self,
        settings: Settings,
        client: PortfolioAPIClient | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        self.settings = settings
        if client is None:
            client = PortfolioAPIClient(
                settings.api_url,
                timeout=settings.request_timeout,
                health_timeout=settings.health_timeout,
            )
        self.client = client
        # TTLCache defines __len__, so an empty cache is falsy.
        if cache is None:
            cache = TTLCache(settings.ttl_policy(), sweep_on_write=settings.sweep_on_write)
        self.cache = cache
        self.cached = CachedRequester(
            self.cache,
            stale_ttl=settings.stale_ttl,
            coalesce=settings.coalesce_requests,
        )
        self.invalidate = Invalidator(self.cache)

    async def close(self) -> None:
        await self.client.close()

    # ── Stocks ──

    async def get_all_stocks(self) -> list[Stock]:
        return await self.cached(
            keys.STOCKS_ALL, lambda: endpoints.get_stocks(self.client)
        )

    async def get_stocks_by_score(self) -> list[Stock]:
        return await self.cached(
            keys.STOCKS_BY_SCORE,
            lambda: endpoints.get_stocks(self.client, by_score=True),
        )

    async def get_stock(self, symbol: str) -> Stock:
        return await self.cached(
            keys.stock_detail(symbol), lambda: endpoints.get_stock(self.client, symbol)
        )

    async def refresh_stocks(self) -> None:
        self.invalidate.namespace(keys.STOCKS_NS)
        await endpoints.refresh_stocks(self.client)

    # ── Cryptos ──

    async def get_all_cryptos(self) -> list[Crypto]:
        return await self.cached(
            keys.CRYPTOS_ALL, lambda: endpoints.get_cryptos(self.client)
        )

    async def get_cryptos_by_score(self) -> list[Crypto]:
        return await self.cached(
            keys.CRYPTOS_BY_SCORE,
            lambda: endpoints.get_cryptos(self.client, by_score=True),
        )

    async def get_crypto(self, symbol: str) -> Crypto:
        return await self.cached(
            keys.crypto_detail(symbol), lambda: endpoints.get_crypto(self.client, symbol)
        )

    async def refresh_cryptos(self) -> None:
        self.invalidate.namespace(keys.CRYPTOS_NS)
        await endpoints.refresh_cryptos(self.client)

    # ── Positions ──

    async def get_autotrader_positions(
        self, asset_type: AssetType | None = None
    ) -> list[Position]:
        return await self.cached(
            keys.autotrader_positions(asset_type),
            lambda: endpoints.get_autotrader_positions(self.client, asset_type),
        )

    async def get_manual_positions(self) -> list[Position]:
        return await self.cached(
            keys.POSITIONS_MANUAL, lambda: endpoints.get_manual_positions(self.client)
        )

    async def create_manual_position(self, position: ManualPosition) -> Position:
        self.invalidate.key(keys.POSITIONS_MANUAL)
        return await endpoints.create_manual_position(self.client, position)

    async def update_manual_position(
        self, position_id: str, position: ManualPosition
    ) -> Position:
        self.invalidate.key(keys.POSITIONS_MANUAL)
        return await endpoints.update_manual_position(self.client, position_id, position)

    async def delete_manual_position(self, position_id: str) -> None:
        self.invalidate.key(keys.POSITIONS_MANUAL)
        await endpoints.delete_manual_position(self.client, position_id)

    async def refresh_positions(self) -> None:
        self.invalidate.namespace(keys.POSITIONS_NS)
        await endpoints.refresh_positions(self.client)

    async def get_position_analysis(self, symbol: str) -> dict[str, Any]:
        return await self.cached(
            keys.position_analysis(symbol),
            lambda: endpoints.get_position_analysis(self.client, symbol),
            self.settings.analysis_ttl,
        )

    # ── Autotrader ──

    async def run_autotrader(self) -> AutotraderRunResult:
        self.invalidate.namespace(keys.POSITIONS_NS)
        self.invalidate.key(keys.AUTOTRADER_SUMMARY)
        return await endpoints.run_autotrader(self.client)

    async def get_autotrader_summary(self) -> AutotraderSummary:
        return await self.cached(
            keys.AUTOTRADER_SUMMARY, lambda: endpoints.get_autotrader_summary(self.client)
        )

    # ── Portfolio ──

    async def get_portfolio_overview(self) -> dict[str, Any]:
        return await self.cached(
            keys.PORTFOLIO_OVERVIEW,
            lambda: endpoints.get_portfolio_overview(self.client),
            self.settings.portfolio_ttl,
        )

    async def get_portfolio_positions(self, market: str) -> dict[str, Any]:
        """``market`` is ``"stocks"`` or ``"crypto"``."""
        return await self.cached(
            keys.portfolio_positions(market),
            lambda: endpoints.get_portfolio_positions(self.client, market),
            self.settings.portfolio_ttl,
        )

    async def get_portfolio_transactions(
        self, market: str, limit: int | None = None, symbol: str | None = None
    ) -> dict[str, Any]:
        return await self.cached(
            keys.portfolio_transactions(market, limit, symbol),
            lambda: endpoints.get_portfolio_transactions(
                self.client, market, limit=limit, symbol=symbol
            ),
            self.settings.transactions_ttl,
        )

    async def get_portfolio_performance(
        self, market: str, days: int | None = None
    ) -> dict[str, Any]:
        return await self.cached(
            keys.portfolio_performance(market, days),
            lambda: endpoints.get_portfolio_performance(self.client, market, days=days),
            self.settings.performance_ttl,
        )

    async def get_portfolio_comparison(self) -> dict[str, Any]:
        return await self.cached(
            keys.PORTFOLIO_COMPARISON,
            lambda: endpoints.get_portfolio_comparison(self.client),
            self.settings.portfolio_ttl,
        )

    async def refresh_portfolio(self) -> None:
        self.invalidate.namespace(keys.PORTFOLIO_NS)
        await endpoints.refresh_portfolio(self.client)

    # ── Alerts ──

    async def get_alerts(self, position_id: str | None = None) -> list[Alert]:
        return await self.cached(
            keys.alerts(position_id),
            lambda: endpoints.get_alerts(self.client, position_id),
            self.settings.alerts_ttl,
        )

    async def create_alert(self, config: AlertConfig) -> Alert:
        self.invalidate.namespace(keys.ALERTS_NS)
        return await endpoints.create_alert(self.client, config)

    async def update_alert(self, alert_id: str, changes: dict[str, Any]) -> Alert:
        self.invalidate.namespace(keys.ALERTS_NS)
        return await endpoints.update_alert(self.client, alert_id, changes)

    async def delete_alert(self, alert_id: str) -> None:
        self.invalidate.namespace(keys.ALERTS_NS)
        await endpoints.delete_alert(self.client, alert_id)

    async def dismiss_alert(self, alert_id: str) -> None:
        self.invalidate.namespace(keys.ALERTS_NS)
        await endpoints.dismiss_alert(self.client, alert_id)

    async def check_alerts(self) -> list[Alert]:
        """Live trigger check, never cached."""
        return await endpoints.check_alerts(self.client)

    async def health_check(self) -> HealthStatus:
        return await endpoints.health_check(self.client)

    def clear_cache(self) -> None:
        self.invalidate.everything()

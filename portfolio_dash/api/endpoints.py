"""Typed fetch and mutate functions for the portfolio API."""

from __future__ import annotations

from typing import Any

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
    dump_payload,
)

# ── Market data ──


async def get_stocks(client: PortfolioAPIClient, *, by_score: bool = False) -> list[Stock]:
    params = {"sort": "score"} if by_score else None
    data = await client.get("/stocks", params=params)
    return [Stock(**s) for s in data]


async def get_stock(client: PortfolioAPIClient, symbol: str) -> Stock:
    return Stock(**await client.get(f"/stocks/{symbol}"))


async def refresh_stocks(client: PortfolioAPIClient) -> None:
    await client.post("/stocks/refresh")


async def get_cryptos(client: PortfolioAPIClient, *, by_score: bool = False) -> list[Crypto]:
    params = {"sort": "score"} if by_score else None
    data = await client.get("/cryptos", params=params)
    return [Crypto(**c) for c in data]


async def get_crypto(client: PortfolioAPIClient, symbol: str) -> Crypto:
    return Crypto(**await client.get(f"/cryptos/{symbol}"))


async def refresh_cryptos(client: PortfolioAPIClient) -> None:
    await client.post("/cryptos/refresh")


# ── Positions ──


async def get_autotrader_positions(
    client: PortfolioAPIClient, asset_type: AssetType | None = None
) -> list[Position]:
    params = {"type": asset_type} if asset_type else None
    data = await client.get("/positions/autotrader", params=params)
    return [Position(**p) for p in data]


async def get_manual_positions(client: PortfolioAPIClient) -> list[Position]:
    data = await client.get("/positions/manual")
    return [Position(**p) for p in data]


async def create_manual_position(
    client: PortfolioAPIClient, position: ManualPosition
) -> Position:
    return Position(**await client.post("/positions/manual", json=dump_payload(position)))


async def update_manual_position(
    client: PortfolioAPIClient, position_id: str, position: ManualPosition
) -> Position:
    data = await client.put(f"/positions/manual/{position_id}", json=dump_payload(position))
    return Position(**data)


async def delete_manual_position(client: PortfolioAPIClient, position_id: str) -> None:
    await client.delete(f"/positions/manual/{position_id}")


async def refresh_positions(client: PortfolioAPIClient) -> None:
    await client.post("/positions/refresh")


async def get_position_analysis(client: PortfolioAPIClient, symbol: str) -> dict[str, Any]:
    return await client.get(f"/positions/analysis/{symbol}")


# ── Autotrader ──


async def run_autotrader(client: PortfolioAPIClient) -> AutotraderRunResult:
    return AutotraderRunResult(**await client.post("/autotrader/run"))


async def get_autotrader_summary(client: PortfolioAPIClient) -> AutotraderSummary:
    return AutotraderSummary(**await client.get("/autotrader/summary"))


# ── Portfolio (raw JSON, shapes vary by backend version) ──


async def get_portfolio_overview(client: PortfolioAPIClient) -> dict[str, Any]:
    return await client.get("/portfolio/overview")


async def get_portfolio_positions(client: PortfolioAPIClient, market: str) -> dict[str, Any]:
    return await client.get(f"/portfolio/{market}/positions")


async def get_portfolio_transactions(
    client: PortfolioAPIClient,
    market: str,
    *,
    limit: int | None = None,
    symbol: str | None = None,
) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if limit:
        params["limit"] = limit
    if symbol:
        params["symbol"] = symbol
    return await client.get(f"/portfolio/{market}/transactions", params=params)


async def get_portfolio_performance(
    client: PortfolioAPIClient, market: str, *, days: int | None = None
) -> dict[str, Any]:
    params = {"days": days} if days else None
    return await client.get(f"/portfolio/{market}/performance", params=params)


async def get_portfolio_comparison(client: PortfolioAPIClient) -> dict[str, Any]:
    return await client.get("/portfolio/analytics/comparison")


async def refresh_portfolio(client: PortfolioAPIClient) -> None:
    await client.post("/portfolio/refresh")


# ── Alerts ──


async def get_alerts(
    client: PortfolioAPIClient, position_id: str | None = None
) -> list[Alert]:
    params = {"positionId": position_id} if position_id else None
    data = await client.get("/alerts", params=params)
    return [Alert(**a) for a in data]


async def create_alert(client: PortfolioAPIClient, config: AlertConfig) -> Alert:
    return Alert(**await client.post("/alerts", json=dump_payload(config)))


async def update_alert(
    client: PortfolioAPIClient, alert_id: str, changes: dict[str, Any]
) -> Alert:
    return Alert(**await client.put(f"/alerts/{alert_id}", json=changes))


async def delete_alert(client: PortfolioAPIClient, alert_id: str) -> None:
    await client.delete(f"/alerts/{alert_id}")


async def dismiss_alert(client: PortfolioAPIClient, alert_id: str) -> None:
    await client.patch(f"/alerts/{alert_id}/dismiss")


async def check_alerts(client: PortfolioAPIClient) -> list[Alert]:
    data = await client.get("/alerts/check")
    return [Alert(**a) for a in data]


async def health_check(client: PortfolioAPIClient) -> HealthStatus:
    return HealthStatus(**await client.health_check())

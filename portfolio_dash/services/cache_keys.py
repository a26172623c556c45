"""Cache key names shared by the service layer."""

from __future__ import annotations

STOCKS_ALL = "stocks:all"
STOCKS_BY_SCORE = "stocks:by-score"
CRYPTOS_ALL = "cryptos:all"
CRYPTOS_BY_SCORE = "cryptos:by-score"
POSITIONS_AUTOTRADER = "positions:autotrader"
POSITIONS_MANUAL = "positions:manual"
AUTOTRADER_SUMMARY = "autotrader:summary"
PORTFOLIO_OVERVIEW = "portfolio:overview"
PORTFOLIO_COMPARISON = "portfolio:analytics:comparison"

# Namespace patterns for bulk eviction
STOCKS_NS = "stocks:"
CRYPTOS_NS = "cryptos:"
POSITIONS_NS = "positions:"
PORTFOLIO_NS = "portfolio:"
ALERTS_NS = "alerts:"


def stock_detail(symbol: str) -> str:
    return f"stock:{symbol}"


def crypto_detail(symbol: str) -> str:
    return f"crypto:{symbol}"


def autotrader_positions(asset_type: str | None = None) -> str:
    return f"{POSITIONS_AUTOTRADER}:{asset_type}" if asset_type else POSITIONS_AUTOTRADER


def position_analysis(symbol: str) -> str:
    return f"position:analysis:{symbol}"


def portfolio_positions(market: str) -> str:
    """``market`` is ``stocks`` or ``crypto``."""
    return f"portfolio:{market}:positions"


def portfolio_transactions(
    market: str, limit: int | None = None, symbol: str | None = None
) -> str:
    return f"portfolio:{market}:transactions:{limit or 'all'}:{symbol or 'all'}"


def portfolio_performance(market: str, days: int | None = None) -> str:
    return f"portfolio:{market}:performance:{days or 'default'}"


def alerts(position_id: str | None = None) -> str:
    return f"alerts:{position_id or 'all'}"

"""Pydantic models for the portfolio API responses.

The backend is inconsistent about key casing (``current_price`` on some
endpoints, ``currentPrice`` on others), so every model accepts both.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

AssetType = Literal["stock", "crypto"]
PositionSide = Literal["LONG", "SHORT"]


class APIModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Stock(APIModel):
    id: str
    symbol: str
    name: str
    current_price: float
    score: float
    change: float = 0.0
    change_percent: float = 0.0
    volume: float = 0.0
    market_cap: float | None = None
    sector: str | None = None


class Crypto(APIModel):
    id: str
    symbol: str
    name: str
    current_price: float
    score: float
    change: float = 0.0
    change_percent: float = 0.0
    volume: float = 0.0
    market_cap: float | None = None


class Position(APIModel):
    id: str
    symbol: str
    name: str
    type: AssetType
    quantity: float
    entry_price: float
    current_price: float
    value: float
    pnl: float
    pnl_percent: float
    source: Literal["autotrader", "manual"]
    position_side: PositionSide | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ManualPosition(APIModel):
    """Payload for creating or updating a manual position."""

    id: str | None = None
    symbol: str
    name: str
    type: AssetType
    quantity: float
    entry_price: float
    position_side: PositionSide | None = None
    notes: str | None = None


class AutotraderSummary(BaseModel):
    cycle_start: str
    actions_taken: int = 0
    buy_signals: int = 0
    sell_signals: int = 0
    total_value: float = 0.0
    total_pnl: float = 0.0
    success_rate: float = 0.0


class AutotraderRunResult(BaseModel):
    success: bool
    summary: AutotraderSummary
    message: str | None = None


class AlertConfig(APIModel):
    id: str | None = None
    position_id: str
    symbol: str
    type: Literal["price", "percentage", "technical", "news", "earnings"]
    condition: Literal["above", "below", "equals", "crosses_above", "crosses_below"]
    value: float
    message: str | None = None
    sound_enabled: bool | None = None
    email_enabled: bool | None = None
    expires_at: str | None = None


class Alert(APIModel):
    id: str
    config: AlertConfig
    status: Literal["active", "triggered", "expired", "dismissed"]
    message: str = ""
    triggered_at: str | None = None
    dismissed_at: str | None = None
    actual_value: float | None = None


class HealthStatus(BaseModel):
    status: str
    service: str | None = None


def dump_payload(model: BaseModel) -> dict:
    """Serialize a request body the way the backend expects it (camelCase)."""
    return model.model_dump(by_alias=True, exclude_none=True)


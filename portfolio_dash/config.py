"""Load .env and settings.yaml, expose all configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from portfolio_dash.services.ttl_policy import DEFAULT_TTL, TTLPolicy

log = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _load_env() -> None:
    env_path = PROJECT_ROOT / ".env"
    load_dotenv(env_path)


def _load_yaml(settings_path: Path | None = None) -> dict:
    settings_path = settings_path or PROJECT_ROOT / "settings.yaml"
    if settings_path.exists():
        try:
            with open(settings_path) as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError:
            log.warning("Failed to parse %s, using defaults", settings_path.name)
            return {}
    return {}


class Settings(BaseModel):
    api_url: str = "http://localhost:8000"

    @field_validator("api_url")
    @classmethod
    def strip_api_url(cls, v: str) -> str:
        return v.strip().rstrip("/")
    request_timeout: float = 60.0
    health_timeout: float = 5.0
    # Cache TTLs are milliseconds.
    # ttl_overrides: namespace → TTL, merged over the built-in table.
    ttl_overrides: dict[str, int] = Field(default_factory=dict)
    default_ttl: int = DEFAULT_TTL
    # Shadow copy at "<key>:stale" on every successful fetch. None = off.
    stale_ttl: int | None = None
    coalesce_requests: bool = False
    sweep_on_write: bool = True
    analysis_ttl: int = 300_000
    portfolio_ttl: int = 300_000
    transactions_ttl: int = 600_000
    performance_ttl: int = 600_000
    alerts_ttl: int = 60_000

    @property
    def api_base(self) -> str:
        """Root of the versioned REST API."""
        return f"{self.api_url}/api/v1"

    def ttl_policy(self) -> TTLPolicy:
        return TTLPolicy.with_overrides(self.ttl_overrides, fallback=self.default_ttl)


def load_settings(settings_path: Path | None = None) -> Settings:
    _load_env()
    raw = _load_yaml(settings_path)
    api_url = os.getenv("PORTFOLIO_API_URL")
    if api_url:
        raw["api_url"] = api_url
    return Settings(**raw)

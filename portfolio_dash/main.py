"""Entry point: warm the cache or check backend health from the shell."""

from __future__ import annotations

import argparse
import asyncio
import logging

import httpx
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from portfolio_dash.config import load_settings
from portfolio_dash.services.cache import TTLCache, cache_status
from portfolio_dash.services.data_service import DataService

log = logging.getLogger(__name__)


def render_stats(cache: TTLCache) -> Table:
    stats = cache.get_stats()
    table = Table(title=f"Cache ({stats.size} entries, {cache_status(stats)})")
    table.add_column("Key")
    table.add_column("Age (s)", justify="right")
    table.add_column("TTL (s)", justify="right")
    table.add_column("Expires in (s)", justify="right")
    for key in sorted(stats.keys):
        info = cache.get_info(key)
        if not info.exists:
            continue
        table.add_row(
            key,
            f"{info.age / 1000:.1f}",
            f"{info.ttl / 1000:.0f}",
            f"{info.expires_in / 1000:.1f}",
        )
    return table


async def _warm(service: DataService) -> None:
    loaders = (
        service.get_all_stocks,
        service.get_all_cryptos,
        service.get_manual_positions,
        service.get_autotrader_positions,
        service.get_autotrader_summary,
        service.get_portfolio_overview,
    )
    for load in loaders:
        try:
            await load()
        except (httpx.HTTPError, ValidationError) as exc:
            log.warning("Failed to load %s: %s", load.__name__, exc)


async def _run(command: str, console: Console) -> int:
    service = DataService(load_settings())
    try:
        if command == "health":
            status = await service.health_check()
            console.print(f"[bold green]{status.status}[/bold green] {status.service or ''}")
            return 0
        await _warm(service)
        console.print(render_stats(service.cache))
        return 0
    except httpx.HTTPError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        return 1
    finally:
        await service.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="portfolio-dash")
    parser.add_argument("command", choices=("stats", "health"), nargs="?", default="stats")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args.command, Console()))


if __name__ == "__main__":
    raise SystemExit(main())

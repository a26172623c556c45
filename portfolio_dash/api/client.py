"""Async httpx wrapper for the portfolio REST API with request logging."""

from __future__ import annotations

import logging
from typing import Any

import httpx

log = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"


class PortfolioAPIClient:
    """Async HTTP client for ``{api_url}/api/v1``.

    Errors are not wrapped: ``httpx.HTTPStatusError`` and
    ``httpx.RequestError`` reach the caller as raised.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = 60.0,
        health_timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self._health_timeout = health_timeout
        kwargs: dict[str, Any] = {
            "base_url": f"{self.api_url}/api/v1",
            "timeout": timeout,
            "headers": {"Content-Type": "application/json"},
            "event_hooks": {
                "request": [self._log_request],
                "response": [self._log_response],
            },
        }
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PortfolioAPIClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @staticmethod
    async def _log_request(request: httpx.Request) -> None:
        log.debug("API Request: %s %s", request.method, request.url)

    @staticmethod
    async def _log_response(response: httpx.Response) -> None:
        log.debug("API Response: %s %s", response.status_code, response.request.url)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log.error("API Error: %s %s", exc.response.status_code, exc.response.text)
            raise
        except httpx.RequestError as exc:
            log.error("Network Error: %s", exc)
            raise
        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self._request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self._request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self._request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    async def health_check(self) -> Any:
        """GET ``/health``, which lives outside ``/api/v1``."""
        response = await self._client.get(
            f"{self.api_url}/health", timeout=self._health_timeout
        )
        response.raise_for_status()
        return response.json()

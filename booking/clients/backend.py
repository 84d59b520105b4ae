from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import httpx

from booking.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)

QueryParams = Union[Dict[str, Any], Sequence[Tuple[str, Any]]]


class BackendClient:
    """Async HTTP client for the hosted backend's REST interface (PostgREST)."""

    def __init__(
        self,
        base_url: str | None,
        *,
        timeout: float = 10.0,
        use_mock_data: bool = True,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/") if base_url else None
        self._timeout = timeout
        self.use_mock_data = use_mock_data or not self._base_url
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if api_key:
            self._headers.update({
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            })
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        if not self.use_mock_data and self._base_url:
            self._client = self._build_client()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self.use_mock_data or not self._base_url:
            raise RuntimeError("HTTP client requested while running in mock mode")
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        payload: Dict[str, Any] | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Any:
        if self.use_mock_data:
            raise RuntimeError("Real HTTP call requested while mock mode is enabled")
        client = await self._ensure_client()
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await client.request(
                method, path, params=params, json=payload, headers=headers
            )
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.exception("Backend returned error %s", exc.response.status_code)
            raise DownstreamServiceError(
                "Backend returned an error response",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach backend: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach backend", status_code=None, cause=exc
            ) from exc

    async def get(self, path: str, params: QueryParams | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(
        self,
        path: str,
        payload: Dict[str, Any],
        *,
        params: QueryParams | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Any:
        return await self._request("POST", path, params=params, payload=payload, headers=headers)

    async def patch(
        self,
        path: str,
        payload: Dict[str, Any],
        *,
        params: QueryParams | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Any:
        return await self._request("PATCH", path, params=params, payload=payload, headers=headers)

    async def simulate_latency(self) -> None:
        """Allow services to await for latency even when mocking responses."""

        await asyncio.sleep(0)

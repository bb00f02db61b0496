"""Python consumer of the gateway's JSON contract.

The gateway itself makes exactly one upstream attempt per request.
Retrying belongs here, at the calling layer, as an explicit
``RetryPolicy``: bounded exponential backoff with jitter, never for
4xx responses.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from listing_gateway.agents import listing_agent_display
from listing_gateway.routes import SEARCH_PARAMS
from listing_gateway.services.params import MIN_QUERY_LENGTH, is_valid_listing_id

logger = logging.getLogger(__name__)


class GatewayApiError(Exception):
    """Raised for any non-2xx or non-JSON gateway response."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_retries: int = 1
    base_delay: float = 0.5
    max_delay: float = 8.0
    jitter: bool = True

    def should_retry(self, error: Exception, attempt: int) -> bool:
        """``attempt`` counts retries already made (0 for the first failure)."""
        if attempt >= self.max_retries:
            return False
        if isinstance(error, GatewayApiError):
            return not error.is_client_error
        return isinstance(error, httpx.TransportError)

    def delay_for(self, attempt: int) -> float:
        delay = min(self.base_delay * (2**attempt), self.max_delay)
        if self.jitter:
            delay = random.uniform(0, delay)
        return delay


NO_RETRY = RetryPolicy(max_retries=0)


class GatewayClient:
    """Async client for the four gateway routes."""

    def __init__(
        self,
        base_url: str,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._retry_policy = retry_policy or RetryPolicy()
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep

    async def search_listings(self, **params: Any) -> dict[str, Any]:
        """Search listings; unknown and empty filters are dropped locally."""
        query = {
            key: str(value)
            for key, value in params.items()
            if key in SEARCH_PARAMS.names and value is not None and value != ""
        }
        return await self._get("/api/repliers/listings", query)

    async def get_listing(self, listing_id: str) -> dict[str, Any]:
        if not is_valid_listing_id(listing_id):
            raise GatewayApiError("Invalid listing ID", 400)
        return await self._get(f"/api/repliers/listing/{listing_id}")

    async def get_listing_agent(self, listing_id: str) -> dict[str, Any]:
        """Contact card for the listing agent of ``listing_id``."""
        return listing_agent_display(await self.get_listing(listing_id))

    async def autocomplete(self, query: str) -> dict[str, Any]:
        if not query or len(query) < MIN_QUERY_LENGTH:
            return {"suggestions": []}
        return await self._get("/api/repliers/autocomplete", {"q": query})

    async def check_health(self) -> dict[str, Any]:
        return await self._get("/api/repliers/health")

    async def _get(self, path: str, params: Mapping[str, str] | None = None) -> dict[str, Any]:
        attempt = 0
        while True:
            try:
                return await self._get_once(path, params)
            except (GatewayApiError, httpx.TransportError) as exc:
                if not self._retry_policy.should_retry(exc, attempt):
                    raise
                delay = self._retry_policy.delay_for(attempt)
                logger.info("Retrying %s in %.2fs after %s", path, delay, exc)
                await self._sleep(delay)
                attempt += 1

    async def _get_once(self, path: str, params: Mapping[str, str] | None) -> dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.get(
                path, params=dict(params or {}), headers={"Accept": "application/json"}
            )
        return _handle_response(response)


def _handle_response(response: httpx.Response) -> dict[str, Any]:
    # Guards against an HTML fallback page served in place of the gateway.
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        raise GatewayApiError(
            f"Expected JSON, got {content_type}. First 120 chars: {response.text[:120]}",
            response.status_code,
        )

    if response.is_success:
        return response.json()

    message = "Request failed"
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        message = str(body["error"])
    raise GatewayApiError(message, response.status_code)

"""Single-attempt HTTP client for the Repliers listings API.

One outbound GET per inbound request. No retries, no backoff, no
circuit breaker: retry policy belongs to the caller of the gateway
(see ``listing_gateway.client``). A fresh ``httpx.AsyncClient`` is used
per call so no state is shared between concurrent requests.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from listing_gateway.config import Settings
from listing_gateway.services.credentials import UpstreamCredential

logger = logging.getLogger(__name__)

ERROR_BODY_LOG_LIMIT = 500


class UpstreamClient:
    """Issue authenticated GET requests to the listings provider."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> UpstreamClient:
        return cls(settings.repliers_base_url, timeout=settings.upstream_timeout_seconds)

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def get(
        self,
        path: str,
        credential: UpstreamCredential,
        params: Mapping[str, str] | None = None,
        *,
        log_name: str = "upstream",
        error_body_limit: int = ERROR_BODY_LOG_LIMIT,
    ) -> httpx.Response:
        """GET ``path`` with the credential attached.

        Non-2xx responses are returned, not raised; their body is logged
        (truncated) for diagnostics. Transport errors propagate.
        """
        headers = {**credential.as_headers(), "Accept": "application/json"}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            request = client.build_request(
                "GET", self.url_for(path), params=dict(params or {}), headers=headers
            )
            logger.info(
                "[%s] auth header name: %s, bearer: %s",
                log_name,
                credential.header_name,
                credential.is_bearer,
            )
            logger.info("[%s] Fetching: %s", log_name, credential.redact(str(request.url)))
            response = await client.send(request)

        if not response.is_success:
            logger.warning(
                "[%s] Upstream error: status=%d body=%s",
                log_name,
                response.status_code,
                credential.redact(_body_text(response))[:error_body_limit],
            )
        return response


def _body_text(response: httpx.Response) -> str:
    """Best-effort decode of an error body for logging."""
    try:
        return response.text
    except Exception:
        return "Unknown error"

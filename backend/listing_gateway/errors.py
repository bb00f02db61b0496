"""Gateway error taxonomy.

Every failure the gateway reports to a client is one of these exceptions,
rendered as an ``ErrorEnvelope`` with the status code the class carries.
"""

from __future__ import annotations

from listing_gateway.schemas import ErrorEnvelope


class GatewayError(Exception):
    """Base class for failures surfaced to the client as an ErrorEnvelope."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None, *, upstream_status: int | None = None) -> None:
        self.message = message or self.default_message
        self.upstream_status = upstream_status
        super().__init__(self.message)

    def envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(error=self.message, status=self.upstream_status)


class ConfigurationError(GatewayError):
    """The upstream secret is not configured. Affects only the current request."""

    status_code = 500
    default_message = "API key not configured"


class InvalidRequestError(GatewayError):
    """Client-correctable input problem (bad id, short query)."""

    status_code = 400
    default_message = "Invalid request"


class MethodNotAllowedError(InvalidRequestError):
    status_code = 405
    default_message = "Method not allowed"


class UpstreamNotFoundError(GatewayError):
    status_code = 404
    default_message = "Listing not found"


class UpstreamError(GatewayError):
    """Upstream answered with a non-2xx status the route does not handle."""

    status_code = 502
    default_message = "Upstream API error"

    def __init__(self, upstream_status: int) -> None:
        super().__init__(upstream_status=upstream_status)

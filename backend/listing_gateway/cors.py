"""Origin policy for the gateway's CORS headers.

Browsers only expose a response body to page scripts when the
``Access-Control-Allow-Origin`` header matches the calling page, so the
same headers are attached to every response, errors and preflights
included. Untrusted origins get the production domain back instead of a
reflection or a wildcard.
"""

from __future__ import annotations

from dataclasses import dataclass

from listing_gateway.config import Settings

ALLOW_HEADERS = "Content-Type"
ALLOW_METHODS = "GET, OPTIONS"


@dataclass(frozen=True, slots=True)
class OriginPolicy:
    production_origin: str
    preview_suffix: str
    local_prefix: str

    @classmethod
    def from_settings(cls, settings: Settings) -> OriginPolicy:
        return cls(
            production_origin=settings.production_origin,
            preview_suffix=settings.preview_origin_suffix,
            local_prefix=settings.local_origin_prefix,
        )

    def is_allowed(self, origin: str | None) -> bool:
        if not origin:
            return False
        if origin == self.production_origin:
            return True
        # An empty suffix/prefix would match every origin.
        if self.preview_suffix and origin.endswith(self.preview_suffix):
            return True
        return bool(self.local_prefix) and origin.startswith(self.local_prefix)

    def allow_origin(self, origin: str | None) -> str:
        """Return the value for ``Access-Control-Allow-Origin``."""
        if origin and self.is_allowed(origin):
            return origin
        return self.production_origin

    def headers(self, origin: str | None) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin(origin),
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            # The reflected origin varies per caller; keep shared caches honest.
            "Vary": "Origin",
        }

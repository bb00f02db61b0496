"""Upstream credential resolution.

The secret is read from the settings on every request and only ever
leaves the process in the upstream request header.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from listing_gateway.config import DEFAULT_API_KEY_HEADER, Settings
from listing_gateway.errors import ConfigurationError

BEARER_PREFIX = "Bearer "
REDACTED = "***"


@dataclass(frozen=True, slots=True)
class UpstreamCredential:
    header_name: str
    header_value: str = field(repr=False)
    secret: str = field(repr=False)

    @property
    def is_bearer(self) -> bool:
        return self.header_value.startswith(BEARER_PREFIX)

    def as_headers(self) -> dict[str, str]:
        return {self.header_name: self.header_value}

    def redact(self, text: str) -> str:
        """Replace every occurrence of the secret in ``text``."""
        if not self.secret:
            return text
        return text.replace(self.secret, REDACTED)


def build_credential(header_name: str, secret: str) -> UpstreamCredential:
    header_name = header_name or DEFAULT_API_KEY_HEADER
    if header_name.lower() == "authorization":
        value = f"{BEARER_PREFIX}{secret}"
    else:
        value = secret
    return UpstreamCredential(header_name=header_name, header_value=value, secret=secret)


def resolve_credential(settings: Settings) -> UpstreamCredential:
    """Build the upstream auth header from settings.

    Raises ConfigurationError if the secret is missing.
    """
    if not settings.repliers_api_key:
        raise ConfigurationError()
    return build_credential(settings.repliers_api_key_header, settings.repliers_api_key)

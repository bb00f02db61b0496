from __future__ import annotations

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_KEY_HEADER = "REPLIERS-API-KEY"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream shared secret, NEVER returned to clients or logged
    repliers_api_key: str = ""
    # Header the secret is sent under; "Authorization" switches to Bearer format
    repliers_api_key_header: str = DEFAULT_API_KEY_HEADER
    repliers_base_url: str = "https://api.repliers.io"
    upstream_timeout_seconds: float = 10.0

    # CORS origin policy
    production_origin: str = "https://allagentconnect.com"
    preview_origin_suffix: str = ".netlify.app"  # deploy previews
    local_origin_prefix: str = "http://localhost:"

    @model_validator(mode="after")
    def _normalize_credentials(self) -> Settings:
        # A missing key is reported per request, not at startup.
        self.repliers_api_key = self.repliers_api_key.strip()
        self.repliers_api_key_header = (
            self.repliers_api_key_header.strip() or DEFAULT_API_KEY_HEADER
        )
        self.repliers_base_url = self.repliers_base_url.rstrip("/")
        return self

    @property
    def api_key_configured(self) -> bool:
        return bool(self.repliers_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from listing_gateway.config import Settings
from listing_gateway.main import create_app

UPSTREAM_BASE_URL = "https://api.repliers.io"
UPSTREAM_HOST = "api.repliers.io"
TEST_API_KEY = "test-repliers-key-9f3c2a"
PRODUCTION_ORIGIN = "https://allagentconnect.com"


def make_settings(**overrides) -> Settings:
    """Settings isolated from any .env file on the machine running tests."""
    values = {
        "repliers_api_key": TEST_API_KEY,
        "repliers_api_key_header": "REPLIERS-API-KEY",
        "repliers_base_url": UPSTREAM_BASE_URL,
        "production_origin": PRODUCTION_ORIGIN,
        "preview_origin_suffix": ".netlify.app",
        "local_origin_prefix": "http://localhost:",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def assert_cors_headers(response, origin: str = PRODUCTION_ORIGIN) -> None:
    assert response.headers["access-control-allow-origin"] == origin
    assert response.headers["access-control-allow-headers"] == "Content-Type"
    assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"
    assert response.headers["content-type"].startswith("application/json")


# ── Settings fixtures ─────────────────────────────────────────────────


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    return make_settings()


@pytest.fixture(name="settings_no_key")
def settings_no_key_fixture() -> Settings:
    return make_settings(repliers_api_key="")


# ── HTTP client fixtures ──────────────────────────────────────────────


@pytest.fixture(name="client")
def client_fixture(settings):
    """TestClient for an app built around the test settings."""
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture(name="client_no_key")
def client_no_key_fixture(settings_no_key):
    """TestClient whose settings carry no upstream API key."""
    with TestClient(create_app(settings_no_key)) as client:
        yield client

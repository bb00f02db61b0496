"""Tests for the CORS origin policy."""
from __future__ import annotations

import pytest

from conftest import PRODUCTION_ORIGIN, make_settings
from listing_gateway.cors import OriginPolicy


@pytest.fixture(name="policy")
def policy_fixture() -> OriginPolicy:
    return OriginPolicy.from_settings(make_settings())


@pytest.mark.parametrize(
    "origin",
    [
        PRODUCTION_ORIGIN,
        "https://deploy-preview-12--allagentconnect.netlify.app",
        "https://main--allagentconnect.netlify.app",
        "http://localhost:5173",
        "http://localhost:8888",
    ],
)
def test_allowed_origins_are_reflected(policy, origin):
    assert policy.allow_origin(origin) == origin


@pytest.mark.parametrize(
    "origin",
    [
        None,
        "",
        "https://evil.example",
        "https://allagentconnect.com.evil.example",
        "https://netlify.app.evil.example",
        "http://localhost",
        "https://localhost:5173",
        "http://127.0.0.1:5173",
        "null",
        "*",
    ],
)
def test_untrusted_origins_fall_back_to_production(policy, origin):
    assert policy.allow_origin(origin) == PRODUCTION_ORIGIN


def test_headers_are_fixed_except_origin(policy):
    headers = policy.headers("http://localhost:3000")

    assert headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
    assert headers["Access-Control-Allow-Headers"] == "Content-Type"
    assert headers["Access-Control-Allow-Methods"] == "GET, OPTIONS"
    assert headers["Vary"] == "Origin"


def test_never_emits_wildcard_or_empty(policy):
    for origin in (None, "", "*", "https://evil.example"):
        value = policy.headers(origin)["Access-Control-Allow-Origin"]
        assert value
        assert value != "*"


def test_empty_suffix_and_prefix_do_not_allow_everything():
    policy = OriginPolicy(production_origin=PRODUCTION_ORIGIN, preview_suffix="", local_prefix="")

    assert policy.allow_origin("https://evil.example") == PRODUCTION_ORIGIN
    assert policy.allow_origin(PRODUCTION_ORIGIN) == PRODUCTION_ORIGIN


def test_policy_is_pure(policy):
    first = policy.headers("https://evil.example")
    second = policy.headers("https://evil.example")
    assert first == second

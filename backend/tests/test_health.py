from __future__ import annotations

import httpx

from conftest import TEST_API_KEY, UPSTREAM_HOST, assert_cors_headers


def _mock_health_check(respx_mock, **kwargs):
    return respx_mock.get(host=UPSTREAM_HOST, path="/listings").mock(**kwargs)


def test_health_ok(client, respx_mock):
    """Healthy upstream → ok=true with a timestamp."""
    route = _mock_health_check(respx_mock, return_value=httpx.Response(200, json={"listings": []}))

    resp = client.get("/api/repliers/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert data["envConfigured"] is True
    assert data["upstreamHealthy"] is True
    assert data["authHeader"] == "REPLIERS-API-KEY"
    assert "timestamp" in data
    assert dict(route.calls.last.request.url.params) == {"resultsPerPage": "1"}
    assert resp.headers["cache-control"] == "no-store"
    assert_cors_headers(resp)


def test_health_missing_key_still_returns_200(client_no_key, respx_mock):
    resp = client_no_key.get("/api/repliers/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is False
    assert data["envConfigured"] is False
    assert data["upstreamHealthy"] is False
    assert "REPLIERS_API_KEY" in data["error"]
    assert respx_mock.calls.call_count == 0


def test_health_upstream_503(client, respx_mock):
    _mock_health_check(respx_mock, return_value=httpx.Response(503, text="Service Unavailable"))

    resp = client.get("/api/repliers/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is False
    assert data["envConfigured"] is True
    assert data["upstreamHealthy"] is False
    assert data["upstreamStatus"] == 503
    assert data["error"] == "Upstream returned 503"
    assert "timestamp" not in data


def test_health_connection_error(client, respx_mock):
    _mock_health_check(respx_mock, side_effect=httpx.ConnectError("Connection refused"))

    resp = client.get("/api/repliers/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is False
    assert data["upstreamHealthy"] is False
    assert data["error"] == "Connection refused"


def test_health_never_exposes_the_secret(client, respx_mock):
    _mock_health_check(respx_mock, return_value=httpx.Response(200, json={}))

    resp = client.get("/api/repliers/health")

    assert TEST_API_KEY not in resp.text


# ── Edge Cases ────────────────────────────────────────────────────────


class TestHealthMethods:
    def test_preflight(self, client, respx_mock):
        resp = client.options("/api/repliers/health")
        assert resp.status_code == 200
        assert resp.content == b""
        assert_cors_headers(resp)
        assert respx_mock.calls.call_count == 0

    def test_post_rejected(self, client, respx_mock):
        resp = client.post("/api/repliers/health")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}
        assert_cors_headers(resp)

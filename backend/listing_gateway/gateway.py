"""Request pipeline shared by every gateway route.

origin policy → method guard → parameter sanitation → credential →
single upstream call → response mapping. CORS headers are computed first
and attached to every response the pipeline produces.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from listing_gateway.config import Settings
from listing_gateway.cors import OriginPolicy
from listing_gateway.errors import (
    ConfigurationError,
    GatewayError,
    InvalidRequestError,
    MethodNotAllowedError,
    UpstreamError,
    UpstreamNotFoundError,
)
from listing_gateway.routes import HEALTH, HEALTH_CHECK_PARAMS, NotFoundMode, RouteSpec
from listing_gateway.schemas import AutocompleteUnavailable, HealthReport
from listing_gateway.services.credentials import UpstreamCredential, resolve_credential
from listing_gateway.services.params import sanitize_query, validate_listing_id
from listing_gateway.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)

HEALTH_ERROR_BODY_LOG_LIMIT = 200


# ── Method guard ─────────────────────────────────────────────────────


def is_preflight(method: str) -> bool:
    """Return True for OPTIONS, False for GET, raise for anything else."""
    method = method.upper()
    if method == "OPTIONS":
        return True
    if method != "GET":
        raise MethodNotAllowedError()
    return False


# ── Response construction ────────────────────────────────────────────


def preflight_response(cors: Mapping[str, str]) -> Response:
    return Response(content=b"", status_code=200, media_type="application/json", headers=dict(cors))


def error_response(exc: GatewayError, cors: Mapping[str, str]) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.envelope().to_content(),
        headers=dict(cors),
    )


def success_response(route: RouteSpec, body: Any, cors: Mapping[str, str]) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=body,
        headers={**cors, "Cache-Control": route.cache_control()},
    )


def map_upstream_response(
    route: RouteSpec, response: httpx.Response, cors: Mapping[str, str]
) -> JSONResponse:
    """Translate an upstream response into the gateway's JSON contract.

    2xx bodies are passed through unchanged. Raises GatewayError for
    failures the route does not degrade gracefully.
    """
    if response.is_success:
        return success_response(route, response.json(), cors)

    if response.status_code == 404:
        if route.not_found is NotFoundMode.LISTING_NOT_FOUND:
            raise UpstreamNotFoundError()
        if route.not_found is NotFoundMode.EMPTY_SUGGESTIONS:
            return success_response(route, AutocompleteUnavailable().model_dump(), cors)

    raise UpstreamError(response.status_code)


# ── Pipeline ─────────────────────────────────────────────────────────


def _log_gateway_error(route: RouteSpec, exc: GatewayError) -> None:
    if isinstance(exc, ConfigurationError):
        logger.error("[%s] REPLIERS_API_KEY not configured", route.log_name)
    elif isinstance(exc, InvalidRequestError):
        logger.debug("[%s] Rejected request: %s", route.log_name, exc.message)
    else:
        logger.info("[%s] Responding %d: %s", route.log_name, exc.status_code, exc.message)


def _upstream_path(route: RouteSpec, listing_id: str | None) -> str:
    if "{listing_id}" not in route.upstream_path:
        return route.upstream_path
    safe_id = validate_listing_id(listing_id)
    return route.upstream_path.format(listing_id=quote(safe_id, safe=""))


async def _fetch(
    route: RouteSpec,
    upstream: UpstreamClient,
    path: str,
    params: Mapping[str, str],
    credential: UpstreamCredential,
    cors: Mapping[str, str],
) -> JSONResponse:
    try:
        response = await upstream.get(path, credential, params, log_name=route.log_name)
        return map_upstream_response(route, response, cors)
    except GatewayError:
        raise
    except Exception as exc:
        message = credential.redact(str(exc))
        logger.warning("[%s] Error: %s", route.log_name, message, exc_info=True)
        raise GatewayError(message or None) from exc


async def relay(
    request: Request,
    route: RouteSpec,
    settings: Settings,
    upstream: UpstreamClient,
    *,
    listing_id: str | None = None,
) -> Response:
    """Run one inbound request through the gateway pipeline."""
    cors = OriginPolicy.from_settings(settings).headers(request.headers.get("origin"))
    try:
        if is_preflight(request.method):
            return preflight_response(cors)

        params: dict[str, str] = {}
        if route.allowlist is not None:
            params = sanitize_query(request.query_params, route.allowlist)
        path = _upstream_path(route, listing_id)

        credential = resolve_credential(settings)
        return await _fetch(route, upstream, path, params, credential, cors)
    except GatewayError as exc:
        _log_gateway_error(route, exc)
        return error_response(exc, cors)


# ── Health ───────────────────────────────────────────────────────────


async def check_upstream(settings: Settings, upstream: UpstreamClient) -> HealthReport:
    """Check credential presence and upstream reachability.

    Never raises: every outcome is described in the returned report.
    """
    try:
        credential = resolve_credential(settings)
    except ConfigurationError:
        logger.error("[%s] REPLIERS_API_KEY not configured", HEALTH.log_name)
        return HealthReport(
            ok=False,
            env_configured=False,
            error="REPLIERS_API_KEY environment variable not set",
        )

    logger.info("[%s] Testing upstream connectivity...", HEALTH.log_name)
    try:
        response = await upstream.get(
            HEALTH.upstream_path,
            credential,
            HEALTH_CHECK_PARAMS,
            log_name=HEALTH.log_name,
            error_body_limit=HEALTH_ERROR_BODY_LOG_LIMIT,
        )
    except Exception as exc:
        message = credential.redact(str(exc))
        logger.warning("[%s] Error: %s", HEALTH.log_name, message, exc_info=True)
        return HealthReport(
            ok=False,
            env_configured=True,
            upstream_healthy=False,
            error=message or "Connection error",
        )

    if not response.is_success:
        return HealthReport(
            ok=False,
            env_configured=True,
            upstream_healthy=False,
            upstream_status=response.status_code,
            auth_header=credential.header_name,
            error=f"Upstream returned {response.status_code}",
        )

    logger.info("[%s] Upstream healthy", HEALTH.log_name)
    return HealthReport(
        ok=True,
        env_configured=True,
        upstream_healthy=True,
        upstream_status=response.status_code,
        auth_header=credential.header_name,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


async def health(request: Request, settings: Settings, upstream: UpstreamClient) -> Response:
    cors = OriginPolicy.from_settings(settings).headers(request.headers.get("origin"))
    try:
        if is_preflight(request.method):
            return preflight_response(cors)
    except GatewayError as exc:
        _log_gateway_error(HEALTH, exc)
        return error_response(exc, cors)

    report = await check_upstream(settings, upstream)
    return JSONResponse(
        status_code=200,
        content=report.to_content(),
        headers={**cors, "Cache-Control": HEALTH.cache_control()},
    )

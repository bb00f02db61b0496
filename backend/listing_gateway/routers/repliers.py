"""Repliers listing gateway router.

Mediates between the browser and the Repliers listings API so the API
key stays server-side. Routes accept every method: the shared pipeline
answers OPTIONS preflights and rejects everything but GET with a CORS-
decorated 405, which the framework's own method handling would not do.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from listing_gateway import gateway
from listing_gateway.config import Settings
from listing_gateway.dependencies import get_gateway_settings, get_upstream_client
from listing_gateway.routes import AUTOCOMPLETE, DETAIL, SEARCH
from listing_gateway.services.upstream import UpstreamClient

router = APIRouter(prefix="/api/repliers", tags=["repliers"])

ROUTED_METHODS = ["GET", "OPTIONS", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


@router.api_route("/listings", methods=ROUTED_METHODS)
async def search_listings(
    request: Request,
    settings: Settings = Depends(get_gateway_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """Search listings. Only allowlisted filters are forwarded."""
    return await gateway.relay(request, SEARCH, settings, upstream)


@router.api_route("/listing", methods=ROUTED_METHODS)
async def listing_detail_by_query(
    request: Request,
    settings: Settings = Depends(get_gateway_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """Listing detail with the id passed as ``?id=``."""
    return await gateway.relay(
        request, DETAIL, settings, upstream, listing_id=request.query_params.get("id")
    )


@router.api_route("/listing/{listing_id:path}", methods=ROUTED_METHODS)
async def listing_detail(
    listing_id: str,
    request: Request,
    settings: Settings = Depends(get_gateway_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """Listing detail by path id.

    The whole remainder of the path is captured so ids containing slashes
    reach validation and get a 400 instead of a routing 404.
    """
    return await gateway.relay(request, DETAIL, settings, upstream, listing_id=listing_id)


@router.api_route("/autocomplete", methods=ROUTED_METHODS)
async def autocomplete(
    request: Request,
    settings: Settings = Depends(get_gateway_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """Location/address suggestions; degrades to an empty list upstream-side."""
    return await gateway.relay(request, AUTOCOMPLETE, settings, upstream)


@router.api_route("/health", methods=ROUTED_METHODS)
async def health(
    request: Request,
    settings: Settings = Depends(get_gateway_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """Always 200; upstream and credential state are reported in the body."""
    return await gateway.health(request, settings, upstream)

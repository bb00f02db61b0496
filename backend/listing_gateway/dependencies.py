"""FastAPI dependencies: settings and upstream client from app state."""

from __future__ import annotations

from fastapi import Request

from listing_gateway.config import Settings
from listing_gateway.services.upstream import UpstreamClient


def get_gateway_settings(request: Request) -> Settings:
    """Settings constructed once at startup by ``create_app``."""
    return request.app.state.settings


def get_upstream_client(request: Request) -> UpstreamClient:
    return request.app.state.upstream_client

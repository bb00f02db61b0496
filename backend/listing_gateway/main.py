from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from listing_gateway import gateway
from listing_gateway.config import Settings, get_settings
from listing_gateway.cors import OriginPolicy
from listing_gateway.errors import MethodNotAllowedError
from listing_gateway.routers import repliers
from listing_gateway.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.api_key_configured:
        logger.info(
            "Listing gateway ready (upstream %s, auth header %s)",
            settings.repliers_base_url,
            settings.repliers_api_key_header,
        )
    else:
        # Requests will answer 500 until the key is provided; keep serving.
        logger.warning("REPLIERS_API_KEY not configured; listing routes will return 500")
    yield


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Framework-raised errors (unrouted methods, unknown paths) still carry CORS headers."""
    cors = OriginPolicy.from_settings(request.app.state.settings).headers(request.headers.get("origin"))
    if exc.status_code == 405:
        response = gateway.error_response(MethodNotAllowedError(), cors)
        if exc.headers and "Allow" in exc.headers:
            response.headers["Allow"] = exc.headers["Allow"]
        return response
    response = await http_exception_handler(request, exc)
    response.headers.update(cors)
    return response


def create_app(
    settings: Settings | None = None,
    upstream_client: UpstreamClient | None = None,
) -> FastAPI:
    """Build the gateway app around an explicit settings object."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Listing Gateway",
        description="Server-side gateway to the Repliers listings API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.upstream_client = upstream_client or UpstreamClient.from_settings(settings)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    app.include_router(repliers.router)
    return app


app = create_app()

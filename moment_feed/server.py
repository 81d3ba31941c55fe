"""
Moment Feed — HTTP Layer

FastAPI app exposing the feed on a single endpoint:

- OPTIONS → 200, empty body (CORS preflight)
- GET     → run the pipeline, JSON body + cache directive

Pipeline errors map to 502 with a diagnostic payload; anything else to 500.
"""

from __future__ import annotations

import random
from typing import AsyncIterator

import structlog
from fastapi import Depends, FastAPI, Query, Response
from fastapi.responses import JSONResponse

from moment_feed import __version__
from moment_feed.config import settings
from moment_feed.engine.policies import FeedPolicy, get_policy
from moment_feed.engine.response import cache_control
from moment_feed.errors import FeedError
from moment_feed.pipeline.feed import build_feed
from moment_feed.pipeline.topshot import TopShotClient

logger = structlog.get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}

MOMENTS_PATHS = ("/api/moments", "/")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def resolve_policy(policy: str | None = Query(default=None)) -> FeedPolicy | None:
    """Named policy for this request, or None when the name is unknown."""
    try:
        return get_policy(policy or settings.FEED_POLICY)
    except KeyError:
        return None


async def get_topshot_client(
    feed_policy: FeedPolicy | None = Depends(resolve_policy),
) -> AsyncIterator[TopShotClient | None]:
    """One upstream client per request, closed when the response is sent."""
    if feed_policy is None:
        yield None
        return
    async with TopShotClient() as client:
        yield client


def get_rng() -> random.Random:
    return random.Random()


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


async def get_moments(
    policy: str | None = Query(default=None),
    feed_policy: FeedPolicy | None = Depends(resolve_policy),
    client: TopShotClient | None = Depends(get_topshot_client),
    rng: random.Random = Depends(get_rng),
) -> JSONResponse:
    headers = dict(CORS_HEADERS)

    if feed_policy is None or client is None:
        return JSONResponse(
            status_code=400,
            content={"error": f"Unknown policy: {policy}"},
            headers=headers,
        )

    try:
        feed = await build_feed(feed_policy, client, rng)
    except FeedError as e:
        logger.warning(
            "moments_request_failed",
            policy=feed_policy.name.value,
            error=str(e),
            error_type=type(e).__name__,
        )
        return JSONResponse(status_code=e.status_code, content=e.to_payload(), headers=headers)
    except Exception as e:
        logger.error(
            "moments_internal_error",
            policy=feed_policy.name.value,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal proxy error", "detail": str(e)},
            headers=headers,
        )

    headers["Cache-Control"] = cache_control(feed_policy)
    return JSONResponse(status_code=200, content=feed.to_payload(), headers=headers)


# ---------------------------------------------------------------------------
# App Factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    app = FastAPI(
        title="Moment Feed",
        version=__version__,
        description="Top Shot marketplace listings reshaped for the game client",
        docs_url=None,
        redoc_url=None,
    )
    for path in MOMENTS_PATHS:
        app.add_api_route(path, get_moments, methods=["GET"])
        app.add_api_route(path, preflight, methods=["OPTIONS"])
    return app


app = create_app()

"""
Moment Feed — Feed Orchestration

fetch → normalize → filter/sample → assemble, for one request.

The primary query must succeed. The commons query (policies that have one)
is best-effort: any failure is logged and the feed is built from the
primary results alone.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any

import structlog

from moment_feed.engine.normalizer import normalize_all
from moment_feed.engine.policies import FeedPolicy
from moment_feed.engine.response import FeedResponse, assemble_response
from moment_feed.engine.sampling import sample_listings
from moment_feed.pipeline.queries import GraphQLQuery
from moment_feed.pipeline.topshot import TopShotClient

logger = structlog.get_logger(__name__)


async def _fetch_commons(
    client: TopShotClient,
    query: GraphQLQuery,
) -> list[dict[str, Any]]:
    try:
        return await client.fetch_listings(query)
    except Exception as e:
        logger.warning(
            "feed_commons_fetch_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return []


async def fetch_raw_items(
    policy: FeedPolicy,
    client: TopShotClient,
) -> list[dict[str, Any]]:
    """
    Run the policy's queries and return primary items followed by commons.

    Raises:
        UpstreamError: The primary query failed.
    """
    if policy.commons_query is None:
        return await client.fetch_listings(policy.primary_query)

    # Both calls settle before the client closes, even when the primary fails
    primary, commons = await asyncio.gather(
        client.fetch_listings(policy.primary_query),
        _fetch_commons(client, policy.commons_query),
        return_exceptions=True,
    )
    if isinstance(primary, BaseException):
        raise primary
    return primary + commons


async def build_feed(
    policy: FeedPolicy,
    client: TopShotClient,
    rng: random.Random | None = None,
) -> FeedResponse:
    """
    Build the client feed for one request.

    Args:
        policy: Active feed policy.
        client: Opened TopShotClient.
        rng: Random source for the shuffle.

    Returns:
        FeedResponse ready to serialize.

    Raises:
        UpstreamError: The primary query returned a non-success status.
        InsufficientDataError: Too few listings survived filtering.
    """
    logger.info("feed_build_start", policy=policy.name.value)

    raw_items = await fetch_raw_items(policy, client)
    listings = normalize_all(raw_items, policy.classify)
    sampled = sample_listings(listings, policy, rng)
    response = assemble_response(sampled, policy)

    logger.info(
        "feed_build_complete",
        policy=policy.name.value,
        raw_count=len(raw_items),
        moments_count=len(response.moments),
    )
    return response

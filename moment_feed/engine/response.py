"""
Moment Feed — Response Assembler
"""

from __future__ import annotations

from typing import Any, Sequence

import structlog
from pydantic import BaseModel

from moment_feed.config import settings
from moment_feed.engine.normalizer import NormalizedListing
from moment_feed.engine.policies import FeedPolicy
from moment_feed.errors import InsufficientDataError

logger = structlog.get_logger(__name__)


class FeedResponse(BaseModel):
    """Success body: the sampled moments plus optional count metadata."""

    moments: list[NormalizedListing]
    total: int | None = None

    def to_payload(self) -> dict[str, Any]:
        # imageUrl stays null on listings; only the envelope drops an unset total
        payload: dict[str, Any] = {
            "moments": [m.model_dump(by_alias=True, mode="json") for m in self.moments],
        }
        if self.total is not None:
            payload["total"] = self.total
        return payload


def cache_control(policy: FeedPolicy) -> str:
    return (
        f"s-maxage={policy.cache_max_age}, "
        f"stale-while-revalidate={settings.STALE_WHILE_REVALIDATE_SECONDS}"
    )


def assemble_response(
    moments: Sequence[NormalizedListing],
    policy: FeedPolicy,
) -> FeedResponse:
    """
    Wrap the sampled listings, enforcing the policy's minimum size.

    Raises:
        InsufficientDataError: Fewer than ``policy.min_count`` listings.
    """
    count = len(moments)
    if count < policy.min_count:
        logger.warning(
            "feed_insufficient_data",
            policy=policy.name.value,
            count=count,
            minimum=policy.min_count,
        )
        raise InsufficientDataError(count, policy.min_count)

    return FeedResponse(
        moments=list(moments),
        total=count if policy.include_total else None,
    )

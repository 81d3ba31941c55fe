"""
Moment Feed — Feed Policies

Each revision of the handler is a named policy: which queries run, how
scarcity is read, and the filter/partition/size rules applied afterwards.
"""

from __future__ import annotations

from pydantic import BaseModel

from moment_feed.config import MomentTier, PolicyName
from moment_feed.engine.scarcity import Classifier, classify_by_tags, classify_by_tier
from moment_feed.pipeline.queries import (
    PREMIUM_TIERS,
    GraphQLQuery,
    marketplace_editions_query,
    recent_listings_query,
    tiered_listings_query,
)


class FeedPolicy(BaseModel):
    """Query selection plus filter policy for one pipeline configuration."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    name: PolicyName
    primary_query: GraphQLQuery
    commons_query: GraphQLQuery | None = None
    classify: Classifier

    require_image: bool = False

    # Scarcity partitioning (premium / common / fandom)
    partition: bool = False
    commons_min_price: int = 0
    commons_cap: int = 0

    max_count: int = 30
    min_count: int = 5

    cache_max_age: int = 300
    include_total: bool = False


RECENT_LISTINGS = FeedPolicy(
    name=PolicyName.RECENT_LISTINGS,
    primary_query=recent_listings_query(limit=50),
    classify=classify_by_tags,
    require_image=True,
    max_count=30,
    min_count=5,
    cache_max_age=300,
)

TIERED_LISTINGS = FeedPolicy(
    name=PolicyName.TIERED_LISTINGS,
    primary_query=tiered_listings_query(PREMIUM_TIERS, limit=100),
    commons_query=tiered_listings_query([MomentTier.COMMON.value], limit=50),
    classify=classify_by_tier,
    partition=True,
    commons_min_price=5,
    commons_cap=8,
    max_count=40,
    min_count=10,
    cache_max_age=180,
    include_total=True,
)

MARKETPLACE_EDITIONS = FeedPolicy(
    name=PolicyName.MARKETPLACE_EDITIONS,
    primary_query=marketplace_editions_query(
        PREMIUM_TIERS + [MomentTier.COMMON.value],
        limit=100,
        exclude_autographed=True,
    ),
    classify=classify_by_tier,
    partition=True,
    commons_min_price=3,
    commons_cap=6,
    max_count=36,
    min_count=8,
    cache_max_age=180,
    include_total=True,
)

POLICIES: dict[PolicyName, FeedPolicy] = {
    policy.name: policy
    for policy in (RECENT_LISTINGS, TIERED_LISTINGS, MARKETPLACE_EDITIONS)
}


def get_policy(name: PolicyName | str) -> FeedPolicy:
    """
    Look up a policy by name.

    Raises:
        KeyError: No policy with that name.
    """
    try:
        key = PolicyName(name)
    except ValueError:
        raise KeyError(name) from None
    return POLICIES[key]

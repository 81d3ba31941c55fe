"""
Moment Feed — Filter / Sample / Dedupe

Turns normalized listings into the bounded list the client shows:

1. Drop invalid records (no price, unknown player, optionally no image)
2. Partition by scarcity (premium always, commons gated and capped, fandom)
3. Deduplicate on (player, set), first occurrence wins
4. Fisher-Yates shuffle
5. Truncate to the policy maximum
"""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

import structlog

from moment_feed.config import Scarcity
from moment_feed.engine.normalizer import UNKNOWN_PLAYER, NormalizedListing
from moment_feed.engine.policies import FeedPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

PREMIUM_SCARCITIES = frozenset({Scarcity.LEGENDARY, Scarcity.RARE, Scarcity.ULTIMATE})


def is_valid(listing: NormalizedListing, require_image: bool = False) -> bool:
    if listing.lowest_ask <= 0 or listing.player == UNKNOWN_PLAYER:
        return False
    if require_image and not listing.image_url:
        return False
    return True


def partition_by_scarcity(
    listings: Sequence[NormalizedListing],
    commons_min_price: int,
    commons_cap: int,
) -> list[NormalizedListing]:
    """
    Concatenate premium, gated commons and fandom listings, in that order.

    Commons below ``commons_min_price`` are dropped and at most
    ``commons_cap`` of the rest are kept (first ones win).
    """
    premium = [item for item in listings if item.scarcity in PREMIUM_SCARCITIES]
    commons = [
        item
        for item in listings
        if item.scarcity == Scarcity.COMMON and item.lowest_ask >= commons_min_price
    ][: max(commons_cap, 0)]
    fandom = [item for item in listings if item.scarcity == Scarcity.FANDOM]

    logger.debug(
        "sampling_partitioned",
        premium=len(premium),
        commons=len(commons),
        fandom=len(fandom),
    )
    return premium + commons + fandom


def dedupe(listings: Sequence[NormalizedListing]) -> list[NormalizedListing]:
    """Keep the first listing per (player, set) pair."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for item in listings:
        key = (item.player, item.set_name)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a uniformly random permutation of ``items``.

    For i from the last index down to 1, swap element i with a uniformly
    chosen index j in [0, i]. The input is not modified.
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def sample_listings(
    listings: Sequence[NormalizedListing],
    policy: FeedPolicy,
    rng: random.Random | None = None,
) -> list[NormalizedListing]:
    """
    Apply the policy's filter, partition, dedupe, shuffle and truncate steps.

    Args:
        listings: Normalized listings in upstream order.
        policy: Active feed policy.
        rng: Random source for the shuffle (seeded in tests).

    Returns:
        At most ``policy.max_count`` valid, unique listings in random order.
    """
    valid = [item for item in listings if is_valid(item, policy.require_image)]

    candidates = valid
    if policy.partition:
        candidates = partition_by_scarcity(
            valid, policy.commons_min_price, policy.commons_cap
        )

    unique = dedupe(candidates)
    sampled = fisher_yates_shuffle(unique, rng)[: policy.max_count]

    logger.info(
        "sampling_complete",
        policy=policy.name.value,
        input_count=len(listings),
        valid_count=len(valid),
        unique_count=len(unique),
        output_count=len(sampled),
    )
    return sampled

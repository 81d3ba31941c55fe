from moment_feed.engine.normalizer import NormalizedListing, normalize_listing
from moment_feed.engine.policies import FeedPolicy, get_policy
from moment_feed.engine.response import FeedResponse, assemble_response, cache_control
from moment_feed.engine.sampling import dedupe, fisher_yates_shuffle, sample_listings
from moment_feed.engine.scarcity import classify_by_tags, classify_by_tier

__all__ = [
    "FeedPolicy",
    "FeedResponse",
    "NormalizedListing",
    "assemble_response",
    "cache_control",
    "classify_by_tags",
    "classify_by_tier",
    "dedupe",
    "fisher_yates_shuffle",
    "get_policy",
    "normalize_listing",
    "sample_listings",
]

"""
Moment Feed — Shared pytest Fixtures

Provides common fixtures for all test modules:
- Mock upstream payloads (fixtures/*.json)
- Factories for raw listing/edition items and normalized listings
- Seeded random source
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Callable

import pytest

from moment_feed.config import Scarcity
from moment_feed.engine.normalizer import NormalizedListing


# ---------------------------------------------------------------------------
# Fixture Loaders
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def load_mock_listings() -> dict:
    """Load mock searchMomentListings response from fixtures/mock_topshot_listings.json."""
    fixture_path = Path(__file__).parent / "fixtures" / "mock_topshot_listings.json"
    with open(fixture_path) as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def listing_item() -> Callable[..., dict[str, Any]]:
    """Build a raw searchMomentListings item."""

    def _build(
        moment_id: str = "m-1",
        player: str | None = "LeBron James",
        set_name: str = "Base Set",
        lowest_ask: Any = "10.00",
        tags: list[str] | None = None,
        tier: str | None = None,
        asset_path_prefix: str | None = "https://assets.nbatopshot.com/media/x/",
        serial: Any = "100",
        circulation: Any = 1000,
    ) -> dict[str, Any]:
        return {
            "moment": {
                "id": moment_id,
                "flowSerialNumber": serial,
                "tier": tier,
                "set": {"id": f"set-{set_name}", "flowName": set_name},
                "play": {
                    "id": f"play-{moment_id}",
                    "description": "A play",
                    "stats": {
                        "playerName": player,
                        "teamAtMoment": "Los Angeles Lakers",
                        "playCategory": "Dunk",
                    },
                },
                "assetPathPrefix": asset_path_prefix,
                "circulationCount": circulation,
                "setPlay": {
                    "id": f"sp-{moment_id}",
                    "flowRetired": False,
                    "tags": [{"title": t} for t in (tags or [])],
                },
            },
            "lowestAsk": lowest_ask,
        }

    return _build


@pytest.fixture
def edition_item() -> Callable[..., dict[str, Any]]:
    """Build a raw searchMarketplaceEditions item."""

    def _build(
        edition_id: str = "e-1",
        player: str | None = "Stephen Curry",
        set_name: str = "Metallic Gold LE",
        tier: str | None = "MOMENT_TIER_LEGENDARY",
        price_min: Any = "120.00",
    ) -> dict[str, Any]:
        return {
            "id": edition_id,
            "tier": tier,
            "assetPathPrefix": f"https://assets.nbatopshot.com/editions/{edition_id}/",
            "circulationCount": 99,
            "set": {"id": f"set-{set_name}", "flowName": set_name},
            "play": {
                "id": f"play-{edition_id}",
                "description": "Logo three",
                "stats": {
                    "playerName": player,
                    "teamAtMoment": "Golden State Warriors",
                    "playCategory": "3 Pointer",
                },
            },
            "setPlay": {"tier": tier, "tags": []},
            "priceRange": {"min": price_min, "max": None},
        }

    return _build


@pytest.fixture
def make_listing() -> Callable[..., NormalizedListing]:
    """Build a NormalizedListing with sensible valid defaults."""

    def _build(
        moment_id: str = "m-1",
        player: str = "LeBron James",
        set_name: str = "Base Set",
        scarcity: Scarcity = Scarcity.COMMON,
        lowest_ask: int = 10,
        image_url: str | None = "https://assets.nbatopshot.com/media/x/Hero_2880_2880_Black.jpg",
    ) -> NormalizedListing:
        return NormalizedListing(
            id=moment_id,
            player=player,
            team="",
            play="Dunk",
            set_name=set_name,
            serial=1,
            circ=100,
            scarcity=scarcity,
            lowest_ask=lowest_ask,
            image_url=image_url,
            moment_url=f"https://nbatopshot.com/moment/{moment_id}",
        )

    return _build


# ---------------------------------------------------------------------------
# Utility Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so shuffles are reproducible."""
    return random.Random(1234)

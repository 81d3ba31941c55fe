"""
Tests for the HTTP layer (moment_feed/server.py).

Requests go through FastAPI's TestClient; the marketplace endpoint behind
it is mocked with respx.
"""

from __future__ import annotations

import importlib
import random
from typing import Iterator

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

import moment_feed.server as server_module
from moment_feed.config import settings
from moment_feed.pipeline.topshot import TopShotClient
from moment_feed.server import app, get_rng

GRAPHQL_URL = settings.TOPSHOT_GRAPHQL_URL


@pytest.fixture
def client() -> Iterator[TestClient]:
    app.dependency_overrides[get_rng] = lambda: random.Random(42)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _assert_cors(response: httpx.Response) -> None:
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"


# ---------------------------------------------------------------------------
# Preflight
# ---------------------------------------------------------------------------


def test_options_preflight(client: TestClient) -> None:
    response = client.options("/api/moments")

    assert response.status_code == 200
    assert response.content == b""
    _assert_cors(response)


# ---------------------------------------------------------------------------
# Success
# ---------------------------------------------------------------------------


def test_get_moments_success(client: TestClient, load_mock_listings) -> None:
    with respx.mock:
        respx.post(GRAPHQL_URL).mock(return_value=httpx.Response(200, json=load_mock_listings))

        response = client.get("/api/moments")

    assert response.status_code == 200
    _assert_cors(response)
    assert response.headers["cache-control"] == "s-maxage=300, stale-while-revalidate=60"

    body = response.json()
    assert set(body) == {"moments"}
    assert len(body["moments"]) == 6
    for moment in body["moments"]:
        assert moment["lowestAsk"] > 0
        assert moment["player"] != "Unknown"
        assert moment["momentUrl"] == f"https://nbatopshot.com/moment/{moment['id']}"
        assert moment["imageUrl"].endswith("Hero_2880_2880_Black.jpg")


def test_root_path_serves_feed(client: TestClient, load_mock_listings) -> None:
    with respx.mock:
        respx.post(GRAPHQL_URL).mock(return_value=httpx.Response(200, json=load_mock_listings))

        response = client.get("/")

    assert response.status_code == 200
    assert len(response.json()["moments"]) == 6


def test_policy_query_parameter(client: TestClient, listing_item) -> None:
    items = [
        listing_item(f"m-{i}", player=f"P{i}", tier="MOMENT_TIER_RARE", lowest_ask="12")
        for i in range(15)
    ]
    payload = {
        "data": {
            "searchMomentListings": {
                "data": {"searchSummary": {"data": {"size": len(items), "data": items}}}
            }
        }
    }

    with respx.mock:
        respx.post(GRAPHQL_URL).mock(return_value=httpx.Response(200, json=payload))

        response = client.get("/api/moments", params={"policy": "tiered_listings"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "s-maxage=180, stale-while-revalidate=60"
    body = response.json()
    # The same payload answers both the premium and commons queries; dedup
    # on (player, set) collapses the repeats
    assert body["total"] == 15
    assert len(body["moments"]) == 15
    assert {m["scarcity"] for m in body["moments"]} == {"rare"}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_upstream_503_returns_502(client: TestClient) -> None:
    with respx.mock:
        respx.post(GRAPHQL_URL).mock(return_value=httpx.Response(503, text="Service Unavailable"))

        response = client.get("/api/moments")

    assert response.status_code == 502
    _assert_cors(response)
    assert "cache-control" not in response.headers

    body = response.json()
    assert "503" in body["error"]
    assert body["status"] == 503
    assert body["detail"] == "Service Unavailable"
    assert body["hint"] == settings.UPSTREAM_ERROR_HINT


def test_not_enough_moments_returns_502(client: TestClient, listing_item) -> None:
    items = [listing_item(f"m-{i}", player=f"P{i}") for i in range(2)]
    items.append(listing_item("m-bad", player=None))
    payload = {
        "data": {
            "searchMomentListings": {
                "data": {"searchSummary": {"data": {"size": len(items), "data": items}}}
            }
        }
    }

    with respx.mock:
        respx.post(GRAPHQL_URL).mock(return_value=httpx.Response(200, json=payload))

        response = client.get("/api/moments")

    assert response.status_code == 502
    assert response.json() == {"error": "Not enough moments", "count": 2}


def test_unknown_policy_returns_400(client: TestClient) -> None:
    response = client.get("/api/moments", params={"policy": "mystery_box"})

    assert response.status_code == 400
    assert response.json() == {"error": "Unknown policy: mystery_box"}
    _assert_cors(response)


def test_unexpected_error_returns_500(client: TestClient, monkeypatch) -> None:
    async def _boom(*args, **kwargs):
        raise RuntimeError("normalizer blew up")

    monkeypatch.setattr(server_module, "build_feed", _boom)

    response = client.get("/api/moments")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal proxy error", "detail": "normalizer blew up"}
    _assert_cors(response)


def test_transport_error_on_primary_returns_500(client: TestClient) -> None:
    with respx.mock:
        respx.post(GRAPHQL_URL).mock(side_effect=httpx.ConnectError("reset"))

        response = client.get("/api/moments")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal proxy error", "detail": "reset"}
    _assert_cors(response)


def test_unknown_policy_never_opens_upstream_client(client: TestClient, monkeypatch) -> None:
    opened = []

    class _RecordingClient(TopShotClient):
        def __init__(self, *args, **kwargs) -> None:
            opened.append(True)
            super().__init__(*args, **kwargs)

    monkeypatch.setattr(server_module, "TopShotClient", _RecordingClient)

    response = client.get("/api/moments", params={"policy": "mystery_box"})

    assert response.status_code == 400
    assert opened == []


# ---------------------------------------------------------------------------
# Serverless entry
# ---------------------------------------------------------------------------


def test_vercel_entry_serves_its_deployed_path(load_mock_listings) -> None:
    """api/moments.py is served at /api/moments; the app must route that path."""
    entry = importlib.import_module("api.moments")

    with TestClient(entry.app) as test_client:
        with respx.mock:
            respx.post(GRAPHQL_URL).mock(
                return_value=httpx.Response(200, json=load_mock_listings)
            )

            response = test_client.get("/api/moments")
        preflight = test_client.options("/api/moments")

    assert response.status_code == 200
    _assert_cors(response)
    assert len(response.json()["moments"]) == 6
    assert preflight.status_code == 200

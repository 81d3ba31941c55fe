"""
Moment Feed — Top Shot Marketplace Client

POSTs GraphQL queries to the marketplace endpoint with a browser-like
header set (the upstream edge blocks obvious bots) and returns the raw
result items. Reshaping happens in engine/normalizer.py.

No retries: a non-2xx response raises UpstreamError straight away.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from moment_feed.config import settings
from moment_feed.errors import UpstreamError
from moment_feed.pipeline.queries import GraphQLQuery

logger = structlog.get_logger(__name__)


def dig_items(payload: Any, path: tuple[str, ...]) -> list[dict[str, Any]]:
    """
    Walk ``path`` through nested mappings and return the list found there.

    Any missing key, null value or unexpected type along the way yields an
    empty list. Non-mapping entries inside the list are dropped.
    """
    node = payload
    for key in path:
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    if not isinstance(node, list):
        return []
    return [item for item in node if isinstance(item, dict)]


class TopShotClient:
    """
    Async client for the Top Shot marketplace GraphQL API.

    Usage:
        async with TopShotClient() as client:
            items = await client.fetch_listings(recent_listings_query())
    """

    def __init__(
        self,
        graphql_url: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ):
        self._graphql_url = graphql_url or settings.TOPSHOT_GRAPHQL_URL
        self._headers = headers if headers is not None else settings.browser_headers()
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TopShotClient:
        self._client = httpx.AsyncClient(headers=self._headers, timeout=self._timeout)
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def fetch_listings(self, query: GraphQLQuery) -> list[dict[str, Any]]:
        """
        Run one GraphQL query and return its raw result items.

        Args:
            query: Query document, variables and result path.

        Returns:
            Raw item mappings (possibly empty).

        Raises:
            UpstreamError: The endpoint returned a non-success status.
        """
        assert self._client is not None, "Client not initialized. Use 'async with'."

        logger.info(
            "topshot_fetch_start",
            operation=query.operation_name,
            variables=query.variables,
        )

        response = await self._client.post(self._graphql_url, json=query.to_body())

        if not response.is_success:
            logger.error(
                "topshot_http_error",
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise UpstreamError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("topshot_invalid_json", error=str(e))
            return []

        if isinstance(payload, dict) and payload.get("errors"):
            logger.warning(
                "topshot_graphql_errors",
                errors=str(payload["errors"])[:200],
            )

        items = dig_items(payload, query.result_path)

        logger.info(
            "topshot_fetch_complete",
            operation=query.operation_name,
            results_count=len(items),
        )
        return items

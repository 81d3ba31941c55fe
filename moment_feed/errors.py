"""
Moment Feed — Pipeline Errors

Errors that map to a structured 502 payload. Anything not derived from
FeedError is treated as an internal failure by the HTTP layer.
"""

from __future__ import annotations

from typing import Any

from moment_feed.config import settings


class FeedError(Exception):
    """Base class for errors surfaced to the caller as HTTP 502."""

    status_code: int = 502

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self)}


class UpstreamError(FeedError):
    """The marketplace GraphQL endpoint answered with a non-2xx status."""

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body[: settings.UPSTREAM_ERROR_BODY_LIMIT]
        super().__init__(f"TopShot API error (HTTP {status})")

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "status": self.status,
            "hint": settings.UPSTREAM_ERROR_HINT,
            "detail": self.body,
        }


class InsufficientDataError(FeedError):
    """Fewer valid listings survived filtering than the policy minimum."""

    def __init__(self, count: int, minimum: int) -> None:
        self.count = count
        self.minimum = minimum
        super().__init__("Not enough moments")

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self), "count": self.count}

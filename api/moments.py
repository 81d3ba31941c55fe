"""Vercel serverless entrypoint, deployed at /api/moments."""

from __future__ import annotations

from moment_feed.config import settings
from moment_feed.main import configure_logging
from moment_feed.server import app

configure_logging(log_level=settings.LOG_LEVEL)

__all__ = ["app"]

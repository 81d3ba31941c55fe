"""
Moment Feed — Configuration & Constants

Upstream endpoints, the browser header set, cache timings and the default
feed policy. No hardcoded values in pipeline logic.

Usage:
    from moment_feed.config import settings
"""

from __future__ import annotations

from enum import Enum

from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Scarcity(str, Enum):
    """Client-facing rarity classification."""
    COMMON = "common"
    RARE = "rare"
    LEGENDARY = "legendary"
    ULTIMATE = "ultimate"
    FANDOM = "fandom"


class MomentTier(str, Enum):
    """Upstream tier enum as returned by the marketplace GraphQL schema."""
    COMMON = "MOMENT_TIER_COMMON"
    FANDOM = "MOMENT_TIER_FANDOM"
    RARE = "MOMENT_TIER_RARE"
    LEGENDARY = "MOMENT_TIER_LEGENDARY"
    ULTIMATE = "MOMENT_TIER_ULTIMATE"


class PolicyName(str, Enum):
    """Named pipeline configurations (one per handler revision)."""
    RECENT_LISTINGS = "recent_listings"
    TIERED_LISTINGS = "tiered_listings"
    MARKETPLACE_EDITIONS = "marketplace_editions"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for the moment feed.

    Loads from environment variables with fallback defaults.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # -----------------------------------------------------------------------
    # Upstream (Top Shot marketplace)
    # -----------------------------------------------------------------------
    TOPSHOT_GRAPHQL_URL: str = "https://nbatopshot.com/marketplace/graphql"
    TOPSHOT_SITE_URL: str = "https://nbatopshot.com"
    TOPSHOT_REFERER_PATH: str = "/search"
    USER_AGENT: str = "TopShotGTLAGame/1.0 (contact: your@email.com)"
    ACCEPT_LANGUAGE: str = "en-US,en;q=0.9"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Appended to assetPathPrefix to build the hero image URL
    IMAGE_SUFFIX: str = "Hero_2880_2880_Black.jpg"

    # -----------------------------------------------------------------------
    # Error reporting
    # -----------------------------------------------------------------------
    UPSTREAM_ERROR_BODY_LIMIT: int = 300
    UPSTREAM_ERROR_HINT: str = "Cloudflare may be blocking — consider switching to curated data"

    # -----------------------------------------------------------------------
    # Response caching (shared caches only, passthrough header)
    # -----------------------------------------------------------------------
    STALE_WHILE_REVALIDATE_SECONDS: int = 60

    # -----------------------------------------------------------------------
    # Pipeline
    # -----------------------------------------------------------------------
    FEED_POLICY: PolicyName = PolicyName.RECENT_LISTINGS

    # -----------------------------------------------------------------------
    # Runtime
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    def browser_headers(self) -> dict[str, str]:
        """Header map that makes server-side requests look like the site itself."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Origin": self.TOPSHOT_SITE_URL,
            "Referer": f"{self.TOPSHOT_SITE_URL}{self.TOPSHOT_REFERER_PATH}",
            "User-Agent": self.USER_AGENT,
            "Accept-Language": self.ACCEPT_LANGUAGE,
        }

    def moment_url(self, moment_id: str) -> str:
        return f"{self.TOPSHOT_SITE_URL}/moment/{moment_id}"


# Singleton instance
settings = Settings()

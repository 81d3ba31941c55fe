"""
Moment Feed — Marketplace GraphQL Queries

Query documents for each feed policy plus the path to the result list
inside the response payload. Queries are plain values handed to the
fetcher; nothing here talks to the network.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from moment_feed.config import MomentTier


class GraphQLQuery(BaseModel):
    """A single upstream request and where to find its result items."""

    model_config = {"frozen": True}

    query: str
    variables: dict[str, Any] = Field(default_factory=dict)
    operation_name: str | None = None
    result_path: tuple[str, ...] = ()

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.operation_name:
            body["operationName"] = self.operation_name
        body["query"] = self.query
        body["variables"] = self.variables
        return body


# Shared by both listing searches
LISTINGS_RESULT_PATH = (
    "data", "searchMomentListings", "data", "searchSummary", "data", "data",
)
EDITIONS_RESULT_PATH = (
    "data", "searchMarketplaceEditions", "data", "searchSummary", "data", "data",
)

_MOMENT_FIELDS = """
                  id
                  flowSerialNumber
                  tier
                  set {
                    id
                    flowName
                    setVisualId
                  }
                  play {
                    id
                    description
                    stats {
                      playerName
                      teamAtMoment
                      playCategory
                    }
                  }
                  assetPathPrefix
                  circulationCount
                  setPlay {
                    id
                    flowRetired
                    tier
                    tags {
                      title
                    }
                  }
"""

RECENT_LISTINGS_QUERY = """
  query SearchMomentListings($limit: Int) {
    searchMomentListings(
      input: {
        filters: { byForSale: true }
        sortBy: LISTING_DATE_DESC
        pagination: { cursor: "", direction: RIGHT, limit: $limit }
      }
    ) {
      data {
        searchSummary {
          data {
            ... on MomentListings {
              size
              data {
                moment {%s}
                lowestAsk
              }
            }
          }
        }
      }
    }
  }
""" % _MOMENT_FIELDS

TIERED_LISTINGS_QUERY = """
  query SearchMomentListingsByTier($byTiers: [MomentTier], $limit: Int) {
    searchMomentListings(
      input: {
        filters: { byForSale: true, byTiers: $byTiers }
        sortBy: LISTING_DATE_DESC
        pagination: { cursor: "", direction: RIGHT, limit: $limit }
      }
    ) {
      data {
        searchSummary {
          data {
            ... on MomentListings {
              size
              data {
                moment {%s}
                lowestAsk
              }
            }
          }
        }
      }
    }
  }
""" % _MOMENT_FIELDS

MARKETPLACE_EDITIONS_QUERY = """
  query SearchMarketplaceEditions(
    $byTiers: [MomentTier]
    $excludeAutographed: Boolean
    $limit: Int
  ) {
    searchMarketplaceEditions(
      input: {
        filters: { byTiers: $byTiers, excludeAutographed: $excludeAutographed }
        sortBy: EDITION_CREATED_AT_DESC
        pagination: { cursor: "", direction: RIGHT, limit: $limit }
      }
    ) {
      data {
        searchSummary {
          data {
            ... on MarketplaceEditions {
              size
              data {
                id
                tier
                assetPathPrefix
                circulationCount
                set {
                  id
                  flowName
                }
                play {
                  id
                  description
                  stats {
                    playerName
                    teamAtMoment
                    playCategory
                  }
                }
                setPlay {
                  tier
                  tags {
                    title
                  }
                }
                priceRange {
                  min
                  max
                }
              }
            }
          }
        }
      }
    }
  }
"""

PREMIUM_TIERS = [
    MomentTier.RARE.value,
    MomentTier.LEGENDARY.value,
    MomentTier.ULTIMATE.value,
    MomentTier.FANDOM.value,
]


def recent_listings_query(limit: int = 50) -> GraphQLQuery:
    return GraphQLQuery(
        query=RECENT_LISTINGS_QUERY,
        variables={"limit": limit},
        result_path=LISTINGS_RESULT_PATH,
    )


def tiered_listings_query(tiers: list[str], limit: int) -> GraphQLQuery:
    return GraphQLQuery(
        query=TIERED_LISTINGS_QUERY,
        variables={"byTiers": list(tiers), "limit": limit},
        result_path=LISTINGS_RESULT_PATH,
    )


def marketplace_editions_query(
    tiers: list[str],
    limit: int,
    exclude_autographed: bool = True,
) -> GraphQLQuery:
    return GraphQLQuery(
        operation_name="SearchMarketplaceEditions",
        query=MARKETPLACE_EDITIONS_QUERY,
        variables={
            "byTiers": list(tiers),
            "excludeAutographed": exclude_autographed,
            "limit": limit,
        },
        result_path=EDITIONS_RESULT_PATH,
    )

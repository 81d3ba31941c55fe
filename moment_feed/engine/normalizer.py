"""
Moment Feed — Listing Normalizer

Pure mapping from an upstream result item (listing or edition) to the flat
record the game client consumes. Every nested level may be missing or null;
absent values fall back to defaults instead of raising.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, Field

from moment_feed.config import Scarcity, settings
from moment_feed.engine.scarcity import Classifier, classify_by_tags

UNKNOWN_PLAYER = "Unknown"

_FLOAT_PREFIX = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[-+]?\d+")


# ---------------------------------------------------------------------------
# Output Model
# ---------------------------------------------------------------------------


class NormalizedListing(BaseModel):
    """A listing as served to the client. Serialize with ``by_alias=True``."""

    model_config = {"populate_by_name": True}

    id: str
    player: str = UNKNOWN_PLAYER
    team: str = ""
    play: str = ""
    set_name: str = Field(default="", alias="set")
    serial: int = 0
    circ: int = 0
    scarcity: Scarcity = Scarcity.COMMON
    lowest_ask: int = Field(default=0, alias="lowestAsk")
    image_url: str | None = Field(default=None, alias="imageUrl")
    moment_url: str = Field(default="", alias="momentUrl")


# ---------------------------------------------------------------------------
# Field Parsers
# ---------------------------------------------------------------------------


def parse_price(value: Any) -> int:
    """
    Parse a price as floating point and round half-up to an integer.

    Accepts numbers and numeric strings (a trailing non-numeric suffix is
    ignored). Anything unparseable, NaN or infinite becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if not match:
            return 0
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(Decimal(repr(number)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_int(value: Any) -> int:
    """Leading-integer parse (``"123/4000"`` → 123); unparseable → 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return 0 if math.isnan(value) or math.isinf(value) else int(value)
    match = _INT_PREFIX.match(str(value))
    return int(match.group(0)) if match else 0


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first(*values: Any, default: Any = None) -> Any:
    """First value that is not None (empty strings count as present)."""
    for value in values:
        if value is not None:
            return value
    return default


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def image_url_for(asset_path_prefix: Any, suffix: str | None = None) -> str | None:
    if not asset_path_prefix or not isinstance(asset_path_prefix, str):
        return None
    return f"{asset_path_prefix}{suffix if suffix is not None else settings.IMAGE_SUFFIX}"


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


def normalize_listing(
    raw: dict[str, Any],
    classify: Classifier = classify_by_tags,
) -> NormalizedListing:
    """
    Map one raw upstream item to a NormalizedListing.

    Listing items nest the moment under ``moment`` and carry ``lowestAsk``
    at the top level; edition items are flat and price via ``priceRange.min``.

    Args:
        raw: Upstream result item.
        classify: Scarcity classifier for the active feed policy.

    Returns:
        NormalizedListing with defaults for anything missing.
    """
    raw = _as_dict(raw)
    moment = _as_dict(raw.get("moment")) or raw
    play = _as_dict(moment.get("play"))
    stats = _as_dict(play.get("stats"))
    set_info = _as_dict(moment.get("set"))

    moment_id = _text(moment.get("id"))
    price = _first(
        raw.get("lowestAsk"),
        moment.get("lowestAsk"),
        _as_dict(raw.get("priceRange")).get("min"),
    )

    return NormalizedListing(
        id=moment_id,
        player=_text(stats.get("playerName"), UNKNOWN_PLAYER),
        team=_text(stats.get("teamAtMoment")),
        play=_text(_first(stats.get("playCategory"), play.get("description"), default="")),
        set_name=_text(set_info.get("flowName")),
        serial=parse_int(moment.get("flowSerialNumber")),
        circ=parse_int(moment.get("circulationCount")),
        scarcity=classify(raw),
        lowest_ask=parse_price(price),
        image_url=image_url_for(moment.get("assetPathPrefix")),
        moment_url=settings.moment_url(moment_id),
    )


def normalize_all(
    items: list[dict[str, Any]],
    classify: Classifier = classify_by_tags,
) -> list[NormalizedListing]:
    return [normalize_listing(item, classify) for item in items]

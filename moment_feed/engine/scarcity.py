"""
Moment Feed — Scarcity Classification

Maps upstream rarity data onto the fixed client enum. Two sources exist:

- Tag titles on the setPlay (``["Legendary"]``, ``["Rare", "Fandom"]``)
- Tier enums (``MOMENT_TIER_RARE``) on the moment, setPlay or edition

Each source has its own precedence; only the highest-precedence match wins.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from moment_feed.config import Scarcity

Classifier = Callable[[dict[str, Any]], Scarcity]

TAG_PRECEDENCE: tuple[Scarcity, ...] = (
    Scarcity.LEGENDARY,
    Scarcity.RARE,
    Scarcity.FANDOM,
)

TIER_PRECEDENCE: tuple[Scarcity, ...] = (
    Scarcity.LEGENDARY,
    Scarcity.RARE,
    Scarcity.ULTIMATE,
    Scarcity.FANDOM,
)

_TIER_PREFIX = "MOMENT_TIER_"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _moment_of(raw: dict[str, Any]) -> dict[str, Any]:
    # Listing results nest the moment; edition results are the record itself
    moment = raw.get("moment")
    return moment if isinstance(moment, dict) else raw


def pick_highest(found: Iterable[str], precedence: tuple[Scarcity, ...]) -> Scarcity:
    """Return the first scarcity in ``precedence`` present in ``found``, else common."""
    found = set(found)
    for scarcity in precedence:
        if scarcity.value in found:
            return scarcity
    return Scarcity.COMMON


def tag_titles(raw: dict[str, Any]) -> list[str]:
    """Lowercased setPlay tag titles; missing/null entries are skipped."""
    set_play = _as_dict(_moment_of(raw).get("setPlay"))
    tags = set_play.get("tags") or []
    if not isinstance(tags, list):
        return []
    titles = []
    for tag in tags:
        title = _as_dict(tag).get("title")
        if isinstance(title, str):
            titles.append(title.strip().lower())
    return titles


def tier_names(raw: dict[str, Any]) -> list[str]:
    """Tier enums from every level that may carry one, as lowercase names."""
    moment = _moment_of(raw)
    candidates = [
        raw.get("tier"),
        moment.get("tier"),
        _as_dict(moment.get("setPlay")).get("tier"),
    ]
    names = []
    for tier in candidates:
        if isinstance(tier, str) and tier:
            name = tier.upper()
            if name.startswith(_TIER_PREFIX):
                name = name[len(_TIER_PREFIX):]
            names.append(name.lower())
    return names


def classify_by_tags(raw: dict[str, Any]) -> Scarcity:
    return pick_highest(tag_titles(raw), TAG_PRECEDENCE)


def classify_by_tier(raw: dict[str, Any]) -> Scarcity:
    return pick_highest(tier_names(raw), TIER_PRECEDENCE)

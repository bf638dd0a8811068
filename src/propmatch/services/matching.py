# src/propmatch/services/matching.py
from __future__ import annotations

import locale
import unicodedata
from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import Any

from propmatch.adapters.logging_utils import get_logger
from propmatch.analysis.pricing import display_price, price_bounds
from propmatch.analysis.scoring import clamp_score, score_breakdown
from propmatch.domain.match import SORT_KEYS, ScoredProperty
from propmatch.domain.preferences import PropertyPreferences, coerce_preferences
from propmatch.domain.property import Property, PropertyConfiguration

logger = get_logger(__name__)


def _norm(v: Any) -> str:
    return str(v or "").strip().lower()


# ---------------------------------------------------------------------
# Predicate filter
# ---------------------------------------------------------------------


def exclusion_reason(prop: Property, prefs: PropertyPreferences) -> str | None:
    """
    Why a listing is hard-excluded, or None if it stays in the result set.

    Only type and zone exclude. A zone-id mismatch is forgiven when no zone
    name was chosen or the zone name still matches, since the finder page
    sometimes carries the zone as a name rather than an id.
    """
    wanted_type = _norm(prefs.property_type)
    if wanted_type and wanted_type != _norm(prop.type):
        return f"type {prop.type} != {prefs.property_type}"

    wanted_zone_id = _norm(prefs.zone_id)
    if wanted_zone_id and wanted_zone_id != _norm(prop.zone_id):
        wanted_zone = _norm(prefs.zone)
        if wanted_zone and wanted_zone != _norm(prop.zone):
            return f"zone {prop.zone_id or prop.zone} != {prefs.zone_id}"

    return None


def passes_filters(prop: Property, prefs: PropertyPreferences) -> bool:
    return exclusion_reason(prop, prefs) is None


# ---------------------------------------------------------------------
# Filter + score
# ---------------------------------------------------------------------


def group_configurations(
    configurations: Iterable[PropertyConfiguration],
) -> dict[str, list[PropertyConfiguration]]:
    by_property: dict[str, list[PropertyConfiguration]] = defaultdict(list)
    for c in configurations:
        by_property[c.property_id].append(c)
    return by_property


def score_one(
    prop: Property,
    configs: Sequence[PropertyConfiguration],
    prefs: PropertyPreferences,
) -> ScoredProperty:
    breakdown = score_breakdown(prop, configs, prefs)
    bounds = price_bounds(configs)
    return ScoredProperty(
        property=prop,
        configurations=list(configs),
        match_score=clamp_score(sum(breakdown.values())),
        price_display=display_price(prop, configs),
        breakdown=breakdown,
        min_price=bounds[0] if bounds else None,
        max_price=bounds[1] if bounds else None,
    )


def filter_and_score_properties(
    properties: Sequence[Property],
    configurations: Sequence[PropertyConfiguration],
    preferences: PropertyPreferences | dict[str, Any] | None,
) -> list[ScoredProperty]:
    """
    Drop clear mismatches, then annotate every survivor with a match score
    and a price label. Output keeps catalog order; see sort_properties.
    """
    prefs = coerce_preferences(preferences)
    by_property = group_configurations(configurations)

    out: list[ScoredProperty] = []
    excluded = 0
    for prop in properties:
        reason = exclusion_reason(prop, prefs)
        if reason is not None:
            excluded += 1
            logger.debug("excluded property", extra={"context": {"property_id": prop.id, "reason": reason}})
            continue
        out.append(score_one(prop, by_property.get(prop.id, []), prefs))

    logger.info(
        "scored properties",
        extra={"context": {"candidates": len(properties), "excluded": excluded, "scored": len(out)}},
    )
    return out


# ---------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------


def use_system_collation() -> None:
    """
    Collate names with the process locale (LC_COLLATE from the environment).
    Called once by the API and CLI at startup.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as err:
        logger.warning("system locale unavailable; name sort uses accent folding only", extra={"context": {"error": str(err)}})


def _name_key(item: ScoredProperty) -> tuple[str, str]:
    # accented letters sort with their base letter even under the C locale
    decomposed = unicodedata.normalize("NFKD", item.property.name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return locale.strxfrm(base.casefold()), item.property.name


def sort_properties(scored: Sequence[ScoredProperty], sort_by: str = "match") -> list[ScoredProperty]:
    """
    Order search hits. Sorting is stable, so ties keep catalog order.

    For price sorts, listings without a usable configuration price go last
    in both directions.
    """
    key = _norm(sort_by)
    if key not in SORT_KEYS:
        logger.warning("unknown sort key, using match", extra={"context": {"sort_by": sort_by}})
        key = "match"

    items = list(scored)

    if key == "match":
        return sorted(items, key=lambda s: -s.match_score)

    if key == "name":
        return sorted(items, key=_name_key)

    priced = [s for s in items if s.min_price is not None]
    unpriced = [s for s in items if s.min_price is None]

    if key == "price-low":
        priced.sort(key=lambda s: s.min_price)  # type: ignore[arg-type,return-value]
    else:
        priced.sort(key=lambda s: -(s.max_price or 0.0))

    return priced + unpriced


def search(
    properties: Sequence[Property],
    configurations: Sequence[PropertyConfiguration],
    preferences: PropertyPreferences | dict[str, Any] | None,
    sort_by: str = "match",
    limit: int | None = None,
) -> list[ScoredProperty]:
    ranked = sort_properties(
        filter_and_score_properties(properties, configurations, preferences),
        sort_by,
    )
    if limit is not None:
        ranked = ranked[: max(int(limit), 0)]
    return ranked

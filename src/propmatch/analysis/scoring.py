from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from propmatch.analysis.pricing import config_prices, to_lakhs
from propmatch.domain.preferences import PropertyPreferences
from propmatch.domain.property import Property, PropertyConfiguration

# ---------------------------------------------------------------------------
# Weights (points). Fixed; tuned against the results page, not derived.
# ---------------------------------------------------------------------------

TYPE_MATCH = 30
TYPE_NO_PREFERENCE = 20

ZONE_MATCH = 25
ZONE_NO_PREFERENCE = 15

BUDGET_OVERLAP = 25
BUDGET_NEAR = 15
BUDGET_FAR = 5
BUDGET_UNKNOWN = 15
BUDGET_ERROR = 10
BUDGET_PROXIMITY = 0.30

INTENT_STRONG = 20
INTENT_MEDIUM = 15
INTENT_BASE = 10

BHK_MATCH = 5
BHK_NO_PREFERENCE = 3
BHK_NO_CONFIGS = 2

SCORE_FLOOR = 20
SCORE_CEILING = 100

INTENT_TAGS: dict[str, tuple[frozenset[str], frozenset[str]]] = {
    "investment": (
        frozenset({"high-roi", "rental-friendly", "appreciation-potential"}),
        frozenset({"established-area", "good-connectivity"}),
    ),
    "end-use": (
        frozenset({"family-friendly", "premium-amenities", "good-schools"}),
        frozenset({"peaceful-area", "good-connectivity"}),
    ),
}


def _norm(v: Any) -> str:
    return str(v or "").strip().lower()


def _bhk_token(v: Any) -> str:
    return _norm(v).replace(" ", "").replace("-", "")


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def score_type(prop: Property, prefs: PropertyPreferences) -> int:
    wanted = _norm(prefs.property_type)
    if not wanted:
        return TYPE_NO_PREFERENCE
    return TYPE_MATCH if _norm(prop.type) == wanted else 0


def score_zone(prop: Property, prefs: PropertyPreferences) -> int:
    zone_id = _norm(prefs.zone_id)
    zone_name = _norm(prefs.zone)

    if zone_id and zone_id == _norm(prop.zone_id):
        return ZONE_MATCH
    if zone_name and zone_name == _norm(prop.zone):
        return ZONE_MATCH
    if not zone_id and not zone_name:
        return ZONE_NO_PREFERENCE
    return 0


def score_budget(configs: Sequence[PropertyConfiguration], prefs: PropertyPreferences) -> int:
    """
    Overlap between the listing's price span and the buyer's budget (lakhs).

    Misses within 30% of either budget bound still earn partial credit.
    """
    if not configs:
        return BUDGET_UNKNOWN

    try:
        prices = config_prices(configs)
        if not prices:
            # configurations exist but none of them price out
            return BUDGET_ERROR

        min_price = to_lakhs(min(prices))
        max_price = to_lakhs(max(prices))
        budget_min, budget_max = prefs.budget_range

        if min_price <= budget_max and max_price >= budget_min:
            return BUDGET_OVERLAP

        below = max_price < budget_min and max_price >= budget_min * (1.0 - BUDGET_PROXIMITY)
        above = min_price > budget_max and min_price <= budget_max * (1.0 + BUDGET_PROXIMITY)
        if below or above:
            return BUDGET_NEAR
        return BUDGET_FAR
    except (TypeError, ValueError, ArithmeticError):
        return BUDGET_ERROR


def score_intent(prop: Property, prefs: PropertyPreferences) -> int:
    groups = INTENT_TAGS.get(prefs.intent)
    if groups is None:
        return INTENT_BASE

    strong, medium = groups
    tags = {_norm(t) for t in prop.tags}
    if tags & strong:
        return INTENT_STRONG
    if tags & medium:
        return INTENT_MEDIUM
    return INTENT_BASE


def score_bhk(configs: Sequence[PropertyConfiguration], prefs: PropertyPreferences) -> int:
    wanted = [_bhk_token(b) for b in prefs.bhk_type if _bhk_token(b)]
    if not wanted:
        return BHK_NO_PREFERENCE
    if not configs:
        return BHK_NO_CONFIGS

    for c in configs:
        label = _bhk_token(c.configuration)
        if any(token in label for token in wanted):
            return BHK_MATCH
    return 0


# ---------------------------------------------------------------------------
# Property score
# ---------------------------------------------------------------------------


def score_breakdown(
    prop: Property,
    configs: Sequence[PropertyConfiguration],
    prefs: PropertyPreferences,
) -> dict[str, int]:
    return {
        "type": score_type(prop, prefs),
        "zone": score_zone(prop, prefs),
        "budget": score_budget(configs, prefs),
        "intent": score_intent(prop, prefs),
        "bhk": score_bhk(configs, prefs),
    }


def clamp_score(total: float) -> int:
    return int(max(min(round(total), SCORE_CEILING), SCORE_FLOOR))


def match_score(
    prop: Property,
    configs: Sequence[PropertyConfiguration],
    prefs: PropertyPreferences,
) -> int:
    """
    Additive 0-100 fit between one listing and the buyer's preferences,
    floored at 20 so a total mismatch still shows as a weak fit.
    """
    return clamp_score(sum(score_breakdown(prop, configs, prefs).values()))


def match_label(score: int) -> str:
    if score >= 80:
        return "Perfect Match"
    if score >= 60:
        return "Great Match"
    if score >= 40:
        return "Good Match"
    return "Fair Match"

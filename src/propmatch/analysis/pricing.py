from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from propmatch.domain.property import Property, PropertyConfiguration

PRICE_ON_REQUEST = "Price on Request"

ONE_CRORE = 10_000_000.0
ONE_LAKH = 100_000.0

# Used when a configuration has a rate but no built-up area on file.
DEFAULT_BUILT_UP_AREA = 1000

# Catalog-page fallback: per-zone rate (INR/sqft) applied to a typical 2-3 BHK.
ZONE_DEFAULT_RATES: dict[str, float] = {
    "north": 12000.0,
    "south": 15000.0,
    "east": 10000.0,
    "west": 11000.0,
    "central": 18000.0,
}
FALLBACK_RATE = 12000.0
ESTIMATED_AREA_SQFT = 1200


def config_price(config: PropertyConfiguration) -> float | None:
    """
    price_per_sqft * built_up_area for one configuration.

    Returns None when the rate does not parse or the result is not a
    positive finite number.
    """
    try:
        rate = float(config.price_per_sqft)  # type: ignore[arg-type]
        area = config.built_up_area or DEFAULT_BUILT_UP_AREA
        price = rate * float(area)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def config_prices(configurations: Iterable[PropertyConfiguration]) -> list[float]:
    out: list[float] = []
    for c in configurations:
        p = config_price(c)
        if p is not None:
            out.append(p)
    return out


def price_bounds(configurations: Iterable[PropertyConfiguration]) -> tuple[float, float] | None:
    prices = config_prices(configurations)
    if not prices:
        return None
    return min(prices), max(prices)


def to_lakhs(price: float) -> float:
    return price / ONE_LAKH


def format_price(price: float) -> str:
    """
    Indian-unit display: crores above 1e7, lakhs above 1e5, else rupees
    with thousands separators.
    """
    if price >= ONE_CRORE:
        return f"₹{price / ONE_CRORE:.1f}Cr"
    if price >= ONE_LAKH:
        return f"₹{price / ONE_LAKH:.1f}L"
    if float(price).is_integer():
        return f"₹{int(price):,}"
    return f"₹{price:,.2f}"


def get_price_range(configurations: Iterable[PropertyConfiguration]) -> str:
    bounds = price_bounds(configurations)
    if bounds is None:
        return PRICE_ON_REQUEST
    lo, hi = bounds
    if lo == hi:
        return format_price(lo)
    return f"{format_price(lo)} - {format_price(hi)}"


def estimate_price_for_zone(zone: str | None) -> float:
    rate = ZONE_DEFAULT_RATES.get(str(zone or "").lower(), FALLBACK_RATE)
    return rate * ESTIMATED_AREA_SQFT


def display_price(
    prop: Property | dict[str, Any],
    configurations: Iterable[PropertyConfiguration],
    *,
    estimate: bool = False,
) -> str:
    """
    Price label for a listing card.

    With estimate=True a listing without priced configurations shows the
    zone-rate estimate instead of "Price on Request".
    """
    label = get_price_range(configurations)
    if label != PRICE_ON_REQUEST or not estimate:
        return label
    zone = prop.get("zone") if isinstance(prop, dict) else prop.zone
    return format_price(estimate_price_for_zone(zone))

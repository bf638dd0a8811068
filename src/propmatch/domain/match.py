from typing import Literal

from pydantic import BaseModel, Field

from propmatch.domain.property import Property, PropertyConfiguration

SortKey = Literal["match", "price-low", "price-high", "name"]

SORT_KEYS: tuple[str, ...] = ("match", "price-low", "price-high", "name")


class ScoredProperty(BaseModel):
    """
    One search hit. Recomputed on every search, never stored.
    """
    property: Property
    configurations: list[PropertyConfiguration] = Field(default_factory=list)

    match_score: int = Field(..., ge=20, le=100)
    price_display: str

    # component name -> points awarded
    breakdown: dict[str, int] = Field(default_factory=dict)

    # rupees; None when no configuration carries a usable price
    min_price: float | None = None
    max_price: float | None = None


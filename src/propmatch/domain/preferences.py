from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Intent = Literal["investment", "end-use", ""]

DEFAULT_BUDGET_RANGE: tuple[float, float] = (50.0, 500.0)  # lakhs


def _as_str_list(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [s.strip() for s in v.split(",") if s.strip()]
    if isinstance(v, (list, tuple, set)):
        return [str(s) for s in v if s is not None and str(s).strip()]
    return []


class PropertyPreferences(BaseModel):
    """
    A buyer's search state.

    Field names follow the storage/wire shape (camelCase aliases) so a stored
    JSON blob round-trips unchanged. Every field has a default, so an empty
    dict is a valid "no preferences" object.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    intent: Intent = ""
    property_type: str = Field(default="", alias="propertyType")
    city_id: str = Field(default="", alias="cityId")
    zone_id: str = Field(default="", alias="zoneId")
    zone: str = ""

    budget_range: tuple[float, float] = Field(default=DEFAULT_BUDGET_RANGE, alias="budgetRange")

    bhk_type: list[str] = Field(default_factory=list, alias="bhkType")
    tags: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)

    @field_validator("intent", mode="before")
    @classmethod
    def _intent(cls, v: Any) -> Any:
        s = str(v or "").strip().lower()
        return s if s in {"investment", "end-use"} else ""

    @field_validator("property_type", "city_id", "zone_id", "zone", mode="before")
    @classmethod
    def _plain_str(cls, v: Any) -> Any:
        return "" if v is None else str(v).strip()

    @field_validator("budget_range", mode="before")
    @classmethod
    def _budget(cls, v: Any) -> Any:
        if v is None:
            return DEFAULT_BUDGET_RANGE
        if not isinstance(v, (list, tuple)) or len(v) != 2:
            raise ValueError("budgetRange must be a [min, max] pair in lakhs")
        lo, hi = v
        lo_f, hi_f = float(lo), float(hi)
        if lo_f > hi_f:
            lo_f, hi_f = hi_f, lo_f
        return (lo_f, hi_f)

    @field_validator("bhk_type", "tags", "amenities", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_str_list(v)

    def to_storage(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True)
        data["budgetRange"] = list(self.budget_range)
        return data


def default_preferences() -> PropertyPreferences:
    return PropertyPreferences()


def coerce_preferences(raw: Any) -> PropertyPreferences:
    """
    Build preferences from whatever a caller or store hands us.

    Known fields that fail validation are dropped one at a time and fall back
    to their defaults; a non-mapping input yields the defaults outright.
    """
    if isinstance(raw, PropertyPreferences):
        return raw
    if not isinstance(raw, dict):
        return default_preferences()

    try:
        return PropertyPreferences.model_validate(raw)
    except (ValueError, TypeError):
        pass

    kept: dict[str, Any] = {}
    for key, value in raw.items():
        try:
            PropertyPreferences.model_validate({key: value})
        except (ValueError, TypeError):
            continue
        kept[key] = value
    return PropertyPreferences.model_validate(kept)

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Listing classes the catalog carries
PropertyType = Literal["apartment", "villa", "plot", "commercial"]

Zone = Literal["north", "south", "east", "west", "central"]

PropertyStatus = Literal[
    "pre-launch",
    "active",
    "under-construction",
    "completed",
    "sold-out",
]

PROPERTY_TYPES: tuple[str, ...] = ("apartment", "villa", "plot", "commercial")
ZONES: tuple[str, ...] = ("north", "south", "east", "west", "central")


class PropertyConfiguration(BaseModel):
    """
    A sellable unit variant ("3BHK", "Villa Type A") of exactly one Property.

    The derived unit price is price_per_sqft * built_up_area; nothing stores a
    canonical price.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    property_id: str = Field(..., alias="propertyId")
    configuration: str = ""
    price_per_sqft: str | None = Field(default=None, alias="pricePerSqft")
    built_up_area: int | None = Field(default=None, alias="builtUpArea")
    plot_size: int | None = Field(default=None, alias="plotSize")

    @field_validator("price_per_sqft", mode="before")
    @classmethod
    def _decimal_as_string(cls, v: Any) -> Any:
        # catalog rows arrive with numbers or decimal strings; keep the raw text
        if v is None:
            return None
        return str(v).strip()

    @field_validator("id", "property_id", mode="before")
    @classmethod
    def _id_as_string(cls, v: Any) -> Any:
        return "" if v is None else str(v)


class Property(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    type: PropertyType

    zone: Zone
    zone_id: str = Field(default="", alias="zoneId")
    area: str = ""

    developer: str = ""
    status: PropertyStatus = "active"

    # ordered, as entered by the catalog editors
    tags: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, v: Any) -> Any:
        return "" if v is None else str(v)

    @field_validator("zone_id", mode="before")
    @classmethod
    def _zone_id_as_string(cls, v: Any) -> Any:
        return "" if v is None else str(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [t.strip() for t in v.split(",") if t.strip()]
        if hasattr(v, "tolist"):
            # parquet list columns come back as numpy arrays
            return v.tolist()
        return v

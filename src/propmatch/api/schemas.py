# src/propmatch/api/schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from propmatch.domain.lead import LeadStatus
from propmatch.domain.match import SortKey
from propmatch.domain.property import Property, PropertyConfiguration


# --------------------------------------------
# Search
# --------------------------------------------

class SearchRequest(BaseModel):
    """
    Body for /properties/search.

    When `preferences` is omitted the stored preferences of `session` are
    used; when given, they win (same precedence as page navigation state).
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    preferences: dict[str, Any] | None = None
    sort_by: SortKey = Field(default="match", alias="sortBy")
    limit: int | None = Field(default=None, ge=1, le=2000)
    session: str = "default"
    remember: bool = False


class SearchHit(BaseModel):
    model_config = ConfigDict(extra="allow")

    property: Property
    configurations: list[PropertyConfiguration] = []

    match_score: int
    match_label: str
    price: str

    breakdown: dict[str, int] = {}


class SearchResponse(BaseModel):
    count: int
    sort_by: str
    preferences: dict[str, Any]
    results: list[SearchHit]


class PriceResponse(BaseModel):
    property_id: str
    price: str
    configurations: int


# --------------------------------------------
# Catalog
# --------------------------------------------

class UpsertResult(BaseModel):
    written: int


# --------------------------------------------
# Leads
# --------------------------------------------

class LeadScoreUpdate(BaseModel):
    score: int = Field(..., ge=0, le=100)
    notes: str | None = None


class LeadStatusUpdate(BaseModel):
    status: LeadStatus


class LeadStatsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_leads: int
    new_leads: int
    qualified_leads: int
    hot_leads: int
    conversion_rate: int
    avg_lead_score: int
    leads_by_source: dict[str, int]
    leads_by_status: dict[str, int]

# src/propmatch/api/http.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Query

from propmatch.adapters.config import config
from propmatch.adapters.logging_utils import get_logger
from propmatch.adapters.preference_store import PreferenceStore
from propmatch.adapters.sql_repo import SqlCatalogRepository, SqlKeyValueStore, SqlLeadRepository
from propmatch.analysis.pricing import display_price
from propmatch.analysis.scoring import match_label
from propmatch.domain.lead import Lead, LeadIntake
from propmatch.domain.preferences import PropertyPreferences
from propmatch.domain.property import Property, PropertyConfiguration
from propmatch.services.lead_scoring import build_lead, filter_leads, lead_stats
from propmatch.services.matching import search, use_system_collation
from .schemas import (
    LeadScoreUpdate,
    LeadStatsResponse,
    LeadStatusUpdate,
    PriceResponse,
    SearchHit,
    SearchRequest,
    SearchResponse,
    UpsertResult,
)

logger = get_logger(__name__)

app = FastAPI(title="propmatch")
use_system_collation()

_catalog_repo = SqlCatalogRepository(config.DB_URI)
_lead_repo = SqlLeadRepository(config.DB_URI)
_kv_store = SqlKeyValueStore(config.DB_URI)


def _preference_store(session: str) -> PreferenceStore:
    # one stored entry per browsing session
    return PreferenceStore(_kv_store, f"{config.PREFERENCES_KEY}:{session}")


# -----------------------------
# Catalog
# -----------------------------
@app.post("/catalog/properties", response_model=UpsertResult)
def upsert_properties(items: list[Property]) -> UpsertResult:
    return UpsertResult(written=_catalog_repo.upsert_properties(items))


@app.post("/catalog/configurations", response_model=UpsertResult)
def upsert_configurations(items: list[PropertyConfiguration]) -> UpsertResult:
    return UpsertResult(written=_catalog_repo.upsert_configurations(items))


# -----------------------------
# Search
# -----------------------------
@app.post("/properties/search", response_model=SearchResponse)
def search_properties(body: SearchRequest) -> SearchResponse:
    store = _preference_store(body.session)
    prefs = store.load(navigation_state=body.preferences)
    if body.remember and body.preferences is not None:
        store.update(prefs)

    properties = _catalog_repo.list_properties()
    configurations = _catalog_repo.list_configurations()

    ranked = search(
        properties,
        configurations,
        prefs,
        sort_by=body.sort_by,
        limit=body.limit or config.SEARCH_DEFAULT_LIMIT,
    )

    return SearchResponse(
        count=len(ranked),
        sort_by=body.sort_by,
        preferences=prefs.to_storage(),
        results=[
            SearchHit(
                property=s.property,
                configurations=s.configurations,
                match_score=s.match_score,
                match_label=match_label(s.match_score),
                price=s.price_display,
                breakdown=s.breakdown,
            )
            for s in ranked
        ],
    )


@app.get("/properties/{property_id}/price", response_model=PriceResponse)
def property_price(property_id: str, estimate: bool = Query(False)) -> PriceResponse:
    prop = _catalog_repo.get_property(property_id)
    if prop is None:
        raise HTTPException(status_code=404, detail="property not found")
    configs = _catalog_repo.list_configurations(property_id)
    return PriceResponse(
        property_id=property_id,
        price=display_price(prop, configs, estimate=estimate),
        configurations=len(configs),
    )


# -----------------------------
# Preferences
# -----------------------------
@app.get("/preferences")
def get_preferences(session: str = Query("default")) -> dict[str, Any]:
    return _preference_store(session).load().to_storage()


@app.put("/preferences")
def put_preferences(body: dict[str, Any], session: str = Query("default")) -> dict[str, Any]:
    try:
        prefs = PropertyPreferences.model_validate(body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _preference_store(session).update(prefs).to_storage()


@app.delete("/preferences")
def clear_preferences(session: str = Query("default")) -> dict[str, Any]:
    return _preference_store(session).clear().to_storage()


# -----------------------------
# Leads
# -----------------------------
@app.post("/leads", response_model=Lead, status_code=201)
def create_lead(body: LeadIntake) -> Lead:
    lead = build_lead(body)
    try:
        created = _lead_repo.create(lead)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    logger.info(
        "lead created",
        extra={"context": {"lead_id": created.lead_id, "lead_score": created.lead_score, "lead_type": created.lead_type}},
    )
    return created


@app.get("/leads", response_model=list[Lead])
def list_leads(
    status: str | None = Query(None),
    lead_type: str | None = Query(None, alias="leadType"),
    priority: str | None = Query(None),
    assigned_to: str | None = Query(None, alias="assignedTo"),
    source: str | None = Query(None),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    limit: int = Query(200, ge=1, le=1000),
) -> list[Lead]:
    return _lead_repo.list_leads(
        status=status,
        lead_type=lead_type,
        priority=priority,
        assigned_to=assigned_to,
        source=source,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )


@app.get("/leads/stats", response_model=LeadStatsResponse)
def get_lead_stats(
    assigned_to: str | None = Query(None, alias="assignedTo"),
    source: str | None = Query(None),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
) -> LeadStatsResponse:
    leads = filter_leads(
        _lead_repo.list_leads(limit=100_000),
        assigned_to=assigned_to,
        source=source,
        date_from=date_from,
        date_to=date_to,
    )
    return LeadStatsResponse(**lead_stats(leads))


@app.get("/leads/{lead_id}", response_model=Lead)
def get_lead(lead_id: str) -> Lead:
    lead = _lead_repo.get(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="lead not found")
    return lead


@app.put("/leads/{lead_id}/score", response_model=Lead)
def update_lead_score(lead_id: str, body: LeadScoreUpdate) -> Lead:
    lead = _lead_repo.update_score(lead_id, body.score, body.notes)
    if lead is None:
        raise HTTPException(status_code=404, detail="lead not found")
    return lead


@app.put("/leads/{lead_id}/status", response_model=Lead)
def update_lead_status(lead_id: str, body: LeadStatusUpdate) -> Lead:
    lead = _lead_repo.update_status(lead_id, body.status)
    if lead is None:
        raise HTTPException(status_code=404, detail="lead not found")
    return lead

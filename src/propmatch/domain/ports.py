# src/propmatch/domain/ports.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Protocol

from propmatch.domain.lead import Lead
from propmatch.domain.property import Property, PropertyConfiguration


# ----------------------------
# Durable key-value storage (preferences)
# ----------------------------

class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


# ----------------------------
# Catalog
# ----------------------------

class CatalogRepository(Protocol):
    def upsert_properties(self, items: Iterable[Property]) -> int:
        ...

    def upsert_configurations(self, items: Iterable[PropertyConfiguration]) -> int:
        ...

    def list_properties(self) -> list[Property]:
        ...

    def list_configurations(self, property_id: str | None = None) -> list[PropertyConfiguration]:
        ...

    def get_property(self, property_id: str) -> Property | None:
        ...


# ----------------------------
# Leads
# ----------------------------

class LeadRepository(Protocol):
    def create(self, lead: Lead) -> Lead:
        ...

    def get(self, lead_id: str) -> Lead | None:
        ...

    def list_leads(
        self,
        *,
        status: str | None = None,
        lead_type: str | None = None,
        priority: str | None = None,
        assigned_to: str | None = None,
        source: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 200,
    ) -> list[Lead]:
        ...

    def update_score(self, lead_id: str, score: int, notes: str | None = None) -> Lead | None:
        ...

    def update_status(self, lead_id: str, status: str) -> Lead | None:
        ...

    def update(self, lead_id: str, fields: dict[str, Any]) -> Lead | None:
        ...

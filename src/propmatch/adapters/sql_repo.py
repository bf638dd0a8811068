# src/propmatch/adapters/sql_repo.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select

from propmatch.domain.lead import Lead, as_utc, utcnow
from propmatch.domain.property import Property, PropertyConfiguration


def _engine(uri: str):
    engine = create_engine(uri, echo=False)
    SQLModel.metadata.create_all(engine)
    return engine


# ---------- Catalog ----------

class PropertyRow(SQLModel, table=True):
    __tablename__ = "properties"

    id: str = Field(primary_key=True)
    ts: datetime = Field(default_factory=utcnow, index=True)

    name: str
    type: str = Field(index=True)
    developer: str = ""
    status: str = Field(default="active", index=True)

    area: str = ""
    zone: str = Field(index=True)
    zone_id: str = Field(default="", index=True)

    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))


class ConfigurationRow(SQLModel, table=True):
    __tablename__ = "property_configurations"

    id: str = Field(primary_key=True)
    property_id: str = Field(index=True)

    configuration: str = ""
    price_per_sqft: str | None = None
    built_up_area: int | None = None
    plot_size: int | None = None


def _property_from_row(r: PropertyRow) -> Property:
    return Property(
        id=r.id,
        name=r.name,
        type=r.type,  # type: ignore[arg-type]
        developer=r.developer,
        status=r.status,  # type: ignore[arg-type]
        area=r.area,
        zone=r.zone,  # type: ignore[arg-type]
        zone_id=r.zone_id,
        tags=list(r.tags or []),
    )


def _configuration_from_row(r: ConfigurationRow) -> PropertyConfiguration:
    return PropertyConfiguration(
        id=r.id,
        property_id=r.property_id,
        configuration=r.configuration,
        price_per_sqft=r.price_per_sqft,
        built_up_area=r.built_up_area,
        plot_size=r.plot_size,
    )


class SqlCatalogRepository:
    def __init__(self, uri: str = "sqlite:///propmatch.db"):
        self.engine = _engine(uri)

    def upsert_properties(self, items: Iterable[Property]) -> int:
        written = 0
        with Session(self.engine) as session:
            for p in items:
                row = session.get(PropertyRow, p.id)
                if row is None:
                    row = PropertyRow(id=p.id, name=p.name, type=p.type, zone=p.zone)
                for field in ["name", "type", "developer", "status", "area", "zone", "zone_id"]:
                    setattr(row, field, getattr(p, field))
                row.tags = list(p.tags)
                row.ts = utcnow()
                session.add(row)
                written += 1
            session.commit()
        return written

    def upsert_configurations(self, items: Iterable[PropertyConfiguration]) -> int:
        written = 0
        with Session(self.engine) as session:
            for c in items:
                if not c.id:
                    continue
                row = session.get(ConfigurationRow, c.id)
                if row is None:
                    row = ConfigurationRow(id=c.id, property_id=c.property_id)
                for field in ["property_id", "configuration", "price_per_sqft", "built_up_area", "plot_size"]:
                    setattr(row, field, getattr(c, field))
                session.add(row)
                written += 1
            session.commit()
        return written

    def list_properties(self) -> list[Property]:
        with Session(self.engine) as session:
            rows = list(session.exec(select(PropertyRow).order_by(PropertyRow.ts)))
        return [_property_from_row(r) for r in rows]

    def list_configurations(self, property_id: str | None = None) -> list[PropertyConfiguration]:
        with Session(self.engine) as session:
            stmt = select(ConfigurationRow)
            if property_id is not None:
                stmt = stmt.where(ConfigurationRow.property_id == property_id)
            rows = list(session.exec(stmt))
        return [_configuration_from_row(r) for r in rows]

    def get_property(self, property_id: str) -> Property | None:
        with Session(self.engine) as session:
            row = session.get(PropertyRow, property_id)
            return _property_from_row(row) if row else None


# ---------- Leads ----------

class LeadRow(SQLModel, table=True):
    __tablename__ = "leads"

    id: int | None = Field(default=None, primary_key=True)
    lead_id: str = Field(index=True, unique=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow, index=True)

    source: str = Field(index=True)
    lead_type: str = Field(index=True)
    priority: str = Field(default="medium", index=True)
    status: str = Field(default="new", index=True)
    assigned_to: str | None = Field(default=None, index=True)

    customer_name: str
    phone: str | None = None
    email: str | None = None

    buyer_persona: str | None = None
    urgency: str | None = None

    budget_range: str = "TBD"
    budget_min: float | None = None
    budget_max: float | None = None

    property_name: str = "General Inquiry"
    interested_configuration: str = "any"

    # 0..100
    lead_score: int = Field(default=0, index=True)
    qualification_notes: str | None = None

    smart_tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))


_LEAD_FIELDS = [
    "lead_id", "created_at", "updated_at",
    "source", "lead_type", "priority", "status", "assigned_to",
    "customer_name", "phone", "email",
    "buyer_persona", "urgency",
    "budget_range", "budget_min", "budget_max",
    "property_name", "interested_configuration",
    "lead_score", "qualification_notes",
]


def _lead_from_row(r: LeadRow) -> Lead:
    data: dict[str, Any] = {f: getattr(r, f) for f in _LEAD_FIELDS}
    data["smart_tags"] = list(r.smart_tags or [])
    return Lead.model_validate(data)


class SqlLeadRepository:
    def __init__(self, uri: str = "sqlite:///propmatch.db"):
        self.engine = _engine(uri)

    def _find(self, session: Session, lead_id: str) -> LeadRow | None:
        return session.exec(select(LeadRow).where(LeadRow.lead_id == lead_id)).first()

    def create(self, lead: Lead) -> Lead:
        row = LeadRow(**{f: getattr(lead, f) for f in _LEAD_FIELDS}, smart_tags=list(lead.smart_tags))
        with Session(self.engine) as session:
            if self._find(session, lead.lead_id) is not None:
                raise ValueError(f"lead {lead.lead_id} already exists")
            session.add(row)
            session.commit()
            session.refresh(row)
            return _lead_from_row(row)

    def get(self, lead_id: str) -> Lead | None:
        with Session(self.engine) as session:
            row = self._find(session, lead_id)
            return _lead_from_row(row) if row else None

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
        with Session(self.engine) as session:
            stmt = select(LeadRow)
            if status:
                stmt = stmt.where(LeadRow.status == status)
            if lead_type:
                stmt = stmt.where(LeadRow.lead_type == lead_type)
            if priority:
                stmt = stmt.where(LeadRow.priority == priority)
            if assigned_to:
                stmt = stmt.where(LeadRow.assigned_to == assigned_to)
            if source:
                stmt = stmt.where(LeadRow.source == source)
            if date_from:
                stmt = stmt.where(LeadRow.created_at >= as_utc(date_from))
            if date_to:
                stmt = stmt.where(LeadRow.created_at <= as_utc(date_to))

            stmt = stmt.order_by(LeadRow.lead_score.desc(), LeadRow.created_at.desc()).limit(limit)
            rows = list(session.exec(stmt))
        return [_lead_from_row(r) for r in rows]

    def update(self, lead_id: str, fields: dict[str, Any]) -> Lead | None:
        with Session(self.engine) as session:
            row = self._find(session, lead_id)
            if row is None:
                return None
            for k in fields:
                if k not in _LEAD_FIELDS or k in {"lead_id", "created_at"}:
                    raise ValueError(f"field {k!r} cannot be updated")
            # validate the merged record before touching the row
            checked = Lead.model_validate(_lead_from_row(row).model_dump() | fields)
            for k in fields:
                setattr(row, k, getattr(checked, k))
            row.updated_at = utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            return _lead_from_row(row)

    def update_score(self, lead_id: str, score: int, notes: str | None = None) -> Lead | None:
        if not 0 <= int(score) <= 100:
            raise ValueError("lead score must be between 0 and 100")
        fields: dict[str, Any] = {"lead_score": int(score)}
        if notes:
            fields["qualification_notes"] = notes
        return self.update(lead_id, fields)

    def update_status(self, lead_id: str, status: str) -> Lead | None:
        return self.update(lead_id, {"status": status})


# ---------- Key-value (preferences) ----------

class KeyValueRow(SQLModel, table=True):
    __tablename__ = "kv_store"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=utcnow)


class SqlKeyValueStore:
    def __init__(self, uri: str = "sqlite:///propmatch.db"):
        self.engine = _engine(uri)

    def get(self, key: str) -> str | None:
        with Session(self.engine) as session:
            row = session.get(KeyValueRow, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            row = session.get(KeyValueRow, key)
            if row is None:
                row = KeyValueRow(key=key, value=value)
            else:
                row.value = value
                row.updated_at = utcnow()
            session.add(row)
            session.commit()

    def delete(self, key: str) -> None:
        with Session(self.engine) as session:
            row = session.get(KeyValueRow, key)
            if row is not None:
                session.delete(row)
                session.commit()

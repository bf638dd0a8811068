# tests/test_sql_repo.py
from datetime import datetime, timedelta, timezone

import pytest

from propmatch.adapters.sql_repo import SqlCatalogRepository, SqlKeyValueStore, SqlLeadRepository
from propmatch.domain.lead import LeadIntake
from propmatch.services.lead_scoring import build_lead


def test_catalog_upsert_and_read_back(tmp_path, make_property, make_config):
    repo = SqlCatalogRepository(f"sqlite:///{tmp_path}/catalog.db")

    assert repo.upsert_properties(
        [
            make_property("p1", tags=["high-roi", "gated-community"]),
            make_property("p2", type="villa", zone="north", zone_id="z1"),
        ]
    ) == 2
    assert repo.upsert_configurations(
        [
            make_config("p1", "6500", area=1250, label="2BHK", cid="c1"),
            make_config("p1", "6500", area=1650, label="3BHK", cid="c2"),
            make_config("p2", "9000", area=3000, label="4BHK Villa", cid="c3"),
        ]
    ) == 3

    props = {p.id: p for p in repo.list_properties()}
    assert set(props) == {"p1", "p2"}
    assert props["p1"].tags == ["high-roi", "gated-community"]
    assert props["p2"].zone_id == "z1"

    assert {c.id for c in repo.list_configurations("p1")} == {"c1", "c2"}
    assert len(repo.list_configurations()) == 3
    assert repo.list_configurations("p1")[0].price_per_sqft == "6500"

    assert repo.get_property("p2").type == "villa"
    assert repo.get_property("missing") is None


def test_catalog_upsert_updates_existing(tmp_path, make_property, make_config):
    repo = SqlCatalogRepository(f"sqlite:///{tmp_path}/catalog.db")
    repo.upsert_properties([make_property("p1", name="Old Name")])
    repo.upsert_properties([make_property("p1", name="New Name", status="completed")])
    repo.upsert_configurations([make_config("p1", "5000", cid="c1")])
    repo.upsert_configurations([make_config("p1", "5500", cid="c1")])

    (prop,) = repo.list_properties()
    assert prop.name == "New Name"
    assert prop.status == "completed"
    (cfg,) = repo.list_configurations()
    assert cfg.price_per_sqft == "5500"


@pytest.fixture
def lead_repo(tmp_path):
    return SqlLeadRepository(f"sqlite:///{tmp_path}/leads.db")


def _intake(name, **kw):
    return LeadIntake(customerName=name, **kw)


def test_lead_create_get_and_duplicate(lead_repo):
    lead = build_lead(_intake("Asha", buyerPersona="investor", urgency="immediate"))

    created = lead_repo.create(lead)

    assert created.lead_id == lead.lead_id
    assert lead_repo.get(lead.lead_id).lead_score == 48
    with pytest.raises(ValueError):
        lead_repo.create(lead)


def test_lead_listing_filters_and_orders_by_score(lead_repo):
    hot = lead_repo.create(build_lead(_intake("A", buyerPersona="end-user-family", urgency="immediate", hasPreApproval=True)))
    cold = lead_repo.create(build_lead(_intake("B", source="walk-in")))
    warm = lead_repo.create(build_lead(_intake("C", urgency="immediate", budgetMin=40, budgetMax=60, priority="high")))

    assert [l.lead_id for l in lead_repo.list_leads()] == [hot.lead_id, warm.lead_id, cold.lead_id]
    assert [l.lead_id for l in lead_repo.list_leads(lead_type="hot")] == [hot.lead_id]
    assert [l.lead_id for l in lead_repo.list_leads(source="walk-in")] == [cold.lead_id]
    assert [l.lead_id for l in lead_repo.list_leads(priority="high")] == [warm.lead_id]
    assert len(lead_repo.list_leads(limit=1)) == 1


def test_lead_score_and_status_updates(lead_repo):
    lead = lead_repo.create(build_lead(_intake("D")))

    scored = lead_repo.update_score(lead.lead_id, 72, notes="site visit booked")
    assert scored.lead_score == 72
    assert scored.qualification_notes == "site visit booked"

    moved = lead_repo.update_status(lead.lead_id, "demo-scheduled")
    assert moved.status == "demo-scheduled"
    assert moved.updated_at >= lead.updated_at


def test_lead_updates_are_validated(lead_repo):
    lead = lead_repo.create(build_lead(_intake("E")))

    with pytest.raises(ValueError):
        lead_repo.update_score(lead.lead_id, 101)
    with pytest.raises(ValueError):
        lead_repo.update_status(lead.lead_id, "won-ish")
    with pytest.raises(ValueError):
        lead_repo.update(lead.lead_id, {"lead_id": "other"})

    assert lead_repo.get(lead.lead_id).status == "new"
    assert lead_repo.update_status("LD-missing", "contacted") is None


def test_lead_timestamps_round_trip_as_utc(lead_repo):
    before = datetime.now(timezone.utc)
    lead = lead_repo.create(build_lead(_intake("F")))

    stored = lead_repo.get(lead.lead_id)

    assert stored.created_at.tzinfo is not None
    assert stored.created_at.utcoffset() == timedelta(0)
    assert before - timedelta(seconds=5) <= stored.created_at <= datetime.now(timezone.utc) + timedelta(seconds=5)

    moved = lead_repo.update_status(lead.lead_id, "contacted")
    assert moved.updated_at >= stored.created_at
    assert len(lead_repo.list_leads(date_from=datetime(2000, 1, 1))) == 1


def test_key_value_store_overwrites(tmp_path):
    kv = SqlKeyValueStore(f"sqlite:///{tmp_path}/kv.db")

    assert kv.get("k") is None
    kv.set("k", "one")
    kv.set("k", "two")
    assert kv.get("k") == "two"
    kv.delete("k")
    assert kv.get("k") is None

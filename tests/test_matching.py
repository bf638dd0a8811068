from propmatch.adapters.memory_repo import InMemoryCatalogRepository
from propmatch.domain.preferences import PropertyPreferences
from propmatch.services.matching import (
    exclusion_reason,
    filter_and_score_properties,
    search,
    sort_properties,
)


def test_type_mismatch_is_excluded(make_property):
    villa = make_property("p1", type="villa")
    flat = make_property("p2", type="apartment")

    out = filter_and_score_properties([villa, flat], [], {"propertyType": "apartment"})

    assert [s.property.id for s in out] == ["p2"]
    assert exclusion_reason(villa, PropertyPreferences(property_type="apartment")) is not None


def test_zone_id_mismatch_forgiven_without_zone_name(make_property):
    prop = make_property("p1", zone="south", zone_id="z2")

    assert exclusion_reason(prop, PropertyPreferences(zone_id="z7")) is None
    assert exclusion_reason(prop, PropertyPreferences(zone_id="z7", zone="south")) is None
    assert exclusion_reason(prop, PropertyPreferences(zone_id="z7", zone="north")) is not None


def test_budget_bhk_tags_never_exclude(make_property, make_config):
    prop = make_property("p1")
    cfg = make_config("p1", "50000", area=3000, label="5BHK")  # 15 crore
    prefs = {"budgetRange": [10, 20], "bhkType": ["1BHK"], "tags": ["golf-course"], "amenities": ["Gym"]}

    out = filter_and_score_properties([prop], [cfg], prefs)

    assert len(out) == 1
    assert 20 <= out[0].match_score <= 100


def test_filter_is_a_subset_and_scores_are_bounded(make_property, make_config):
    props = [
        make_property("a", type="villa", zone="north", zone_id="z1"),
        make_property("b", type="plot", zone="east", zone_id="z3", tags=["high-roi"]),
        make_property("c", type="apartment", zone="central", zone_id="z5"),
    ]
    cfgs = [make_config("a", "12000", area=2400), make_config("c", "oops")]

    for prefs in [{}, {"propertyType": "plot"}, {"zoneId": "z1", "zone": "north"}, {"intent": "investment"}]:
        out = filter_and_score_properties(props, cfgs, prefs)
        assert len(out) <= len(props)
        for s in out:
            assert isinstance(s.match_score, int)
            assert 20 <= s.match_score <= 100


def test_scoring_is_idempotent(make_property, make_config):
    props = [make_property("a", tags=["family-friendly"]), make_property("b", type="villa")]
    cfgs = [make_config("a", "7000", area=1100, label="2BHK")]
    prefs = {"intent": "end-use", "bhkType": ["2BHK"], "budgetRange": [60, 90]}

    first = [s.match_score for s in filter_and_score_properties(props, cfgs, prefs)]
    second = [s.match_score for s in filter_and_score_properties(props, cfgs, prefs)]
    assert first == second


def test_scored_property_carries_configs_and_price(make_property, make_config):
    prop = make_property("v1", type="villa", zone_id="z2")
    cfg = make_config("v1", "10000", area=1500)
    other = make_config("zz", "9000")

    (hit,) = filter_and_score_properties([prop], [cfg, other], {"propertyType": "villa", "zoneId": "z2", "budgetRange": [100, 200]})

    assert hit.configurations == [cfg]
    assert hit.price_display == "₹1.5Cr"
    assert hit.min_price == hit.max_price == 15_000_000.0
    assert hit.match_score == 93


def test_malformed_preferences_are_treated_as_none(make_property):
    out = filter_and_score_properties([make_property("p1")], [], "not a dict")  # type: ignore[arg-type]
    assert len(out) == 1
    assert out[0].match_score == 20 + 15 + 15 + 10 + 3


def _scored(make_property, make_config):
    props = [
        make_property("cheap", name="Cheap Homes"),
        make_property("none", name="No Price Yet"),
        make_property("dear", name="alpha towers"),
        make_property("mid", name="Brook Side"),
    ]
    cfgs = [
        make_config("cheap", "4000"),
        make_config("dear", "20000", area=2000),
        make_config("dear", "9000", area=1000),
        make_config("mid", "7000"),
    ]
    return filter_and_score_properties(props, cfgs, {})


def test_sort_price_low_puts_unpriced_last(make_property, make_config):
    ranked = sort_properties(_scored(make_property, make_config), "price-low")
    assert [s.property.id for s in ranked] == ["cheap", "mid", "dear", "none"]


def test_sort_price_high_puts_unpriced_last(make_property, make_config):
    ranked = sort_properties(_scored(make_property, make_config), "price-high")
    assert [s.property.id for s in ranked] == ["dear", "mid", "cheap", "none"]


def test_sort_by_name(make_property, make_config):
    ranked = sort_properties(_scored(make_property, make_config), "name")
    assert [s.property.name for s in ranked] == ["alpha towers", "Brook Side", "Cheap Homes", "No Price Yet"]


def test_sort_by_match_is_descending_and_stable(make_property, make_config):
    props = [
        make_property("x", type="plot"),
        make_property("y", type="villa"),
        make_property("z", type="villa"),
    ]
    scored = filter_and_score_properties(props, [], {"zone": "south"})
    # equal scores keep catalog order
    assert [s.property.id for s in sort_properties(scored, "match")] == ["x", "y", "z"]

    scored[1] = scored[1].model_copy(update={"match_score": 90})
    assert [s.property.id for s in sort_properties(scored, "match")] == ["y", "x", "z"]


def test_unknown_sort_key_falls_back_to_match(make_property, make_config):
    scored = _scored(make_property, make_config)
    assert sort_properties(scored, "popularity") == sort_properties(scored, "match")


def test_search_pipeline_limits(make_property, make_config):
    props = [make_property(str(i)) for i in range(5)]
    assert len(search(props, [], {}, sort_by="name", limit=2)) == 2
    assert len(search(props, [], {})) == 5


def test_search_over_in_memory_catalog(make_property, make_config):
    repo = InMemoryCatalogRepository()
    repo.upsert_properties([make_property("a", name="Acacia"), make_property("b", name="Birch", type="plot")])
    repo.upsert_properties([make_property("a", name="Acacia Phase 2")])
    repo.upsert_configurations([make_config("a", "5000", cid="a1"), make_config("a", "7000", cid="a2")])

    assert repo.get_property("a").name == "Acacia Phase 2"
    assert len(repo.list_configurations("a")) == 2

    hits = search(repo.list_properties(), repo.list_configurations(), {"propertyType": "apartment"})
    assert [h.property.id for h in hits] == ["a"]
    assert hits[0].price_display == "₹50.0L - ₹70.0L"


def test_name_sort_folds_accents(make_property):
    props = [
        make_property("z", name="Zen Gardens"),
        make_property("e", name="Ébène Residency"),
        make_property("a", name="amber court"),
    ]
    scored = filter_and_score_properties(props, [], {})

    assert [s.property.id for s in sort_properties(scored, "name")] == ["a", "e", "z"]

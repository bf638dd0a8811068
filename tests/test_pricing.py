from propmatch.analysis.pricing import (
    PRICE_ON_REQUEST,
    config_price,
    display_price,
    format_price,
    get_price_range,
)


def test_no_configurations_is_price_on_request():
    assert get_price_range([]) == PRICE_ON_REQUEST == "Price on Request"


def test_price_is_rate_times_area(make_config):
    cfg = make_config("p1", "10000", area=1500)
    assert config_price(cfg) == 15_000_000.0
    assert get_price_range([cfg]) == "₹1.5Cr"


def test_equal_prices_show_single_value(make_config):
    a = make_config("p1", "5000", area=1200, label="2BHK")
    b = make_config("p1", "6000", area=1000, label="2BHK Large")
    assert get_price_range([a, b]) == "₹60.0L"


def test_range_uses_min_and_max(make_config):
    cfgs = [
        make_config("p1", "8000", area=1200, label="3BHK"),
        make_config("p1", "5000", area=1000, label="2BHK"),
    ]
    assert get_price_range(cfgs) == "₹50.0L - ₹96.0L"


def test_missing_area_defaults_to_1000_sqft(make_config):
    cfg = make_config("p1", "6000", area=None)
    assert config_price(cfg) == 6_000_000.0


def test_unparseable_or_zero_rates_are_skipped(make_config):
    bad = make_config("p1", "abc", label="1BHK")
    zero = make_config("p1", "0", label="2BHK")
    good = make_config("p1", "4000", label="3BHK")

    assert config_price(bad) is None
    assert config_price(zero) is None
    assert get_price_range([bad, zero, good]) == "₹40.0L"
    assert get_price_range([bad, zero]) == PRICE_ON_REQUEST


def test_format_price_units():
    assert format_price(25_000_000) == "₹2.5Cr"
    assert format_price(100_000) == "₹1.0L"
    assert format_price(50_000) == "₹50,000"
    assert format_price(99_999.5) == "₹99,999.50"


def test_zone_estimate_only_when_requested(make_property):
    prop = make_property("p1", zone="south")
    assert display_price(prop, []) == PRICE_ON_REQUEST
    assert display_price(prop, [], estimate=True) == "₹1.8Cr"
    assert display_price({"zone": "unknown"}, [], estimate=True) == "₹1.4Cr"


def test_estimate_ignored_when_configs_priced(make_property, make_config):
    prop = make_property("p1", zone="west")
    cfg = make_config("p1", "5000")
    assert display_price(prop, [cfg], estimate=True) == "₹50.0L"

"""Scenario sharing through query-string parameters."""

from __future__ import annotations

import pytest

from rent_vs_buy.query import (
    FORM_DEFAULTS,
    ScenarioQuery,
    from_query_params,
    from_query_string,
    to_query_params,
    to_query_string,
)
from rent_vs_buy.schemas import DEFAULT_YEARS, ScenarioInputs


def test_only_present_fields_are_written():
    query = ScenarioQuery(purchase_price=900_000, down_payment_percent=25)
    assert to_query_params(query) == {"price": "900000", "down": "25"}


def test_default_years_left_out():
    assert "years" not in to_query_params(ScenarioQuery(years=DEFAULT_YEARS))
    assert to_query_params(ScenarioQuery(years=15)) == {"years": "15"}


def test_query_string_uses_short_keys():
    query = ScenarioQuery(
        purchase_price=1_200_000,
        down_payment_percent=20,
        mortgage_rate_pct=6.75,
        monthly_rent=4_500,
        home_appreciation_pct=3.5,
        rent_growth_pct=2,
        years=20,
    )
    assert to_query_string(query) == (
        "price=1200000&down=20&rate=6.75&rent=4500&appreciation=3.5&rentgrowth=2&years=20"
    )


def test_parse_query_string():
    query = from_query_string("?price=%24900%2C000&down=25&rate=6.5&years=15")
    assert query.purchase_price == 900_000
    assert query.down_payment_percent == 25
    assert query.mortgage_rate_pct == 6.5
    assert query.monthly_rent is None
    assert query.years == 15


def test_unparseable_values_mean_default():
    query = from_query_params({"price": "lots", "rent": "", "years": "ten"})
    assert query.purchase_price is None
    assert query.monthly_rent is None
    assert query.years is None
    assert query.years_or_default == DEFAULT_YEARS


def test_non_finite_or_fractional_years_mean_default():
    assert from_query_string("years=1e400").years is None
    assert from_query_string("years=2.7").years is None
    assert from_query_string("years=15.0").years == 15
    assert from_query_string("price=1e400&rent=3000").purchase_price is None


def test_unknown_keys_ignored():
    query = from_query_string("price=500000&utm_source=newsletter")
    assert query.purchase_price == 500_000


def test_to_inputs_fills_defaults_and_converts_units():
    inputs = from_query_string("price=900000&rate=5").to_inputs()
    assert inputs.purchase_price == 900_000
    assert inputs.mortgage_rate == pytest.approx(0.05)
    assert inputs.down_payment_percent == FORM_DEFAULTS["down_payment_percent"]
    assert inputs.monthly_rent == FORM_DEFAULTS["monthly_rent"]
    assert inputs.rent_growth_rate == pytest.approx(FORM_DEFAULTS["rent_growth_pct"] / 100)


def test_to_inputs_keeps_base_advanced_fields():
    base = ScenarioInputs(
        purchase_price=700_000,
        down_payment_percent=10,
        mortgage_rate=0.06,
        monthly_rent=3_000,
        home_appreciation_rate=0.02,
        rent_growth_rate=0.02,
        hoa_monthly=350.0,
        selling_cost_rate=0.05,
    )
    inputs = from_query_string("rent=3300").to_inputs(base)
    assert inputs.monthly_rent == 3_300
    assert inputs.purchase_price == 700_000
    assert inputs.mortgage_rate == pytest.approx(0.06)
    assert inputs.hoa_monthly == 350.0
    assert inputs.selling_cost_rate == 0.05


def test_from_inputs_reports_form_units():
    inputs = ScenarioInputs(
        purchase_price=1_000_000,
        down_payment_percent=20,
        mortgage_rate=0.065,
        monthly_rent=4_000,
        home_appreciation_rate=0.03,
        rent_growth_rate=0.03,
    )
    query = ScenarioQuery.from_inputs(inputs, years=12)
    assert query.mortgage_rate_pct == 6.5
    assert query.home_appreciation_pct == 3.0
    assert to_query_params(query)["years"] == "12"
    assert from_query_string(to_query_string(query)).to_inputs() == inputs

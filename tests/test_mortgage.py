"""Amortization and capped-assessment formulas."""

from __future__ import annotations

import math

import pytest

from rent_vs_buy.assessment import assessed_value, property_tax
from rent_vs_buy.mortgage import monthly_payment, remaining_balance


def test_payment_known_case_30_year():
    assert math.isclose(monthly_payment(1_000_000, 0.06, 30), 5995.51, abs_tol=0.01)


def test_payment_known_case_15_year():
    assert math.isclose(monthly_payment(500_000, 0.05, 15), 3953.97, abs_tol=0.01)


def test_payment_defaults_to_30_year_term():
    assert monthly_payment(1_000_000, 0.06) == monthly_payment(1_000_000, 0.06, 30)


def test_zero_rate_payment_is_straight_line():
    assert monthly_payment(360_000, 0.0, 30) == 1000.0
    assert monthly_payment(120_000, 0.0, 10) == 120_000 / 120


@pytest.mark.parametrize("rate,term", [(0.03, 15), (0.065, 30), (0.12, 10)])
def test_balance_starts_at_principal_and_ends_near_zero(rate, term):
    principal = 750_000.0
    assert remaining_balance(principal, rate, 0, term) == principal
    assert remaining_balance(principal, rate, term * 12, term) == pytest.approx(0.0, abs=1e-6)


def test_balance_is_non_increasing():
    balances = [remaining_balance(400_000, 0.07, month) for month in range(0, 361)]
    assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))


def test_balance_never_negative_after_term():
    assert remaining_balance(400_000, 0.07, 400) == 0.0


def test_zero_rate_balance():
    assert remaining_balance(360_000, 0.0, 0) == 360_000
    assert remaining_balance(360_000, 0.0, 120) == pytest.approx(240_000)
    assert remaining_balance(360_000, 0.0, 360) == pytest.approx(0.0)
    assert remaining_balance(360_000, 0.0, 480) == 0.0


def test_assessed_value_grows_at_two_percent():
    assert assessed_value(1_000_000, 0) == 1_000_000
    assert assessed_value(1_000_000, 1) == pytest.approx(1_020_000)
    assert assessed_value(1_000_000, 10) == pytest.approx(1_000_000 * 1.02**10)


def test_property_tax_uses_assessed_value():
    assert property_tax(1_000_000, 0, 0.0115) == pytest.approx(11_500)
    assert property_tax(1_000_000, 1, 0.01) == pytest.approx(10_200)
    assert property_tax(1_000_000, 5, 0.0) == 0.0

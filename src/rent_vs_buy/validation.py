"""Input adapter: form values in, validated ``ScenarioInputs`` out."""

from __future__ import annotations

import re
from typing import List, Optional

from .schemas import DEFAULT_ADVANCED, ScenarioInputs

_NUMERIC_NOISE = re.compile(r"[$,\s]")
_LEADING_FLOAT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class InvalidScenarioError(ValueError):
    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def parse_optional_number(value: Optional[str]) -> Optional[float]:
    """Parse ``"$1,200.50"``-style text; None when nothing numeric is there."""
    if value is None:
        return None
    match = _LEADING_FLOAT.match(_NUMERIC_NOISE.sub("", value))
    if match is None:
        return None
    return float(match.group(0))


def parse_number(value: Optional[str]) -> float:
    parsed = parse_optional_number(value)
    return 0.0 if parsed is None else parsed


def validate_inputs(inputs: ScenarioInputs) -> List[str]:
    errors: List[str] = []

    if inputs.purchase_price <= 0:
        errors.append("Purchase price must be greater than 0")
    if not 0 <= inputs.down_payment_percent <= 100:
        errors.append("Down payment must be between 0% and 100%")
    if not 0 <= inputs.mortgage_rate <= 0.25:
        errors.append("Mortgage rate seems unrealistic (should be between 0% and 25%)")
    if inputs.monthly_rent < 0:
        errors.append("Monthly rent cannot be negative")
    if not -0.2 <= inputs.home_appreciation_rate <= 0.3:
        errors.append("Home appreciation rate seems unrealistic (-20% to 30%)")
    if not -0.1 <= inputs.rent_growth_rate <= 0.2:
        errors.append("Rent growth rate seems unrealistic (-10% to 20%)")
    if not -0.5 <= inputs.investment_return_rate <= 0.5:
        errors.append("Investment return rate seems unrealistic (-50% to 50%)")

    for name, label in (
        ("property_tax_rate", "Property tax rate"),
        ("hoa_monthly", "HOA dues"),
        ("maintenance_rate", "Maintenance rate"),
        ("closing_cost_rate", "Closing cost rate"),
        ("selling_cost_rate", "Selling cost rate"),
        ("insurance_annual", "Insurance premium"),
    ):
        if getattr(inputs, name) < 0:
            errors.append(f"{label} cannot be negative")

    return errors


def build_inputs(
    purchase_price: float,
    down_payment_percent: float,
    mortgage_rate_pct: float,
    monthly_rent: float,
    home_appreciation_pct: float,
    rent_growth_pct: float,
    **advanced: float,
) -> ScenarioInputs:
    """
    Convert form units (percentages) to decimals, fill in the advanced
    defaults and validate. Advanced overrides are already in engine units
    (decimals, dollars). Raises ``InvalidScenarioError`` listing every
    problem found.
    """
    unknown = set(advanced) - set(DEFAULT_ADVANCED)
    if unknown:
        raise TypeError(f"Unknown scenario fields: {', '.join(sorted(unknown))}")

    inputs = ScenarioInputs(
        purchase_price=purchase_price,
        down_payment_percent=down_payment_percent,
        mortgage_rate=mortgage_rate_pct / 100.0,
        monthly_rent=monthly_rent,
        home_appreciation_rate=home_appreciation_pct / 100.0,
        rent_growth_rate=rent_growth_pct / 100.0,
        **{**DEFAULT_ADVANCED, **advanced},
    )
    errors = validate_inputs(inputs)
    if errors:
        raise InvalidScenarioError(errors)
    return inputs

"""Capped property-tax assessment (Prop 13 style)."""

from __future__ import annotations

ASSESSMENT_CAP = 0.02


def assessed_value(purchase_price: float, year_index: int) -> float:
    # grows at the cap no matter what the market does
    return purchase_price * (1 + ASSESSMENT_CAP) ** year_index


def property_tax(purchase_price: float, year_index: int, tax_rate: float) -> float:
    return assessed_value(purchase_price, year_index) * tax_rate

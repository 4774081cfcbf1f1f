"""
Rent vs. Buy simulator.

Projects, year by year, the net worth of a household that buys a home
against one that rents and invests the difference, and finds the year at
which buying pulls ahead.
"""

from .schemas import (
    ComparisonResult,
    LocationFinancialDefaults,
    ScenarioInputs,
    YearlyRecord,
)
from .mortgage import monthly_payment, remaining_balance
from .assessment import assessed_value, property_tax
from .model import compare_scenarios, find_crossover, simulate
from .validation import InvalidScenarioError, build_inputs, validate_inputs

__all__ = [
    "ComparisonResult",
    "LocationFinancialDefaults",
    "ScenarioInputs",
    "YearlyRecord",
    "monthly_payment",
    "remaining_balance",
    "assessed_value",
    "property_tax",
    "compare_scenarios",
    "find_crossover",
    "simulate",
    "InvalidScenarioError",
    "build_inputs",
    "validate_inputs",
]

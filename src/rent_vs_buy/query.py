"""Shareable scenarios as flat query-string parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Dict, Optional
from urllib.parse import parse_qs, urlencode

from .schemas import DEFAULT_YEARS, ScenarioInputs
from .validation import parse_optional_number

# Short keys keep shared URLs readable.
QUERY_KEYS: Dict[str, str] = {
    "purchase_price": "price",
    "down_payment_percent": "down",
    "mortgage_rate_pct": "rate",
    "monthly_rent": "rent",
    "home_appreciation_pct": "appreciation",
    "rent_growth_pct": "rentgrowth",
    "years": "years",
}

# Used for any field a query leaves out.
FORM_DEFAULTS: Dict[str, float] = {
    "purchase_price": 1_000_000.0,
    "down_payment_percent": 20.0,
    "mortgage_rate_pct": 6.5,
    "monthly_rent": 4_000.0,
    "home_appreciation_pct": 3.0,
    "rent_growth_pct": 3.0,
}

# ScenarioInputs fields a query can carry
_BASIC_FIELDS = frozenset(
    {
        "purchase_price",
        "down_payment_percent",
        "mortgage_rate",
        "monthly_rent",
        "home_appreciation_rate",
        "rent_growth_rate",
    }
)


@dataclass
class ScenarioQuery:
    """Form-unit values (percentages as typed); None means "use default"."""

    purchase_price: Optional[float] = None
    down_payment_percent: Optional[float] = None
    mortgage_rate_pct: Optional[float] = None
    monthly_rent: Optional[float] = None
    home_appreciation_pct: Optional[float] = None
    rent_growth_pct: Optional[float] = None
    years: Optional[int] = None

    @classmethod
    def from_inputs(cls, inputs: ScenarioInputs, years: int = DEFAULT_YEARS) -> "ScenarioQuery":
        return cls(
            purchase_price=inputs.purchase_price,
            down_payment_percent=inputs.down_payment_percent,
            mortgage_rate_pct=_to_percent(inputs.mortgage_rate),
            monthly_rent=inputs.monthly_rent,
            home_appreciation_pct=_to_percent(inputs.home_appreciation_rate),
            rent_growth_pct=_to_percent(inputs.rent_growth_rate),
            years=years,
        )

    def form_values(self, defaults: Optional[Dict[str, float]] = None) -> Dict[str, float]:
        values = dict(FORM_DEFAULTS if defaults is None else defaults)
        for name in FORM_DEFAULTS:
            value = getattr(self, name)
            if value is not None:
                values[name] = value
        return values

    def to_inputs(self, base: Optional[ScenarioInputs] = None) -> ScenarioInputs:
        """
        Fill the engine's inputs. Missing fields come from ``base`` when
        given, otherwise from ``FORM_DEFAULTS``; advanced fields always come
        from ``base`` (or their defaults).
        """
        defaults = None
        advanced = {}
        if base is not None:
            defaults = ScenarioQuery.from_inputs(base).form_values()
            advanced = {
                f.name: getattr(base, f.name)
                for f in fields(ScenarioInputs)
                if f.name not in _BASIC_FIELDS
            }
        values = self.form_values(defaults)
        return ScenarioInputs(
            purchase_price=values["purchase_price"],
            down_payment_percent=values["down_payment_percent"],
            mortgage_rate=values["mortgage_rate_pct"] / 100.0,
            monthly_rent=values["monthly_rent"],
            home_appreciation_rate=values["home_appreciation_pct"] / 100.0,
            rent_growth_rate=values["rent_growth_pct"] / 100.0,
            **advanced,
        )

    @property
    def years_or_default(self) -> int:
        return DEFAULT_YEARS if self.years is None else self.years


def to_query_params(query: ScenarioQuery) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for name, key in QUERY_KEYS.items():
        value = getattr(query, name)
        if value is None:
            continue
        if name == "years" and value == DEFAULT_YEARS:
            continue
        params[key] = _format_number(value)
    return params


def to_query_string(query: ScenarioQuery) -> str:
    return urlencode(to_query_params(query))


def from_query_params(params: Dict[str, str]) -> ScenarioQuery:
    values = {
        name: parse_optional_number(params.get(key))
        for name, key in QUERY_KEYS.items()
    }
    for name, value in values.items():
        if value is not None and not math.isfinite(value):
            values[name] = None
    years = values.pop("years")
    # fractional horizons are not shareable
    if years is not None and not years.is_integer():
        years = None
    return ScenarioQuery(years=None if years is None else int(years), **values)


def from_query_string(query_string: str) -> ScenarioQuery:
    parsed = parse_qs(query_string.lstrip("?"), keep_blank_values=True)
    # repeated keys: first one wins
    return from_query_params({key: values[0] for key, values in parsed.items()})


def _to_percent(rate: float) -> float:
    return round(rate * 100.0, 10)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_YEARS = 10
AMORTIZATION_TERM_YEARS = 30
INSURANCE_RATE_OF_VALUE = 0.0035

# Advanced fields a minimal form does not ask for.
DEFAULT_ADVANCED: Dict[str, float] = {
    "investment_return_rate": 0.07,
    "property_tax_rate": 0.0115,
    "hoa_monthly": 0.0,
    "maintenance_rate": 0.01,
    "closing_cost_rate": 0.025,
    "selling_cost_rate": 0.06,
    "insurance_annual": 0.0,  # 0 -> 0.35% of home value
}


@dataclass(frozen=True)
class ScenarioInputs:
    """Everything one buy-vs-rent projection needs. Rates are decimals."""

    purchase_price: float
    down_payment_percent: float  # 0-100
    mortgage_rate: float
    monthly_rent: float
    home_appreciation_rate: float
    rent_growth_rate: float
    investment_return_rate: float = DEFAULT_ADVANCED["investment_return_rate"]
    property_tax_rate: float = DEFAULT_ADVANCED["property_tax_rate"]
    hoa_monthly: float = DEFAULT_ADVANCED["hoa_monthly"]
    maintenance_rate: float = DEFAULT_ADVANCED["maintenance_rate"]
    closing_cost_rate: float = DEFAULT_ADVANCED["closing_cost_rate"]
    selling_cost_rate: float = DEFAULT_ADVANCED["selling_cost_rate"]
    insurance_annual: float = DEFAULT_ADVANCED["insurance_annual"]

    @property
    def down_payment(self) -> float:
        return self.purchase_price * (self.down_payment_percent / 100.0)

    @property
    def loan_amount(self) -> float:
        return self.purchase_price - self.down_payment

    @property
    def closing_costs(self) -> float:
        return self.purchase_price * self.closing_cost_rate

    def annual_insurance(self, home_value: float) -> float:
        if self.insurance_annual > 0:
            return self.insurance_annual
        return home_value * INSURANCE_RATE_OF_VALUE


@dataclass(frozen=True)
class YearlyRecord:
    year: int
    buy_net_worth: float
    rent_net_worth: float
    home_value: float
    mortgage_balance: float
    home_equity: float
    renting_investments: float
    annual_rent: float
    annual_ownership_cost: float


@dataclass
class ComparisonResult:
    inputs: ScenarioInputs
    years: int
    monthly_mortgage_payment: float
    crossover_year: Optional[float]
    records: List[YearlyRecord] = field(default_factory=list)

    @property
    def final_record(self) -> YearlyRecord:
        return self.records[-1]

    @property
    def buy_leads_from_start(self) -> bool:
        """Buying is ahead already at year 0, so no crossover can occur."""
        first = self.records[0]
        return first.buy_net_worth > first.rent_net_worth

    @property
    def better_option(self) -> str:
        last = self.final_record
        if last.buy_net_worth > last.rent_net_worth:
            return "buying"
        if last.rent_net_worth > last.buy_net_worth:
            return "renting"
        return "tie"


@dataclass
class LocationFinancialDefaults:
    """Holds CBSA-level financial defaults assembled from ACS + HMDA."""

    cbsa: str
    name: str
    median_income: float
    median_rent: float
    property_value: float
    loan_amount: float
    interest_rate: float  # annual percentage, e.g., 6.25
    annual_taxes: float = 0.0

    @property
    def loan_to_value(self) -> float:
        if self.property_value == 0:
            return 0.0
        return self.loan_amount / self.property_value

    @property
    def down_payment_percent(self) -> float:
        return max(1.0 - self.loan_to_value, 0.0) * 100.0

    @property
    def property_tax_rate(self) -> float:
        if self.property_value <= 0 or self.annual_taxes <= 0:
            return DEFAULT_ADVANCED["property_tax_rate"]
        return self.annual_taxes / self.property_value

    def to_scenario_inputs(
        self,
        *,
        home_appreciation_rate: float,
        rent_growth_rate: float,
        **advanced: float,
    ) -> ScenarioInputs:
        overrides = {**DEFAULT_ADVANCED, "property_tax_rate": self.property_tax_rate}
        overrides.update(advanced)
        return ScenarioInputs(
            purchase_price=self.property_value,
            down_payment_percent=self.down_payment_percent,
            mortgage_rate=self.interest_rate / 100.0,
            monthly_rent=self.median_rent,
            home_appreciation_rate=home_appreciation_rate,
            rent_growth_rate=rent_growth_rate,
            **overrides,
        )

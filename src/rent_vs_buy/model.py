from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .assessment import property_tax
from .mortgage import monthly_payment, remaining_balance
from .schemas import (
    DEFAULT_YEARS,
    ComparisonResult,
    ScenarioInputs,
    YearlyRecord,
)

logger = logging.getLogger(__name__)


def compare_scenarios(
    inputs: ScenarioInputs, years: int = DEFAULT_YEARS
) -> ComparisonResult:
    records = simulate(inputs, years)
    return ComparisonResult(
        inputs=inputs,
        years=years,
        monthly_mortgage_payment=monthly_payment(
            inputs.loan_amount, inputs.mortgage_rate
        ),
        crossover_year=find_crossover(records),
        records=records,
    )


def simulate(inputs: ScenarioInputs, years: int) -> List[YearlyRecord]:
    """
    Project buy-side and rent-side net worth for years 0..``years``.

    Year 0 is the "sell today" position. The mortgage always amortizes over
    30 years, whatever the projection horizon.
    """
    if years < 0:
        raise ValueError("years must be zero or positive")

    price = inputs.purchase_price
    down_payment = inputs.down_payment
    loan_amount = inputs.loan_amount
    closing_costs = inputs.closing_costs
    mortgage_payment = monthly_payment(loan_amount, inputs.mortgage_rate)
    investment_monthly = inputs.investment_return_rate / 12.0

    # the renter invests what the buyer sinks into the purchase
    renting_investments = down_payment + closing_costs
    current_rent = inputs.monthly_rent

    records: List[YearlyRecord] = [
        YearlyRecord(
            year=0,
            buy_net_worth=down_payment - price * inputs.selling_cost_rate - closing_costs,
            rent_net_worth=renting_investments,
            home_value=price,
            mortgage_balance=loan_amount,
            home_equity=down_payment,
            renting_investments=renting_investments,
            annual_rent=0.0,
            annual_ownership_cost=closing_costs,
        )
    ]

    for year in range(1, years + 1):
        home_value = price * (1 + inputs.home_appreciation_rate) ** year
        balance = remaining_balance(loan_amount, inputs.mortgage_rate, year * 12)

        ownership_cost = (
            mortgage_payment * 12
            + property_tax(price, year - 1, inputs.property_tax_rate)
            + inputs.hoa_monthly * 12
            + home_value * inputs.maintenance_rate
            + inputs.annual_insurance(home_value)
        )

        home_equity = home_value - balance
        selling_costs = home_value * inputs.selling_cost_rate
        buy_net_worth = home_equity - selling_costs - closing_costs

        # negative when owning is cheaper than renting
        monthly_savings = ownership_cost / 12.0 - current_rent
        for _ in range(12):
            renting_investments += monthly_savings
            renting_investments *= 1 + investment_monthly

        records.append(
            YearlyRecord(
                year=year,
                buy_net_worth=buy_net_worth,
                rent_net_worth=renting_investments,
                home_value=home_value,
                mortgage_balance=balance,
                home_equity=home_equity,
                renting_investments=renting_investments,
                annual_rent=current_rent * 12,
                annual_ownership_cost=ownership_cost,
            )
        )

        current_rent *= 1 + inputs.rent_growth_rate

    logger.debug(
        "Simulated %d years: buy=%.2f rent=%.2f at horizon",
        years,
        records[-1].buy_net_worth,
        records[-1].rent_net_worth,
    )
    return records


def find_crossover(records: Sequence[YearlyRecord]) -> Optional[float]:
    """
    Fractional year where buying first overtakes renting, or None.

    Only a transition counts: if buying is ahead from year 0 there is no
    crossover, so check ``records[0]`` (or ``ComparisonResult.buy_leads_from_start``).
    """
    for prev, curr in zip(records, records[1:]):
        if (
            prev.buy_net_worth <= prev.rent_net_worth
            and curr.buy_net_worth > curr.rent_net_worth
        ):
            gap = prev.rent_net_worth - prev.buy_net_worth
            closing = (curr.buy_net_worth - prev.buy_net_worth) - (
                curr.rent_net_worth - prev.rent_net_worth
            )
            return prev.year + gap / closing
    return None

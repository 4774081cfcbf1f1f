from __future__ import annotations

from .schemas import AMORTIZATION_TERM_YEARS


def monthly_payment(
    principal: float, annual_rate: float, term_years: int = AMORTIZATION_TERM_YEARS
) -> float:
    """
    Fixed-rate principal + interest payment:
      M = P * r(1+r)^n / ((1+r)^n - 1),  r = annual_rate/12, n = term_years*12.
    A zero rate falls back to straight-line repayment.
    """
    monthly_rate = annual_rate / 12.0
    num_payments = term_years * 12
    if monthly_rate == 0:
        return principal / num_payments
    growth = (1 + monthly_rate) ** num_payments
    return principal * monthly_rate * growth / (growth - 1)


def remaining_balance(
    principal: float,
    annual_rate: float,
    months_elapsed: int,
    term_years: int = AMORTIZATION_TERM_YEARS,
) -> float:
    """Outstanding principal after ``months_elapsed`` scheduled payments."""
    if months_elapsed == 0:
        return principal
    monthly_rate = annual_rate / 12.0
    payment = monthly_payment(principal, annual_rate, term_years)
    if monthly_rate == 0:
        return max(principal - payment * months_elapsed, 0.0)
    growth = (1 + monthly_rate) ** months_elapsed
    balance = principal * growth - payment * (growth - 1) / monthly_rate
    # float noise leaves tiny negatives once the loan is paid off
    return max(balance, 0.0)

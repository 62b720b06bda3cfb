# src/core/finance/amortization.py

from __future__ import annotations

from dataclasses import dataclass

_EPS = 1e-6  # for floating cleanup


@dataclass(frozen=True)
class PaymentBreakdown:
    """
    Immutable record of a single monthly payment.

    Attributes:
        month: 1-based month index.
        interest: Interest paid this month.
        principal: Principal paid this month.
        total: Total payment this month (interest + principal).
        balance: Remaining principal balance after this month's payment.
    """

    month: int
    interest: float
    principal: float
    total: float
    balance: float


@dataclass(frozen=True)
class YearDebt:
    year: int
    interest: float
    principal: float
    payment: float
    ending_balance: float


def monthly_payment(principal: float, annual_rate_percent: float, term_years: int) -> float:
    """
    Constant monthly payment for a fully-amortizing fixed-rate loan.

    Formula (standard annuity):
        PMT = [ P * r * (1 + r)^n ] / [ (1 + r)^n - 1 ]

    Where:
        P = principal
        r = monthly rate = annual_rate_percent / 12 / 100
        n = term_years * 12

    Notes:
        - A zero rate reduces to straight-line principal / n.
        - principal == 0 (all-cash purchase) or a zero term yields 0.0.
    """
    if principal <= 0 or term_years <= 0:
        return 0.0

    r = annual_rate_percent / 12.0 / 100.0
    n = term_years * 12

    if r == 0:
        return principal / n

    growth = (1 + r) ** n
    return principal * r * growth / (growth - 1)


def generate_schedule(principal: float, annual_rate_percent: float, term_years: int) -> list[PaymentBreakdown]:
    """
    Build the monthly amortization schedule (term_years * 12 entries).

    The final month absorbs rounding drift so the balance lands on exactly 0.
    """
    if principal <= 0 or term_years <= 0:
        return []

    r = annual_rate_percent / 12.0 / 100.0
    pmt = monthly_payment(principal, annual_rate_percent, term_years)
    n = term_years * 12

    schedule: list[PaymentBreakdown] = []
    bal = float(principal)
    for month in range(1, n + 1):
        interest = bal * r
        principal_paid = max(0.0, pmt - interest)
        total = pmt
        # Guard for rounding drift in the final payment
        if month == n or principal_paid > bal:
            principal_paid = bal
            total = interest + principal_paid
        bal = max(0.0, bal - principal_paid)
        if bal < _EPS:
            bal = 0.0
        schedule.append(PaymentBreakdown(month, interest, principal_paid, total, bal))

    return schedule


def annual_debt_schedule(
    principal: float,
    annual_rate_percent: float,
    term_years: int,
    horizon_years: int,
) -> list[YearDebt]:
    """
    Roll the monthly schedule up into one row per year, padded with zero-payment
    rows up to `horizon_years` (the loan is retired once the term elapses).
    """
    if horizon_years < 0:
        raise ValueError("horizon_years must be >= 0")

    monthly = generate_schedule(principal, annual_rate_percent, term_years)
    out: list[YearDebt] = []

    for y in range(1, horizon_years + 1):
        chunk = monthly[(y - 1) * 12 : y * 12]
        if not chunk:
            # Past the loan term: no debt service, nothing left to pay off
            out.append(YearDebt(y, interest=0.0, principal=0.0, payment=0.0, ending_balance=0.0))
            continue
        out.append(
            YearDebt(
                y,
                interest=sum(p.interest for p in chunk),
                principal=sum(p.principal for p in chunk),
                payment=sum(p.total for p in chunk),
                ending_balance=chunk[-1].balance,
            )
        )

    return out

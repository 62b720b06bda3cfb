# src/core/finance/projection.py

from __future__ import annotations

from src.schemas.models import (
    ExitAnalysis,
    MFDeal,
    OperatingStatement,
    SFRDeal,
    YearlyProjection,
)

from .amortization import annual_debt_schedule
from .property import PropertyStrategy, initial_investment, safe_div, strategy_for


def project(
    deal: SFRDeal | MFDeal,
    year0: OperatingStatement,
    *,
    strategy: PropertyStrategy | None = None,
) -> list[YearlyProjection]:
    """
    Year-by-year projection over `deal.long_term.projection_years`.

    Year 1 reproduces the first-year statement; each later year is derived from
    the previous one:
      rent_k      = rent_{k-1} * (1 + rent growth)
      inflation_k = inflation_{k-1} * (1 + inflation)      (fixed-dollar lines)
      value_k     = value_{k-1} * (1 + value growth)       (end of year)
    Tax/insurance use the value at the start of the year. Debt service and the
    balance come from the monthly amortization schedule and drop to 0 once the
    loan term has elapsed.
    """
    strategy = strategy or strategy_for(deal)
    lt = deal.long_term
    rent_growth = 1.0 + lt.annual_rent_increase / 100.0
    value_growth = 1.0 + lt.annual_property_value_increase / 100.0
    inflation = 1.0 + lt.inflation_rate / 100.0
    vacancy_rate = lt.vacancy_rate / 100.0

    debt = annual_debt_schedule(
        max(0.0, deal.loan_amount),
        deal.interest_rate,
        deal.loan_term,
        horizon_years=lt.projection_years,
    )

    projections: list[YearlyProjection] = []
    rent = year0.gross_income
    start_value = deal.purchase_price
    inflation_factor = 1.0

    for y in range(1, lt.projection_years + 1):
        if y > 1:
            prev = projections[-1]
            rent = prev.gross_rent * rent_growth
            start_value = prev.property_value
            inflation_factor *= inflation

        vacancy = rent * vacancy_rate
        effective = rent - vacancy
        expenses = strategy.expense_breakdown(
            gross_rent=rent,
            effective_income=effective,
            property_value=start_value,
            inflation_factor=inflation_factor,
        )
        opex = expenses.total
        noi = effective - opex

        row = debt[y - 1]
        end_value = start_value * value_growth

        projections.append(
            YearlyProjection(
                year=y,
                gross_rent=rent,
                vacancy_loss=vacancy,
                effective_income=effective,
                expenses=expenses,
                operating_expenses=opex,
                noi=noi,
                debt_service=row.payment,
                interest_paid=row.interest,
                principal_paid=row.principal,
                cash_flow=noi - row.payment,
                property_value=end_value,
                mortgage_balance=row.ending_balance,
                equity=end_value - row.ending_balance,
                appreciation=end_value - deal.purchase_price,
            )
        )

    return projections


def analyze_exit(
    projections: list[YearlyProjection],
    deal: SFRDeal | MFDeal,
    *,
    total_investment: float | None = None,
) -> ExitAnalysis:
    """Sale at the end of the horizon, using the last projection row."""
    if not projections:
        raise ValueError("analyze_exit requires at least one projection year")
    if total_investment is None:
        total_investment = initial_investment(deal)

    last = projections[-1]
    sale_price = last.property_value
    selling_costs = sale_price * deal.long_term.selling_costs_percentage / 100.0
    payoff = last.mortgage_balance
    net = sale_price - selling_costs - payoff

    cumulative_cash_flow = sum(p.cash_flow for p in projections)
    total_return = cumulative_cash_flow + net - total_investment

    return ExitAnalysis(
        projected_sale_price=sale_price,
        selling_costs=selling_costs,
        mortgage_payoff=payoff,
        net_proceeds_from_sale=net,
        total_return=total_return,
        return_on_investment=safe_div(total_return, total_investment) * 100.0,
        equity_multiple=safe_div(cumulative_cash_flow + net, total_investment),
    )

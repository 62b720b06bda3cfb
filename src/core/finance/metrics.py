# src/core/finance/metrics.py

from __future__ import annotations

from src.schemas.models import (
    ExitAnalysis,
    MFDeal,
    OperatingStatement,
    ReturnMetrics,
    SFRDeal,
    YearlyProjection,
)

from .irr import solve_irr
from .property import PropertyStrategy, initial_investment, safe_div, strategy_for

# Per-type underwriting thresholds (percent units except DSCR)
METRIC_THRESHOLDS: dict[str, dict[str, float]] = {
    "SFR": {"cap_rate": 6.0, "cash_on_cash": 8.0, "dscr": 1.0, "operating_expense_ratio": 45.0},
    "MF": {"cap_rate": 5.0, "cash_on_cash": 7.0, "dscr": 1.25, "operating_expense_ratio": 50.0},
}

DEFAULT_IMPROVEMENT_RETURN = 8.0


def metric_threshold(metric: str, property_type: str) -> float:
    return METRIC_THRESHOLDS[property_type][metric]


# ----------------------------
# Ratio helpers (zero denominator -> 0.0)
# ----------------------------


def cap_rate(noi: float, purchase_price: float) -> float:
    return safe_div(noi, purchase_price) * 100.0


def cash_on_cash_return(annual_cash_flow: float, total_investment: float) -> float:
    return safe_div(annual_cash_flow, total_investment) * 100.0


def dscr(noi: float, annual_debt_service: float) -> float:
    return safe_div(noi, annual_debt_service)


def gross_rent_multiplier(purchase_price: float, annual_gross_rent: float) -> float:
    return safe_div(purchase_price, annual_gross_rent)


def operating_expense_ratio(operating_expenses: float, effective_income: float) -> float:
    return safe_div(operating_expenses, effective_income) * 100.0


def break_even_occupancy(operating_expenses: float, debt_service: float, gross_potential_rent: float) -> float:
    return safe_div(operating_expenses + debt_service, gross_potential_rent) * 100.0


def rent_to_price_ratio(monthly_rent: float, purchase_price: float) -> float:
    return safe_div(monthly_rent, purchase_price) * 100.0


def return_on_improvements(noi: float, base_noi: float | None, capital_investments: float) -> float:
    """
    NOI lift per dollar of improvements (%). Without a pre-improvement NOI the
    lift is unknown and a flat DEFAULT_IMPROVEMENT_RETURN is reported.
    """
    if not capital_investments:
        return 0.0
    if base_noi is None:
        return DEFAULT_IMPROVEMENT_RETURN
    return (noi - base_noi) / capital_investments * 100.0


# ----------------------------
# Cash-flow series
# ----------------------------


def irr_cash_flows(total_investment: float, projections: list[YearlyProjection], exit_analysis: ExitAnalysis) -> list[float]:
    """
    [-investment, cf_1, ..., cf_n + net sale proceeds]

    Sale proceeds are folded into the final year, not appended as an extra period.
    """
    series = [-total_investment] + [p.cash_flow for p in projections]
    if projections:
        series[-1] += exit_analysis.net_proceeds_from_sale
    return series


def compute_metrics(
    deal: SFRDeal | MFDeal,
    year0: OperatingStatement,
    projections: list[YearlyProjection],
    exit_analysis: ExitAnalysis,
    *,
    strategy: PropertyStrategy | None = None,
) -> ReturnMetrics:
    """Summary return metrics from the first-year statement, the projection and the exit."""
    strategy = strategy or strategy_for(deal)
    investment = initial_investment(deal)

    series = irr_cash_flows(investment, projections, exit_analysis)
    irr_pct = solve_irr(series) * 100.0
    total_return = sum(series)

    # Headline price metric: per sqft (SFR) or per unit (MF)
    basis, size = strategy.unit_of_comparison()
    supplemental = {
        f"price_per_{basis}": safe_div(deal.purchase_price, size),
        **strategy.supplemental_metrics(
            noi=year0.noi,
            gross_income=year0.gross_income,
            vacancy_loss=year0.vacancy_loss,
            total_expenses=year0.total_expenses,
        ),
    }

    return ReturnMetrics(
        property_type=deal.property_type,
        noi=year0.noi,
        total_investment=investment,
        annual_debt_service=year0.debt_service,
        cap_rate=cap_rate(year0.noi, deal.purchase_price),
        cash_on_cash_return=cash_on_cash_return(year0.cash_flow, investment),
        dscr=dscr(year0.noi, year0.debt_service),
        gross_rent_multiplier=gross_rent_multiplier(deal.purchase_price, year0.gross_income),
        operating_expense_ratio=operating_expense_ratio(year0.total_expenses, year0.effective_income),
        irr=irr_pct,
        total_return=total_return,
        equity_multiple=exit_analysis.equity_multiple,
        break_even_occupancy=break_even_occupancy(year0.total_expenses, year0.debt_service, year0.gross_income),
        one_percent_rule=safe_div(year0.gross_income / 12.0, deal.purchase_price) * 100.0,
        passes_fifty_percent_rule=bool(year0.gross_income) and year0.total_expenses <= 0.5 * year0.gross_income,
        rent_to_price_ratio=rent_to_price_ratio(year0.gross_income / 12.0, deal.purchase_price),
        return_on_improvements=return_on_improvements(year0.noi, deal.base_noi, deal.capital_investments),
        turnover_cost_impact=safe_div(year0.expenses.turnover_costs, year0.gross_income) * 100.0,
        **supplemental,
    )

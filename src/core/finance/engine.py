# src/core/finance/engine.py
from __future__ import annotations

from src.schemas.models import (
    DealAnalysis,
    LongTermAnalysis,
    LongTermReturns,
    MFDeal,
    SFRDeal,
)

from .errors import validate_deal
from .metrics import compute_metrics, irr_cash_flows
from .operating import annual_view, build_operating_statement, monthly_view, mortgage_terms
from .projection import analyze_exit, project
from .property import initial_investment, strategy_for


def with_horizon(deal: SFRDeal | MFDeal, horizon_years: int | None) -> SFRDeal | MFDeal:
    """Copy of `deal` with long_term.projection_years replaced (the deal itself when None)."""
    if horizon_years is None:
        return deal
    return deal.model_copy(
        update={"long_term": deal.long_term.model_copy(update={"projection_years": horizon_years})}
    )


def analyze_deal(deal: SFRDeal | MFDeal, *, horizon_years: int | None = None) -> DealAnalysis:
    """
    Run the full pipeline for one deal:
      mortgage -> first-year statement -> projection -> exit -> metrics.

    Args:
        deal: SFRDeal or MFDeal.
        horizon_years: Optional override of deal.long_term.projection_years.

    Raises:
        InvalidDealInputError: inconsistent inputs (checked before any math).
    """
    deal = with_horizon(deal, horizon_years)
    validate_deal(deal)

    strategy = strategy_for(deal)
    mortgage = mortgage_terms(deal)
    year0 = build_operating_statement(deal, strategy=strategy, mortgage=mortgage)
    projections = project(deal, year0, strategy=strategy)

    investment = initial_investment(deal)
    exit_analysis = analyze_exit(projections, deal, total_investment=investment)
    metrics = compute_metrics(deal, year0, projections, exit_analysis, strategy=strategy)

    total_cash_flow = sum(p.cash_flow for p in projections)
    long_term = LongTermAnalysis(
        projection_years=len(projections),
        projections=projections,
        exit_analysis=exit_analysis,
        returns=LongTermReturns(
            irr=metrics.irr,
            total_cash_flow=total_cash_flow,
            total_appreciation=projections[-1].property_value - deal.purchase_price,
            total_return=metrics.total_return,
        ),
        cash_flow_series=irr_cash_flows(investment, projections, exit_analysis),
    )

    return DealAnalysis(
        property_type=deal.property_type,
        mortgage=mortgage,
        monthly_analysis=monthly_view(year0, mortgage),
        annual_analysis=annual_view(year0),
        long_term_analysis=long_term,
        key_metrics=metrics,
    )

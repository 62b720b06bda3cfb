# tests/unit/test_engine_end_to_end.py

from __future__ import annotations

import math

import pytest

from src.core.finance import analyze_deal
from src.schemas.models import DEFAULT_PROJECTION_YEARS, DealAnalysis


def test_reference_sfr_scenario(sfr_analysis):
    a = sfr_analysis
    assert isinstance(a, DealAnalysis)
    assert a.property_type == "SFR"
    # Standard annuity payment on 280k at 6.5%/30y is 1769.78, not the rounded 1769.38 sometimes quoted
    assert a.mortgage.monthly_payment == pytest.approx(1769.78, abs=0.1)

    # Year-1 figures are deterministic from the inputs
    assert a.annual_analysis.noi == pytest.approx(20_241.4)
    assert a.annual_analysis.cash_flow == pytest.approx(20_241.4 - a.mortgage.monthly_payment * 12)

    k = a.key_metrics
    for value in (k.cap_rate, k.dscr, k.irr, k.cash_on_cash_return, k.equity_multiple):
        assert math.isfinite(value)
    assert 0.0 < k.cap_rate < 15.0
    assert 0.5 < k.dscr < 3.0


def test_long_term_block_is_consistent(sfr_analysis):
    lt = sfr_analysis.long_term_analysis
    assert lt.projection_years == DEFAULT_PROJECTION_YEARS
    assert len(lt.projections) == 10
    assert lt.returns.irr == sfr_analysis.key_metrics.irr
    assert lt.returns.total_cash_flow == pytest.approx(sum(p.cash_flow for p in lt.projections))
    assert lt.returns.total_appreciation == pytest.approx(lt.projections[-1].property_value - 350_000.0)
    assert lt.returns.total_return == pytest.approx(sum(lt.cash_flow_series))
    assert lt.cash_flow_series[0] == -sfr_analysis.key_metrics.total_investment


def test_horizon_override(sfr_deal):
    a = analyze_deal(sfr_deal, horizon_years=15)
    assert a.long_term_analysis.projection_years == 15
    assert len(a.long_term_analysis.projections) == 15
    # The caller's deal is left untouched
    assert sfr_deal.long_term.projection_years == 10


def test_analysis_is_idempotent(sfr_deal, mf_deal):
    for deal in (sfr_deal, mf_deal):
        assert analyze_deal(deal).model_dump() == analyze_deal(deal).model_dump()


def test_mf_scenario(mf_analysis):
    a = mf_analysis
    assert a.property_type == "MF"
    assert a.annual_analysis.noi == pytest.approx(68_360.0)
    assert a.key_metrics.price_per_unit == pytest.approx(125_000.0)
    assert len(a.long_term_analysis.projections) == 10
    assert math.isfinite(a.key_metrics.irr)


def test_all_cash_deal(sfr_deal_factory):
    a = analyze_deal(sfr_deal_factory(down_payment=350_000.0))
    assert a.mortgage.monthly_payment == 0.0
    assert all(p.mortgage_balance == 0.0 for p in a.long_term_analysis.projections)
    assert a.key_metrics.dscr == 0.0
    assert a.key_metrics.irr > 0.0


def test_money_losing_deal_reports_zero_irr(sfr_deal_factory, sfr_deal):
    deal = sfr_deal_factory(
        monthly_rent=900.0,
        long_term=sfr_deal.long_term.model_copy(update={"annual_property_value_increase": -5.0}),
    )
    a = analyze_deal(deal)
    assert sum(a.long_term_analysis.cash_flow_series) <= 0
    assert a.key_metrics.irr == 0.0


def test_result_is_json_serializable(sfr_analysis):
    payload = sfr_analysis.model_dump_json()
    restored = DealAnalysis.model_validate_json(payload)
    assert restored == sfr_analysis

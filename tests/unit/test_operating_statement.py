# tests/unit/test_operating_statement.py

from __future__ import annotations

import pytest

from src.core.finance import build_operating_statement, mortgage_terms
from src.core.finance.operating import annual_view, monthly_view
from src.schemas.models import CommonAreaUtilities, TenantTurnoverFees
from tests.utils import make_long_term


def test_mortgage_terms_for_reference_deal(sfr_deal):
    m = mortgage_terms(sfr_deal)
    assert m.loan_amount == pytest.approx(280_000.0)
    assert m.number_of_payments == 360
    assert m.monthly_rate == pytest.approx(6.5 / 12 / 100)
    assert m.monthly_payment == pytest.approx(1769.78, abs=0.1)
    assert m.annual_debt_service == pytest.approx(m.monthly_payment * 12)


def test_mortgage_terms_all_cash(sfr_deal_factory):
    m = mortgage_terms(sfr_deal_factory(down_payment=350_000.0))
    assert m.loan_amount == 0.0
    assert m.monthly_payment == 0.0


def test_sfr_first_year_statement(sfr_deal):
    st = build_operating_statement(sfr_deal)
    assert st.gross_income == pytest.approx(33_600.0)
    assert st.vacancy_loss == pytest.approx(1_680.0)
    assert st.effective_income == pytest.approx(31_920.0)

    e = st.expenses
    assert e.property_tax == pytest.approx(4_375.0)
    assert e.insurance == pytest.approx(1_750.0)
    assert e.maintenance == pytest.approx(3_000.0)
    # Management is charged on effective (collected) income
    assert e.property_management == pytest.approx(2_553.6)
    assert e.utilities == 0.0
    assert e.common_area_maintenance == 0.0

    assert st.total_expenses == pytest.approx(11_678.6)
    assert st.noi == pytest.approx(20_241.4)
    assert st.cash_flow == pytest.approx(st.noi - st.debt_service)


def test_sfr_maintenance_fallback_is_five_percent_of_rent(sfr_deal_factory):
    st = build_operating_statement(sfr_deal_factory(maintenance_cost=None))
    assert st.expenses.maintenance == pytest.approx(33_600.0 * 0.05)


def test_sfr_capex_reserve(sfr_deal_factory):
    st = build_operating_statement(sfr_deal_factory(capital_expenditure_rate=5.0))
    assert st.expenses.capital_expenditures == pytest.approx(1_680.0)


def test_mf_first_year_statement(mf_deal):
    st = build_operating_statement(mf_deal)
    assert st.gross_income == pytest.approx(120_000.0)
    assert st.vacancy_loss == pytest.approx(6_000.0)
    assert st.effective_income == pytest.approx(114_000.0)

    e = st.expenses
    assert e.property_tax == pytest.approx(12_000.0)
    assert e.insurance == pytest.approx(4_000.0)
    assert e.maintenance == pytest.approx(7_200.0)
    assert e.property_management == pytest.approx(6_840.0)
    assert e.utilities == pytest.approx(7_200.0)
    assert e.capital_expenditures == pytest.approx(6_000.0)
    assert e.common_area_maintenance == pytest.approx(2_400.0)

    assert st.total_expenses == pytest.approx(45_640.0)
    assert st.noi == pytest.approx(68_360.0)


def test_mf_without_common_area_costs(mf_deal_factory):
    st = build_operating_statement(
        mf_deal_factory(common_area_utilities=CommonAreaUtilities(), common_area_maintenance_rate=0.0)
    )
    assert st.expenses.utilities == 0.0
    assert st.expenses.common_area_maintenance == 0.0


def test_zero_vacancy_means_effective_equals_gross(sfr_deal_factory, sfr_deal):
    deal = sfr_deal_factory(long_term=sfr_deal.long_term.model_copy(update={"vacancy_rate": 0.0}))
    st = build_operating_statement(deal)
    assert st.vacancy_loss == 0.0
    assert st.effective_income == st.gross_income


def test_monthly_and_annual_views_agree(sfr_deal):
    m = mortgage_terms(sfr_deal)
    st = build_operating_statement(sfr_deal, mortgage=m)
    mo = monthly_view(st, m)
    yr = annual_view(st)

    assert mo.gross_income * 12 == pytest.approx(yr.gross_income)
    assert mo.noi * 12 == pytest.approx(yr.noi)
    assert mo.cash_flow * 12 == pytest.approx(yr.cash_flow)
    assert mo.expenses.total * 12 == pytest.approx(yr.operating_expenses)
    assert mo.total_expenses == pytest.approx(mo.operating_expenses + m.monthly_payment)
    assert mo.mortgage_payment == m.monthly_payment


def test_no_turnover_expense_without_fees(sfr_deal, mf_deal):
    assert build_operating_statement(sfr_deal).expenses.turnover_costs == 0.0
    assert build_operating_statement(mf_deal).expenses.turnover_costs == 0.0


def test_sfr_turnover_costs(sfr_deal_factory):
    st = build_operating_statement(sfr_deal_factory(tenant_turnover_fees=TenantTurnoverFees()))
    # (500 prep + 2,800 * 0.5 commission) * min(0.9, 1/2 * 5/5)
    assert st.expenses.turnover_costs == pytest.approx(950.0)
    assert st.total_expenses == pytest.approx(11_678.6 + 950.0)
    assert st.noi == pytest.approx(20_241.4 - 950.0)


def test_turnover_rate_is_capped(sfr_deal_factory):
    deal = sfr_deal_factory(
        tenant_turnover_fees=TenantTurnoverFees(prep_fees=1_000.0, realtor_commission=1.0),
        long_term=make_long_term(vacancy_rate=20.0, turnover_frequency=1.0),
    )
    st = build_operating_statement(deal)
    assert st.expenses.turnover_costs == pytest.approx((1_000.0 + 2_800.0) * 0.9)

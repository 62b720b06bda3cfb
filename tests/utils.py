# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from typing import Any

from src.schemas.models import (
    CommonAreaUtilities,
    DealInsights,
    LongTermAssumptions,
    MFDeal,
    ReturnMetrics,
    SFRDeal,
    UnitGroup,
)

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_PURCHASE_PRICE = 350_000.0
DEFAULT_DOWN_PAYMENT = 70_000.0
DEFAULT_INTEREST_RATE = 6.5
DEFAULT_MONTHLY_RENT = 2_800.0

DEFAULT_LONG_TERM = LongTermAssumptions(
    projection_years=10,
    annual_rent_increase=3.0,
    annual_property_value_increase=4.0,
    inflation_rate=2.0,
    vacancy_rate=5.0,
    selling_costs_percentage=6.0,
)


# -----------------------------
# Deal factories
# -----------------------------


def make_long_term(**overrides: Any) -> LongTermAssumptions:
    return DEFAULT_LONG_TERM.model_copy(update=overrides)


def make_sfr_deal(**overrides: Any) -> SFRDeal:
    """Canonical single-family deal (the end-to-end scenario); keyword overrides win."""
    data: dict[str, Any] = dict(
        name="123 Test St",
        purchase_price=DEFAULT_PURCHASE_PRICE,
        down_payment=DEFAULT_DOWN_PAYMENT,
        interest_rate=DEFAULT_INTEREST_RATE,
        loan_term=30,
        closing_costs=0.0,
        property_tax_rate=1.25,
        insurance_rate=0.5,
        property_management_rate=8.0,
        monthly_rent=DEFAULT_MONTHLY_RENT,
        square_footage=1_750.0,
        bedrooms=3,
        bathrooms=2.0,
        maintenance_cost=250.0,
        long_term=DEFAULT_LONG_TERM,
    )
    data.update(overrides)
    return SFRDeal(**data)


def make_unit_groups() -> list[UnitGroup]:
    return [
        UnitGroup(label="1BR/1BA", count=4, sqft=650.0, monthly_rent=1_100.0, occupied=4),
        UnitGroup(label="2BR/1BA", count=4, sqft=900.0, monthly_rent=1_400.0, occupied=3),
    ]


def make_mf_deal(**overrides: Any) -> MFDeal:
    """Canonical 8-unit multi-family deal; keyword overrides win."""
    data: dict[str, Any] = dict(
        name="Test Apartments",
        purchase_price=1_000_000.0,
        down_payment=250_000.0,
        interest_rate=6.0,
        loan_term=30,
        closing_costs=15_000.0,
        property_tax_rate=1.2,
        insurance_rate=0.4,
        property_management_rate=6.0,
        unit_types=make_unit_groups(),
        maintenance_cost_per_unit=75.0,
        common_area_utilities=CommonAreaUtilities(electric=150.0, water=300.0, gas=50.0, trash=100.0),
        capital_expenditure_rate=5.0,
        common_area_maintenance_rate=2.0,
        long_term=DEFAULT_LONG_TERM,
    )
    data.update(overrides)
    return MFDeal(**data)


# -----------------------------
# Metrics & insights
# -----------------------------


def make_metrics(**overrides: Any) -> ReturnMetrics:
    """A ReturnMetrics bundle for insight/report tests that do not need the engine."""
    data: dict[str, Any] = dict(
        property_type="SFR",
        noi=20_000.0,
        total_investment=75_000.0,
        annual_debt_service=18_000.0,
        cap_rate=6.5,
        cash_on_cash_return=9.0,
        dscr=1.3,
        gross_rent_multiplier=10.0,
        operating_expense_ratio=38.0,
        irr=12.0,
        total_return=90_000.0,
        equity_multiple=2.2,
        break_even_occupancy=80.0,
        one_percent_rule=0.9,
        passes_fifty_percent_rule=True,
    )
    data.update(overrides)
    return ReturnMetrics(**data)


def make_insights(**overrides: Any) -> DealInsights:
    data: dict[str, Any] = dict(
        summary="Solid cash-flowing rental.",
        strengths=["Healthy DSCR"],
        weaknesses=["Thin appreciation assumptions"],
        recommendations=["Negotiate closing credits"],
        investment_score=72,
        source="rules",
    )
    data.update(overrides)
    return DealInsights(**data)

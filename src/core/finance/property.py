# src/core/finance/property.py
"""
Property-type strategies (SFR | MF)

Purpose
-------
Keep every property-type difference behind one small interface so the
statement builder, projector and metrics each have a single code path:

  - gross_monthly_rent()          whole-property scheduled rent
  - expense_breakdown(...)        annual expense lines for a given year state
  - unit_of_comparison()          ("sqft", total sqft) or ("unit", total units)
  - supplemental_metrics(...)     type-specific extras for ReturnMetrics

Expense policy
--------------
- Value-linked: property tax and insurance scale with the property value at
  the start of the year (purchase price in year 1).
- Rent-linked: management (effective income), CapEx and CAM (gross rent), and
  the SFR maintenance fallback (5% of gross rent).
- Fixed-dollar: flat maintenance and common-area utilities grow with inflation.
- Turnover (opt-in via tenant_turnover_fees): inflated prep fees plus a
  leasing commission in months of rent, times the yearly turnover rate
  (1 / turnover_frequency) scaled by vacancy / 5% and capped at 90%.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.schemas.models import ExpenseBreakdown, MFDeal, SFRDeal

SFR_MAINTENANCE_FALLBACK_RATE = 0.05
MAX_TURNOVER_RATE = 0.9
BASELINE_VACANCY_PCT = 5.0


def _pct(x: float) -> float:
    return x / 100.0


def safe_div(num: float, den: float) -> float:
    """Ratio that reports 0.0 instead of NaN/inf on a zero denominator."""
    return num / den if den else 0.0


def initial_investment(deal: SFRDeal | MFDeal) -> float:
    """Cash in at close: down payment + closing costs + upfront capital investments."""
    return deal.down_payment + deal.closing_costs + deal.capital_investments


def turnover_costs(deal: SFRDeal | MFDeal, *, gross_rent: float, inflation_factor: float) -> float:
    """
    Annual tenant turnover expense for a year with `gross_rent` scheduled rent.

        rate = min(0.9, (1 / turnover_frequency) * vacancy_rate / 5)
        cost = (prep_fees * inflation_factor + monthly_rent * realtor_commission) * rate
    """
    fees = deal.tenant_turnover_fees
    if fees is None:
        return 0.0
    lt = deal.long_term
    rate = min(MAX_TURNOVER_RATE, (1.0 / lt.turnover_frequency) * lt.vacancy_rate / BASELINE_VACANCY_PCT)
    return (fees.prep_fees * inflation_factor + gross_rent / 12.0 * fees.realtor_commission) * rate


class PropertyStrategy(Protocol):
    def gross_monthly_rent(self) -> float: ...

    def expense_breakdown(
        self,
        *,
        gross_rent: float,
        effective_income: float,
        property_value: float,
        inflation_factor: float,
    ) -> ExpenseBreakdown: ...

    def unit_of_comparison(self) -> tuple[str, float]: ...

    def supplemental_metrics(self, *, noi: float, gross_income: float, vacancy_loss: float, total_expenses: float) -> dict[str, Any]: ...


class SFRStrategy:
    """Single-family rental: one rent figure, flat maintenance, priced per sqft."""

    def __init__(self, deal: SFRDeal) -> None:
        self.deal = deal

    def gross_monthly_rent(self) -> float:
        return self.deal.monthly_rent

    def expense_breakdown(
        self,
        *,
        gross_rent: float,
        effective_income: float,
        property_value: float,
        inflation_factor: float,
    ) -> ExpenseBreakdown:
        d = self.deal
        if d.maintenance_cost is None:
            maintenance = gross_rent * SFR_MAINTENANCE_FALLBACK_RATE
        else:
            maintenance = d.maintenance_cost * 12.0 * inflation_factor
        return ExpenseBreakdown(
            property_tax=property_value * _pct(d.property_tax_rate),
            insurance=property_value * _pct(d.insurance_rate),
            maintenance=maintenance,
            property_management=effective_income * _pct(d.property_management_rate),
            capital_expenditures=gross_rent * _pct(d.capital_expenditure_rate),
            turnover_costs=turnover_costs(d, gross_rent=gross_rent, inflation_factor=inflation_factor),
        )

    def unit_of_comparison(self) -> tuple[str, float]:
        return "sqft", self.deal.square_footage

    def supplemental_metrics(self, *, noi: float, gross_income: float, vacancy_loss: float, total_expenses: float) -> dict[str, Any]:
        d = self.deal
        out: dict[str, Any] = {"rent_per_sqft": safe_div(gross_income, d.square_footage)}
        if d.bedrooms is not None:
            out["price_per_bedroom"] = safe_div(d.purchase_price, d.bedrooms)
        # Rehab metrics only when both figures are known
        if d.after_repair_value and d.renovation_costs:
            out["after_repair_value_ratio"] = safe_div(d.after_repair_value, d.purchase_price)
            out["rehab_roi"] = safe_div(d.after_repair_value - d.purchase_price, d.renovation_costs) * 100.0
        return out


class MFStrategy:
    """Multi-family: rent from the unit mix, per-unit maintenance, common-area costs, priced per unit."""

    def __init__(self, deal: MFDeal) -> None:
        self.deal = deal

    def gross_monthly_rent(self) -> float:
        return sum(u.monthly_rent * u.count for u in self.deal.unit_types)

    def expense_breakdown(
        self,
        *,
        gross_rent: float,
        effective_income: float,
        property_value: float,
        inflation_factor: float,
    ) -> ExpenseBreakdown:
        d = self.deal
        return ExpenseBreakdown(
            property_tax=property_value * _pct(d.property_tax_rate),
            insurance=property_value * _pct(d.insurance_rate),
            maintenance=d.maintenance_cost_per_unit * d.total_units * 12.0 * inflation_factor,
            property_management=effective_income * _pct(d.property_management_rate),
            utilities=d.common_area_utilities.monthly_total * 12.0 * inflation_factor,
            capital_expenditures=gross_rent * _pct(d.capital_expenditure_rate),
            common_area_maintenance=gross_rent * _pct(d.common_area_maintenance_rate),
            turnover_costs=turnover_costs(d, gross_rent=gross_rent, inflation_factor=inflation_factor),
        )

    def unit_of_comparison(self) -> tuple[str, float]:
        return "unit", float(self.deal.total_units)

    def supplemental_metrics(self, *, noi: float, gross_income: float, vacancy_loss: float, total_expenses: float) -> dict[str, Any]:
        d = self.deal
        units = d.total_units
        sqft = d.total_sqft
        return {
            "price_per_sqft": safe_div(d.purchase_price, sqft),
            "noi_per_unit": safe_div(noi, units),
            "average_rent_per_unit": safe_div(gross_income, units * 12),
            "operating_expense_per_unit": safe_div(total_expenses, units),
            "physical_occupancy": safe_div(d.occupied_units, units) * 100.0,
            "economic_vacancy_rate": safe_div(vacancy_loss, gross_income) * 100.0,
            "common_area_expense_ratio": safe_div(d.common_area_utilities.monthly_total * 12.0, sqft) * 100.0,
            "unit_mix_efficiency": safe_div(self.gross_monthly_rent() * 12.0, sqft) * 100.0,
        }


def strategy_for(deal: SFRDeal | MFDeal) -> PropertyStrategy:
    """Pick the strategy matching the deal's property_type tag."""
    if isinstance(deal, MFDeal):
        return MFStrategy(deal)
    if isinstance(deal, SFRDeal):
        return SFRStrategy(deal)
    raise TypeError(f"Unsupported deal type: {type(deal).__name__}")

# src/schemas/models.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =========================
# Core inputs
# =========================

DEFAULT_PROJECTION_YEARS = 10


class LongTermAssumptions(BaseModel):
    """
    Growth and exit assumptions for the multi-year projection.

    All rates are expressed in *percent* units (e.g., 3.0 = 3% per year).
    """

    projection_years: int = Field(DEFAULT_PROJECTION_YEARS, ge=1, le=50, description="Projection horizon in years.")
    annual_rent_increase: float = Field(3.0, description="Annual rent growth (%).")
    annual_property_value_increase: float = Field(3.0, description="Annual property value growth (%).")
    inflation_rate: float = Field(2.0, description="Annual inflation (%) applied to fixed-dollar expenses.")
    vacancy_rate: float = Field(5.0, ge=0, le=100, description="Vacancy loss as % of gross rent.")
    selling_costs_percentage: float = Field(6.0, ge=0, le=100, description="Selling costs at exit as % of sale price.")
    turnover_frequency: float = Field(2.0, gt=0, description="Average years between tenant turnovers.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class UnitGroup(BaseModel):
    """A group of identical units in a multi-family property."""

    label: str = Field("Unit", description="Unit type label (e.g., '2BR/1BA').")
    count: int = Field(..., ge=1, description="Number of units of this type.")
    sqft: float = Field(0.0, ge=0, description="Square footage of a single unit.")
    monthly_rent: float = Field(..., ge=0, description="Monthly rent per unit.")
    occupied: int = Field(0, ge=0, description="Number of units currently occupied.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class CommonAreaUtilities(BaseModel):
    """Owner-paid common-area utilities ($/month)."""

    electric: float = Field(0.0, ge=0)
    water: float = Field(0.0, ge=0)
    gas: float = Field(0.0, ge=0)
    trash: float = Field(0.0, ge=0)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def monthly_total(self) -> float:
        return self.electric + self.water + self.gas + self.trash


class TenantTurnoverFees(BaseModel):
    """Cost of re-leasing a unit when a tenant leaves."""

    prep_fees: float = Field(500.0, ge=0, description="Cleaning/repairs per turnover ($, inflated yearly).")
    realtor_commission: float = Field(0.5, ge=0, description="Leasing commission in months of rent.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class _DealBase(BaseModel):
    """
    Acquisition, financing and recurring expense inputs shared by every property type.
    Percentages are in percent units (6.5 = 6.5%).
    """

    name: str | None = Field(None, description="Optional label for the deal (address, nickname).")
    purchase_price: float = Field(..., gt=0, description="Contract price.")
    down_payment: float = Field(..., ge=0, description="Cash down payment; loan = price - down payment.")
    interest_rate: float = Field(..., ge=0, le=100, description="Annual interest rate (%).")
    loan_term: int = Field(30, ge=0, le=50, description="Loan term in years.")
    closing_costs: float = Field(0.0, ge=0, description="One-time buyer closing costs.")
    capital_investments: float = Field(0.0, ge=0, description="Upfront rehab/improvement cash at acquisition.")
    property_tax_rate: float = Field(..., ge=0, le=100, description="Property tax (% of property value per year).")
    insurance_rate: float = Field(..., ge=0, le=100, description="Insurance (% of property value per year).")
    property_management_rate: float = Field(0.0, ge=0, le=100, description="Management fee (% of effective income).")
    tenant_turnover_fees: TenantTurnoverFees | None = Field(
        None, description="Turnover cost inputs. When unset, no turnover expense is modeled."
    )
    base_noi: float | None = Field(None, description="NOI before capital improvements, if known.")
    long_term: LongTermAssumptions = Field(default_factory=LongTermAssumptions)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def loan_amount(self) -> float:
        return self.purchase_price - self.down_payment


class SFRDeal(_DealBase):
    """Single-family rental."""

    property_type: Literal["SFR"] = "SFR"
    monthly_rent: float = Field(..., ge=0, description="Monthly rent for the whole property.")
    square_footage: float = Field(0.0, ge=0)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: float | None = Field(None, ge=0)
    year_built: int | None = None
    maintenance_cost: float | None = Field(
        None, ge=0, description="Flat maintenance ($/month). When unset, 5% of gross rent is used."
    )
    capital_expenditure_rate: float = Field(0.0, ge=0, le=100, description="CapEx reserve (% of gross rent).")
    after_repair_value: float | None = Field(None, ge=0)
    renovation_costs: float | None = Field(None, ge=0)


class MFDeal(_DealBase):
    """Multi-family property made of unit groups."""

    property_type: Literal["MF"] = "MF"
    unit_types: list[UnitGroup] = Field(..., description="Unit mix.")
    maintenance_cost_per_unit: float = Field(0.0, ge=0, description="Maintenance ($/unit/month).")
    common_area_utilities: CommonAreaUtilities = Field(default_factory=CommonAreaUtilities)
    capital_expenditure_rate: float = Field(0.0, ge=0, le=100, description="CapEx reserve (% of gross rent).")
    common_area_maintenance_rate: float = Field(0.0, ge=0, le=100, description="CAM (% of gross rent).")
    year_built: int | None = None

    @property
    def total_units(self) -> int:
        return sum(u.count for u in self.unit_types)

    @property
    def total_sqft(self) -> float:
        return sum(u.sqft * u.count for u in self.unit_types)

    @property
    def occupied_units(self) -> int:
        return sum(u.occupied for u in self.unit_types)


DealInput = Annotated[SFRDeal | MFDeal, Field(discriminator="property_type")]


# =========================
# Derived: financing
# =========================


class MortgageTerms(BaseModel):
    """Loan figures derived from purchase price, down payment, rate and term."""

    loan_amount: float
    monthly_rate: float = Field(..., description="annual % / 12 / 100")
    number_of_payments: int
    monthly_payment: float

    model_config = ConfigDict(frozen=True)

    @property
    def annual_debt_service(self) -> float:
        return self.monthly_payment * 12.0


# =========================
# Derived: operating statement
# =========================


class ExpenseBreakdown(BaseModel):
    """Operating expense lines for one period (excludes vacancy and debt service)."""

    property_tax: float = 0.0
    insurance: float = 0.0
    maintenance: float = 0.0
    property_management: float = 0.0
    utilities: float = 0.0
    capital_expenditures: float = 0.0
    common_area_maintenance: float = 0.0
    turnover_costs: float = 0.0

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> float:
        return (
            self.property_tax
            + self.insurance
            + self.maintenance
            + self.property_management
            + self.utilities
            + self.capital_expenditures
            + self.common_area_maintenance
            + self.turnover_costs
        )

    def scaled(self, factor: float) -> ExpenseBreakdown:
        """Return a copy with every line multiplied by `factor` (e.g., 1/12 for a monthly view)."""
        return ExpenseBreakdown(**{k: v * factor for k, v in self.model_dump().items()})


class OperatingStatement(BaseModel):
    """First-year operating statement on an annual basis."""

    gross_income: float
    vacancy_loss: float
    effective_income: float
    expenses: ExpenseBreakdown
    total_expenses: float
    noi: float
    debt_service: float
    cash_flow: float

    model_config = ConfigDict(frozen=True)


class MonthlyAnalysis(BaseModel):
    """Monthly view of the first-year statement."""

    gross_income: float
    vacancy_loss: float
    effective_income: float
    expenses: ExpenseBreakdown
    operating_expenses: float
    mortgage_payment: float
    total_expenses: float = Field(..., description="Operating expenses + mortgage payment.")
    noi: float
    cash_flow: float

    model_config = ConfigDict(frozen=True)


class AnnualAnalysis(BaseModel):
    """Annual view of the first-year statement."""

    gross_income: float
    vacancy_loss: float
    effective_income: float
    expenses: ExpenseBreakdown
    operating_expenses: float
    noi: float
    debt_service: float
    cash_flow: float

    model_config = ConfigDict(frozen=True)


# =========================
# Derived: projection & exit
# =========================


class YearlyProjection(BaseModel):
    """One year of the multi-year projection. Emitted once, never modified."""

    year: int = Field(..., ge=1)
    gross_rent: float
    vacancy_loss: float
    effective_income: float
    expenses: ExpenseBreakdown
    operating_expenses: float
    noi: float
    debt_service: float
    interest_paid: float
    principal_paid: float
    cash_flow: float
    property_value: float = Field(..., description="End-of-year property value.")
    mortgage_balance: float = Field(..., description="End-of-year remaining loan balance.")
    equity: float
    appreciation: float = Field(..., description="property_value - purchase_price")

    model_config = ConfigDict(frozen=True)


class ExitAnalysis(BaseModel):
    """Sale at the end of the projection horizon."""

    projected_sale_price: float
    selling_costs: float
    mortgage_payoff: float
    net_proceeds_from_sale: float
    total_return: float = Field(..., description="Σ cash flows + net proceeds - total investment.")
    return_on_investment: float = Field(..., description="total_return / total_investment (%).")
    equity_multiple: float

    model_config = ConfigDict(frozen=True)


class LongTermReturns(BaseModel):
    irr: float = Field(..., description="IRR (%).")
    total_cash_flow: float
    total_appreciation: float
    total_return: float

    model_config = ConfigDict(frozen=True)


class LongTermAnalysis(BaseModel):
    projection_years: int
    projections: list[YearlyProjection]
    exit_analysis: ExitAnalysis
    returns: LongTermReturns
    cash_flow_series: list[float] = Field(..., description="Series fed to the IRR solver.")

    model_config = ConfigDict(frozen=True)


# =========================
# Derived: metrics
# =========================


class ReturnMetrics(BaseModel):
    """Summary return metrics. Percent-valued metrics are in percent units."""

    property_type: Literal["SFR", "MF"]
    noi: float
    total_investment: float
    annual_debt_service: float
    cap_rate: float
    cash_on_cash_return: float
    dscr: float
    gross_rent_multiplier: float
    operating_expense_ratio: float
    irr: float
    total_return: float
    equity_multiple: float
    break_even_occupancy: float
    one_percent_rule: float
    passes_fifty_percent_rule: bool
    price_per_sqft: float = 0.0
    price_per_unit: float = 0.0
    rent_to_price_ratio: float = Field(0.0, description="Monthly gross rent / price (%).")
    return_on_improvements: float = Field(0.0, description="NOI lift per dollar of capital investments (%).")
    turnover_cost_impact: float = Field(0.0, description="Turnover costs / gross income (%).")

    # SFR
    rent_per_sqft: float | None = None
    price_per_bedroom: float | None = None
    after_repair_value_ratio: float | None = None
    rehab_roi: float | None = None

    # MF
    noi_per_unit: float | None = None
    average_rent_per_unit: float | None = None
    operating_expense_per_unit: float | None = None
    physical_occupancy: float | None = None
    economic_vacancy_rate: float | None = None
    common_area_expense_ratio: float | None = Field(None, description="Annual common-area utilities per 100 sqft.")
    unit_mix_efficiency: float | None = Field(None, description="Annual gross potential rent per 100 sqft.")

    model_config = ConfigDict(frozen=True)


class DealAnalysis(BaseModel):
    """Complete engine output for one deal."""

    property_type: Literal["SFR", "MF"]
    mortgage: MortgageTerms
    monthly_analysis: MonthlyAnalysis
    annual_analysis: AnnualAnalysis
    long_term_analysis: LongTermAnalysis
    key_metrics: ReturnMetrics

    model_config = ConfigDict(frozen=True)


# =========================
# Collaborators
# =========================


class DealInsights(BaseModel):
    """Free-text commentary about a deal, produced by an insight provider."""

    summary: str
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    investment_score: int | None = Field(None, ge=0, le=100)
    source: str = Field("unknown", description='Provider tag: "rules", "openai", "placeholder", ...')

    @field_validator("investment_score", mode="before")
    @classmethod
    def _coerce_score(cls, v: object) -> int | None:
        if v is None or v == "":
            return None
        try:
            score = int(round(float(v)))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return max(0, min(100, score))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DealRecord(BaseModel):
    """A stored deal: inputs plus the (opaque) analysis payload."""

    id: str
    deal: DealInput
    analysis: DealAnalysis | None = None
    insights: DealInsights | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def property_type(self) -> str:
        return self.deal.property_type

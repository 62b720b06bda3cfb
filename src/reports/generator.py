# src/reports/generator.py
from __future__ import annotations

from src.core.finance.metrics import metric_threshold
from src.schemas.models import (
    DealAnalysis,
    DealInsights,
    ExitAnalysis,
    ExpenseBreakdown,
    MFDeal,
    ReturnMetrics,
    SFRDeal,
    YearlyProjection,
)


def _fmt_currency(x: float) -> str:
    """
    Format a float as USD-style currency with thousands separators.

    Example:
        123456.789 -> $123,456.79
        -2000 -> -$2,000.00
    """
    sign = "-" if x < 0 else ""
    return f"{sign}${abs(x):,.2f}"


def _fmt_pct(x: float) -> str:
    """
    Format a percent-unit value with two decimals.

    Example:
        6.5 -> 6.50%
    """
    return f"{x:.2f}%"


def _section(title: str) -> str:
    """
    Render a level-2 heading for Markdown sections.
    """
    return f"\n## {title}\n"


def _check(passed: bool) -> str:
    return "✅" if passed else "⚠️"


# -----------------------
# Header & top sections
# -----------------------


def _render_header(analysis: DealAnalysis, deal: SFRDeal | MFDeal | None) -> str:
    """
    Render the report header with a short subject summary.
    """
    kind = "Single-Family Rental" if analysis.property_type == "SFR" else "Multi-Family"
    name = deal.name if deal is not None and deal.name else "Subject Property"
    body = [f"# Investment Analysis – {name}", "", f"**Property Type:** {kind}"]

    if isinstance(deal, MFDeal):
        body.append(f"**Units:** {deal.total_units} ({deal.occupied_units} occupied)")
        for group in deal.unit_types:
            body.append(f"- {group.count} × {group.label} @ {_fmt_currency(group.monthly_rent)}/mo")
    elif isinstance(deal, SFRDeal):
        details = []
        if deal.bedrooms is not None:
            details.append(f"{deal.bedrooms} bd")
        if deal.bathrooms is not None:
            details.append(f"{deal.bathrooms:g} ba")
        if deal.square_footage:
            details.append(f"{deal.square_footage:,.0f} sqft")
        if details:
            body.append(f"**Layout:** {' / '.join(details)}")

    return "\n".join(body) + "\n"


def _render_financing(analysis: DealAnalysis, deal: SFRDeal | MFDeal | None) -> str:
    """
    Render purchase and financing terms.
    """
    m = analysis.mortgage
    lines = [_section("Purchase & Financing")]
    if deal is not None:
        lines += [
            f"- **Purchase Price:** {_fmt_currency(deal.purchase_price)}",
            f"- **Down Payment:** {_fmt_currency(deal.down_payment)}",
            f"- **Closing Costs:** {_fmt_currency(deal.closing_costs)}",
            f"- **Interest Rate:** {_fmt_pct(deal.interest_rate)}",
            f"- **Loan Term:** {deal.loan_term} years",
        ]
    lines += [
        f"- **Loan Amount:** {_fmt_currency(m.loan_amount)}",
        f"- **Monthly Payment:** {_fmt_currency(m.monthly_payment)}",
        f"- **Total Cash Invested:** {_fmt_currency(analysis.key_metrics.total_investment)}",
    ]
    return "\n".join(lines) + "\n"


def _expense_rows(expenses: ExpenseBreakdown) -> list[str]:
    rows = [
        ("Property Tax", expenses.property_tax),
        ("Insurance", expenses.insurance),
        ("Maintenance", expenses.maintenance),
        ("Property Management", expenses.property_management),
        ("Utilities", expenses.utilities),
        ("Capital Expenditures", expenses.capital_expenditures),
        ("Common Area Maintenance", expenses.common_area_maintenance),
        ("Tenant Turnover", expenses.turnover_costs),
    ]
    # Zero lines are noise for SFR deals (no utilities, no CAM)
    return [f"| {label} | {_fmt_currency(v)} |" for label, v in rows if v]


def _render_statements(analysis: DealAnalysis) -> str:
    """
    Render the first-year operating statement side by side: monthly and annual.
    """
    mo = analysis.monthly_analysis
    yr = analysis.annual_analysis
    lines = [
        _section("Operating Statement (Year 1)"),
        "| Line | Monthly | Annual |",
        "| --- | ---: | ---: |",
        f"| Gross Income | {_fmt_currency(mo.gross_income)} | {_fmt_currency(yr.gross_income)} |",
        f"| Vacancy Loss | {_fmt_currency(-mo.vacancy_loss)} | {_fmt_currency(-yr.vacancy_loss)} |",
        f"| Effective Income | {_fmt_currency(mo.effective_income)} | {_fmt_currency(yr.effective_income)} |",
        f"| Operating Expenses | {_fmt_currency(-mo.operating_expenses)} | {_fmt_currency(-yr.operating_expenses)} |",
        f"| **NOI** | {_fmt_currency(mo.noi)} | {_fmt_currency(yr.noi)} |",
        f"| Debt Service | {_fmt_currency(-mo.mortgage_payment)} | {_fmt_currency(-yr.debt_service)} |",
        f"| **Cash Flow** | {_fmt_currency(mo.cash_flow)} | {_fmt_currency(yr.cash_flow)} |",
        "",
        "**Annual expense detail**",
        "",
        "| Expense | Annual |",
        "| --- | ---: |",
    ]
    lines += _expense_rows(yr.expenses)
    lines.append(f"| **Total** | {_fmt_currency(yr.operating_expenses)} |")
    return "\n".join(lines) + "\n"


def _render_metrics(k: ReturnMetrics) -> str:
    """
    Render key metrics with pass/warn markers against the property-type thresholds.
    """
    pt = k.property_type
    cap_min = metric_threshold("cap_rate", pt)
    coc_min = metric_threshold("cash_on_cash", pt)
    dscr_min = metric_threshold("dscr", pt)
    oer_max = metric_threshold("operating_expense_ratio", pt)

    lines = [
        _section("Key Metrics"),
        f"- {_check(k.cap_rate >= cap_min)} **Cap Rate:** {_fmt_pct(k.cap_rate)} (target ≥ {_fmt_pct(cap_min)})",
        f"- {_check(k.cash_on_cash_return >= coc_min)} **Cash-on-Cash:** {_fmt_pct(k.cash_on_cash_return)} "
        f"(target ≥ {_fmt_pct(coc_min)})",
        f"- {_check(k.dscr >= dscr_min)} **DSCR:** {k.dscr:.2f} (target ≥ {dscr_min:.2f})",
        f"- {_check(k.operating_expense_ratio <= oer_max)} **Operating Expense Ratio:** "
        f"{_fmt_pct(k.operating_expense_ratio)} (target ≤ {_fmt_pct(oer_max)})",
        f"- **Gross Rent Multiplier:** {k.gross_rent_multiplier:.2f}",
        f"- **Break-even Occupancy:** {_fmt_pct(k.break_even_occupancy)}",
        f"- **1% Rule:** {_fmt_pct(k.one_percent_rule)}",
        f"- **50% Rule:** {'pass' if k.passes_fifty_percent_rule else 'fail'}",
        f"- **IRR:** {_fmt_pct(k.irr)}",
        f"- **Equity Multiple:** {k.equity_multiple:.2f}x",
    ]
    if k.price_per_sqft:
        lines.append(f"- **Price / sqft:** {_fmt_currency(k.price_per_sqft)}")
    if k.price_per_unit:
        lines.append(f"- **Price / unit:** {_fmt_currency(k.price_per_unit)}")
    if k.price_per_bedroom:
        lines.append(f"- **Price / bedroom:** {_fmt_currency(k.price_per_bedroom)}")
    if k.turnover_cost_impact:
        lines.append(f"- **Turnover Cost Impact:** {_fmt_pct(k.turnover_cost_impact)} of gross income")
    if k.return_on_improvements:
        lines.append(f"- **Return on Improvements:** {_fmt_pct(k.return_on_improvements)}")
    if k.noi_per_unit is not None:
        lines.append(f"- **NOI / unit:** {_fmt_currency(k.noi_per_unit)}")
    if k.physical_occupancy is not None:
        lines.append(f"- **Physical Occupancy:** {_fmt_pct(k.physical_occupancy)}")
    if k.after_repair_value_ratio is not None:
        lines.append(f"- **ARV / Price:** {k.after_repair_value_ratio:.2f}x")
    return "\n".join(lines) + "\n"


# -----------------------
# Projection & exit
# -----------------------


def _render_year_table(years: list[YearlyProjection]) -> str:
    """
    Render a compact Markdown table of the projection.

    Columns:
      Year | Gross Rent | Op. Expenses | NOI | Debt Service | Cash Flow | Value | Loan Balance | Equity
    """
    header = [
        _section(f"{len(years)}-Year Projection"),
        "| Year | Gross Rent | Op. Expenses | NOI | Debt Service | Cash Flow | Value | Loan Balance | Equity |",
        "| ---: | ---: | ---: | ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    rows = [
        f"| {y.year} "
        f"| {_fmt_currency(y.gross_rent)} "
        f"| {_fmt_currency(y.operating_expenses)} "
        f"| {_fmt_currency(y.noi)} "
        f"| {_fmt_currency(y.debt_service)} "
        f"| {_fmt_currency(y.cash_flow)} "
        f"| {_fmt_currency(y.property_value)} "
        f"| {_fmt_currency(y.mortgage_balance)} "
        f"| {_fmt_currency(y.equity)} |"
        for y in years
    ]
    return "\n".join(header + rows) + "\n"


def _render_exit(exit_: ExitAnalysis, years: int) -> str:
    lines = [
        _section(f"Exit Analysis (Sale at Year {years})"),
        f"- **Projected Sale Price:** {_fmt_currency(exit_.projected_sale_price)}",
        f"- **Selling Costs:** {_fmt_currency(exit_.selling_costs)}",
        f"- **Mortgage Payoff:** {_fmt_currency(exit_.mortgage_payoff)}",
        f"- **Net Proceeds:** {_fmt_currency(exit_.net_proceeds_from_sale)}",
        f"- **Total Return:** {_fmt_currency(exit_.total_return)}",
        f"- **Return on Investment:** {_fmt_pct(exit_.return_on_investment)}",
        f"- **Equity Multiple:** {exit_.equity_multiple:.2f}x",
    ]
    return "\n".join(lines) + "\n"


def _render_insights(insights: DealInsights | None) -> str:
    """
    Render the insight block: score, summary, strengths, weaknesses, recommendations.
    """
    if insights is None:
        return ""
    lines = [_section("Investment Insights")]
    if insights.investment_score is not None:
        lines.append(f"**Investment Score:** {insights.investment_score}/100")
        lines.append("")
    lines.append(insights.summary)
    for title, items in (
        ("Strengths", insights.strengths),
        ("Weaknesses", insights.weaknesses),
        ("Recommendations", insights.recommendations),
    ):
        if items:
            lines.append("")
            lines.append(f"**{title}:**")
            lines.extend(f"- {item}" for item in items)
    lines.append("")
    lines.append(f"_Source: {insights.source}_")
    return "\n".join(lines) + "\n"


# -----------------------
# Orchestration
# -----------------------


def generate_report(
    analysis: DealAnalysis,
    insights: DealInsights | None = None,
    deal: SFRDeal | MFDeal | None = None,
    title_override: str | None = None,
) -> str:
    """
    Generate a Markdown report that summarizes the investment analysis.

    Sections:
      - Header: property type and unit mix / layout
      - Purchase & Financing
      - Operating Statement (Year 1): monthly and annual, expense detail
      - Key Metrics with threshold markers
      - Year-by-year projection table
      - Exit Analysis
      - Investment Insights (when provided)
    """
    header = _render_header(analysis, deal)
    if title_override:
        header_lines = header.splitlines()
        header_lines[0] = f"# {title_override}"
        header = "\n".join(header_lines) + "\n"

    lt = analysis.long_term_analysis
    parts = [
        header,
        _render_financing(analysis, deal),
        _render_statements(analysis),
        _render_metrics(analysis.key_metrics),
        _render_year_table(lt.projections),
        _render_exit(lt.exit_analysis, lt.projection_years),
        _render_insights(insights),
    ]
    return "\n".join(part for part in parts if part).strip() + "\n"


def write_report(
    path: str,
    analysis: DealAnalysis,
    insights: DealInsights | None = None,
    deal: SFRDeal | MFDeal | None = None,
) -> None:
    """
    Convenience helper to write the generated report to disk.
    """
    md = generate_report(analysis, insights, deal=deal)
    with open(path, "w", encoding="utf-8") as f:
        f.write(md)

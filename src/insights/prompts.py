# src/insights/prompts.py
"""
Prompt templates for the LLM insight provider.

Only deal inputs and the engine's ReturnMetrics go into the prompt; the model
never sees (or recomputes) intermediate engine state.
"""

from __future__ import annotations

from src.schemas.models import MFDeal, ReturnMetrics, SFRDeal

_RESPONSE_FORMAT = """Please provide your analysis in the following JSON format (raw JSON, no code fences):
{
  "summary": "2-3 sentence summary of the investment opportunity",
  "strengths": ["strength1", "strength2", "strength3"],
  "weaknesses": ["weakness1", "weakness2", "weakness3"],
  "recommendations": ["recommendation1", "recommendation2", "recommendation3"],
  "investmentScore": 0-100
}

Scoring guidelines:
1. Financial metrics are the PRIMARY factor in the investment score.
2. Higher returns (cap rate, cash-on-cash, DSCR, IRR) must result in a higher score.
3. Do not penalize an attractive purchase price.
4. Cash flow and DSCR matter most, then cap rate and cash-on-cash, then IRR.
"""


def _metrics_block(m: ReturnMetrics) -> str:
    return "\n".join(
        [
            "FINANCIAL METRICS:",
            f"- NOI (annual): ${m.noi:,.2f}",
            f"- Annual Debt Service: ${m.annual_debt_service:,.2f}",
            f"- Annual Cash Flow: ${m.noi - m.annual_debt_service:,.2f}",
            f"- Total Investment: ${m.total_investment:,.2f}",
            f"- Cap Rate: {m.cap_rate:.2f}%",
            f"- Cash on Cash Return: {m.cash_on_cash_return:.2f}%",
            f"- DSCR: {m.dscr:.2f} (below 1.0 indicates negative cash flow)",
            f"- Gross Rent Multiplier: {m.gross_rent_multiplier:.2f}",
            f"- Operating Expense Ratio: {m.operating_expense_ratio:.2f}%",
            f"- Break-even Occupancy: {m.break_even_occupancy:.2f}%",
            f"- IRR: {m.irr:.2f}%",
            f"- Equity Multiple: {m.equity_multiple:.2f}x",
        ]
    )


def _financing_block(deal: SFRDeal | MFDeal) -> list[str]:
    down_pct = deal.down_payment / deal.purchase_price * 100.0
    return [
        f"- Purchase Price: ${deal.purchase_price:,.0f}",
        f"- Down Payment: ${deal.down_payment:,.0f} ({down_pct:.1f}%)",
        f"- Interest Rate: {deal.interest_rate:.2f}% over {deal.loan_term} years",
        f"- Projection: {deal.long_term.projection_years} years, rent +{deal.long_term.annual_rent_increase:.1f}%/yr, "
        f"value +{deal.long_term.annual_property_value_increase:.1f}%/yr",
    ]


def sfr_prompt(deal: SFRDeal, metrics: ReturnMetrics) -> str:
    lines = [
        "Analyze this single-family rental property investment:",
        "",
        "PROPERTY DETAILS:",
        *_financing_block(deal),
        f"- Monthly Rent: ${deal.monthly_rent:,.0f}",
        f"- Square Footage: {deal.square_footage or 'N/A'}",
        f"- Bedrooms: {deal.bedrooms if deal.bedrooms is not None else 'N/A'}",
        f"- Bathrooms: {deal.bathrooms if deal.bathrooms is not None else 'N/A'}",
        f"- Year Built: {deal.year_built or 'N/A'}",
        "",
        _metrics_block(metrics),
        "",
        _RESPONSE_FORMAT,
    ]
    return "\n".join(lines)


def mf_prompt(deal: MFDeal, metrics: ReturnMetrics) -> str:
    mix = [f"  * {u.label}: {u.count} units @ ${u.monthly_rent:,.0f}/mo ({u.occupied} occupied)" for u in deal.unit_types]
    lines = [
        "Analyze this multi-family property investment:",
        "",
        "PROPERTY DETAILS:",
        *_financing_block(deal),
        f"- Total Units: {deal.total_units}",
        "- Unit Mix:",
        *mix,
        f"- Price per Unit: ${metrics.price_per_unit:,.0f}",
        f"- Year Built: {deal.year_built or 'N/A'}",
        "",
        _metrics_block(metrics),
        "",
        _RESPONSE_FORMAT,
    ]
    return "\n".join(lines)


def build_prompt(deal: SFRDeal | MFDeal, metrics: ReturnMetrics) -> str:
    if isinstance(deal, MFDeal):
        return mf_prompt(deal, metrics)
    return sfr_prompt(deal, metrics)

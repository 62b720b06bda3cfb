# src/insights/rule_provider.py
"""
Rule-Based Insight Provider

Purpose
-------
Deterministic commentary from the engine's ReturnMetrics using the per-type
underwriting thresholds. No network, no randomness: the offline default and
the reference used in tests.

Scoring
-------
Start at 50 and add/subtract points per guardrail:
  - DSCR vs floor              ±15
  - Cash-on-cash vs target     ±15
  - Cap rate vs target         ±10
  - Operating expense ratio    ±5
  - IRR vs MIN_IRR             ±10
  - Negative year-1 cash flow  -10
Clamped to [0, 100].
"""

from __future__ import annotations

from src.core.finance.metrics import metric_threshold
from src.schemas.models import DealInsights, MFDeal, ReturnMetrics, SFRDeal

# ----------------------------
# Guardrails (tunable)
# ----------------------------
MIN_IRR = 10.0  # percent
BASE_SCORE = 50


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            out.append(item)
            seen.add(item)
    return out


class RuleBasedInsightProvider:
    """Threshold-driven strengths, weaknesses, levers and a 0..100 score."""

    source = "rules"

    def get_insight(self, deal: SFRDeal | MFDeal, metrics: ReturnMetrics) -> DealInsights:
        ptype = deal.property_type
        min_cap = metric_threshold("cap_rate", ptype)
        min_coc = metric_threshold("cash_on_cash", ptype)
        min_dscr = metric_threshold("dscr", ptype)
        max_oer = metric_threshold("operating_expense_ratio", ptype)

        strengths: list[str] = []
        weaknesses: list[str] = []
        levers: list[str] = []
        score = BASE_SCORE

        annual_cf = metrics.noi - metrics.annual_debt_service

        if metrics.dscr >= min_dscr:
            strengths.append(f"DSCR is healthy at {metrics.dscr:.2f} (≥ {min_dscr:.2f}).")
            score += 15
        else:
            weaknesses.append(f"DSCR is weak at {metrics.dscr:.2f} (< {min_dscr:.2f}).")
            levers.append("Increase down payment to reduce debt service and lift DSCR.")
            score -= 15

        if metrics.cash_on_cash_return >= min_coc:
            strengths.append(f"Cash-on-cash return of {metrics.cash_on_cash_return:.2f}% meets the {min_coc:.0f}% target.")
            score += 15
        else:
            weaknesses.append(f"Cash-on-cash return of {metrics.cash_on_cash_return:.2f}% is below the {min_coc:.0f}% target.")
            levers.append("Negotiate a lower price or closing credits to improve cash-on-cash.")
            score -= 15

        if metrics.cap_rate >= min_cap:
            strengths.append(f"Cap rate of {metrics.cap_rate:.2f}% meets the {min_cap:.0f}% target.")
            score += 10
        else:
            weaknesses.append(f"Cap rate of {metrics.cap_rate:.2f}% is below the {min_cap:.0f}% target.")
            levers.append("Target rent optimization (renewals, ancillary income) to raise NOI.")
            score -= 10

        if metrics.operating_expense_ratio <= max_oer:
            strengths.append(f"Operating expense ratio of {metrics.operating_expense_ratio:.1f}% is within {max_oer:.0f}%.")
            score += 5
        else:
            weaknesses.append(f"Operating expense ratio of {metrics.operating_expense_ratio:.1f}% exceeds {max_oer:.0f}%.")
            levers.append("Trim OPEX (insurance shopping, vendor bids, management fee) to lift NOI.")
            score -= 5

        if metrics.irr >= MIN_IRR:
            strengths.append(f"Projected IRR of {metrics.irr:.2f}% clears {MIN_IRR:.0f}%.")
            score += 10
        else:
            weaknesses.append(f"Projected IRR of {metrics.irr:.2f}% is below {MIN_IRR:.0f}%.")
            levers.append("Revisit hold period and exit assumptions, or scope value-add to raise exit value.")
            score -= 10

        if annual_cf < 0:
            weaknesses.append(f"Year-1 cash flow is negative at ${annual_cf:,.0f}.")
            levers.append("Defer non-critical CapEx; build reserves gradually to improve year-1 cash flow.")
            score -= 10

        score = max(0, min(100, score))
        label = "Single-family rental" if ptype == "SFR" else "Multi-family property"
        summary = (
            f"{label} at ${deal.purchase_price:,.0f}: cap rate {metrics.cap_rate:.2f}%, "
            f"cash-on-cash {metrics.cash_on_cash_return:.2f}%, DSCR {metrics.dscr:.2f}, IRR {metrics.irr:.2f}%."
        )

        return DealInsights(
            summary=summary,
            strengths=strengths,
            weaknesses=weaknesses,
            recommendations=_dedupe(levers),
            investment_score=score,
            source=self.source,
        )

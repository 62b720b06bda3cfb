# main.py
"""
Entry Point - Rental Deal Underwriter

Purpose
-------
Run the underwriting pipeline end-to-end and emit a Markdown report:
  1) Load the deal (built-in sample SFR deal or --config JSON).
  2) Analyze: mortgage, first-year statement, projection, exit, metrics.
  3) Optionally attach insights (rules or OpenAI) and store the deal record.
  4) Generate a Markdown investment report.

Design
------
- CLI-friendly; pure Python. The numeric work is delegated to src.core.finance.
- Insights and persistence are configuration-driven, not hardcoded here.

Usage
-----
    python main.py
    python main.py --config data/sample/deal.json --out out.md --horizon 15 \
                   --insights rules --store data/deals
"""

from __future__ import annotations

import argparse
import logging

from src.core.logs import configure_logging
from src.inputs.inputs import InputsLoader
from src.insights import InsightProviderError, make_provider
from src.orchestrator import run_analysis
from src.reports.generator import write_report
from src.repositories import JsonFileDealRepository
from src.schemas.models import LongTermAssumptions, SFRDeal

logger = logging.getLogger("src.main")


def build_sample_deal() -> SFRDeal:
    """Return a baseline single-family deal for demo purposes."""
    return SFRDeal(
        name="Sample Single-Family Rental",
        purchase_price=350_000.0,
        down_payment=70_000.0,
        interest_rate=6.5,
        loan_term=30,
        closing_costs=0.0,
        property_tax_rate=1.25,
        insurance_rate=0.5,
        property_management_rate=8.0,
        monthly_rent=2_800.0,
        square_footage=1_800.0,
        bedrooms=3,
        bathrooms=2.0,
        maintenance_cost=250.0,
        long_term=LongTermAssumptions(
            projection_years=10,
            annual_rent_increase=3.0,
            annual_property_value_increase=4.0,
            inflation_rate=2.0,
            vacancy_rate=5.0,
            selling_costs_percentage=6.0,
        ),
    )


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for configurable runs."""
    p = argparse.ArgumentParser(description="Rental Deal Underwriter")
    p.add_argument("--config", type=str, default=None, help="Path to JSON deal (bare deal or {deal, run}).")
    p.add_argument("--out", type=str, default=None, help="Output Markdown path (overrides config).")
    p.add_argument("--horizon", type=int, default=None, help="Projection horizon in years (overrides config).")
    p.add_argument(
        "--insights",
        type=str,
        default=None,
        choices=["none", "rules", "openai"],
        help='Insight provider: "none", "rules" or "openai" (overrides config).',
    )
    p.add_argument("--store", type=str, default=None, help="Directory for the JSON deal repository (optional).")
    return p.parse_args()


def main():
    """Run end-to-end analysis and write investment_analysis.md (or chosen output)."""
    configure_logging()
    print("Running Rental Deal Underwriter...")
    args = parse_args()

    loader = InputsLoader()

    if args.config:
        cfg = loader.load(args.config)
    else:
        # No config file → use the sample deal and CLI flags (if any)
        cfg = loader.from_deal(build_sample_deal())
    cfg = loader.with_overrides(
        cfg,
        out=args.out,
        horizon=args.horizon,
        insights=args.insights,
        store=args.store,
    )
    run = cfg.run

    try:
        provider = make_provider(run.insights)
    except InsightProviderError as e:
        logger.warning("insights disabled: %s", e)
        provider = None

    repository = JsonFileDealRepository(run.store) if run.store else None

    try:
        outcome = run_analysis(
            cfg.deal,
            insight_provider=provider,
            repository=repository,
            horizon_years=run.horizon,
        )
        write_report(run.out, outcome.analysis, outcome.insights, deal=outcome.deal)

        k = outcome.analysis.key_metrics
        print(f"Report written to {run.out}")
        print(f"Cap rate {k.cap_rate:.2f}% | CoC {k.cash_on_cash_return:.2f}% | DSCR {k.dscr:.2f} | IRR {k.irr:.2f}%")
        if outcome.insights is not None and outcome.insights.investment_score is not None:
            print(f"Investment score: {outcome.insights.investment_score}/100")
        if outcome.record is not None:
            print(f"Stored deal {outcome.record.id} under {run.store}")
    except Exception as e:
        print(f"Error during analysis: {e}")
        raise


if __name__ == "__main__":
    main()

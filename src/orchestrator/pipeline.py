# src/orchestrator/pipeline.py
"""
Analysis Orchestrator

Purpose
-------
Execute the deal pipeline in a fixed order:
  1) Underwriting engine -> DealAnalysis   (pure, synchronous)
  2) Insight provider    -> DealInsights   (best effort, optional)
  3) Repository          -> DealRecord     (optional)

Design
------
- The numeric result is fully assembled before any collaborator runs; a
  failing insight provider degrades to placeholder text and never blocks it.
- Input validation errors from the engine propagate to the caller.
- A horizon override is applied to the deal once; the analysis, the insight
  prompt and the stored record all see that same effective deal.

Public API
----------
run_analysis(deal, *, insight_provider=None, repository=None, record_id=None, horizon_years=None)
  -> AnalysisOutcome(deal, analysis, insights, record)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.core.finance import analyze_deal, with_horizon
from src.insights import InsightProvider, generate_insights
from src.repositories import DealRepository, new_deal_id
from src.schemas.models import DealAnalysis, DealInsights, DealRecord, MFDeal, SFRDeal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Bundle of final artifacts from the pipeline."""

    deal: SFRDeal | MFDeal
    analysis: DealAnalysis
    insights: DealInsights | None
    record: DealRecord | None


def run_analysis(
    deal: SFRDeal | MFDeal,
    *,
    insight_provider: InsightProvider | None = None,
    repository: DealRepository | None = None,
    record_id: str | None = None,
    horizon_years: int | None = None,
) -> AnalysisOutcome:
    """
    Analyze one deal, then optionally attach insights and persist it.

    Args:
        deal: SFRDeal or MFDeal.
        insight_provider: Optional provider; None skips insights entirely.
        repository: Optional repository; None skips persistence.
        record_id: Id to save under (updates an existing record); a new id is
            generated when omitted.
        horizon_years: Optional override of the deal's projection horizon.

    Raises:
        InvalidDealInputError: inconsistent deal inputs.
    """
    deal = with_horizon(deal, horizon_years)
    analysis = analyze_deal(deal)
    logger.info(
        "analyzed %s deal: cap rate %.2f%%, DSCR %.2f, IRR %.2f%%",
        deal.property_type,
        analysis.key_metrics.cap_rate,
        analysis.key_metrics.dscr,
        analysis.key_metrics.irr,
    )

    insights = None
    if insight_provider is not None:
        insights = generate_insights(deal, analysis.key_metrics, insight_provider)

    record = None
    if repository is not None:
        record = repository.save(
            DealRecord(id=record_id or new_deal_id(), deal=deal, analysis=analysis, insights=insights)
        )
        logger.info("stored deal %s", record.id)

    return AnalysisOutcome(deal=deal, analysis=analysis, insights=insights, record=record)

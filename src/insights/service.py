# src/insights/service.py
"""
Best-effort insight generation.

The numeric analysis never depends on this module: any provider failure is
logged and replaced by a placeholder so callers always get a DealInsights.
"""

from __future__ import annotations

import logging

from src.schemas.models import DealInsights, MFDeal, ReturnMetrics, SFRDeal

from .provider_base import InsightProvider, InsightProviderError
from .rule_provider import RuleBasedInsightProvider

logger = logging.getLogger(__name__)

INSIGHT_MODES = ("none", "rules", "openai")


def placeholder_insights(reason: str) -> DealInsights:
    return DealInsights(
        summary=f"Insights are not available: {reason}",
        strengths=[],
        weaknesses=[],
        recommendations=[],
        investment_score=None,
        source="placeholder",
    )


def make_provider(mode: str) -> InsightProvider | None:
    """
    Resolve a provider from a mode string ("none" | "rules" | "openai").

    Raises:
        ValueError for an unknown mode.
        InsightProviderError if the OpenAI provider cannot be configured.
    """
    mode = (mode or "none").strip().lower()
    if mode == "none":
        return None
    if mode == "rules":
        return RuleBasedInsightProvider()
    if mode == "openai":
        from .openai_provider import OpenAIInsightProvider

        return OpenAIInsightProvider()
    raise ValueError(f"Unknown insights mode {mode!r}; expected one of {', '.join(INSIGHT_MODES)}")


def generate_insights(
    deal: SFRDeal | MFDeal,
    metrics: ReturnMetrics,
    provider: InsightProvider | None,
) -> DealInsights:
    """Ask `provider` for insights; fall back to a placeholder on any failure."""
    if provider is None:
        return placeholder_insights("no insight provider configured")
    try:
        return provider.get_insight(deal, metrics)
    except InsightProviderError as e:
        logger.warning("insight provider failed: %s", e)
        return placeholder_insights(str(e))
    except Exception as e:  # noqa: BLE001
        logger.exception("unexpected insight provider error")
        return placeholder_insights(f"{type(e).__name__}: {e}")

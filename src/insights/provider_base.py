# src/insights/provider_base.py
"""
Insight Provider Interface

Purpose
-------
Define a minimal, provider-agnostic contract for turning a deal and the
engine's ReturnMetrics into commentary. Providers only *read* the numeric
results; they never feed anything back into the engine.

Public API
----------
class InsightProvider(Protocol):
    def get_insight(self, deal, metrics) -> DealInsights

class InsightProviderError(RuntimeError)

def parse_insight_json(text, source) -> DealInsights
"""

from __future__ import annotations

import json
import re
from typing import Protocol

from pydantic import ValidationError

from src.schemas.models import DealInsights, MFDeal, ReturnMetrics, SFRDeal


class InsightProviderError(RuntimeError):
    """A provider could not produce usable insights (transport, parsing, config)."""


class InsightProvider(Protocol):
    def get_insight(self, deal: SFRDeal | MFDeal, metrics: ReturnMetrics) -> DealInsights: ...


_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_insight_json(text: str, source: str) -> DealInsights:
    """
    Parse a provider's JSON answer into DealInsights.

    Accepts either snake_case or camelCase keys (investment_score / investmentScore)
    and tolerates a surrounding Markdown code fence.
    """
    cleaned = _FENCE.sub("", (text or "").strip())
    if not cleaned:
        raise InsightProviderError("empty provider response")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        # Some models wrap the object in prose; try the outermost braces
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise InsightProviderError(f"provider response is not JSON: {e}") from e
        try:
            data = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as e2:
            raise InsightProviderError(f"provider response is not JSON: {e2}") from e2

    if not isinstance(data, dict):
        raise InsightProviderError("provider response must be a JSON object")

    try:
        return DealInsights(
            summary=str(data.get("summary") or "No summary provided"),
            strengths=list(data.get("strengths") or []),
            weaknesses=list(data.get("weaknesses") or []),
            recommendations=list(data.get("recommendations") or []),
            investment_score=data.get("investment_score", data.get("investmentScore")),
            source=source,
        )
    except ValidationError as e:
        raise InsightProviderError(f"provider response has an invalid shape: {e}") from e

"""
Insight providers package

Re-exports the provider interface, the built-in providers and the
best-effort entry point, so callers can do:

    from src.insights import RuleBasedInsightProvider, generate_insights
"""

from .provider_base import InsightProvider, InsightProviderError, parse_insight_json
from .rule_provider import RuleBasedInsightProvider
from .service import generate_insights, make_provider, placeholder_insights

__all__ = [
    "InsightProvider",
    "InsightProviderError",
    "RuleBasedInsightProvider",
    "generate_insights",
    "make_provider",
    "parse_insight_json",
    "placeholder_insights",
]

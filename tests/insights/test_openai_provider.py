# tests/insights/test_openai_provider.py
"""
OpenAIInsightProvider (No Network)

Purpose
-------
Exercise the provider against a stub chat client: prompt routing, JSON parsing,
retries, and a clear failure without OPENAI_API_KEY.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.insights import InsightProviderError
from src.insights.openai_provider import OpenAIInsightProvider
from src.insights.prompts import build_prompt


class _StubCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


def _client(*replies):
    completions = _StubCompletions(replies)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_requires_api_key_without_client():
    with pytest.raises(InsightProviderError):
        OpenAIInsightProvider()


def test_returns_parsed_insights(sfr_deal, metrics_factory, monkeypatch):
    monkeypatch.setenv("UNDERWRITE_INSIGHT_MODEL", "test-model")
    client, completions = _client('{"summary": "Looks fine", "investmentScore": 70}')
    out = OpenAIInsightProvider(client=client).get_insight(sfr_deal, metrics_factory())

    assert out.summary == "Looks fine"
    assert out.investment_score == 70
    assert out.source == "openai"

    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert "single-family" in call["messages"][1]["content"]


def test_retries_then_succeeds(sfr_deal, metrics_factory, monkeypatch):
    monkeypatch.setenv("UNDERWRITE_INSIGHT_MAX_RETRIES", "1")
    monkeypatch.setattr("src.insights.openai_provider.time.sleep", lambda *_: None)
    client, completions = _client(TimeoutError("slow"), '{"summary": "Second try"}')
    out = OpenAIInsightProvider(client=client).get_insight(sfr_deal, metrics_factory())
    assert out.summary == "Second try"
    assert len(completions.calls) == 2


def test_exhausted_retries_raise_provider_error(sfr_deal, metrics_factory, monkeypatch):
    monkeypatch.setenv("UNDERWRITE_INSIGHT_MAX_RETRIES", "0")
    client, _ = _client("not json at all")
    with pytest.raises(InsightProviderError):
        OpenAIInsightProvider(client=client).get_insight(sfr_deal, metrics_factory())


def test_prompt_routes_by_property_type(sfr_deal, mf_deal, metrics_factory):
    sfr_text = build_prompt(sfr_deal, metrics_factory())
    mf_text = build_prompt(mf_deal, metrics_factory(property_type="MF", price_per_unit=125_000.0))
    assert "single-family" in sfr_text
    assert "multi-family" in mf_text
    assert "1BR/1BA: 4 units" in mf_text
    assert "Price per Unit: $125,000" in mf_text


@pytest.mark.parametrize(
    "var,value",
    [("UNDERWRITE_INSIGHT_TIMEOUT_S", "soon"), ("UNDERWRITE_INSIGHT_MAX_RETRIES", "two")],
)
def test_malformed_env_settings_raise_provider_error(monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    client, _ = _client()
    with pytest.raises(InsightProviderError, match="Invalid insight provider setting"):
        OpenAIInsightProvider(client=client)

# src/insights/openai_provider.py
"""
OpenAI Insight Provider

Purpose
-------
Production `InsightProvider` backed by an OpenAI chat model. Sends the deal
inputs and the engine's metrics, expects a JSON object back.

Environment
-----------
OPENAI_API_KEY                 : required
UNDERWRITE_INSIGHT_MODEL       : default "gpt-4o-mini"
UNDERWRITE_INSIGHT_TIMEOUT_S   : default "20"
UNDERWRITE_INSIGHT_MAX_RETRIES : default "2"
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

from src.schemas.models import DealInsights, MFDeal, ReturnMetrics, SFRDeal

from .prompts import build_prompt
from .provider_base import InsightProviderError, parse_insight_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a real-estate investment analyst. Answer ONLY with a raw JSON object "
    "(no code fences, no markdown, no prose)."
)


class OpenAIInsightProvider:
    source = "openai"

    def __init__(self, client: Any | None = None) -> None:
        self._model = os.getenv("UNDERWRITE_INSIGHT_MODEL", "gpt-4o-mini")
        try:
            self._timeout_s = float(os.getenv("UNDERWRITE_INSIGHT_TIMEOUT_S", "20"))
            self._max_retries = max(0, int(os.getenv("UNDERWRITE_INSIGHT_MAX_RETRIES", "2")))
        except ValueError as e:
            raise InsightProviderError(f"Invalid insight provider setting: {e}") from e

        if client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise InsightProviderError("OPENAI_API_KEY not set for OpenAIInsightProvider.")
            try:
                from openai import OpenAI
            except ImportError as e:
                raise InsightProviderError("OpenAI SDK not available. Install `openai>=1.0`.") from e
            client = OpenAI(api_key=api_key)
        self._client = client

    def get_insight(self, deal: SFRDeal | MFDeal, metrics: ReturnMetrics) -> DealInsights:
        prompt = build_prompt(deal, metrics)
        logger.info("Generated %s insight prompt (%d chars)", deal.property_type, len(prompt))

        last_err: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                text = self._call_chat_completions(prompt)
                return parse_insight_json(text, source=self.source)
            except Exception as e:  # noqa: BLE001
                last_err = e
                logger.warning("insight request failed (attempt %d/%d): %s", attempt + 1, self._max_retries + 1, e)
                if attempt < self._max_retries:
                    time.sleep(min(0.5 * (attempt + 1), 2.0))
        assert last_err is not None
        if isinstance(last_err, InsightProviderError):
            raise last_err
        raise InsightProviderError(str(last_err)) from last_err

    def _call_chat_completions(self, prompt: str) -> str:
        resp = self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=800,
            temperature=0.7,
            timeout=self._timeout_s,
        )
        return resp.choices[0].message.content or ""

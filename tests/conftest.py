# tests/conftest.py
from __future__ import annotations

import pytest

from src.core.finance import analyze_deal
from tests.utils import make_insights, make_metrics, make_mf_deal, make_sfr_deal


# -------- Environment isolation --------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "UNDERWRITE_OUT",
        "UNDERWRITE_HORIZON",
        "UNDERWRITE_INSIGHTS",
        "UNDERWRITE_STORE",
        "UNDERWRITE_DEBUG",
        "UNDERWRITE_INSIGHT_MODEL",
        "UNDERWRITE_INSIGHT_TIMEOUT_S",
        "UNDERWRITE_INSIGHT_MAX_RETRIES",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


# -------- Deal fixtures --------
@pytest.fixture
def sfr_deal_factory():
    """Factory for the canonical SFR deal (overridable)."""

    def _factory(**overrides):
        return make_sfr_deal(**overrides)

    return _factory


@pytest.fixture
def mf_deal_factory():
    """Factory for the canonical MF deal (overridable)."""

    def _factory(**overrides):
        return make_mf_deal(**overrides)

    return _factory


@pytest.fixture
def sfr_deal():
    return make_sfr_deal()


@pytest.fixture
def mf_deal():
    return make_mf_deal()


# -------- Analysis fixtures --------
@pytest.fixture
def sfr_analysis(sfr_deal):
    return analyze_deal(sfr_deal)


@pytest.fixture
def mf_analysis(mf_deal):
    return analyze_deal(mf_deal)


@pytest.fixture
def metrics_factory():
    def _factory(**overrides):
        return make_metrics(**overrides)

    return _factory


@pytest.fixture
def insights_baseline():
    return make_insights()


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests")

# tests/test_main_cli.py

from __future__ import annotations

import json
import sys

import main as cli
from src.core.logs import redact
from tests.utils import make_mf_deal


def test_sample_deal_matches_reference_scenario():
    deal = cli.build_sample_deal()
    assert deal.purchase_price == 350_000.0
    assert deal.loan_amount == 280_000.0
    assert deal.long_term.annual_property_value_increase == 4.0


def test_cli_runs_sample_and_writes_report(tmp_path, monkeypatch, capsys):
    out = tmp_path / "report.md"
    monkeypatch.setattr(sys, "argv", ["main.py", "--out", str(out), "--insights", "rules", "--horizon", "5"])
    cli.main()

    text = out.read_text(encoding="utf-8")
    assert "5-Year Projection" in text
    assert "Investment Insights" in text
    printed = capsys.readouterr().out
    assert f"Report written to {out}" in printed
    assert "Investment score:" in printed


def test_cli_with_config_and_store(tmp_path, monkeypatch, capsys):
    cfg = tmp_path / "deal.json"
    cfg.write_text(
        json.dumps({"deal": make_mf_deal().model_dump(), "run": {"out": str(tmp_path / "mf.md"), "insights": "none"}}),
        encoding="utf-8",
    )
    store = tmp_path / "store"
    monkeypatch.setattr(sys, "argv", ["main.py", "--config", str(cfg), "--store", str(store)])
    cli.main()

    assert (tmp_path / "mf.md").exists()
    assert len(list(store.glob("*/*.json"))) == 1
    assert "Stored deal" in capsys.readouterr().out


def test_cli_openai_without_key_still_reports(tmp_path, monkeypatch):
    out = tmp_path / "r.md"
    monkeypatch.setattr(sys, "argv", ["main.py", "--out", str(out), "--insights", "openai"])
    cli.main()
    assert "Investment Insights" not in out.read_text(encoding="utf-8")


def test_cli_bad_insight_timeout_still_reports(tmp_path, monkeypatch):
    out = tmp_path / "r.md"
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("UNDERWRITE_INSIGHT_TIMEOUT_S", "soon")
    monkeypatch.setattr(sys, "argv", ["main.py", "--out", str(out), "--insights", "openai"])
    cli.main()
    assert out.exists()
    assert "Investment Insights" not in out.read_text(encoding="utf-8")


def test_cli_report_reflects_horizon_override(tmp_path, monkeypatch):
    out = tmp_path / "r.md"
    monkeypatch.setattr(sys, "argv", ["main.py", "--out", str(out), "--insights", "none", "--horizon", "7"])
    cli.main()
    assert "7-Year Projection" in out.read_text(encoding="utf-8")


def test_redact_masks_api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret-123")
    assert redact("token=sk-secret-123") == "token=[REDACTED]"

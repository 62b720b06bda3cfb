# src/inputs/inputs.py
"""
Inputs loader for the deal underwriting CLI.

Goals
-----
- Deterministic, file-first inputs with validation via Pydantic.
- Accept a bare deal object or a structured shape with run options.
- Accept the camelCase payloads produced by the web client
  (purchasePrice, longTermAssumptions, unitTypes, ...).
- Minimal environment-variable overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Bare deal (root = SFRDeal | MFDeal, discriminated by "property_type")
   { "property_type": "SFR", "purchase_price": 350000, ... }

2) Structured (root = AppInputs)
   {
     "deal": { ... },
     "run": {
       "out": "investment_analysis.md",
       "horizon": 10,
       "insights": "rules",
       "store": "data/deals"
     }
   }

Environment overrides (optional)
--------------------------------
- UNDERWRITE_OUT      -> AppInputs.run.out
- UNDERWRITE_HORIZON  -> AppInputs.run.horizon (int)
- UNDERWRITE_INSIGHTS -> AppInputs.run.insights
- UNDERWRITE_STORE    -> AppInputs.run.store

Public API
----------
- class InputsLoader:
    - load(path: str | Path | None) -> AppInputs
    - load_json(text: str) -> AppInputs
    - from_deal(deal) -> AppInputs
    - with_overrides(cfg, **kwargs) -> AppInputs (non-destructive copies)
- function load_inputs(path: str | Path | None) -> AppInputs  (convenience)
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, cast

from pydantic import BaseModel, Field, ValidationError

from src.schemas.models import DealInput, MFDeal, SFRDeal

InsightMode = Literal["none", "rules", "openai"]

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling the analysis run."""

    out: str = Field("investment_analysis.md", description="Path to write the Markdown report.")
    horizon: int | None = Field(None, ge=1, le=50, description="Projection horizon override in years.")
    insights: InsightMode = Field("rules", description='Insight provider: "none", "rules" or "openai".')
    store: str | None = Field(None, description="Directory for the JSON deal repository (optional).")


class AppInputs(BaseModel):
    """
    Full input payload.

    Attributes:
        deal: The validated deal (SFR or MF) used by the engine.
        run:  Non-financial, runtime options for the current execution.
    """

    deal: DealInput
    run: RunOptions = RunOptions()


# ----------------------------
# camelCase translation
# ----------------------------

_CAMEL = re.compile(r"(?<=[a-z0-9])([A-Z])")

# snake_case keys from the web client that differ from ours
_KEY_ALIASES = {
    "long_term_assumptions": "long_term",
    "property_management": "property_management_rate",
}


def _snake(key: str) -> str:
    k = _CAMEL.sub(r"_\1", key).lower()
    return _KEY_ALIASES.get(k, k)


def _snake_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {_snake(str(k)): _snake_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_snake_keys(v) for v in obj]
    return obj


def _translate_deal(raw: dict[str, Any]) -> dict[str, Any]:
    deal = _snake_keys(raw)
    # Unit groups use "type" for their label in the web client
    for unit in deal.get("unit_types") or []:
        if isinstance(unit, dict) and "type" in unit and "label" not in unit:
            unit["label"] = unit.pop("type")
    if isinstance(deal.get("property_type"), str):
        deal["property_type"] = deal["property_type"].strip().upper()
    return deal


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Responsibilities:
        - Read JSON from a file or string
        - Accept both the bare-deal and the structured shapes
        - Validate with Pydantic
        - Apply environment overrides for run options

    Default search (when path=None):
        1) ./data/sample/deal.json
        2) ./config.json
    """

    env_prefix: str = "UNDERWRITE_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppInputs:
        """
        Load inputs from a JSON file (path). If path is None, try defaults.

        Returns:
            AppInputs (validated).
        """
        p = self._resolve_path(path)
        raw = self._read_json_file(p)
        return self._finish(raw)

    def load_json(self, text: str) -> AppInputs:
        """Load inputs from a JSON string (either supported shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Inputs payload must be a JSON object.")
        return self._finish(raw)

    def from_deal(self, deal: SFRDeal | MFDeal) -> AppInputs:
        """Wrap an in-memory deal (e.g., a built-in sample) with default run options plus env overrides."""
        return self._apply_env_overrides(AppInputs(deal=deal))

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        horizon: int | None = None,
        insights: str | None = None,
        store: str | None = None,
    ) -> AppInputs:
        """
        Return a *new* AppInputs with provided non-null overrides applied to RunOptions.
        Does not mutate the original instance.
        """
        updates: dict[str, Any] = {}
        if out is not None:
            updates["out"] = out
        if horizon is not None:
            updates["horizon"] = horizon
        if insights is not None:
            updates["insights"] = insights
        if store is not None:
            updates["store"] = store

        if not updates:
            return cfg

        try:
            run_new = RunOptions.model_validate({**cfg.run.model_dump(), **updates})
        except ValidationError as e:
            raise ValueError(f"Run option overrides are invalid:\n{e}") from e
        return cfg.model_copy(update={"run": run_new})

    # ---------- Internals ----------

    def _finish(self, raw: dict[str, Any]) -> AppInputs:
        data = self._normalize_shape(raw)
        cfg = self._parse_root(data)
        return self._apply_env_overrides(cfg)

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        # Default search order
        for candidate in (Path("data/sample/deal.json"), Path("config.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. Looked for ./data/sample/deal.json and ./config.json."
        )

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            loaded = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e
        if not isinstance(loaded, dict):
            raise ValueError(f"Inputs in {p} must be a JSON object.")
        return cast(dict[str, Any], loaded)

    def _normalize_shape(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Wrap a bare deal into the structured shape and snake_case the deal keys."""
        if "deal" in raw:
            out = dict(raw)
            if isinstance(out["deal"], dict):
                out["deal"] = _translate_deal(out["deal"])
            return out
        return {"deal": _translate_deal(raw)}

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        try:
            return AppInputs.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        """Apply light, optional overrides from environment variables to run options."""
        prefix = self.env_prefix
        updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            updates["out"] = out

        horizon = os.getenv(f"{prefix}HORIZON")
        if horizon:
            try:
                value = int(horizon)
            except ValueError:
                value = None
            # Ignore bad or out-of-range values; keep validated cfg.horizon
            if value is not None and 1 <= value <= 50:
                updates["horizon"] = value

        insights = os.getenv(f"{prefix}INSIGHTS")
        if insights:
            normalized = insights.strip().lower()
            if normalized in ("none", "rules", "openai"):
                updates["insights"] = normalized

        store = os.getenv(f"{prefix}STORE")
        if store:
            updates["store"] = store

        if not updates:
            return cfg

        return self.with_overrides(cfg, **updates)


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)

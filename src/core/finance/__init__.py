# src/core/finance/__init__.py

from .amortization import (
    annual_debt_schedule,
    generate_schedule,
    monthly_payment,
)
from .engine import analyze_deal, with_horizon
from .errors import InvalidDealInputError, UnderwritingError, validate_deal
from .irr import solve_irr
from .metrics import compute_metrics
from .operating import build_operating_statement, mortgage_terms
from .projection import analyze_exit, project

__all__ = [
    "analyze_deal",
    "with_horizon",
    "monthly_payment",
    "generate_schedule",
    "annual_debt_schedule",
    "mortgage_terms",
    "build_operating_statement",
    "project",
    "analyze_exit",
    "compute_metrics",
    "solve_irr",
    "validate_deal",
    "UnderwritingError",
    "InvalidDealInputError",
]

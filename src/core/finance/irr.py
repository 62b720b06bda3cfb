# src/core/finance/irr.py

from __future__ import annotations

from collections.abc import Iterable

# Bracket for bisection (annual rates as decimals)
LOWER_BOUND = -0.99
UPPER_BOUND = 10.0
MAX_ITERATIONS = 100
TOLERANCE = 1e-6


def npv(rate: float, cash_flows: Iterable[float]) -> float:
    """Net present value with period 0 undiscounted: Σ cf_i / (1 + rate)^i."""
    return float(sum(cf / ((1.0 + rate) ** i) for i, cf in enumerate(cash_flows)))


def annualized_return(cash_flows: list[float]) -> float:
    """
    Approximate annualized total return:
        ((initial + net gain) / initial) ^ (1 / periods) - 1

    Used when the bisection bracket does not straddle a root. Returns 0.0
    when there is no initial outlay to annualize against.
    """
    if len(cash_flows) < 2:
        return 0.0
    initial = -cash_flows[0]
    if initial <= 0:
        return 0.0
    gain = sum(cash_flows)
    multiple = (initial + gain) / initial
    if multiple <= 0:
        return 0.0
    return multiple ** (1.0 / (len(cash_flows) - 1)) - 1.0


def solve_irr(
    cash_flows: Iterable[float],
    *,
    lower: float = LOWER_BOUND,
    upper: float = UPPER_BOUND,
    max_iter: int = MAX_ITERATIONS,
    tol: float = TOLERANCE,
) -> float:
    """
    Internal Rate of Return by bisection.

    Args:
        cash_flows: [-initial_investment, cf_1, ..., cf_n + exit_proceeds].
        lower/upper: Rate bracket (decimal).
        max_iter: Iteration cap; the loop always terminates.
        tol: Convergence tolerance on |NPV| and on bracket width.

    Returns:
        IRR as a decimal (0.12 for 12%). Never raises and never returns NaN:
          - fewer than two flows, or Σ flows <= 0          -> 0.0
          - NPV(lower) and NPV(upper) share a sign         -> annualized_return()
          - iterations exhausted                            -> last midpoint
    """
    flows = [float(x) for x in cash_flows]
    if len(flows) < 2:
        return 0.0

    # Not profitable under a simple total-return test
    if sum(flows) <= 0:
        return 0.0

    f_lo = npv(lower, flows)
    f_hi = npv(upper, flows)
    if f_lo == 0.0:
        return lower
    if f_hi == 0.0:
        return upper
    if f_lo * f_hi > 0.0:
        return annualized_return(flows)

    lo, hi = lower, upper
    mid = (lo + hi) / 2.0
    for _ in range(max_iter):
        mid = (lo + hi) / 2.0
        val = npv(mid, flows)
        if abs(val) < tol:
            return mid
        # Same sign as the low end -> root lies above mid
        if (val > 0.0) == (f_lo > 0.0):
            lo = mid
        else:
            hi = mid
        if abs(hi - lo) < tol:
            return (lo + hi) / 2.0

    return mid

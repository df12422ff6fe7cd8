"""Internal rate of return on dated annual cash flows.

IRR is the rate r at which NPV(r) = sum(CF_t / (1 + r)^t) = 0. A cash flow
stream with more than one sign change can have several roots; the solver
scans a rate grid for every sign change, solves each bracket with Brent's
method, and picks:

- the smallest positive root, or
- when no root is positive, the root closest to zero.

Streams that are all one sign have no IRR and raise UndefinedMetricError.
Callers that report results use irr_or_none() so an undefined IRR shows up
as None and never as 0%.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.optimize import brentq

from ..errors import UndefinedMetricError

logger = logging.getLogger(__name__)

CashFlows = Union[Sequence[float], Sequence[Tuple[float, float]]]


@dataclass(frozen=True)
class SolverConfig:
    """Bounds and tolerance for the IRR root search."""

    lower_bound: float = -0.99
    upper_bound: float = 10.0  # 1000%
    grid_points: int = 400
    tolerance: float = 1e-10
    max_iterations: int = 200


DEFAULT_SOLVER = SolverConfig()


def _as_arrays(cash_flows: CashFlows) -> Tuple[np.ndarray, np.ndarray]:
    """Split cash flows into (times, amounts).

    Accepts a plain list (time = index) or (time, amount) pairs.
    """
    flows = list(cash_flows)
    if flows and isinstance(flows[0], (tuple, list)):
        times = np.array([float(t) for t, _ in flows])
        amounts = np.array([float(a) for _, a in flows])
    else:
        times = np.arange(len(flows), dtype=float)
        amounts = np.array(flows, dtype=float)
    return times, amounts


def npv(rate: float, cash_flows: CashFlows) -> float:
    """Net present value of cash flows at an annual rate.

    Example:
        >>> round(npv(0.10, [-100, 110]), 10)
        0.0
    """
    times, amounts = _as_arrays(cash_flows)
    return float(np.sum(amounts / (1.0 + rate) ** times))


def _solve_bracket(
    lo: float,
    hi: float,
    times: np.ndarray,
    amounts: np.ndarray,
    config: SolverConfig,
) -> float:
    """Root of NPV inside a sign-change bracket [lo, hi]."""

    def f(r: float) -> float:
        return float(np.sum(amounts / (1.0 + r) ** times))

    return brentq(f, lo, hi, xtol=config.tolerance, maxiter=config.max_iterations)


def find_irr_roots(cash_flows: CashFlows, config: SolverConfig = DEFAULT_SOLVER) -> List[float]:
    """Every IRR root the grid scan can bracket, in ascending order."""
    times, amounts = _as_arrays(cash_flows)
    grid = np.linspace(config.lower_bound, config.upper_bound, config.grid_points + 1)
    values = np.array([np.sum(amounts / (1.0 + r) ** times) for r in grid])

    roots = []
    for i in range(len(grid) - 1):
        if values[i] == 0.0:
            roots.append(float(grid[i]))
        elif values[i] * values[i + 1] < 0:
            logger.debug("IRR bracket [%.4f, %.4f]", grid[i], grid[i + 1])
            roots.append(_solve_bracket(float(grid[i]), float(grid[i + 1]), times, amounts, config))
    if values[-1] == 0.0:
        roots.append(float(grid[-1]))
    return roots


def calculate_irr(cash_flows: CashFlows, config: SolverConfig = DEFAULT_SOLVER) -> float:
    """Calculate the IRR of annual cash flows.

    Args:
        cash_flows: Amounts by year (index = year) or (year, amount) pairs.
            The first flow is normally the negative initial contribution.
        config: Solver bounds and tolerance.

    Returns:
        IRR as decimal (e.g., 0.1487 for 14.87%).

    Raises:
        UndefinedMetricError: All flows share one sign, or no root lies
            within the solver bounds.

    Example:
        >>> round(calculate_irr([-100, 0, 0, 0, 0, 200]), 4)
        0.1487
    """
    _, amounts = _as_arrays(cash_flows)
    if not (np.any(amounts < 0) and np.any(amounts > 0)):
        raise UndefinedMetricError(
            "IRR is undefined without at least one negative and one positive cash flow"
        )

    roots = find_irr_roots(cash_flows, config)
    if not roots:
        raise UndefinedMetricError(
            f"IRR has no root between {config.lower_bound:.0%} and {config.upper_bound:.0%}"
        )

    positive = [r for r in roots if r > 0]
    if positive:
        return min(positive)
    return min(roots, key=abs)


def irr_or_none(cash_flows: CashFlows, config: SolverConfig = DEFAULT_SOLVER) -> Optional[float]:
    """calculate_irr(), returning None when the IRR is undefined."""
    try:
        return calculate_irr(cash_flows, config)
    except UndefinedMetricError as exc:
        logger.warning("IRR reported as undefined: %s", exc)
        return None

"""Exit cap rate sensitivity.

Re-values the exit and re-runs the waterfall for a grid of exit cap rates,
holding everything else fixed. Debt service and operations do not depend
on the exit cap rate, so they are computed once and shared read-only by
every grid point.
"""

import concurrent.futures
import logging
import multiprocessing
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd

from ..models.deal import DealAssumptions
from .cashflow import CashFlowSchedule
from .debt import DebtServiceYear, remaining_balance
from .exit import LiquidationEvent, value_exit
from .irr import DEFAULT_SOLVER, SolverConfig
from .metrics import ReturnResult, calculate_returns
from .proforma import OperatingYear
from .waterfall import DistributionLedger, distribute

logger = logging.getLogger(__name__)

DEFAULT_OFFSETS_BPS = (-150, -100, -50, 0, 50, 100, 150)


@dataclass(frozen=True)
class SensitivityConfig:
    """Configuration for the exit cap rate grid.

    Attributes:
        offsets_bps: Offsets from the base exit cap rate, in basis points
        parallel: Whether to evaluate grid points on worker threads
        max_workers: Max parallel workers (None = CPU count, capped at 8)
    """

    offsets_bps: Tuple[int, ...] = DEFAULT_OFFSETS_BPS
    parallel: bool = False
    max_workers: Optional[int] = None


@dataclass(frozen=True)
class ExitScenario:
    """Exit, waterfall and returns for one exit cap rate."""

    liquidation: LiquidationEvent
    ledger: DistributionLedger
    returns: ReturnResult


@dataclass(frozen=True)
class SensitivityPoint:
    """One row of the sensitivity table."""

    exit_cap_rate: float
    exit_price: float
    returns: ReturnResult


def build_cap_rate_grid(
    base_cap_rate: float,
    offsets_bps: Sequence[int] = DEFAULT_OFFSETS_BPS,
) -> List[float]:
    """Exit cap rates around a base rate, dropping non-positive rates.

    Example:
        >>> build_cap_rate_grid(0.06, (-50, 0, 50))
        [0.055, 0.06, 0.065]
    """
    grid = []
    for offset in offsets_bps:
        rate = round(base_cap_rate + offset / 10_000, 10)
        if rate > 0:
            grid.append(rate)
    return grid


def run_exit_scenario(
    assumptions: DealAssumptions,
    operations: Sequence[OperatingYear],
    debt_schedule: List[DebtServiceYear],
    schedule: CashFlowSchedule,
    exit_cap_rate: float,
    solver: SolverConfig = DEFAULT_SOLVER,
) -> ExitScenario:
    """Value the exit at one cap rate and run it through the waterfall.

    Args:
        assumptions: Deal assumptions.
        operations: Projection covering hold + 1 years.
        debt_schedule: Debt schedule over the hold.
        schedule: Assembled hold-period cash flows.
        exit_cap_rate: Exit cap rate as decimal.
        solver: IRR solver settings.

    Returns:
        ExitScenario.
    """
    hold = assumptions.hold_period_years
    liquidation = value_exit(
        year=hold,
        forward_noi=operations[hold].noi,
        exit_cap_rate=exit_cap_rate,
        disposition_fee_rate=assumptions.disposition_fee_rate,
        loan_balance=remaining_balance(debt_schedule, assumptions.loan_principal),
    )

    ledger = distribute(
        assumptions.waterfall_tiers,
        schedule.capitalization.lp_contribution,
        schedule.capitalization.gp_contribution,
        schedule.distribution_events(liquidation),
    )

    returns = calculate_returns(assumptions, schedule, liquidation, ledger, solver)
    return ExitScenario(liquidation=liquidation, ledger=ledger, returns=returns)


def _evaluate_point(
    index: int,
    exit_cap_rate: float,
    assumptions: DealAssumptions,
    operations: Sequence[OperatingYear],
    debt_schedule: List[DebtServiceYear],
    schedule: CashFlowSchedule,
    solver: SolverConfig,
) -> Tuple[int, SensitivityPoint]:
    scenario = run_exit_scenario(
        assumptions, operations, debt_schedule, schedule, exit_cap_rate, solver,
    )
    point = SensitivityPoint(
        exit_cap_rate=exit_cap_rate,
        exit_price=scenario.liquidation.sale_price,
        returns=scenario.returns,
    )
    return index, point


def run_exit_cap_sensitivity(
    assumptions: DealAssumptions,
    operations: Sequence[OperatingYear],
    debt_schedule: List[DebtServiceYear],
    schedule: CashFlowSchedule,
    cap_rates: Sequence[float],
    config: SensitivityConfig = SensitivityConfig(),
    solver: SolverConfig = DEFAULT_SOLVER,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> List[SensitivityPoint]:
    """Evaluate returns across a grid of exit cap rates.

    Args:
        assumptions: Deal assumptions.
        operations: Projection covering hold + 1 years.
        debt_schedule: Debt schedule over the hold.
        schedule: Assembled hold-period cash flows.
        cap_rates: Exit cap rates to evaluate.
        config: Parallelism settings.
        solver: IRR solver settings.
        progress_callback: Optional callback(completed, total) for progress updates

    Returns:
        One SensitivityPoint per cap rate, in the order given.
    """
    total = len(cap_rates)
    logger.info("Running exit cap sensitivity over %d rates", total)

    args = (assumptions, operations, debt_schedule, schedule, solver)
    results: List[Tuple[int, SensitivityPoint]] = []

    if config.parallel and total > 1:
        max_workers = config.max_workers or min(multiprocessing.cpu_count(), 8)

        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_evaluate_point, i, rate, *args)
                for i, rate in enumerate(cap_rates)
            ]

            for done, future in enumerate(concurrent.futures.as_completed(futures)):
                results.append(future.result())
                if progress_callback:
                    progress_callback(done + 1, total)
    else:
        for i, rate in enumerate(cap_rates):
            results.append(_evaluate_point(i, rate, *args))
            if progress_callback:
                progress_callback(i + 1, total)

    # Restore grid order
    results.sort(key=lambda item: item[0])
    logger.info("Exit cap sensitivity complete")
    return [point for _, point in results]


def sensitivity_to_dataframe(points: Sequence[SensitivityPoint]) -> pd.DataFrame:
    """Sensitivity table for display, one row per exit cap rate."""
    return pd.DataFrame([
        {
            "Exit Cap Rate": p.exit_cap_rate,
            "Exit Price": p.exit_price,
            "LP IRR": p.returns.lp_irr,
            "LP Equity Multiple": p.returns.lp_equity_multiple,
            "GP IRR": p.returns.gp_irr,
            "GP Equity Multiple": p.returns.gp_equity_multiple,
        }
        for p in points
    ])


def format_sensitivity_table(points: Sequence[SensitivityPoint]) -> str:
    """Format the sensitivity grid as a text table."""
    lines = [
        "=" * 60,
        "EXIT CAP RATE SENSITIVITY",
        "=" * 60,
        "",
        f"{'Exit Cap':>10} {'Exit Price':>16} {'LP IRR':>12} {'LP Multiple':>14}",
        "-" * 60,
    ]
    for p in points:
        irr = f"{p.returns.lp_irr:>12.2%}" if p.returns.lp_irr is not None else f"{'n/a':>12}"
        lines.append(
            f"{p.exit_cap_rate:>10.2%} ${p.exit_price:>15,.0f} {irr} "
            f"{p.returns.lp_equity_multiple:>13.2f}x"
        )
    lines.append("=" * 60)
    return "\n".join(lines)

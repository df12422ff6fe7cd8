"""Return metrics for LP and GP, deal-level figures and benchmark ratings."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..models.deal import DealAssumptions
from ..models.waterfall import TierTrigger, WaterfallTier
from .cashflow import CashFlowSchedule
from .exit import LiquidationEvent
from .irr import DEFAULT_SOLVER, SolverConfig, irr_or_none
from .waterfall import DistributionLedger

logger = logging.getLogger(__name__)

# Benchmark thresholds for syndication returns (minimum value for each rating)
IRR_BENCHMARKS = {
    "poor": 0.08,
    "acceptable": 0.12,
    "good": 0.15,
    "excellent": 0.20,
}

EQUITY_MULTIPLE_BENCHMARKS = {
    "poor": 1.5,
    "acceptable": 1.75,
    "good": 2.0,
    "excellent": 2.5,
}


@dataclass(frozen=True)
class ReturnResult:
    """LP and GP returns for one scenario."""

    exit_cap_rate: float
    exit_price: float

    # Contributions (year 0)
    lp_contribution: float
    gp_contribution: float

    # Distributions over the hold, sale included
    lp_total_distributions: float
    gp_total_distributions: float

    # Returns (IRR is None when undefined)
    lp_irr: Optional[float]
    gp_irr: Optional[float]
    lp_equity_multiple: float
    gp_equity_multiple: float

    gp_promote: float  # GP take above its base share in hurdle/residual tiers
    total_project_profit: float


@dataclass(frozen=True)
class DealMetrics:
    """Supporting deal figures shown alongside the returns."""

    going_in_cap_rate: float  # Year-1 NOI / purchase price
    total_noi: float
    exit_noi: float
    equity_at_sale: float  # Sale price less loan payoff
    dscr_by_year: List[Optional[float]]
    min_dscr: Optional[float]
    average_cash_on_cash: float  # Mean annual cash available / total equity

    lp_preferred_return_paid: float
    lp_operating_distributions: float
    lp_sale_distributions: float  # Sale-year distributions, operating cash included
    gp_operating_distributions: float
    gp_sale_distributions: float

    total_acquisition_fees: float
    total_asset_management_fees: float

    lp_irr_rating: str
    lp_equity_multiple_rating: str

    @property
    def gp_fee_income(self) -> float:
        """Sponsor fees earned outside the waterfall."""
        return self.total_acquisition_fees + self.total_asset_management_fees


def equity_multiple(distributions: float, contribution: float) -> float:
    """Total distributions / total contribution (0 when nothing was contributed)."""
    if contribution <= 0:
        return 0.0
    return distributions / contribution


def base_gp_share(tiers: tuple[WaterfallTier, ...], gp_equity_share: float) -> float:
    """GP split of the last return-of-capital or pref tier.

    This is the GP's share before any outperformance split kicks in. Falls
    back to the GP equity share when the waterfall has no such tier.
    """
    share = gp_equity_share
    for tier in tiers:
        if tier.trigger in (TierTrigger.RETURN_OF_CAPITAL, TierTrigger.PREFERRED_RETURN):
            share = tier.gp_split
    return share


def calculate_gp_promote(ledger: DistributionLedger, gp_equity_share: float) -> float:
    """GP promote: GP amounts in hurdle and residual tiers above the base share."""
    base = base_gp_share(ledger.tiers, gp_equity_share)
    return sum(
        allocation.gp_amount - allocation.total * base
        for allocation in ledger.allocations()
        if allocation.tier.is_outperformance
    )


def calculate_total_profit(schedule: CashFlowSchedule, liquidation: LiquidationEvent) -> float:
    """Total project profit.

    Net sale proceeds + NOI - equity - debt service - AM fees
    - capex paid from operations + reserve release
    """
    return (
        liquidation.net_sale_proceeds
        + schedule.total_noi
        - schedule.capitalization.total_equity
        - schedule.total_debt_service
        - schedule.total_asset_management_fees
        - schedule.total_capex_from_operations
        + schedule.reserve_release
    )


def calculate_returns(
    assumptions: DealAssumptions,
    schedule: CashFlowSchedule,
    liquidation: LiquidationEvent,
    ledger: DistributionLedger,
    solver: SolverConfig = DEFAULT_SOLVER,
) -> ReturnResult:
    """Aggregate a distribution ledger into LP/GP returns.

    Args:
        assumptions: Deal assumptions.
        schedule: Assembled cash flows.
        liquidation: Exit valuation.
        ledger: Waterfall result.
        solver: IRR solver settings.

    Returns:
        ReturnResult.
    """
    lp_total = ledger.total_lp_distributions
    gp_total = ledger.total_gp_distributions

    return ReturnResult(
        exit_cap_rate=liquidation.exit_cap_rate,
        exit_price=liquidation.sale_price,
        lp_contribution=ledger.lp_contribution,
        gp_contribution=ledger.gp_contribution,
        lp_total_distributions=lp_total,
        gp_total_distributions=gp_total,
        lp_irr=irr_or_none(ledger.lp_cash_flows(), solver),
        gp_irr=irr_or_none(ledger.gp_cash_flows(), solver),
        lp_equity_multiple=equity_multiple(lp_total, ledger.lp_contribution),
        gp_equity_multiple=equity_multiple(gp_total, ledger.gp_contribution),
        gp_promote=calculate_gp_promote(ledger, assumptions.gp_equity_share),
        total_project_profit=calculate_total_profit(schedule, liquidation),
    )


def rate_against_benchmarks(value: Optional[float], benchmarks: dict) -> str:
    """Rating for a return against benchmark thresholds.

    Returns "excellent", "good", "acceptable", "fair" (at or above the poor
    threshold), "poor", or "n/a" for an undefined value.
    """
    if value is None:
        return "n/a"
    if value >= benchmarks["excellent"]:
        return "excellent"
    if value >= benchmarks["good"]:
        return "good"
    if value >= benchmarks["acceptable"]:
        return "acceptable"
    if value >= benchmarks["poor"]:
        return "fair"
    return "poor"


def calculate_deal_metrics(
    assumptions: DealAssumptions,
    schedule: CashFlowSchedule,
    liquidation: LiquidationEvent,
    ledger: DistributionLedger,
    returns: ReturnResult,
) -> DealMetrics:
    """Supporting deal figures: coverage, cash yield, fee totals, ratings."""
    projections = schedule.projections
    dscr_by_year = [p.dscr for p in projections]
    defined_dscr = [d for d in dscr_by_year if d is not None]
    total_equity = schedule.capitalization.total_equity

    average_cash = sum(p.cash_available for p in projections) / len(projections)

    pref_paid = sum(
        a.lp_amount for a in ledger.allocations()
        if a.tier.trigger == TierTrigger.PREFERRED_RETURN
    )
    operating = [p for p in ledger.periods if not p.includes_liquidation]
    sale = [p for p in ledger.periods if p.includes_liquidation]

    return DealMetrics(
        going_in_cap_rate=projections[0].noi / assumptions.purchase_price,
        total_noi=schedule.total_noi,
        exit_noi=liquidation.forward_noi,
        equity_at_sale=liquidation.sale_price - liquidation.loan_payoff,
        dscr_by_year=dscr_by_year,
        min_dscr=min(defined_dscr) if defined_dscr else None,
        average_cash_on_cash=average_cash / total_equity if total_equity > 0 else 0.0,
        lp_preferred_return_paid=pref_paid,
        lp_operating_distributions=sum(p.lp_amount for p in operating),
        lp_sale_distributions=sum(p.lp_amount for p in sale),
        gp_operating_distributions=sum(p.gp_amount for p in operating),
        gp_sale_distributions=sum(p.gp_amount for p in sale),
        total_acquisition_fees=schedule.capitalization.acquisition_fee,
        total_asset_management_fees=schedule.total_asset_management_fees,
        lp_irr_rating=rate_against_benchmarks(returns.lp_irr, IRR_BENCHMARKS),
        lp_equity_multiple_rating=rate_against_benchmarks(
            returns.lp_equity_multiple, EQUITY_MULTIPLE_BENCHMARKS,
        ),
    )


def _fmt_irr(irr: Optional[float], width: int) -> str:
    if irr is None:
        return f"{'n/a':>{width}}"
    return f"{irr:>{width}.2%}"


def format_returns_table(returns: ReturnResult, metrics: Optional[DealMetrics] = None) -> str:
    """Format LP/GP returns as a text table.

    Args:
        returns: Scenario returns.
        metrics: Optional deal metrics appended below the returns.

    Returns:
        Formatted string table.
    """
    lines = [
        "=" * 60,
        "SYNDICATION RETURNS",
        "=" * 60,
        "",
        f"{'Metric':<25} {'LP':>15} {'GP':>15}",
        "-" * 60,
        f"{'Contribution':<25} ${returns.lp_contribution:>14,.0f} ${returns.gp_contribution:>14,.0f}",
        f"{'Total Distributions':<25} ${returns.lp_total_distributions:>14,.0f} "
        f"${returns.gp_total_distributions:>14,.0f}",
        f"{'IRR':<25} {_fmt_irr(returns.lp_irr, 15)} {_fmt_irr(returns.gp_irr, 15)}",
        f"{'Equity Multiple':<25} {returns.lp_equity_multiple:>14.2f}x {returns.gp_equity_multiple:>14.2f}x",
        "",
        "-" * 60,
        f"{'Exit Cap Rate':<25} {returns.exit_cap_rate:>15.2%}",
        f"{'Exit Price':<25} ${returns.exit_price:>14,.0f}",
        f"{'GP Promote':<25} ${returns.gp_promote:>14,.0f}",
        f"{'Total Project Profit':<25} ${returns.total_project_profit:>14,.0f}",
    ]

    if metrics is not None:
        min_dscr = f"{metrics.min_dscr:>14.2f}x" if metrics.min_dscr is not None else f"{'n/a':>15}"
        lines += [
            "",
            "-" * 60,
            f"{'Going-in Cap Rate':<25} {metrics.going_in_cap_rate:>15.2%}",
            f"{'Avg Cash-on-Cash':<25} {metrics.average_cash_on_cash:>15.2%}",
            f"{'Minimum DSCR':<25} {min_dscr}",
            f"{'LP Pref Paid':<25} ${metrics.lp_preferred_return_paid:>14,.0f}",
            f"{'Acquisition Fees':<25} ${metrics.total_acquisition_fees:>14,.0f}",
            f"{'Asset Mgmt Fees':<25} ${metrics.total_asset_management_fees:>14,.0f}",
            f"{'LP IRR Rating':<25} {metrics.lp_irr_rating.upper():>15}",
            f"{'LP Multiple Rating':<25} {metrics.lp_equity_multiple_rating.upper():>15}",
        ]

    lines.append("=" * 60)
    return "\n".join(lines)

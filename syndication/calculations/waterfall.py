"""LP/GP distribution waterfall.

Each distribution event (one per hold year, the last one including the
sale) runs cash through the ordered tiers:

1. Every preferred-return tier accrues on LP unreturned capital, compounding
   annually on any unpaid balance.
2. Tiers are walked in order. Each absorbs cash up to its capacity and splits
   what it takes LP/GP:
   - Return of capital: until LP unreturned capital reaches zero.
   - Preferred return: until the tier's accrued balance is paid.
   - IRR hurdle: until the LP stream to date reaches the hurdle IRR.
   - Residual: everything left.
3. A negative year distributes nothing. Its deficit is carried forward and
   netted against the next positive events, the sale included, before any
   cash reaches the tiers.
4. The ledger must reconcile: every dollar of net cash is allocated.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import pandas as pd
from scipy.optimize import brentq

from ..errors import ReconciliationError
from ..models.waterfall import TierTrigger, WaterfallTier

logger = logging.getLogger(__name__)

# Relative tolerance for ledger reconciliation
RECONCILIATION_TOLERANCE = 1e-6


@dataclass(frozen=True)
class TierAllocation:
    """Cash absorbed by one tier in one period."""

    tier_index: int  # Position in the tier list (0-based)
    tier: WaterfallTier
    lp_amount: float
    gp_amount: float

    @property
    def total(self) -> float:
        return self.lp_amount + self.gp_amount


@dataclass(frozen=True)
class PeriodDistribution:
    """Waterfall result for one distribution event."""

    year: int
    cash_available: float
    lp_amount: float
    gp_amount: float
    cumulative_lp: float
    cumulative_gp: float
    allocations: Tuple[TierAllocation, ...]
    includes_liquidation: bool = False
    deficit_recovered: float = 0.0  # Earlier shortfall netted out of this period's cash

    @property
    def total_distributed(self) -> float:
        return self.lp_amount + self.gp_amount


@dataclass
class DistributionLedger:
    """Full record of who received what, from which tier, in which year."""

    tiers: Tuple[WaterfallTier, ...]
    lp_contribution: float
    gp_contribution: float
    periods: List[PeriodDistribution] = field(default_factory=list)
    lp_unreturned_capital: float = 0.0  # After the last period
    unpaid_preferred_return: float = 0.0  # Accrued and never paid
    unrecovered_deficit: float = 0.0  # Negative cash still outstanding at the end

    @property
    def total_lp_distributions(self) -> float:
        return sum(p.lp_amount for p in self.periods)

    @property
    def total_gp_distributions(self) -> float:
        return sum(p.gp_amount for p in self.periods)

    @property
    def total_distributed(self) -> float:
        return self.total_lp_distributions + self.total_gp_distributions

    def lp_cash_flows(self) -> List[Tuple[int, float]]:
        """LP (year, amount) vector starting with the year-0 contribution."""
        return [(0, -self.lp_contribution)] + [(p.year, p.lp_amount) for p in self.periods]

    def gp_cash_flows(self) -> List[Tuple[int, float]]:
        """GP (year, amount) vector starting with the year-0 contribution."""
        return [(0, -self.gp_contribution)] + [(p.year, p.gp_amount) for p in self.periods]

    def allocations(self) -> List[TierAllocation]:
        """Every tier allocation across all periods, in order."""
        return [a for p in self.periods for a in p.allocations]

    def totals_by_tier(self) -> Dict[int, Tuple[float, float]]:
        """(LP, GP) totals keyed by tier index."""
        totals = {i: (0.0, 0.0) for i in range(len(self.tiers))}
        for allocation in self.allocations():
            lp, gp = totals[allocation.tier_index]
            totals[allocation.tier_index] = (lp + allocation.lp_amount, gp + allocation.gp_amount)
        return totals

    def to_dataframe(self) -> pd.DataFrame:
        """One row per period with cash, LP/GP amounts and per-tier totals."""
        rows = []
        for period in self.periods:
            row = {
                "Year": period.year,
                "Cash Available": period.cash_available,
                "LP Distribution": period.lp_amount,
                "GP Distribution": period.gp_amount,
                "Cumulative LP": period.cumulative_lp,
                "Cumulative GP": period.cumulative_gp,
                "Includes Sale": period.includes_liquidation,
                "Deficit Recovered": period.deficit_recovered,
            }
            for index, tier in enumerate(self.tiers):
                row[f"T{index + 1} {tier.label}"] = sum(
                    a.total for a in period.allocations if a.tier_index == index
                )
            rows.append(row)
        return pd.DataFrame(rows)


def _hurdle_capacity(
    lp_flows: List[Tuple[int, float]],
    year: int,
    hurdle_rate: float,
    lp_split: float,
    available: float,
) -> float:
    """Cash this tier can absorb before the LP stream reaches the hurdle IRR.

    Finds the LP amount x paid in ``year`` at which the LP stream has zero NPV
    at the hurdle rate. NPV rises with x, so the root is bracketed by
    [0, available * lp_split].
    """

    def npv_at_hurdle(x: float) -> float:
        total = sum(amount / (1 + hurdle_rate) ** t for t, amount in lp_flows)
        return total + x / (1 + hurdle_rate) ** year

    if npv_at_hurdle(0.0) >= 0:
        return 0.0  # Hurdle already met

    max_lp = available * lp_split
    if npv_at_hurdle(max_lp) <= 0:
        return available  # Hurdle not reachable this period

    lp_needed = brentq(npv_at_hurdle, 0.0, max_lp, xtol=1e-9)
    return lp_needed / lp_split


def distribute(
    tiers: Sequence[WaterfallTier],
    lp_contribution: float,
    gp_contribution: float,
    events: Sequence[Tuple[int, float, bool]],
) -> DistributionLedger:
    """Run distribution events through the waterfall.

    Args:
        tiers: Ordered tiers; the last must be RESIDUAL.
        lp_contribution: LP year-0 equity.
        gp_contribution: GP year-0 equity.
        events: (year, distributable cash, includes_liquidation) per period.

    Returns:
        DistributionLedger.

    Raises:
        ReconciliationError: Cash left unallocated after the residual tier,
            or more allocated than was available.

    Example:
        >>> ledger = distribute(tiers, 900_000, 100_000, [(1, 50_000, False)])
        >>> ledger.periods[0].lp_amount
        50000.0
    """
    tiers = tuple(tiers)
    ledger = DistributionLedger(
        tiers=tiers,
        lp_contribution=lp_contribution,
        gp_contribution=gp_contribution,
    )

    unreturned = lp_contribution
    pref_balances = {
        i: 0.0 for i, tier in enumerate(tiers) if tier.trigger == TierTrigger.PREFERRED_RETURN
    }
    lp_flows: List[Tuple[int, float]] = [(0, -lp_contribution)]
    cumulative_lp = 0.0
    cumulative_gp = 0.0
    deficit = 0.0

    for year, cash, is_liquidation in events:
        # Accrue pref on start-of-period unreturned capital
        for i in pref_balances:
            rate = tiers[i].rate
            pref_balances[i] = pref_balances[i] * (1 + rate) + rate * unreturned

        if cash < 0:
            deficit -= cash
            recovered = 0.0
            remaining = 0.0
        else:
            recovered = min(deficit, cash)
            deficit -= recovered
            remaining = cash - recovered
        if recovered > 0:
            logger.debug("Year %d: $%.2f of earlier deficit recovered", year, recovered)
        net_cash = remaining

        period_lp = 0.0
        period_gp = 0.0
        allocations = []

        for index, tier in enumerate(tiers):
            if remaining <= 0:
                break

            if tier.trigger == TierTrigger.RETURN_OF_CAPITAL:
                capacity = unreturned / tier.lp_split
            elif tier.trigger == TierTrigger.PREFERRED_RETURN:
                capacity = pref_balances[index] / tier.lp_split
            elif tier.trigger == TierTrigger.IRR_HURDLE:
                flows_to_date = lp_flows + [(year, period_lp)]
                capacity = _hurdle_capacity(
                    flows_to_date, year, tier.rate, tier.lp_split, remaining,
                )
            else:
                capacity = remaining

            take = min(capacity, remaining)
            if take <= 0:
                continue

            lp_amount = take * tier.lp_split
            gp_amount = take * tier.gp_split

            if tier.trigger == TierTrigger.RETURN_OF_CAPITAL:
                unreturned = max(0.0, unreturned - lp_amount)
            elif tier.trigger == TierTrigger.PREFERRED_RETURN:
                pref_balances[index] = max(0.0, pref_balances[index] - lp_amount)

            allocations.append(TierAllocation(index, tier, lp_amount, gp_amount))
            period_lp += lp_amount
            period_gp += gp_amount
            remaining -= take

            logger.debug(
                "Year %d tier %d (%s): LP $%.2f GP $%.2f",
                year, index + 1, tier.label, lp_amount, gp_amount,
            )

        _reconcile(year, net_cash, period_lp + period_gp)

        cumulative_lp += period_lp
        cumulative_gp += period_gp
        lp_flows.append((year, period_lp))

        ledger.periods.append(PeriodDistribution(
            year=year,
            cash_available=cash,
            lp_amount=period_lp,
            gp_amount=period_gp,
            cumulative_lp=cumulative_lp,
            cumulative_gp=cumulative_gp,
            allocations=tuple(allocations),
            includes_liquidation=is_liquidation,
            deficit_recovered=recovered,
        ))

    ledger.lp_unreturned_capital = unreturned
    ledger.unpaid_preferred_return = sum(pref_balances.values())
    ledger.unrecovered_deficit = deficit
    if deficit > 0:
        logger.warning("Deficit of $%s was never recovered", f"{deficit:,.0f}")
    return ledger


def _reconcile(year: int, available: float, allocated: float) -> None:
    """Raise ReconciliationError unless allocated matches available cash."""
    tolerance = RECONCILIATION_TOLERANCE * max(1.0, abs(available))
    difference = available - allocated
    if abs(difference) > tolerance:
        if difference > 0:
            message = f"Year {year}: ${difference:,.2f} left unallocated after the residual tier"
        else:
            message = f"Year {year}: allocated ${-difference:,.2f} more than was available"
        logger.error("Waterfall reconciliation failed. %s", message)
        raise ReconciliationError(message, year=year, difference=difference)

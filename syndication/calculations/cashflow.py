"""Annual cash flow assembly: capitalization, cash available and reserves."""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ..models.deal import DealAssumptions, FeeBasis
from .debt import DebtServiceYear
from .exit import LiquidationEvent
from .proforma import OperatingYear

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capitalization:
    """Sources and uses at closing (year 0)."""

    purchase_price: float
    closing_costs: float
    capex_reserves: float
    acquisition_fee: float
    total_capitalization: float
    loan_amount: float
    total_equity: float
    lp_contribution: float
    gp_contribution: float


@dataclass(frozen=True)
class AnnualProjection:
    """Operating cash flow for one hold year, before the waterfall."""

    year: int
    noi: float
    interest: float
    principal: float
    debt_service: float
    asset_management_fee: float
    capex_draw: float
    capex_funded_by_reserve: float
    cash_available: float  # NOI - debt service - AM fee - unfunded capex

    @property
    def capex_from_operations(self) -> float:
        """Part of the capex draw the reserve could not cover."""
        return self.capex_draw - self.capex_funded_by_reserve

    @property
    def dscr(self) -> float | None:
        """Debt service coverage ratio, None when there is no debt service."""
        if self.debt_service <= 0:
            return None
        return self.noi / self.debt_service


@dataclass(frozen=True)
class CashFlowSchedule:
    """Capitalization plus one AnnualProjection per hold year."""

    capitalization: Capitalization
    projections: Tuple[AnnualProjection, ...]
    reserve_release: float  # Unspent capex reserve returned at exit

    @property
    def hold_years(self) -> int:
        return len(self.projections)

    @property
    def total_noi(self) -> float:
        return sum(p.noi for p in self.projections)

    @property
    def total_debt_service(self) -> float:
        return sum(p.debt_service for p in self.projections)

    @property
    def total_asset_management_fees(self) -> float:
        return sum(p.asset_management_fee for p in self.projections)

    @property
    def total_capex_from_operations(self) -> float:
        return sum(p.capex_from_operations for p in self.projections)

    @property
    def total_cash_available(self) -> float:
        return sum(p.cash_available for p in self.projections)

    def distribution_events(self, liquidation: LiquidationEvent) -> List[Tuple[int, float, bool]]:
        """Cash to push through the waterfall per hold year.

        The final year is liquidation-augmented: its operating cash plus net
        sale proceeds plus the reserve release.

        Returns:
            List of (year, distributable cash, includes_liquidation).
        """
        events = []
        for projection in self.projections:
            is_final = projection.year == self.hold_years
            cash = projection.cash_available
            if is_final:
                cash += liquidation.net_sale_proceeds + self.reserve_release
            events.append((projection.year, cash, is_final))
        return events


def calculate_capitalization(assumptions: DealAssumptions) -> Capitalization:
    """Sources and uses at closing.

    Total capitalization = purchase + closing + capex reserve + acquisition fee
    Total equity = total capitalization - loan
    """
    total_equity = assumptions.total_equity
    return Capitalization(
        purchase_price=assumptions.purchase_price,
        closing_costs=assumptions.closing_costs,
        capex_reserves=assumptions.capex_reserves,
        acquisition_fee=assumptions.acquisition_fee,
        total_capitalization=assumptions.total_capitalization,
        loan_amount=assumptions.loan_principal,
        total_equity=total_equity,
        lp_contribution=total_equity * assumptions.lp_equity_share,
        gp_contribution=total_equity * assumptions.gp_equity_share,
    )


def calculate_asset_management_fee(
    basis: FeeBasis,
    rate: float,
    total_equity: float,
    noi: float,
) -> float:
    """Annual asset-management fee on equity raised or on positive NOI."""
    if basis == FeeBasis.NOI:
        return max(noi, 0.0) * rate
    return total_equity * rate


def assemble_cash_flows(
    assumptions: DealAssumptions,
    debt_schedule: List[DebtServiceYear],
    operations: List[OperatingYear],
) -> CashFlowSchedule:
    """Combine operations and debt service into per-year cash available.

    Capex draws are funded from the upfront reserve first; only the
    shortfall reduces cash available. A negative year is reported as-is and
    is not carried forward.

    Args:
        assumptions: Deal assumptions.
        debt_schedule: One DebtServiceYear per hold year.
        operations: Projection covering at least the hold years.

    Returns:
        CashFlowSchedule for the hold period.
    """
    hold = assumptions.hold_period_years
    if len(debt_schedule) < hold or len(operations) < hold:
        raise ValueError(
            f"need {hold} years of debt service and operations, got "
            f"{len(debt_schedule)} and {len(operations)}"
        )

    capitalization = calculate_capitalization(assumptions)
    reserve = assumptions.capex_reserves
    projections = []

    for year in range(1, hold + 1):
        operating = operations[year - 1]
        debt = debt_schedule[year - 1]

        am_fee = calculate_asset_management_fee(
            assumptions.asset_management_fee_basis,
            assumptions.asset_management_fee_rate,
            capitalization.total_equity,
            operating.noi,
        )

        draw = assumptions.capex_draw_for_year(year)
        funded = min(draw, reserve)
        reserve -= funded

        cash = operating.noi - debt.debt_service - am_fee - (draw - funded)
        if cash < 0:
            logger.warning("Year %d cash available is negative: $%s", year, f"{cash:,.0f}")

        projections.append(AnnualProjection(
            year=year,
            noi=operating.noi,
            interest=debt.interest,
            principal=debt.principal,
            debt_service=debt.debt_service,
            asset_management_fee=am_fee,
            capex_draw=draw,
            capex_funded_by_reserve=funded,
            cash_available=cash,
        ))

    return CashFlowSchedule(
        capitalization=capitalization,
        projections=tuple(projections),
        reserve_release=reserve,
    )

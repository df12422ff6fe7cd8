"""Single entry point: run a full syndication analysis for one deal."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .calculations.cashflow import CashFlowSchedule, assemble_cash_flows
from .calculations.debt import DebtServiceYear, build_debt_schedule
from .calculations.exit import LiquidationEvent
from .calculations.irr import DEFAULT_SOLVER, SolverConfig
from .calculations.metrics import DealMetrics, ReturnResult, calculate_deal_metrics
from .calculations.proforma import OperatingYear, project_operations
from .calculations.sensitivity import (
    SensitivityConfig,
    SensitivityPoint,
    build_cap_rate_grid,
    run_exit_cap_sensitivity,
    run_exit_scenario,
)
from .calculations.waterfall import DistributionLedger
from .models.deal import DealAssumptions
from .models.form import from_form_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyndicationAnalysis:
    """Complete analysis of one deal: base case plus exit cap sensitivity."""

    assumptions: DealAssumptions
    debt_schedule: List[DebtServiceYear]
    operations: List[OperatingYear]  # hold + 1 years
    cash_flows: CashFlowSchedule
    liquidation: LiquidationEvent
    ledger: DistributionLedger
    returns: ReturnResult
    metrics: DealMetrics
    sensitivity: List[SensitivityPoint]

    def to_output_contract(self) -> Dict[str, Any]:
        """Named values consumed by the display layer.

        IRRs are decimals, or None when undefined.
        """
        r = self.returns
        noi_by_year = {p.year: p.noi for p in self.cash_flows.projections}

        return {
            "lpIrr": r.lp_irr,
            "gpIrr": r.gp_irr,
            "lpEquityMultiple": r.lp_equity_multiple,
            "gpEquityMultiple": r.gp_equity_multiple,
            "lpTotalDistributions": r.lp_total_distributions,
            "gpTotalDistributions": r.gp_total_distributions,
            "lpEquityContribution": r.lp_contribution,
            "gpEquityContribution": r.gp_contribution,
            "gpPromote": r.gp_promote,
            "totalProjectProfit": r.total_project_profit,
            "exitPrice": r.exit_price,
            "totalAcquisitionFees": self.metrics.total_acquisition_fees,
            "totalAssetManagementFees": self.metrics.total_asset_management_fees,
            "yearlyData": [
                {
                    "year": period.year,
                    "noi": noi_by_year[period.year],
                    "lpDistribution": period.lp_amount,
                    "gpDistribution": period.gp_amount,
                }
                for period in self.ledger.periods
            ],
            "sensitivityData": [
                {
                    "exitCapRate": point.exit_cap_rate,
                    "exitPrice": point.exit_price,
                    "lpIrr": point.returns.lp_irr,
                    "lpEquityMultiple": point.returns.lp_equity_multiple,
                }
                for point in self.sensitivity
            ],
        }


def analyze_deal(
    assumptions: DealAssumptions,
    sensitivity_config: SensitivityConfig = SensitivityConfig(),
    cap_rates: Optional[Sequence[float]] = None,
    solver: SolverConfig = DEFAULT_SOLVER,
) -> SyndicationAnalysis:
    """Run the full analysis for one deal.

    Validates every input before computing anything, then projects debt and
    operations, assembles cash flows, values the exit, runs the waterfall,
    and repeats the exit and waterfall across the exit cap rate grid.

    Args:
        assumptions: Deal assumptions.
        sensitivity_config: Grid offsets and parallelism.
        cap_rates: Explicit exit cap rate grid. Defaults to the base exit
            cap rate shifted by ``sensitivity_config.offsets_bps``.
        solver: IRR solver settings.

    Returns:
        SyndicationAnalysis.

    Raises:
        InvalidInputError: Listing every violated input constraint.
        ReconciliationError: The waterfall ledger did not reconcile.
    """
    assumptions.ensure_valid()
    hold = assumptions.hold_period_years
    logger.info(
        "Analyzing deal: $%s purchase, %d-year hold, %.2f%% exit cap",
        f"{assumptions.purchase_price:,.0f}", hold, assumptions.exit_cap_rate * 100,
    )

    debt_schedule = build_debt_schedule(
        loan_amount=assumptions.loan_principal,
        annual_rate=assumptions.interest_rate,
        amortization_years=assumptions.amortization_years,
        term_years=assumptions.loan_term_years,
        hold_years=hold,
        interest_only_years=assumptions.interest_only_years,
    )
    # One extra year for the forward NOI the exit is valued on
    operations = project_operations(assumptions, hold + 1)
    cash_flows = assemble_cash_flows(assumptions, debt_schedule, operations)

    base = run_exit_scenario(
        assumptions, operations, debt_schedule, cash_flows, assumptions.exit_cap_rate, solver,
    )
    metrics = calculate_deal_metrics(
        assumptions, cash_flows, base.liquidation, base.ledger, base.returns,
    )

    if cap_rates is None:
        cap_rates = build_cap_rate_grid(assumptions.exit_cap_rate, sensitivity_config.offsets_bps)
    sensitivity = run_exit_cap_sensitivity(
        assumptions, operations, debt_schedule, cash_flows, cap_rates,
        config=sensitivity_config, solver=solver,
    )

    logger.info("Analysis complete: LP IRR %s", _describe_irr(base.returns.lp_irr))

    return SyndicationAnalysis(
        assumptions=assumptions,
        debt_schedule=debt_schedule,
        operations=operations,
        cash_flows=cash_flows,
        liquidation=base.liquidation,
        ledger=base.ledger,
        returns=base.returns,
        metrics=metrics,
        sensitivity=sensitivity,
    )


def analyze_form(
    fields: Mapping[str, Any],
    sensitivity_config: SensitivityConfig = SensitivityConfig(),
) -> Dict[str, Any]:
    """Analyze a deal given as form fields and return the output contract."""
    return analyze_deal(from_form_fields(fields), sensitivity_config).to_output_contract()


def _describe_irr(irr: Optional[float]) -> str:
    return "undefined" if irr is None else f"{irr:.2%}"

"""Calculation modules for the syndication engine."""

from .debt import (
    DebtServiceYear,
    build_debt_schedule,
    calculate_annual_payment,
    annual_debt_service,
    total_debt_service,
    remaining_balance,
)
from .proforma import OperatingYear, project_operations, project_noi, calculate_egi, escalate
from .exit import LiquidationEvent, value_exit
from .cashflow import (
    Capitalization,
    AnnualProjection,
    CashFlowSchedule,
    calculate_capitalization,
    calculate_asset_management_fee,
    assemble_cash_flows,
)
from .irr import SolverConfig, npv, calculate_irr, irr_or_none, find_irr_roots
from .waterfall import (
    TierAllocation,
    PeriodDistribution,
    DistributionLedger,
    distribute,
)
from .metrics import (
    ReturnResult,
    DealMetrics,
    IRR_BENCHMARKS,
    EQUITY_MULTIPLE_BENCHMARKS,
    calculate_returns,
    calculate_deal_metrics,
    calculate_gp_promote,
    rate_against_benchmarks,
    format_returns_table,
)

# Exit cap rate sensitivity
from .sensitivity import (
    SensitivityConfig,
    SensitivityPoint,
    ExitScenario,
    build_cap_rate_grid,
    run_exit_scenario,
    run_exit_cap_sensitivity,
    sensitivity_to_dataframe,
    format_sensitivity_table,
)

__all__ = [
    "DebtServiceYear",
    "build_debt_schedule",
    "calculate_annual_payment",
    "annual_debt_service",
    "total_debt_service",
    "remaining_balance",
    "OperatingYear",
    "project_operations",
    "project_noi",
    "calculate_egi",
    "escalate",
    "LiquidationEvent",
    "value_exit",
    "Capitalization",
    "AnnualProjection",
    "CashFlowSchedule",
    "calculate_capitalization",
    "calculate_asset_management_fee",
    "assemble_cash_flows",
    "SolverConfig",
    "npv",
    "calculate_irr",
    "irr_or_none",
    "find_irr_roots",
    "TierAllocation",
    "PeriodDistribution",
    "DistributionLedger",
    "distribute",
    "ReturnResult",
    "DealMetrics",
    "IRR_BENCHMARKS",
    "EQUITY_MULTIPLE_BENCHMARKS",
    "calculate_returns",
    "calculate_deal_metrics",
    "calculate_gp_promote",
    "rate_against_benchmarks",
    "format_returns_table",
    "SensitivityConfig",
    "SensitivityPoint",
    "ExitScenario",
    "build_cap_rate_grid",
    "run_exit_scenario",
    "run_exit_cap_sensitivity",
    "sensitivity_to_dataframe",
    "format_sensitivity_table",
]

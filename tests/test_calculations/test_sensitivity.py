"""Tests for exit cap rate sensitivity."""

from dataclasses import replace

from syndication.calculations.cashflow import assemble_cash_flows
from syndication.calculations.debt import build_debt_schedule
from syndication.calculations.proforma import project_operations
from syndication.calculations.sensitivity import (
    SensitivityConfig,
    build_cap_rate_grid,
    format_sensitivity_table,
    run_exit_cap_sensitivity,
    run_exit_scenario,
    sensitivity_to_dataframe,
)


def _inputs(deal):
    debt = build_debt_schedule(
        deal.loan_principal,
        deal.interest_rate,
        deal.amortization_years,
        deal.loan_term_years,
        deal.hold_period_years,
        deal.interest_only_years,
    )
    operations = project_operations(deal, deal.hold_period_years + 1)
    schedule = assemble_cash_flows(deal, debt, operations)
    return operations, debt, schedule


class TestBuildCapRateGrid:
    """Tests for the grid helper."""

    def test_default_offsets(self):
        grid = build_cap_rate_grid(0.06)
        assert grid == [0.045, 0.05, 0.055, 0.06, 0.065, 0.07, 0.075]

    def test_drops_non_positive_rates(self):
        assert build_cap_rate_grid(0.01) == [0.005, 0.01, 0.015, 0.02, 0.025]


class TestRunExitCapSensitivity:
    """Tests for the sensitivity run."""

    def test_one_point_per_rate_in_order(self, default_deal):
        operations, debt, schedule = _inputs(default_deal)
        rates = [0.07, 0.05, 0.06]
        points = run_exit_cap_sensitivity(default_deal, operations, debt, schedule, rates)

        assert [p.exit_cap_rate for p in points] == rates

    def test_lp_irr_decreases_with_cap_rate(self, default_deal):
        """Higher exit cap, lower price, lower LP IRR."""
        operations, debt, schedule = _inputs(default_deal)
        points = run_exit_cap_sensitivity(
            default_deal, operations, debt, schedule, build_cap_rate_grid(0.06),
        )

        irrs = [p.returns.lp_irr for p in points]
        prices = [p.exit_price for p in points]
        assert all(b < a for a, b in zip(irrs, irrs[1:]))
        assert all(b < a for a, b in zip(prices, prices[1:]))

    def test_parallel_matches_sequential(self, default_deal):
        """Threads return the same points in grid order."""
        operations, debt, schedule = _inputs(default_deal)
        grid = build_cap_rate_grid(0.06)

        sequential = run_exit_cap_sensitivity(default_deal, operations, debt, schedule, grid)
        parallel = run_exit_cap_sensitivity(
            default_deal, operations, debt, schedule, grid,
            config=SensitivityConfig(parallel=True, max_workers=4),
        )

        assert parallel == sequential

    def test_progress_callback(self, default_deal):
        operations, debt, schedule = _inputs(default_deal)
        calls = []
        run_exit_cap_sensitivity(
            default_deal, operations, debt, schedule, [0.055, 0.06],
            progress_callback=lambda done, total: calls.append((done, total)),
        )
        assert calls == [(1, 2), (2, 2)]

    def test_base_point_matches_direct_run(self, default_deal):
        operations, debt, schedule = _inputs(default_deal)
        points = run_exit_cap_sensitivity(default_deal, operations, debt, schedule, [0.06])
        direct = run_exit_scenario(default_deal, operations, debt, schedule, 0.06)

        assert points[0].returns == direct.returns

    def test_only_exit_changes(self, default_deal):
        """Each point shares the base operations and debt."""
        operations, debt, schedule = _inputs(default_deal)
        low = run_exit_scenario(default_deal, operations, debt, schedule, 0.05)
        high = run_exit_scenario(replace(default_deal, exit_cap_rate=0.07), operations, debt, schedule, 0.07)

        assert low.liquidation.loan_payoff == high.liquidation.loan_payoff
        assert low.liquidation.forward_noi == high.liquidation.forward_noi


class TestSensitivityOutputs:
    """Tests for display helpers."""

    def test_dataframe_and_table(self, default_deal):
        operations, debt, schedule = _inputs(default_deal)
        points = run_exit_cap_sensitivity(
            default_deal, operations, debt, schedule, [0.055, 0.06, 0.065],
        )

        df = sensitivity_to_dataframe(points)
        assert list(df["Exit Cap Rate"]) == [0.055, 0.06, 0.065]
        assert "LP IRR" in df.columns

        table = format_sensitivity_table(points)
        assert "EXIT CAP RATE SENSITIVITY" in table
        assert "6.00%" in table

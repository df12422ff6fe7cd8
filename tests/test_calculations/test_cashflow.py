"""Tests for cash flow assembly."""

import logging
from dataclasses import replace

from syndication.calculations.cashflow import (
    assemble_cash_flows,
    calculate_asset_management_fee,
    calculate_capitalization,
)
from syndication.calculations.debt import build_debt_schedule
from syndication.calculations.exit import value_exit
from syndication.calculations.proforma import project_operations
from syndication.models.deal import FeeBasis


def _assemble(deal):
    debt = build_debt_schedule(
        deal.loan_principal,
        deal.interest_rate,
        deal.amortization_years,
        deal.loan_term_years,
        deal.hold_period_years,
        deal.interest_only_years,
    )
    operations = project_operations(deal, deal.hold_period_years + 1)
    return assemble_cash_flows(deal, debt, operations)


class TestCapitalization:
    """Tests for sources and uses at closing."""

    def test_default_deal(self, default_deal):
        cap = calculate_capitalization(default_deal)

        assert abs(cap.acquisition_fee - 100_000) < 1e-6
        assert abs(cap.total_capitalization - 5_350_000) < 1e-6
        assert abs(cap.loan_amount - 3_250_000) < 1e-6
        assert abs(cap.total_equity - 2_100_000) < 1e-6
        assert abs(cap.lp_contribution - 1_890_000) < 1e-6
        assert abs(cap.gp_contribution - 210_000) < 1e-6

    def test_loan_amount_overrides_ltv(self, default_deal):
        deal = replace(default_deal, loan_amount=3_000_000)
        assert abs(calculate_capitalization(deal).loan_amount - 3_000_000) < 1e-6


class TestAssetManagementFee:
    """Tests for the asset-management fee basis."""

    def test_equity_basis(self):
        assert abs(calculate_asset_management_fee(FeeBasis.EQUITY, 0.02, 2_100_000, 300_000) - 42_000) < 1e-6

    def test_noi_basis(self):
        assert abs(calculate_asset_management_fee(FeeBasis.NOI, 0.02, 2_100_000, 300_000) - 6_000) < 1e-6

    def test_noi_basis_ignores_negative_noi(self):
        assert calculate_asset_management_fee(FeeBasis.NOI, 0.02, 2_100_000, -50_000) == 0.0


class TestAssembleCashFlows:
    """Tests for per-year cash available."""

    def test_cash_available(self, default_deal):
        """Cash = NOI - debt service - AM fee."""
        schedule = _assemble(default_deal)
        year1 = schedule.projections[0]

        assert abs(year1.debt_service - 211_250) < 0.01
        assert abs(year1.asset_management_fee - 42_000) < 1e-6
        assert abs(year1.cash_available - (326_700 - 211_250 - 42_000)) < 0.01
        assert schedule.hold_years == 5

    def test_reserve_funds_capex_first(self, default_deal):
        """Draws come out of the reserve; only the shortfall hits cash."""
        deal = replace(default_deal, capex_draws=(100_000, 100_000))
        base = _assemble(default_deal)
        schedule = _assemble(deal)

        year1, year2 = schedule.projections[:2]
        assert year1.capex_funded_by_reserve == 100_000
        assert year1.capex_from_operations == 0
        assert abs(year1.cash_available - base.projections[0].cash_available) < 1e-6

        assert year2.capex_funded_by_reserve == 50_000
        assert year2.capex_from_operations == 50_000
        assert abs(year2.cash_available - (base.projections[1].cash_available - 50_000)) < 1e-6
        assert schedule.reserve_release == 0

    def test_unspent_reserve_released(self, default_deal):
        deal = replace(default_deal, capex_draws=(40_000,))
        assert abs(_assemble(deal).reserve_release - 110_000) < 1e-6
        assert abs(_assemble(default_deal).reserve_release - 150_000) < 1e-6

    def test_negative_year_is_logged_not_carried(self, default_deal, caplog):
        deal = replace(default_deal, capex_reserves=0, capex_draws=(500_000,))
        with caplog.at_level(logging.WARNING, logger="syndication.calculations.cashflow"):
            schedule = _assemble(deal)

        assert schedule.projections[0].cash_available < 0
        assert "Year 1 cash available is negative" in caplog.text
        # Year 2 is unaffected by the year 1 deficit
        assert abs(schedule.projections[1].cash_available - _assemble(
            replace(default_deal, capex_reserves=0)
        ).projections[1].cash_available) < 1e-6

    def test_final_event_includes_sale_and_reserve(self, default_deal):
        schedule = _assemble(default_deal)
        liquidation = value_exit(5, 400_000, 0.06, 0.02, 3_000_000)
        events = schedule.distribution_events(liquidation)

        assert [e[0] for e in events] == [1, 2, 3, 4, 5]
        assert [e[2] for e in events] == [False, False, False, False, True]
        expected = (
            schedule.projections[-1].cash_available
            + liquidation.net_sale_proceeds
            + schedule.reserve_release
        )
        assert abs(events[-1][1] - expected) < 1e-6

    def test_dscr(self, golden_deal):
        schedule = _assemble(golden_deal)
        for p in schedule.projections:
            assert p.dscr > 1.0

    def test_dscr_undefined_without_debt(self, all_cash_deal):
        schedule = _assemble(all_cash_deal)
        assert all(p.dscr is None for p in schedule.projections)

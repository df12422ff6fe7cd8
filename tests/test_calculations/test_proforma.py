"""Tests for the pro forma operating projection."""

from dataclasses import replace

from syndication.calculations.proforma import (
    calculate_egi,
    escalate,
    project_noi,
    project_operations,
)


class TestEGI:
    """Tests for effective gross income."""

    def test_egi_formula(self):
        """EGI = GPR x (1 - vacancy) + other income."""
        assert abs(calculate_egi(600_000, 0.05, 24_000) - 594_000) < 1e-6

    def test_escalate(self):
        assert abs(escalate(100_000, 0.03, 2) - 106_090) < 1e-6
        assert escalate(100_000, 0.03, 0) == 100_000


class TestProjectOperations:
    """Tests for the rent/expense build-up."""

    def test_year_one(self, default_deal):
        """Year 1 NOI = EGI x (1 - expense ratio)."""
        year1 = project_operations(default_deal, 1)[0]

        assert abs(year1.effective_gross_income - 594_000) < 1e-6
        assert abs(year1.operating_expenses - 267_300) < 1e-6
        assert abs(year1.noi - 326_700) < 1e-6
        assert abs(year1.vacancy_loss - 30_000) < 1e-6

    def test_projects_requested_years(self, default_deal):
        """Projector returns hold + 1 years when asked."""
        years = project_operations(default_deal, default_deal.hold_period_years + 1)
        assert [y.year for y in years] == [1, 2, 3, 4, 5, 6]

    def test_income_and_expenses_grow_separately(self, default_deal):
        """Income grows at rent growth, expenses at expense growth."""
        years = project_operations(default_deal, 3)

        assert abs(years[2].gross_potential_rent - 600_000 * 1.03 ** 2) < 1e-6
        assert abs(years[2].other_income - 24_000 * 1.03 ** 2) < 1e-6
        assert abs(years[2].operating_expenses - 267_300 * 1.02 ** 2) < 1e-6

    def test_margin_drifts_when_growth_rates_differ(self, default_deal):
        """Rent growing faster than expenses widens the margin."""
        years = project_operations(default_deal, 5)
        margins = [y.operating_margin for y in years]
        assert all(b > a for a, b in zip(margins, margins[1:]))

    def test_margin_flat_when_growth_rates_match(self, default_deal):
        deal = replace(default_deal, expense_growth_rate=default_deal.rent_growth_rate)
        years = project_operations(deal, 5)
        assert abs(years[0].operating_margin - years[4].operating_margin) < 1e-12


class TestNOIShortcut:
    """Tests for flat NOI growth."""

    def test_project_noi(self):
        years = project_noi(300_000, 0.03, 6)
        assert abs(years[0].noi - 300_000) < 1e-6
        assert abs(years[5].noi - 300_000 * 1.03 ** 5) < 1e-6

    def test_assumptions_with_year1_noi_use_shortcut(self, golden_deal):
        """Setting year1_noi bypasses the rent build-up."""
        years = project_operations(golden_deal, 2)
        assert abs(years[1].noi - 309_000) < 1e-6
        assert years[1].effective_gross_income == 0.0

"""Tests for the input form adapter."""

import pytest

from syndication.errors import InvalidInputError
from syndication.models.deal import FeeBasis, default_assumptions
from syndication.models.form import from_form_fields
from syndication.models.waterfall import TierTrigger, irr_hurdle, preferred_return, residual


class TestFromFormFields:
    """Tests for mapping camelCase percent fields to DealAssumptions."""

    def test_default_form_matches_default_deal(self, default_form_fields):
        """Whole-number percentages map onto the decimal defaults."""
        assert from_form_fields(default_form_fields) == default_assumptions()

    def test_fixed_tier_fields(self, default_form_fields):
        """Fixed fields become pref, capital, two hurdles and a residual."""
        deal = from_form_fields(default_form_fields)
        tiers = deal.waterfall_tiers

        assert tiers[0] == preferred_return(0.08)
        assert tiers[1].trigger == TierTrigger.RETURN_OF_CAPITAL
        assert tiers[2] == irr_hurdle(0.12, 0.70, 0.30)
        assert tiers[3] == irr_hurdle(0.18, 0.60, 0.40)
        assert tiers[4] == residual(0.50, 0.50)

    def test_interest_only_toggle_off(self, default_form_fields):
        fields = dict(default_form_fields, interestOnly=False, interestOnlyYears=3)
        assert from_form_fields(fields).interest_only_years == 0

    def test_explicit_tier_list(self, default_form_fields):
        fields = dict(default_form_fields)
        fields["waterfallTiers"] = [
            {"type": "preferredReturn", "lpSplit": 100, "gpSplit": 0},
            {"type": "returnOfCapital", "lpSplit": 100, "gpSplit": 0},
            {"type": "irrHurdle", "irrHurdle": 15, "lpSplit": 80, "gpSplit": 20},
            {"type": "residual", "lpSplit": 65, "gpSplit": 35},
        ]
        tiers = from_form_fields(fields).waterfall_tiers

        assert len(tiers) == 4
        assert tiers[0] == preferred_return(0.08)  # Rate from preferredReturn
        assert tiers[2] == irr_hurdle(0.15, 0.80, 0.20)
        assert tiers[3] == residual(0.65, 0.35)

    def test_optional_fields(self, default_form_fields):
        fields = dict(
            default_form_fields,
            loanAmount=3_000_000,
            assetManagementFeeBasis="NOI",
            capexDraws=[50_000, 25_000],
        )
        deal = from_form_fields(fields)

        assert deal.loan_principal == 3_000_000
        assert deal.asset_management_fee_basis == FeeBasis.NOI
        assert deal.capex_draws == (50_000.0, 25_000.0)

    def test_noi_shortcut_does_not_need_rent_fields(self, default_form_fields):
        fields = {
            k: v for k, v in default_form_fields.items()
            if k not in ("grossPotentialRent", "vacancyRate", "operatingExpenseRatio")
        }
        fields.update(year1Noi=300_000, noiGrowthRate=3)
        deal = from_form_fields(fields)

        assert deal.year1_noi == 300_000
        assert abs(deal.noi_growth_rate - 0.03) < 1e-12

    def test_missing_fields_collected(self, default_form_fields):
        fields = dict(default_form_fields)
        del fields["purchasePrice"]
        del fields["tier2IrrHurdle"]
        fields["exitCapRate"] = "six"

        with pytest.raises(InvalidInputError) as exc_info:
            from_form_fields(fields)

        violations = exc_info.value.violations
        assert "purchasePrice is required" in violations
        assert "tier2IrrHurdle is required" in violations
        assert any("exitCapRate must be a number" in v for v in violations)

    def test_bad_tier_type(self, default_form_fields):
        fields = dict(default_form_fields, waterfallTiers=[{"type": "catchUp", "lpSplit": 50, "gpSplit": 50}])
        with pytest.raises(InvalidInputError, match="waterfallTiers"):
            from_form_fields(fields)

    def test_range_checks_left_to_validation(self, default_form_fields):
        """The adapter maps; range checks happen in validate()."""
        fields = dict(default_form_fields, lpEquityPercent=85)
        deal = from_form_fields(fields)
        assert any("sum to 100%" in e for e in deal.validate())

    def test_bad_capex_draw_collected_with_other_violations(self, default_form_fields):
        """A non-numeric capex draw is a violation, not a crash."""
        fields = dict(default_form_fields, capexDraws=[50_000, "abc"], purchasePrice=None)

        with pytest.raises(InvalidInputError) as exc_info:
            from_form_fields(fields)

        violations = exc_info.value.violations
        assert "purchasePrice is required" in violations
        assert "capexDraws[2] must be a number, got 'abc'" in violations

    def test_fractional_interest_only_years_reported(self, default_form_fields):
        """2.5 interest-only years is reported, never truncated to 2."""
        fields = dict(default_form_fields, interestOnlyYears=2.5)

        with pytest.raises(InvalidInputError) as exc_info:
            from_form_fields(fields)

        assert any("interest_only_years must be a whole number" in v
                   for v in exc_info.value.violations)

    def test_non_numeric_preferred_return_with_tier_list(self, default_form_fields):
        fields = dict(default_form_fields, preferredReturn="eight")
        fields["waterfallTiers"] = [
            {"type": "preferredReturn", "lpSplit": 100, "gpSplit": 0},
            {"type": "residual", "lpSplit": 70, "gpSplit": 30},
        ]

        with pytest.raises(InvalidInputError) as exc_info:
            from_form_fields(fields)

        assert "preferredReturn must be a number, got 'eight'" in exc_info.value.violations

"""Deal inputs shared across tests."""

from syndication.models.deal import DealAssumptions, default_assumptions
from syndication.models.waterfall import preferred_return, residual


def get_default_deal() -> DealAssumptions:
    """Typical $5M syndication with the standard promote and a 3-year IO loan."""
    return default_assumptions()


def get_golden_deal() -> DealAssumptions:
    """$5M purchase, 75% LTV at 6% / 30y, $300k NOI growing 3%, 6% exit cap.

    Single 8% pref tier then an 80/20 residual. No fees, closing costs or
    reserves so the figures can be checked by hand:
    - Equity: $1.25M (LP $1.125M / GP $125k)
    - Annual debt service: ~$272,434
    - Net sale proceeds: ~$2.31M
    - LP equity multiple: ~1.90x
    """
    return DealAssumptions(
        purchase_price=5_000_000,
        closing_costs=0,
        capex_reserves=0,
        lp_equity_share=0.90,
        gp_equity_share=0.10,
        loan_to_value=0.75,
        interest_rate=0.06,
        loan_term_years=10,
        amortization_years=30,
        interest_only_years=0,
        acquisition_fee_rate=0.0,
        asset_management_fee_rate=0.0,
        disposition_fee_rate=0.0,
        year1_noi=300_000,
        noi_growth_rate=0.03,
        hold_period_years=5,
        exit_cap_rate=0.06,
        waterfall_tiers=(preferred_return(0.08), residual(0.80, 0.20)),
    )


def get_all_cash_deal() -> DealAssumptions:
    """Golden deal bought without debt, split pro rata through one residual tier."""
    return DealAssumptions(
        purchase_price=5_000_000,
        closing_costs=0,
        capex_reserves=0,
        lp_equity_share=0.90,
        gp_equity_share=0.10,
        loan_to_value=0.0,
        acquisition_fee_rate=0.0,
        asset_management_fee_rate=0.0,
        disposition_fee_rate=0.0,
        year1_noi=300_000,
        noi_growth_rate=0.03,
        hold_period_years=5,
        exit_cap_rate=0.06,
        waterfall_tiers=(residual(0.90, 0.10),),
    )


def get_default_form_fields() -> dict:
    """Input form values matching default_assumptions()."""
    return {
        "purchasePrice": 5_000_000,
        "closingCosts": 100_000,
        "capexReserves": 150_000,
        "lpEquityPercent": 90,
        "gpEquityPercent": 10,
        "loanToValue": 65,
        "interestRate": 6.5,
        "loanTermYears": 10,
        "amortizationYears": 30,
        "interestOnly": True,
        "interestOnlyYears": 3,
        "acquisitionFeePercent": 2,
        "assetManagementFeePercent": 2,
        "preferredReturn": 8,
        "tier1LpSplit": 70,
        "tier1GpSplit": 30,
        "tier2IrrHurdle": 12,
        "tier2LpSplit": 60,
        "tier2GpSplit": 40,
        "tier3IrrHurdle": 18,
        "tier3LpSplit": 50,
        "tier3GpSplit": 50,
        "grossPotentialRent": 600_000,
        "vacancyRate": 5,
        "otherIncome": 24_000,
        "operatingExpenseRatio": 45,
        "rentGrowthRate": 3,
        "expenseGrowthRate": 2,
        "holdPeriodYears": 5,
        "exitCapRate": 6,
        "dispositionFeePercent": 2,
    }


# Hand-computed figures for the golden deal
GOLDEN_EQUITY = 1_250_000
GOLDEN_LP_CONTRIBUTION = 1_125_000
GOLDEN_ANNUAL_DEBT_SERVICE = 272_434  # pmt(6%, 30, $3.75M)
GOLDEN_LP_EQUITY_MULTIPLE = 1.898

"""Deal data model containing all assumptions for a syndication analysis."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from ..errors import InvalidInputError
from .waterfall import TierTrigger, WaterfallTier, get_waterfall_preset

# Tolerance for "splits sum to 100%" checks
SPLIT_TOLERANCE = 1e-6


class FeeBasis(Enum):
    """What the annual asset-management fee is charged on."""

    EQUITY = "equity"  # % of total equity raised
    NOI = "noi"  # % of the year's NOI


@dataclass(frozen=True)
class DealAssumptions:
    """Complete, immutable input for one syndication deal.

    All rates are decimals (0.065 for 6.5%). Defaults describe a typical
    $5M multifamily syndication.
    """

    # === Capitalization ===
    purchase_price: float = 5_000_000.0
    closing_costs: float = 100_000.0
    capex_reserves: float = 150_000.0  # Funded at closing, drawn for capex

    # === Equity Structure ===
    lp_equity_share: float = 0.90
    gp_equity_share: float = 0.10

    # === Debt ===
    loan_to_value: float = 0.65
    loan_amount: Optional[float] = None  # Overrides loan_to_value when set
    interest_rate: float = 0.065
    loan_term_years: int = 10
    amortization_years: int = 30
    interest_only_years: int = 3

    # === Sponsor Fees ===
    acquisition_fee_rate: float = 0.02  # % of purchase price, paid at closing
    asset_management_fee_rate: float = 0.02
    asset_management_fee_basis: FeeBasis = FeeBasis.EQUITY
    disposition_fee_rate: float = 0.02  # % of sale price

    # === Operations (Year 1) ===
    gross_potential_rent: float = 600_000.0
    vacancy_rate: float = 0.05
    other_income: float = 24_000.0
    operating_expense_ratio: float = 0.45  # % of EGI

    # === Growth ===
    rent_growth_rate: float = 0.03
    expense_growth_rate: float = 0.02

    # NOI shortcut: when year1_noi is set, NOI grows flat at noi_growth_rate
    # and the rent/expense build-up above is ignored.
    year1_noi: Optional[float] = None
    noi_growth_rate: float = 0.0

    # === Capex ===
    capex_draws: Tuple[float, ...] = ()  # Spend per hold year (year 1 first)

    # === Hold & Exit ===
    hold_period_years: int = 5
    exit_cap_rate: float = 0.06

    # === Waterfall ===
    waterfall_tiers: Tuple[WaterfallTier, ...] = field(
        default_factory=lambda: get_waterfall_preset("standard", preferred_rate=0.08)
    )

    @property
    def loan_principal(self) -> float:
        """Acquisition loan amount."""
        if self.loan_amount is not None:
            return self.loan_amount
        return self.purchase_price * self.loan_to_value

    @property
    def acquisition_fee(self) -> float:
        """One-time acquisition fee paid to the GP at closing."""
        return self.purchase_price * self.acquisition_fee_rate

    @property
    def total_capitalization(self) -> float:
        """Total uses of funds at closing."""
        return (
            self.purchase_price
            + self.closing_costs
            + self.capex_reserves
            + self.acquisition_fee
        )

    @property
    def total_equity(self) -> float:
        """Equity raised from LP and GP (capitalization less loan proceeds)."""
        return self.total_capitalization - self.loan_principal

    @property
    def uses_noi_shortcut(self) -> bool:
        return self.year1_noi is not None

    @property
    def is_all_cash(self) -> bool:
        return self.loan_principal == 0

    def capex_draw_for_year(self, year: int) -> float:
        """Capex spend for a hold year (1-indexed), 0 when not scheduled."""
        if 1 <= year <= len(self.capex_draws):
            return self.capex_draws[year - 1]
        return 0.0

    def with_exit_cap_rate(self, exit_cap_rate: float) -> "DealAssumptions":
        """Copy of these assumptions with a different exit cap rate."""
        return replace(self, exit_cap_rate=exit_cap_rate)

    def validate(self) -> list[str]:
        """Validate assumptions and return every violation found.

        Returns:
            List of validation error messages. Empty if valid.
        """
        errors = []

        # Capitalization
        if self.purchase_price <= 0:
            errors.append(f"purchase_price must be > 0, got {self.purchase_price:,.0f}")
        if self.closing_costs < 0:
            errors.append(f"closing_costs must be >= 0, got {self.closing_costs:,.0f}")
        if self.capex_reserves < 0:
            errors.append(f"capex_reserves must be >= 0, got {self.capex_reserves:,.0f}")

        # Equity split (reported, never silently corrected)
        if not 0.01 <= self.lp_equity_share <= 0.99:
            errors.append(f"lp_equity_share must be 1%-99%, got {self.lp_equity_share:.2%}")
        if not 0.01 <= self.gp_equity_share <= 0.99:
            errors.append(f"gp_equity_share must be 1%-99%, got {self.gp_equity_share:.2%}")
        equity_sum = self.lp_equity_share + self.gp_equity_share
        if abs(equity_sum - 1.0) > SPLIT_TOLERANCE:
            errors.append(f"LP and GP equity shares must sum to 100%, got {equity_sum:.2%}")

        # Debt
        if not 0 <= self.loan_to_value <= 1:
            errors.append(f"loan_to_value must be 0%-100%, got {self.loan_to_value:.2%}")
        if self.loan_amount is not None and self.loan_amount < 0:
            errors.append(f"loan_amount must be >= 0, got {self.loan_amount:,.0f}")
        if not 0 <= self.interest_rate <= 0.30:
            errors.append(f"interest_rate must be 0%-30%, got {self.interest_rate:.2%}")
        if self.loan_term_years < 1:
            errors.append(f"loan_term_years must be >= 1, got {self.loan_term_years}")
        if self.amortization_years < 1:
            errors.append(f"amortization_years must be >= 1, got {self.amortization_years}")
        if self.interest_only_years < 0:
            errors.append(f"interest_only_years must be >= 0, got {self.interest_only_years}")
        elif self.interest_only_years > self.loan_term_years:
            errors.append(
                f"interest_only_years ({self.interest_only_years}) exceeds "
                f"loan_term_years ({self.loan_term_years})"
            )
        if self.loan_principal > 0:
            if self.interest_only_years >= self.amortization_years >= 1:
                errors.append(
                    f"interest_only_years ({self.interest_only_years}) must be shorter than "
                    f"amortization_years ({self.amortization_years})"
                )

        # Fees
        if not 0 <= self.acquisition_fee_rate <= 0.10:
            errors.append(
                f"acquisition_fee_rate must be 0%-10%, got {self.acquisition_fee_rate:.2%}"
            )
        if not 0 <= self.asset_management_fee_rate <= 0.10:
            errors.append(
                f"asset_management_fee_rate must be 0%-10%, got {self.asset_management_fee_rate:.2%}"
            )
        if not 0 <= self.disposition_fee_rate <= 0.15:
            errors.append(
                f"disposition_fee_rate must be 0%-15%, got {self.disposition_fee_rate:.2%}"
            )

        # Operations
        if self.year1_noi is None:
            if self.gross_potential_rent <= 0:
                errors.append(
                    f"gross_potential_rent must be > 0, got {self.gross_potential_rent:,.0f}"
                )
            if not 0 <= self.vacancy_rate <= 0.50:
                errors.append(f"vacancy_rate must be 0%-50%, got {self.vacancy_rate:.2%}")
            if self.other_income < 0:
                errors.append(f"other_income must be >= 0, got {self.other_income:,.0f}")
            if not 0 <= self.operating_expense_ratio <= 1:
                errors.append(
                    f"operating_expense_ratio must be 0%-100%, got {self.operating_expense_ratio:.2%}"
                )
            for name in ("rent_growth_rate", "expense_growth_rate"):
                value = getattr(self, name)
                if not -0.10 <= value <= 0.20:
                    errors.append(f"{name} must be -10%-20%, got {value:.2%}")
        else:
            if self.year1_noi <= 0:
                errors.append(f"year1_noi must be > 0, got {self.year1_noi:,.0f}")
            if not -0.10 <= self.noi_growth_rate <= 0.20:
                errors.append(f"noi_growth_rate must be -10%-20%, got {self.noi_growth_rate:.2%}")

        # Capex
        if len(self.capex_draws) > self.hold_period_years:
            errors.append(
                f"capex_draws has {len(self.capex_draws)} entries for a "
                f"{self.hold_period_years}-year hold"
            )
        if any(draw < 0 for draw in self.capex_draws):
            errors.append("capex_draws must be >= 0")

        # Hold & exit
        if not 1 <= self.hold_period_years <= 15:
            errors.append(f"hold_period_years must be 1-15, got {self.hold_period_years}")
        if not 0.01 <= self.exit_cap_rate <= 0.20:
            errors.append(f"exit_cap_rate must be 1%-20%, got {self.exit_cap_rate:.2%}")

        # Equity must be positive for contributions and multiples to exist
        if self.purchase_price > 0 and self.total_equity <= 0:
            errors.append(
                f"total equity must be > 0 (loan of ${self.loan_principal:,.0f} covers "
                f"the ${self.total_capitalization:,.0f} capitalization)"
            )

        errors.extend(validate_tiers(self.waterfall_tiers))

        return errors

    def ensure_valid(self) -> "DealAssumptions":
        """Raise InvalidInputError listing every violation, or return self."""
        errors = self.validate()
        if errors:
            raise InvalidInputError(errors)
        return self


def validate_tiers(tiers: Tuple[WaterfallTier, ...]) -> list[str]:
    """Validate an ordered waterfall tier list.

    Returns:
        List of validation error messages. Empty if valid.
    """
    errors = []

    if not tiers:
        return ["waterfall must have at least one tier"]

    for position, tier in enumerate(tiers, 1):
        name = f"tier {position} ({tier.trigger.value})"

        if not 0 <= tier.lp_split <= 1 or not 0 <= tier.gp_split <= 1:
            errors.append(f"{name}: splits must be 0%-100%")
        split_sum = tier.lp_split + tier.gp_split
        if abs(split_sum - 1.0) > SPLIT_TOLERANCE:
            errors.append(f"{name}: LP and GP splits must sum to 100%, got {split_sum:.2%}")

        if tier.trigger == TierTrigger.PREFERRED_RETURN and not 0 <= tier.rate <= 0.20:
            errors.append(f"{name}: preferred return must be 0%-20%, got {tier.rate:.2%}")
        if tier.trigger == TierTrigger.IRR_HURDLE and not 0 <= tier.rate <= 0.50:
            errors.append(f"{name}: IRR hurdle must be 0%-50%, got {tier.rate:.2%}")

        # A tier that pays the LP back must give the LP some of the cash
        if tier.trigger in (TierTrigger.RETURN_OF_CAPITAL, TierTrigger.PREFERRED_RETURN):
            if tier.lp_split <= 0:
                errors.append(f"{name}: LP split must be > 0")
        if tier.trigger == TierTrigger.IRR_HURDLE and tier.lp_split <= 0:
            errors.append(f"{name}: LP split must be > 0 for the hurdle to be reachable")

    residual_positions = [
        i for i, tier in enumerate(tiers) if tier.trigger == TierTrigger.RESIDUAL
    ]
    if not residual_positions:
        errors.append("waterfall must end with a residual tier")
    elif len(residual_positions) > 1:
        errors.append("waterfall may only have one residual tier")
    elif residual_positions[0] != len(tiers) - 1:
        errors.append("residual tier must be the last tier")

    return errors


def default_assumptions() -> DealAssumptions:
    """Typical $5M multifamily syndication with the standard promote."""
    return DealAssumptions()

"""Adapter from the deal input form's field names to DealAssumptions.

The form speaks camelCase and percentages (6.5 for 6.5%). The engine speaks
snake_case and decimals. Tiers arrive either as the form's fixed tier
fields or as an explicit ``waterfallTiers`` list.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import InvalidInputError
from .deal import DealAssumptions, FeeBasis
from .waterfall import TierTrigger, WaterfallTier, build_tiers

# form field -> (DealAssumptions field, is_percent)
FIELD_MAP: Dict[str, Tuple[str, bool]] = {
    "purchasePrice": ("purchase_price", False),
    "closingCosts": ("closing_costs", False),
    "capexReserves": ("capex_reserves", False),
    "lpEquityPercent": ("lp_equity_share", True),
    "gpEquityPercent": ("gp_equity_share", True),
    "loanToValue": ("loan_to_value", True),
    "interestRate": ("interest_rate", True),
    "loanTermYears": ("loan_term_years", False),
    "amortizationYears": ("amortization_years", False),
    "acquisitionFeePercent": ("acquisition_fee_rate", True),
    "assetManagementFeePercent": ("asset_management_fee_rate", True),
    "grossPotentialRent": ("gross_potential_rent", False),
    "vacancyRate": ("vacancy_rate", True),
    "otherIncome": ("other_income", False),
    "operatingExpenseRatio": ("operating_expense_ratio", True),
    "rentGrowthRate": ("rent_growth_rate", True),
    "expenseGrowthRate": ("expense_growth_rate", True),
    "holdPeriodYears": ("hold_period_years", False),
    "exitCapRate": ("exit_cap_rate", True),
    "dispositionFeePercent": ("disposition_fee_rate", True),
}

# Fields that may be left out of the form
OPTIONAL_FIELDS: Dict[str, Tuple[str, bool]] = {
    "loanAmount": ("loan_amount", False),
    "year1Noi": ("year1_noi", False),
    "noiGrowthRate": ("noi_growth_rate", True),
}

# Rent build-up fields, not needed when the NOI shortcut is used
RENT_BUILDUP_FIELDS = {
    "grossPotentialRent",
    "vacancyRate",
    "otherIncome",
    "operatingExpenseRatio",
    "rentGrowthRate",
    "expenseGrowthRate",
}

INTEGER_FIELDS = {
    "loan_term_years",
    "amortization_years",
    "hold_period_years",
    "interest_only_years",
}

FIXED_TIER_FIELDS = (
    "preferredReturn",
    "tier1LpSplit",
    "tier1GpSplit",
    "tier2IrrHurdle",
    "tier2LpSplit",
    "tier2GpSplit",
    "tier3IrrHurdle",
    "tier3LpSplit",
    "tier3GpSplit",
)

TIER_TYPES = {
    "returnOfCapital": TierTrigger.RETURN_OF_CAPITAL,
    "preferredReturn": TierTrigger.PREFERRED_RETURN,
    "irrHurdle": TierTrigger.IRR_HURDLE,
    "residual": TierTrigger.RESIDUAL,
}


def _number(fields: Mapping[str, Any], key: str, errors: List[str]) -> Optional[float]:
    """Read a numeric field, recording a violation when missing or non-numeric."""
    if key not in fields or fields[key] is None:
        errors.append(f"{key} is required")
        return None
    return _as_number(key, fields[key], errors)


def _as_number(key: str, value: Any, errors: List[str]) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(f"{key} must be a number, got {value!r}")
        return None
    return float(value)


def _tiers_from_fixed_fields(
    fields: Mapping[str, Any],
    errors: List[str],
) -> Optional[Tuple[WaterfallTier, ...]]:
    values = {key: _number(fields, key, errors) for key in FIXED_TIER_FIELDS}
    if any(v is None for v in values.values()):
        return None
    return build_tiers(
        preferred_rate=values["preferredReturn"] / 100,
        first_split=(values["tier1LpSplit"] / 100, values["tier1GpSplit"] / 100),
        first_hurdle=values["tier2IrrHurdle"] / 100,
        second_split=(values["tier2LpSplit"] / 100, values["tier2GpSplit"] / 100),
        second_hurdle=values["tier3IrrHurdle"] / 100,
        final_split=(values["tier3LpSplit"] / 100, values["tier3GpSplit"] / 100),
    )


def _tiers_from_list(
    entries: List[Mapping[str, Any]],
    preferred_return: Optional[float],
    errors: List[str],
) -> Optional[Tuple[WaterfallTier, ...]]:
    tiers = []
    for position, entry in enumerate(entries, 1):
        prefix = f"waterfallTiers[{position}]"
        trigger = TIER_TYPES.get(entry.get("type"))
        if trigger is None:
            errors.append(
                f"{prefix}.type must be one of {sorted(TIER_TYPES)}, got {entry.get('type')!r}"
            )
            continue

        tier_errors: List[str] = []
        lp = _number(entry, "lpSplit", tier_errors)
        gp = _number(entry, "gpSplit", tier_errors)

        rate = 0.0
        if trigger == TierTrigger.IRR_HURDLE:
            key = "irrHurdle" if "irrHurdle" in entry else "rate"
            rate = _number(entry, key, tier_errors)
        elif trigger == TierTrigger.PREFERRED_RETURN:
            if entry.get("rate") is not None:
                rate = _number(entry, "rate", tier_errors)
            elif preferred_return is not None:
                rate = preferred_return
            else:
                tier_errors.append("rate is required (or set preferredReturn)")

        if tier_errors:
            errors.extend(f"{prefix}.{e}" for e in tier_errors)
            continue
        tiers.append(WaterfallTier(trigger, lp / 100, gp / 100, rate=(rate or 0.0) / 100))

    return tuple(tiers)


def from_form_fields(fields: Mapping[str, Any]) -> DealAssumptions:
    """Build DealAssumptions from the input form's fields.

    Fixed tier fields map to: pref at ``preferredReturn`` (100/0), return of
    capital (100/0), ``tier1`` split up to the ``tier2IrrHurdle``, ``tier2``
    split up to the ``tier3IrrHurdle``, and ``tier3`` split on the residual.

    Args:
        fields: Form values keyed by camelCase field name. Percentages are
            given as whole numbers (8 for 8%).

    Returns:
        DealAssumptions (not yet range-validated; call ensure_valid()).

    Raises:
        InvalidInputError: Listing every missing or malformed field.
    """
    errors: List[str] = []
    kwargs: Dict[str, Any] = {}

    uses_noi_shortcut = fields.get("year1Noi") is not None

    for key, (name, is_percent) in FIELD_MAP.items():
        if uses_noi_shortcut and key in RENT_BUILDUP_FIELDS and fields.get(key) is None:
            continue
        value = _number(fields, key, errors)
        if value is not None:
            kwargs[name] = value / 100 if is_percent else value

    for key, (name, is_percent) in OPTIONAL_FIELDS.items():
        if fields.get(key) is not None:
            value = _number(fields, key, errors)
            if value is not None:
                kwargs[name] = value / 100 if is_percent else value

    # Interest-only years only count when the interest-only toggle is on
    if fields.get("interestOnly"):
        io_years = _number(fields, "interestOnlyYears", errors)
        if io_years is not None:
            kwargs["interest_only_years"] = io_years
    else:
        kwargs["interest_only_years"] = 0

    for name in INTEGER_FIELDS:
        if name in kwargs:
            if kwargs[name] != int(kwargs[name]):
                errors.append(f"{name} must be a whole number of years, got {kwargs[name]}")
            kwargs[name] = int(kwargs[name])

    basis = fields.get("assetManagementFeeBasis")
    if basis is not None:
        try:
            kwargs["asset_management_fee_basis"] = FeeBasis(str(basis).lower())
        except ValueError:
            errors.append(f"assetManagementFeeBasis must be 'equity' or 'noi', got {basis!r}")

    draws = fields.get("capexDraws")
    if draws is not None:
        values = [_as_number(f"capexDraws[{i}]", d, errors) for i, d in enumerate(draws, 1)]
        if all(v is not None for v in values):
            kwargs["capex_draws"] = tuple(values)

    if fields.get("waterfallTiers") is not None:
        pref = None
        if fields.get("preferredReturn") is not None:
            pref = _number(fields, "preferredReturn", errors)
        tiers = _tiers_from_list(list(fields["waterfallTiers"]), pref, errors)
    else:
        tiers = _tiers_from_fixed_fields(fields, errors)
    if tiers is not None:
        kwargs["waterfall_tiers"] = tiers

    if errors:
        raise InvalidInputError(errors)

    return DealAssumptions(**kwargs)

"""Data models for the syndication engine."""

from .waterfall import (
    TierTrigger,
    WaterfallTier,
    WaterfallPreset,
    WATERFALL_PRESETS,
    return_of_capital,
    preferred_return,
    irr_hurdle,
    residual,
    build_tiers,
    get_waterfall_preset,
)
from .deal import (
    FeeBasis,
    DealAssumptions,
    default_assumptions,
    validate_tiers,
)
from .form import from_form_fields

__all__ = [
    "TierTrigger",
    "WaterfallTier",
    "WaterfallPreset",
    "WATERFALL_PRESETS",
    "return_of_capital",
    "preferred_return",
    "irr_hurdle",
    "residual",
    "build_tiers",
    "get_waterfall_preset",
    "FeeBasis",
    "DealAssumptions",
    "default_assumptions",
    "validate_tiers",
    "from_form_fields",
]

"""Syndication deal analysis: pro forma, LP/GP waterfall and returns."""

from .errors import (
    SyndicationError,
    InvalidInputError,
    UndefinedMetricError,
    ReconciliationError,
)
from .models import (
    DealAssumptions,
    FeeBasis,
    TierTrigger,
    WaterfallTier,
    default_assumptions,
    from_form_fields,
    get_waterfall_preset,
)
from .engine import SyndicationAnalysis, analyze_deal, analyze_form

__all__ = [
    "SyndicationError",
    "InvalidInputError",
    "UndefinedMetricError",
    "ReconciliationError",
    "DealAssumptions",
    "FeeBasis",
    "TierTrigger",
    "WaterfallTier",
    "default_assumptions",
    "from_form_fields",
    "get_waterfall_preset",
    "SyndicationAnalysis",
    "analyze_deal",
    "analyze_form",
]

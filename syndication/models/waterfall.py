"""Waterfall tier definitions and standard tier structures."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class TierTrigger(Enum):
    """What a waterfall tier absorbs cash until."""

    RETURN_OF_CAPITAL = "return_of_capital"  # LP unreturned capital is repaid
    PREFERRED_RETURN = "preferred_return"  # Accrued LP pref is paid
    IRR_HURDLE = "irr_hurdle"  # LP stream reaches the hurdle IRR
    RESIDUAL = "residual"  # Everything that is left


@dataclass(frozen=True)
class WaterfallTier:
    """One step of the distribution waterfall.

    Splits are decimals (0.8 = 80%) and must sum to 1.0. ``rate`` is the
    preferred return or hurdle IRR and is ignored for the other triggers.
    """

    trigger: TierTrigger
    lp_split: float
    gp_split: float
    rate: float = 0.0

    @property
    def label(self) -> str:
        """Short display name, e.g. "Pref 8.0%" or "Residual 50/50"."""
        split = f"{self.lp_split * 100:.0f}/{self.gp_split * 100:.0f}"
        if self.trigger == TierTrigger.RETURN_OF_CAPITAL:
            return f"Return of Capital {split}"
        if self.trigger == TierTrigger.PREFERRED_RETURN:
            return f"Pref {self.rate:.1%} {split}"
        if self.trigger == TierTrigger.IRR_HURDLE:
            return f"IRR Hurdle {self.rate:.1%} {split}"
        return f"Residual {split}"

    @property
    def is_outperformance(self) -> bool:
        """True for tiers whose GP share counts toward the promote."""
        return self.trigger in (TierTrigger.IRR_HURDLE, TierTrigger.RESIDUAL)


def return_of_capital(lp_split: float = 1.0, gp_split: float = 0.0) -> WaterfallTier:
    return WaterfallTier(TierTrigger.RETURN_OF_CAPITAL, lp_split, gp_split)


def preferred_return(rate: float, lp_split: float = 1.0, gp_split: float = 0.0) -> WaterfallTier:
    return WaterfallTier(TierTrigger.PREFERRED_RETURN, lp_split, gp_split, rate=rate)


def irr_hurdle(rate: float, lp_split: float, gp_split: float) -> WaterfallTier:
    return WaterfallTier(TierTrigger.IRR_HURDLE, lp_split, gp_split, rate=rate)


def residual(lp_split: float, gp_split: float) -> WaterfallTier:
    return WaterfallTier(TierTrigger.RESIDUAL, lp_split, gp_split)


@dataclass(frozen=True)
class WaterfallPreset:
    """A named promote structure.

    ``splits`` holds the (LP, GP) split above the pref, between the two
    hurdles, and above the second hurdle.
    """

    name: str
    first_hurdle: float
    second_hurdle: float
    splits: Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float]]


# Common syndication promote structures
WATERFALL_PRESETS: Dict[str, WaterfallPreset] = {
    "conservative": WaterfallPreset(
        name="Conservative (LP Favorable)",
        first_hurdle=0.15,
        second_hurdle=0.20,
        splits=((0.80, 0.20), (0.70, 0.30), (0.60, 0.40)),
    ),
    "standard": WaterfallPreset(
        name="Standard",
        first_hurdle=0.12,
        second_hurdle=0.18,
        splits=((0.70, 0.30), (0.60, 0.40), (0.50, 0.50)),
    ),
    "aggressive": WaterfallPreset(
        name="Aggressive (GP Favorable)",
        first_hurdle=0.10,
        second_hurdle=0.15,
        splits=((0.60, 0.40), (0.50, 0.50), (0.40, 0.60)),
    ),
}


def build_tiers(
    preferred_rate: float,
    first_split: Tuple[float, float],
    first_hurdle: float,
    second_split: Tuple[float, float],
    second_hurdle: float,
    final_split: Tuple[float, float],
) -> Tuple[WaterfallTier, ...]:
    """Build the standard five-step syndication waterfall.

    Pref is paid first, then LP capital, then profit is split at
    ``first_split`` until the LP reaches ``first_hurdle``, at
    ``second_split`` until ``second_hurdle``, and at ``final_split`` after.
    """
    return (
        preferred_return(preferred_rate),
        return_of_capital(),
        irr_hurdle(first_hurdle, *first_split),
        irr_hurdle(second_hurdle, *second_split),
        residual(*final_split),
    )


def get_waterfall_preset(name: str, preferred_rate: float = 0.08) -> Tuple[WaterfallTier, ...]:
    """Get the tier list for a named preset.

    Args:
        name: One of "conservative", "standard", "aggressive".
        preferred_rate: LP preferred return (e.g., 0.08).

    Returns:
        Ordered tuple of WaterfallTier.
    """
    try:
        preset = WATERFALL_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown waterfall preset: {name!r} (expected one of {sorted(WATERFALL_PRESETS)})"
        ) from None

    first, second, final = preset.splits
    return build_tiers(
        preferred_rate=preferred_rate,
        first_split=first,
        first_hurdle=preset.first_hurdle,
        second_split=second,
        second_hurdle=preset.second_hurdle,
        final_split=final,
    )

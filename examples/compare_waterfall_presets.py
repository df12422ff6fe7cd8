#!/usr/bin/env python3
"""Compare LP and GP returns across the waterfall presets.

Runs the default deal through the conservative, standard and aggressive
promote structures and prints how returns shift between LP and GP, with the
exit cap rate sensitivity for each.

Usage:
    python examples/compare_waterfall_presets.py
"""

import sys
from pathlib import Path
from dataclasses import replace

sys.path.insert(0, str(Path(__file__).parent.parent))

from syndication.calculations.sensitivity import SensitivityConfig
from syndication.engine import analyze_deal
from syndication.models.deal import default_assumptions
from syndication.models.waterfall import WATERFALL_PRESETS, get_waterfall_preset


def _pct(value):
    return "n/a" if value is None else f"{value:.2%}"


def main():
    """Compare the three waterfall presets on the default deal."""

    print("=" * 70)
    print("WATERFALL COMPARISON: Conservative vs Standard vs Aggressive")
    print("=" * 70)
    print()

    base = default_assumptions()
    results = {}

    for key, preset in WATERFALL_PRESETS.items():
        deal = replace(base, waterfall_tiers=get_waterfall_preset(key, preferred_rate=0.08))
        results[key] = analyze_deal(deal, SensitivityConfig(parallel=True))
        print(f"{preset.name}: hurdles {preset.first_hurdle:.0%} / {preset.second_hurdle:.0%}")
        for tier in deal.waterfall_tiers:
            print(f"  - {tier.label}")
        print()

    print(f"{'Preset':<14} {'LP IRR':>10} {'LP EM':>8} {'GP IRR':>10} {'GP EM':>8} {'Promote':>14}")
    print("-" * 70)
    for key, analysis in results.items():
        r = analysis.returns
        print(
            f"{key:<14} {_pct(r.lp_irr):>10} {r.lp_equity_multiple:>7.2f}x "
            f"{_pct(r.gp_irr):>10} {r.gp_equity_multiple:>7.2f}x ${r.gp_promote:>13,.0f}"
        )
    print()

    print("LP IRR by exit cap rate")
    print("-" * 70)
    caps = [p.exit_cap_rate for p in results["standard"].sensitivity]
    print(f"{'Preset':<14}" + "".join(f"{cap:>8.2%}" for cap in caps))
    for key, analysis in results.items():
        print(f"{key:<14}" + "".join(f"{_pct(p.returns.lp_irr):>8}" for p in analysis.sensitivity))
    print()


if __name__ == "__main__":
    main()

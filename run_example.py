#!/usr/bin/env python3
"""Example script to run the syndication model on the default deal."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from syndication.calculations.metrics import format_returns_table
from syndication.calculations.sensitivity import SensitivityConfig, format_sensitivity_table
from syndication.engine import SyndicationAnalysis, analyze_deal
from syndication.errors import InvalidInputError
from syndication.models.deal import default_assumptions
from syndication.models.waterfall import WATERFALL_PRESETS, get_waterfall_preset


def format_yearly_table(analysis: SyndicationAnalysis) -> str:
    """Format the year-by-year waterfall as a text table."""
    noi_by_year = {p.year: p.noi for p in analysis.cash_flows.projections}
    lines = [
        "=" * 60,
        "ANNUAL DISTRIBUTIONS",
        "=" * 60,
        "",
        f"{'Year':<6} {'NOI':>14} {'Cash':>14} {'LP':>12} {'GP':>12}",
        "-" * 60,
    ]
    for period in analysis.ledger.periods:
        marker = " *" if period.includes_liquidation else ""
        lines.append(
            f"{period.year:<6} ${noi_by_year[period.year]:>13,.0f} ${period.cash_available:>13,.0f} "
            f"${period.lp_amount:>11,.0f} ${period.gp_amount:>11,.0f}{marker}"
        )
    lines += ["-" * 60, "* includes sale proceeds", "=" * 60]
    return "\n".join(lines)


def run_default_deal(preset: str, parallel: bool, excel_path: str | None) -> None:
    """Analyze the default deal and print the results."""
    assumptions = default_assumptions()
    assumptions = replace(
        assumptions,
        waterfall_tiers=get_waterfall_preset(preset, preferred_rate=0.08),
    )

    print("\n" + "=" * 60)
    print("SYNDICATION WATERFALL MODEL")
    print(f"Waterfall: {WATERFALL_PRESETS[preset].name}")
    print("=" * 60 + "\n")

    for i, tier in enumerate(assumptions.waterfall_tiers, 1):
        print(f"  Tier {i}: {tier.label}")
    print()

    analysis = analyze_deal(assumptions, SensitivityConfig(parallel=parallel))

    print(format_returns_table(analysis.returns, analysis.metrics))
    print()
    print(format_yearly_table(analysis))
    print()
    print(format_sensitivity_table(analysis.sensitivity))

    if excel_path:
        from syndication.export.workbook import generate_analysis_excel

        Path(excel_path).write_bytes(generate_analysis_excel(analysis))
        print(f"\nWorkbook written to {excel_path}")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Syndication Waterfall Model")
    parser.add_argument(
        "--preset",
        choices=sorted(WATERFALL_PRESETS),
        default="standard",
        help="Waterfall promote structure",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Evaluate the sensitivity grid on worker threads",
    )
    parser.add_argument(
        "--excel",
        metavar="PATH",
        help="Write the analysis workbook to PATH",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log waterfall allocations and solver brackets",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run_default_deal(args.preset, args.parallel, args.excel)
    except InvalidInputError as exc:
        print(exc, file=sys.stderr)
        sys.exit(2)

    print("\nDone.")


if __name__ == "__main__":
    main()

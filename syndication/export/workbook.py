"""Excel export of a syndication analysis.

Writes the base-case returns, the annual cash flows, the tier-by-tier
waterfall ledger and the exit cap sensitivity grid to one workbook.
"""

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from ..calculations.sensitivity import sensitivity_to_dataframe
from ..engine import SyndicationAnalysis

MONEY_FORMAT = "$#,##0"
PERCENT_FORMAT = "0.00%"
MULTIPLE_FORMAT = '0.00"x"'


@dataclass
class WorkbookConfig:
    """Configuration for workbook generation."""
    include_cash_flows: bool = True
    include_ledger: bool = True
    include_sensitivity: bool = True
    deal_name: str = "Syndication Analysis"


HEADER_FILL = PatternFill(start_color="203864", end_color="203864", fill_type="solid")


def _write_header_row(ws, row: int, headers: Sequence[str], width: Optional[float] = None) -> int:
    """Write a white-on-navy header row, optionally sizing its columns; return next row."""
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.fill = HEADER_FILL
        cell.font = Font(color="FFFFFF", bold=True)
        cell.alignment = Alignment(horizontal="center", wrap_text=True)
        if width is not None:
            ws.column_dimensions[get_column_letter(col)].width = width
    return row + 1


def _write_title(ws, title: str, row: int, size: int = 13) -> int:
    ws.cell(row=row, column=1, value=title).font = Font(bold=True, size=size)
    return row + 1


def _write_value(ws, row: int, col: int, value, number_format: Optional[str]) -> None:
    cell = ws.cell(row=row, column=col, value=value)
    if number_format and value is not None:
        cell.number_format = number_format


def generate_analysis_excel(
    analysis: SyndicationAnalysis,
    config: Optional[WorkbookConfig] = None,
) -> bytes:
    """Generate an Excel workbook for an analysis.

    Args:
        analysis: Result of analyze_deal()
        config: Optional configuration for the workbook

    Returns:
        Excel file as bytes
    """
    if config is None:
        config = WorkbookConfig()

    wb = Workbook()
    wb.remove(wb.active)

    _create_summary_sheet(wb.create_sheet("Summary"), analysis, config)

    if config.include_cash_flows:
        _create_cash_flows_sheet(wb.create_sheet("Annual Cash Flows"), analysis)

    if config.include_ledger:
        _create_ledger_sheet(wb.create_sheet("Waterfall Ledger"), analysis)

    if config.include_sensitivity:
        _create_sensitivity_sheet(wb.create_sheet("Sensitivity"), analysis)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


def _create_summary_sheet(ws, analysis: SyndicationAnalysis, config: WorkbookConfig) -> None:
    """Create the summary sheet."""
    r = analysis.returns
    m = analysis.metrics
    cap = analysis.cash_flows.capitalization

    row = _write_title(ws, config.deal_name, 1, size=16)
    ws.cell(row=row, column=1, value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    row += 2

    row = _write_title(ws, "Capitalization", row)
    for label, value in [
        ("Purchase Price", cap.purchase_price),
        ("Closing Costs", cap.closing_costs),
        ("Capex Reserve", cap.capex_reserves),
        ("Acquisition Fee", cap.acquisition_fee),
        ("Total Capitalization", cap.total_capitalization),
        ("Loan Amount", cap.loan_amount),
        ("Total Equity", cap.total_equity),
    ]:
        ws.cell(row=row, column=1, value=label)
        _write_value(ws, row, 2, value, MONEY_FORMAT)
        row += 1
    row += 1

    row = _write_title(ws, "Returns", row)
    row = _write_header_row(ws, row, ["Metric", "LP", "GP"], width=18)

    for label, lp, gp, fmt in [
        ("Contribution", r.lp_contribution, r.gp_contribution, MONEY_FORMAT),
        ("Total Distributions", r.lp_total_distributions, r.gp_total_distributions, MONEY_FORMAT),
        ("IRR", r.lp_irr, r.gp_irr, PERCENT_FORMAT),
        ("Equity Multiple", r.lp_equity_multiple, r.gp_equity_multiple, MULTIPLE_FORMAT),
    ]:
        ws.cell(row=row, column=1, value=label)
        # Undefined IRR is written as text, never as 0%
        _write_value(ws, row, 2, lp if lp is not None else "n/a", fmt)
        _write_value(ws, row, 3, gp if gp is not None else "n/a", fmt)
        row += 1
    row += 1

    row = _write_title(ws, "Deal Metrics", row)
    for label, value, fmt in [
        ("Exit Price", r.exit_price, MONEY_FORMAT),
        ("GP Promote", r.gp_promote, MONEY_FORMAT),
        ("Total Project Profit", r.total_project_profit, MONEY_FORMAT),
        ("Going-in Cap Rate", m.going_in_cap_rate, PERCENT_FORMAT),
        ("Average Cash-on-Cash", m.average_cash_on_cash, PERCENT_FORMAT),
        ("Minimum DSCR", m.min_dscr, MULTIPLE_FORMAT),
        ("LP Preferred Return Paid", m.lp_preferred_return_paid, MONEY_FORMAT),
        ("Total Acquisition Fees", m.total_acquisition_fees, MONEY_FORMAT),
        ("Total Asset Management Fees", m.total_asset_management_fees, MONEY_FORMAT),
        ("LP IRR Rating", m.lp_irr_rating, None),
        ("LP Multiple Rating", m.lp_equity_multiple_rating, None),
    ]:
        ws.cell(row=row, column=1, value=label)
        _write_value(ws, row, 2, value if value is not None else "n/a", fmt)
        row += 1

    ws.column_dimensions["A"].width = 30


def _create_cash_flows_sheet(ws, analysis: SyndicationAnalysis) -> None:
    """Create the annual cash flow sheet."""
    row = _write_title(ws, "Annual Cash Flows", 1)
    row += 1

    headers = [
        "Year", "NOI", "Interest", "Principal", "Debt Service", "Asset Mgmt Fee",
        "Capex Draw", "Capex from Reserve", "Cash Available", "DSCR",
    ]
    row = _write_header_row(ws, row, headers, width=16)

    for p in analysis.cash_flows.projections:
        ws.cell(row=row, column=1, value=p.year)
        for col, value in enumerate([
            p.noi, p.interest, p.principal, p.debt_service, p.asset_management_fee,
            p.capex_draw, p.capex_funded_by_reserve, p.cash_available,
        ], 2):
            _write_value(ws, row, col, value, MONEY_FORMAT)
        _write_value(ws, row, 10, p.dscr, MULTIPLE_FORMAT)
        row += 1

    row += 1
    row = _write_title(ws, "Sale", row)
    liquidation = analysis.liquidation
    for label, value in [
        ("Forward NOI", liquidation.forward_noi),
        ("Sale Price", liquidation.sale_price),
        ("Disposition Fee", liquidation.disposition_fee),
        ("Loan Payoff", liquidation.loan_payoff),
        ("Net Sale Proceeds", liquidation.net_sale_proceeds),
        ("Reserve Release", analysis.cash_flows.reserve_release),
    ]:
        ws.cell(row=row, column=1, value=label)
        _write_value(ws, row, 2, value, MONEY_FORMAT)
        row += 1


def _create_ledger_sheet(ws, analysis: SyndicationAnalysis) -> None:
    """Create the waterfall ledger sheet, one row per year."""
    row = _write_title(ws, "Waterfall Ledger", 1)
    row += 1

    df = analysis.ledger.to_dataframe()
    row = _write_header_row(ws, row, list(df.columns), width=18)

    # Year and the sale flag are left unformatted; every other column is dollars
    plain = {"Year", "Includes Sale"}
    for values in dataframe_to_rows(df, index=False, header=False):
        for col, (header, value) in enumerate(zip(df.columns, values), 1):
            _write_value(ws, row, col, value, None if header in plain else MONEY_FORMAT)
        row += 1


def _create_sensitivity_sheet(ws, analysis: SyndicationAnalysis) -> None:
    """Create the exit cap sensitivity sheet."""
    row = _write_title(ws, "Exit Cap Rate Sensitivity", 1)
    row += 1

    df = sensitivity_to_dataframe(analysis.sensitivity)
    formats = [PERCENT_FORMAT, MONEY_FORMAT, PERCENT_FORMAT, MULTIPLE_FORMAT,
               PERCENT_FORMAT, MULTIPLE_FORMAT]

    row = _write_header_row(ws, row, list(df.columns), width=18)

    for record in df.itertuples(index=False):
        for col, (value, fmt) in enumerate(zip(record, formats), 1):
            if value is None or value != value:  # NaN from an undefined IRR
                ws.cell(row=row, column=col, value="n/a")
            else:
                _write_value(ws, row, col, float(value), fmt)
        row += 1

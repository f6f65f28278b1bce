#!/usr/bin/env python3
"""
Write the station revenue report workbook.

Sheets, in order:
  站点汇总 - station summary
  年度明细 - yearly detail
  月度明细 - monthly detail
"""

from pathlib import Path

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

SUMMARY_SHEET = '站点汇总'
YEARLY_SHEET = '年度明细'
MONTHLY_SHEET = '月度明细'

DEFAULT_OUTPUT_FILE = '站点年度和月度收益明细.xlsx'

HEADER_FONT = Font(bold=True)
NAME_COLUMN_WIDTH = 28
CODE_COLUMN_WIDTH = 16
VALUE_COLUMN_WIDTH = 20
NUMBER_FORMAT = '#,##0.00'


def _format_sheet(ws, column_count: int):
    """Bold header, frozen name/code columns, readable widths."""
    for cell in ws[1]:
        cell.font = HEADER_FONT

    ws.freeze_panes = 'C2'
    ws.column_dimensions['A'].width = NAME_COLUMN_WIDTH
    ws.column_dimensions['B'].width = CODE_COLUMN_WIDTH

    for column in range(3, column_count + 1):
        ws.column_dimensions[get_column_letter(column)].width = VALUE_COLUMN_WIDTH
        for row in ws.iter_rows(min_row=2, min_col=column, max_col=column):
            for cell in row:
                cell.number_format = NUMBER_FORMAT


def write_revenue_report(summary: pd.DataFrame, yearly: pd.DataFrame, monthly: pd.DataFrame,
                         output_path=DEFAULT_OUTPUT_FILE) -> Path:
    """Write the three report tables to one workbook. Errors while saving propagate."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = [
        (SUMMARY_SHEET, summary),
        (YEARLY_SHEET, yearly),
        (MONTHLY_SHEET, monthly),
    ]

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        for sheet_name, frame in sheets:
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
            _format_sheet(writer.sheets[sheet_name], len(frame.columns))
            print(f"  📄 {sheet_name}: {len(frame):,} stations, {len(frame.columns)} columns")

    return output_path

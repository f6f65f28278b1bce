#!/usr/bin/env python3
"""
Parse monthly settlement workbooks into per-station revenue records.

Each settlement file covers one month and is named like
"2021区域结算单(03.01-03.31).xlsx". Two sheets are read:

  收益每日明细  (daily detail)    - station names/codes and the total revenue row
  收益分项明细  (sub-item detail) - peak shaving, efficiency and other revenue rows

Revenue figures sit in fixed trailing rows, so everything here is
position based rather than header based.
"""

import re
import sys
from pathlib import Path
from typing import Dict, List, Tuple

import numpy as np
import openpyxl
import pandas as pd

from station_revenue.errors import (
    FilenameError,
    MissingSheetError,
    SettlementParseError,
    SheetLayoutError,
)

DAILY_SHEET = '收益每日明细'
SUB_ITEM_SHEET = '收益分项明细'

FILENAME_PATTERN = re.compile(r'(\d{4})区域结算单[(（](\d{2})')
NON_NUMERIC_PATTERN = re.compile(r'[^\d.\-]')

# Columns of the long per-station record table
RECORD_COLUMNS = [
    'Station_Code', 'Station_Name', 'Year', 'Month',
    'Total', 'Peak_Shaving', 'Efficiency', 'Other', 'Source_File',
]

# Sub-item rows counted from the bottom of the sheet
SUB_ITEM_ROWS = {
    'Peak_Shaving': -3,
    'Efficiency': -2,
    'Other': -1,
}
SUB_ITEM_FIRST_COLUMN = 3


def clean_revenue_value(value) -> float:
    """
    Convert a revenue cell to a float.

    Currency symbols, thousands separators and unit suffixes are dropped,
    so "¥1,234.56" becomes 1234.56. Empty cells count as zero. Raises
    ValueError when what is left is still not a number.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"Unexpected boolean revenue value: {value}")
    if isinstance(value, (int, float, np.number)):
        return 0.0 if pd.isna(value) else float(value)

    cleaned = NON_NUMERIC_PATTERN.sub('', str(value))
    # A bare dash is how accounting formats show zero
    if cleaned in ('', '-'):
        return 0.0
    # Only a leading minus sign is meaningful
    if '-' in cleaned[1:]:
        raise ValueError(f"Cannot parse revenue value: {value!r}")
    return float(cleaned)


def extract_year_month(file_path) -> Tuple[int, int]:
    """Extract (year, month) from a name like "2021区域结算单(03.01-03.31)"."""
    name = Path(file_path).name
    match = FILENAME_PATTERN.search(name)
    if not match:
        raise FilenameError(f"Cannot extract year and month from file name: {name}")

    year = int(match.group(1))
    month = int(match.group(2))
    if not 1 <= month <= 12:
        raise FilenameError(f"Invalid month {month:02d} in file name: {name}")
    return year, month


def _cell_text(value) -> str:
    """Normalise a label cell (station code or name) to a stripped string."""
    if value is None:
        return ''
    if isinstance(value, float):
        if np.isnan(value):
            return ''
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _sheet_rows(worksheet) -> List[list]:
    """
    Read all rows of a worksheet as value lists.

    Trailing empty cells are dropped from each row and trailing empty rows
    from the sheet, so rows[-1] is the last row holding data.
    """
    rows = []
    for row in worksheet.iter_rows(min_row=1, min_col=1, values_only=True):
        values = list(row)
        while values and (values[-1] is None or values[-1] == ''):
            values.pop()
        rows.append(values)

    while rows and not rows[-1]:
        rows.pop()
    return rows


def _station_codes(daily_rows: List[list]) -> List[str]:
    """Station codes from row 4 of the daily sheet, skipping the label column."""
    return [_cell_text(code) for code in daily_rows[3][1:]]


def process_daily_sheet(daily_rows: List[list]) -> Tuple[Dict[str, float], Dict[str, str]]:
    """
    Read total revenue per station from the daily detail sheet.

    Row 3 holds station names, row 4 station codes and the last row the
    monthly totals, all starting from the second column.
    """
    if len(daily_rows) < 4:
        raise SheetLayoutError(f"Daily sheet has {len(daily_rows)} rows, expected at least 4")

    station_names = daily_rows[2][1:]
    station_codes = _station_codes(daily_rows)
    summary_row = daily_rows[-1][1:]

    total_revenue = {}
    station_info = {}

    for i, code in enumerate(station_codes):
        if not code or i >= len(summary_row):
            continue
        try:
            revenue = clean_revenue_value(summary_row[i])
        except ValueError as e:
            print(f"  ⚠️  Skipping total for station {code}: {e}")
            continue
        total_revenue[code] = revenue
        station_info[code] = _cell_text(station_names[i]) if i < len(station_names) else ''

    return total_revenue, station_info


def process_sub_item_sheet(sub_item_rows: List[list], station_codes: List[str]) -> Dict[str, Dict[str, float]]:
    """
    Read peak shaving, efficiency and other revenue per station.

    The three categories are the last three rows of the sheet, starting at
    the fourth column and lined up by position with the daily sheet's codes.
    Missing or malformed cells leave the category out.
    """
    if len(sub_item_rows) < 5:
        raise SheetLayoutError(f"Sub-item sheet has {len(sub_item_rows)} rows, expected at least 5")

    category_rows = {
        category: sub_item_rows[offset][SUB_ITEM_FIRST_COLUMN:]
        for category, offset in SUB_ITEM_ROWS.items()
    }

    sub_items = {}
    for i, code in enumerate(station_codes):
        if not code:
            continue
        sub_items[code] = {}
        for category, row in category_rows.items():
            if i >= len(row):
                continue
            try:
                sub_items[code][category] = clean_revenue_value(row[i])
            except ValueError as e:
                print(f"  ⚠️  Skipping {category} for station {code}: {e}")

    return sub_items


def parse_settlement_file(file_path, daily_sheet: str = DAILY_SHEET,
                          sub_item_sheet: str = SUB_ITEM_SHEET) -> pd.DataFrame:
    """Parse one settlement workbook into one record per station."""
    file_path = Path(file_path)
    print(f"Processing: {file_path.name}")

    year, month = extract_year_month(file_path)
    print(f"  Settlement period: {year}-{month:02d}")

    wb = openpyxl.load_workbook(file_path, data_only=True)
    try:
        for sheet_name in (daily_sheet, sub_item_sheet):
            if sheet_name not in wb.sheetnames:
                raise MissingSheetError(f"Sheet '{sheet_name}' not found (available: {wb.sheetnames})")

        daily_rows = _sheet_rows(wb[daily_sheet])
        sub_item_rows = _sheet_rows(wb[sub_item_sheet])
    finally:
        wb.close()

    total_revenue, station_info = process_daily_sheet(daily_rows)
    sub_items = process_sub_item_sheet(sub_item_rows, _station_codes(daily_rows))

    records = []
    for code, revenue in total_revenue.items():
        items = sub_items.get(code, {})
        records.append({
            'Station_Code': code,
            'Station_Name': station_info.get(code, ''),
            'Year': year,
            'Month': month,
            'Total': revenue,
            'Peak_Shaving': items.get('Peak_Shaving', 0.0),
            'Efficiency': items.get('Efficiency', 0.0),
            'Other': items.get('Other', 0.0),
            'Source_File': file_path.name,
        })

    print(f"  Stations found: {len(records)}")
    return pd.DataFrame(records, columns=RECORD_COLUMNS)


def parse_all_settlement_files(source_dir='converted_files', daily_sheet: str = DAILY_SHEET,
                               sub_item_sheet: str = SUB_ITEM_SHEET) -> Tuple[pd.DataFrame, dict]:
    """
    Process every settlement workbook under source_dir (recursively).

    Files that cannot be parsed are reported and skipped. A missing input
    directory raises FileNotFoundError.
    """
    settlement_dir = Path(source_dir)
    if not settlement_dir.is_dir():
        raise FileNotFoundError(f"Settlement directory not found: {settlement_dir}")

    excel_files = sorted(path for path in settlement_dir.rglob('*.xlsx') if path.is_file())
    print(f"🔍 Found {len(excel_files)} Excel files to process\n")

    all_data = []
    report = {
        'processed_files': [],
        'skipped_files': [],
    }

    for file_path in excel_files:
        try:
            df = parse_settlement_file(file_path, daily_sheet, sub_item_sheet)
            if len(df) > 0:
                all_data.append(df)
                report['processed_files'].append(file_path.name)
                print(f"  ✅ Success: {len(df)} stations")
            else:
                report['skipped_files'].append((file_path.name, 'no station data'))
                print(f"  ⚠️  Skipping - no station data extracted")
        except SettlementParseError as e:
            report['skipped_files'].append((file_path.name, str(e)))
            print(f"  ⚠️  Skipping {file_path.name}: {e}")
        except Exception as e:
            report['skipped_files'].append((file_path.name, str(e)))
            print(f"  ❌ Error processing {file_path.name}: {e}")
        print()

    print(f"=== SUMMARY ===")
    print(f"Successfully processed: {len(report['processed_files'])} files")
    print(f"Skipped: {len(report['skipped_files'])} files")
    for name, reason in report['skipped_files']:
        print(f"  - {name}: {reason}")

    if all_data:
        combined_df = pd.concat(all_data, ignore_index=True)
        print(f"Total station records: {len(combined_df):,}")
    else:
        combined_df = pd.DataFrame(columns=RECORD_COLUMNS)
        print("No data was successfully extracted from any files.")

    return combined_df, report


if __name__ == "__main__":
    # Allow specifying source directory as command line argument
    source_dir = sys.argv[1] if len(sys.argv) > 1 else 'converted_files'
    parse_all_settlement_files(source_dir)

#!/usr/bin/env python3
"""
Aggregate per-station settlement records into report tables.

Produces three wide tables from the long record table built by
parse_settlement_files:
  - station summary (all-time totals per station)
  - yearly detail (four revenue columns per year)
  - monthly detail (four revenue columns per year/month)
"""

from typing import Dict, List, Tuple

import pandas as pd

NAME_HEADER = '站点名称'
CODE_HEADER = '站点编码'

CATEGORY_COLUMNS = ['Total', 'Peak_Shaving', 'Efficiency', 'Other']

CATEGORY_LABELS = {
    'Total': '总收益',
    'Peak_Shaving': '削峰填谷收益',
    'Efficiency': '效率提升收益',
    'Other': '其它收益',
}


def yearly_columns(years) -> List[str]:
    """Column headers for the yearly detail, four per year."""
    return [
        f"{int(year)}年{CATEGORY_LABELS[category]}"
        for year in years
        for category in CATEGORY_COLUMNS
    ]


def month_label(year, month) -> str:
    return f"{int(year)}年{int(month)}月"


def monthly_columns(year_months) -> List[str]:
    """Column headers for the monthly detail, four per (year, month)."""
    return [
        f"{month_label(year, month)}{CATEGORY_LABELS[category]}"
        for year, month in year_months
        for category in CATEGORY_COLUMNS
    ]


def build_station_names(df: pd.DataFrame) -> Dict[str, str]:
    """Map station code to display name; the first non-blank name seen wins."""
    names = {code: '' for code in df['Station_Code'].unique()}
    named = df[df['Station_Name'].fillna('') != '']
    first_seen = named.drop_duplicates(subset='Station_Code', keep='first')
    names.update(dict(zip(first_seen['Station_Code'], first_seen['Station_Name'])))
    return names


def sorted_station_codes(df: pd.DataFrame) -> List[str]:
    return sorted(df['Station_Code'].unique())


def sorted_years(df: pd.DataFrame) -> List[int]:
    return sorted(int(year) for year in df['Year'].unique())


def sorted_year_months(df: pd.DataFrame) -> List[Tuple[int, int]]:
    pairs = df[['Year', 'Month']].drop_duplicates()
    return sorted((int(year), int(month)) for year, month in pairs.itertuples(index=False))


def _station_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Leading name/code columns, one row per station in code order."""
    names = build_station_names(df)
    codes = sorted_station_codes(df)
    return pd.DataFrame({
        NAME_HEADER: [names[code] for code in codes],
        CODE_HEADER: codes,
    })


def build_station_summary(df: pd.DataFrame) -> pd.DataFrame:
    """All-time revenue per station, one column per category."""
    summary = _station_frame(df)
    if len(df) == 0:
        for category in CATEGORY_COLUMNS:
            summary[CATEGORY_LABELS[category]] = pd.Series(dtype=float)
        return summary

    totals = df.groupby('Station_Code')[CATEGORY_COLUMNS].sum()
    totals = totals.reindex(summary[CODE_HEADER])

    for category in CATEGORY_COLUMNS:
        summary[CATEGORY_LABELS[category]] = totals[category].to_numpy(dtype=float)

    return summary


def build_yearly_detail(df: pd.DataFrame) -> pd.DataFrame:
    """Revenue per station and year. Years without data for a station are 0."""
    detail = _station_frame(df)
    years = sorted_years(df)
    if not years:
        return detail

    yearly = df.groupby(['Station_Code', 'Year'])[CATEGORY_COLUMNS].sum()
    wide = yearly.unstack('Year')
    wide = wide.reindex(
        index=detail[CODE_HEADER],
        columns=pd.MultiIndex.from_tuples(
            [(category, year) for year in years for category in CATEGORY_COLUMNS]
        ),
    ).fillna(0.0)

    headers = yearly_columns(years)
    values = wide.to_numpy(dtype=float)
    for position, header in enumerate(headers):
        detail[header] = values[:, position]

    return detail


def build_monthly_detail(df: pd.DataFrame) -> pd.DataFrame:
    """
    Revenue per station, year and month.

    Months are taken from every file processed, so each station gets the
    same columns; months a station has no data for are left blank.
    """
    detail = _station_frame(df)
    year_months = sorted_year_months(df)
    if not year_months:
        return detail

    monthly = df.groupby(['Station_Code', 'Year', 'Month'])[CATEGORY_COLUMNS].sum()
    wide = monthly.unstack(['Year', 'Month'])
    wide = wide.reindex(
        index=detail[CODE_HEADER],
        columns=pd.MultiIndex.from_tuples(
            [(category, year, month) for year, month in year_months for category in CATEGORY_COLUMNS]
        ),
    )

    headers = monthly_columns(year_months)
    values = wide.to_numpy(dtype=float)
    for position, header in enumerate(headers):
        detail[header] = values[:, position]

    return detail

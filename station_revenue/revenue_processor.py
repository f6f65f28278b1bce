#!/usr/bin/env python3
"""
Station Revenue Processing System
=================================

Simple pipeline for turning a folder of monthly settlement workbooks into
one station revenue report:
1. Finds every settlement workbook in the input directory
2. Extracts per-station revenue from the daily and sub-item sheets
3. Aggregates revenue by station, year and month
4. Writes the summary workbook

Usage:
    processor = StationRevenueProcessor(base_dir=Path("."))
    processor.process(input_dir="converted_files")

Config File (settlement_config.json):
    {
      "input_dir": "converted_files",
      "output_file": "站点年度和月度收益明细.xlsx",
      "daily_sheet": "收益每日明细",
      "sub_item_sheet": "收益分项明细"
    }
"""

import json
from pathlib import Path
from typing import Optional

from station_revenue.parse_settlement_files import (
    DAILY_SHEET,
    SUB_ITEM_SHEET,
    parse_all_settlement_files,
)
from station_revenue.report_writer import DEFAULT_OUTPUT_FILE, write_revenue_report
from station_revenue.revenue_summary import (
    CATEGORY_LABELS,
    build_monthly_detail,
    build_station_summary,
    build_yearly_detail,
    sorted_year_months,
    sorted_years,
)

CONFIG_FILE = 'settlement_config.json'

DEFAULT_CONFIG = {
    'input_dir': 'converted_files',
    'output_file': DEFAULT_OUTPUT_FILE,
    'daily_sheet': DAILY_SHEET,
    'sub_item_sheet': SUB_ITEM_SHEET,
}


class StationRevenueProcessor:
    """Aggregate station revenue from a directory of settlement workbooks."""

    def __init__(self, base_dir: Path = Path("."), config_path: Optional[Path] = None):
        self.base_dir = Path(base_dir)
        self.config_path = Path(config_path) if config_path else self.base_dir / CONFIG_FILE
        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load settings from the config file, falling back to defaults."""
        config = dict(DEFAULT_CONFIG)
        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                overrides = json.load(f)
            unknown = set(overrides) - set(DEFAULT_CONFIG)
            if unknown:
                print(f"⚠️ Ignoring unknown config keys: {', '.join(sorted(unknown))}")
            config.update({key: value for key, value in overrides.items() if key in DEFAULT_CONFIG})
        return config

    def _resolve(self, path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.base_dir / path

    def process(self, input_dir=None, output_file=None) -> Optional[Path]:
        """Complete pipeline: parse, aggregate and write the report."""
        source_dir = self._resolve(input_dir or self.config['input_dir'])
        output_path = self._resolve(output_file or self.config['output_file'])

        print(f"🚀 STATION REVENUE PROCESSING PIPELINE")
        print(f"📁 Source: {source_dir}")
        print("=" * 60)

        # Step 1: Extract revenue from every settlement file
        records, report = parse_all_settlement_files(
            source_dir,
            daily_sheet=self.config['daily_sheet'],
            sub_item_sheet=self.config['sub_item_sheet'],
        )
        if len(records) == 0:
            print("❌ No station revenue extracted - report not written")
            return None

        # Step 2: Aggregate
        print(f"\n📊 AGGREGATING REVENUE")
        print("=" * 60)
        summary = build_station_summary(records)
        yearly = build_yearly_detail(records)
        monthly = build_monthly_detail(records)

        years = sorted_years(records)
        print(f"  Stations: {len(summary)}")
        print(f"  Years: {', '.join(str(year) for year in years)}")
        print(f"  Months: {len(sorted_year_months(records))}")
        print(f"  Total revenue: {summary[CATEGORY_LABELS['Total']].sum():,.2f}")

        # Step 3: Write report
        print(f"\n💾 WRITING REPORT")
        print("=" * 60)
        saved_path = write_revenue_report(summary, yearly, monthly, output_path)

        print(f"\n🎉 PIPELINE COMPLETED SUCCESSFULLY!")
        print(f"✅ {len(report['processed_files'])} files aggregated, {len(report['skipped_files'])} skipped")
        return saved_path


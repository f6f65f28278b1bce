#!/usr/bin/env python3
"""
Station Revenue Report - Main Entry Point
=========================================

Aggregates monthly settlement workbooks into a station revenue report.

Usage:
    python main.py                                       # Read ./converted_files
    python main.py --input-dir "D:/结算单/2021-2024"      # Custom input directory
    python main.py --output report.xlsx                  # Custom output workbook
    python main.py --config my_config.json               # Custom config file
    python main.py --help                                # Show all options

Processing Pipeline:
    1. Find every .xlsx file under the input directory
    2. Read year/month from names like "2021区域结算单(03.01-03.31).xlsx"
    3. Read station totals (收益每日明细) and revenue items (收益分项明细)
    4. Write 站点汇总 / 年度明细 / 月度明细 to 站点年度和月度收益明细.xlsx

Files that cannot be parsed are reported and skipped.

Config File (settlement_config.json, optional):
    {
      "input_dir": "converted_files",
      "output_file": "站点年度和月度收益明细.xlsx"
    }
"""

import sys
import argparse
from pathlib import Path

from station_revenue.revenue_processor import StationRevenueProcessor


def main(argv=None):
    """Main entry point."""

    parser = argparse.ArgumentParser(
        description="Station Revenue Report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument("--input-dir",
                        help="Directory of settlement workbooks (default: converted_files)")
    parser.add_argument("--output",
                        help="Report workbook to write (default: 站点年度和月度收益明细.xlsx)")
    parser.add_argument("--config", type=Path,
                        help="JSON config file (default: settlement_config.json)")

    args = parser.parse_args(argv)

    try:
        processor = StationRevenueProcessor(config_path=args.config)
        saved_path = processor.process(input_dir=args.input_dir, output_file=args.output)
    except OSError as e:
        print(f"❌ {e}")
        return 1

    if saved_path is None:
        return 1

    print(f"站点年度和月度收益明细已成功保存至 '{saved_path}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())

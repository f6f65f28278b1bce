"""Shared fixtures: build settlement workbooks laid out like the real monthly files."""

from pathlib import Path

import openpyxl
import pytest

from station_revenue.parse_settlement_files import DAILY_SHEET, SUB_ITEM_SHEET


def write_settlement_workbook(path, stations, totals, peak_shaving, efficiency, other,
                              daily_sheet=DAILY_SHEET, sub_item_sheet=SUB_ITEM_SHEET,
                              days=3):
    """
    Write a settlement workbook.

    stations is a list of (code, name) pairs; the revenue lists line up
    with it by position.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    codes = [code for code, _ in stations]
    names = [name for _, name in stations]

    wb = openpyxl.Workbook()
    wb.remove(wb.active)

    if daily_sheet:
        ws = wb.create_sheet(daily_sheet)
        ws.append(['收益每日明细'])
        ws.append(['日期'])
        ws.append(['站点名称'] + names)
        ws.append(['站点编码'] + codes)
        for day in range(1, days + 1):
            ws.append([f'{day:02d}日'] + [1.0] * len(codes))
        ws.append(['合计'] + list(totals))

    if sub_item_sheet:
        ws = wb.create_sheet(sub_item_sheet)
        ws.append(['收益分项明细'])
        ws.append(['项目', '单位', '备注'] + codes)
        ws.append(['充放电量', 'kWh', None] + [100] * len(codes))
        ws.append(['削峰填谷收益', '元', None] + list(peak_shaving))
        ws.append(['效率提升收益', '元', None] + list(efficiency))
        ws.append(['其他收益', '元', None] + list(other))

    wb.save(path)
    return path


@pytest.fixture
def make_settlement_file(tmp_path):
    """Factory writing settlement workbooks under tmp_path/converted_files."""
    def _make(name, stations, totals, peak_shaving, efficiency, other, **kwargs):
        return write_settlement_workbook(
            tmp_path / 'converted_files' / name,
            stations, totals, peak_shaving, efficiency, other, **kwargs
        )
    return _make

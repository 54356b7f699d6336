# tests/test_payroll_export.py
"""
Tests for the pay period tables and the Excel export.
"""

import io

import pytest
from openpyxl import load_workbook

from payroll_calc import DAY, NIGHT_A, NIGHT_B, calculate_pay_summary
from payroll_export import (
    create_shift_workbook,
    export_filename,
    shifts_dataframe,
    summary_dataframe,
    summary_rows,
    workbook_bytes,
)


@pytest.fixture
def period(shift_log):
    shift_log.add_shift("2024-01-12", "10", NIGHT_B)
    shift_log.add_shift("2024-01-10", "8", DAY)
    shift_log.add_shift("2024-01-11", "6", NIGHT_A)
    return shift_log


def test_shifts_dataframe_is_sorted_and_formatted(period):
    df = shifts_dataframe(period)

    assert list(df.columns) == ["Date", "Hours", "Shift Type"]
    assert list(df["Date"]) == ["01-10-24", "01-11-24", "01-12-24"]
    assert list(df["Hours"]) == [8.0, 6.0, 10.0]
    assert df["Shift Type"].iloc[0] == "☀️ Day Shift"


def test_shifts_dataframe_empty(shift_log):
    df = shifts_dataframe(shift_log)
    assert df.empty
    assert list(df.columns) == ["Date", "Hours", "Shift Type"]


def test_summary_rows_skip_categories_without_hours(shift_log, rates):
    shift_log.add_shift("2024-01-11", "6", NIGHT_A)
    rows = summary_rows(calculate_pay_summary(shift_log, rates), rates)

    assert [row["shift_type"] for row in rows] == [NIGHT_A]
    assert rows[0]["label"] == "Night Shift A"
    assert rows[0]["hours"] == 6
    assert rows[0]["rate"] == pytest.approx(120)
    assert rows[0]["pay"] == pytest.approx(720)


def test_summary_dataframe(period, rates):
    df = summary_dataframe(calculate_pay_summary(period, rates), rates)

    assert list(df["Category"]) == ["Day Shift", "Night Shift A", "Night Shift B"]
    assert list(df["Pay ($)"]) == [800.0, 720.0, 1275.0]


def test_workbook_layout(period, rates):
    wb = create_shift_workbook(period, rates)
    ws = wb.active

    assert ws.title == "Pay Period"
    assert ws["A1"].value == "Pay Period: 01-10-24 - 01-12-24"
    assert [c.value for c in ws[2]] == ["Date", "Shift Type", "Hours", "Rate ($/hr)", "Pay ($)"]
    assert [ws.cell(row=r, column=1).value for r in (3, 4, 5)] == ["01-10-24", "01-11-24", "01-12-24"]
    assert ws["B4"].value == "Night Shift A (7pm-3am)"
    assert ws["C5"].value == 10
    assert ws["D5"].value == pytest.approx(127.5)
    assert ws["E3"].value == "=C3*D3"
    assert ws["A6"].value == "TOTALS"
    assert ws["C6"].value == "=SUM(C3:C5)"
    assert ws["E6"].value == "=SUM(E3:E5)"


def test_workbook_without_shifts(shift_log, rates):
    ws = create_shift_workbook(shift_log, rates).active

    assert ws["A1"].value == "Pay Period: no shifts entered"
    assert ws["A3"].value == "TOTALS"
    assert ws["C3"].value == 0


def test_workbook_bytes_round_trip(period, rates):
    data = workbook_bytes(create_shift_workbook(period, rates))
    ws = load_workbook(io.BytesIO(data)).active

    assert ws["A6"].value == "TOTALS"


def test_export_filename(period):
    assert export_filename(period) == "physician_payroll_20240110_20240112.xlsx"


def test_export_filename_without_shifts(shift_log):
    assert export_filename(shift_log) == "physician_payroll.xlsx"

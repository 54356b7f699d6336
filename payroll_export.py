# payroll_export.py - Pay period tables and Excel export for the Physician Payroll Calculator

import io

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from payroll_calc import (
    DAY,
    NIGHT_A,
    NIGHT_B,
    SHIFT_TYPES,
    format_date,
    parse_hours,
    sort_shifts,
    to_calendar_date,
)

CURRENCY_FORMAT = '$#,##0.00'
NUMBER_FORMAT = '#,##0.0'
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def shifts_dataframe(shifts):
    """Sorted shifts as a table for on-screen display."""
    rows = []
    for shift in sort_shifts(shifts):
        rows.append({
            "Date": format_date(shift.date),
            "Hours": parse_hours(shift.hours),
            "Shift Type": shift.label,
        })
    return pd.DataFrame(rows, columns=["Date", "Hours", "Shift Type"])


def summary_rows(summary, rates):
    """
    Per-category summary lines, only for categories with hours.
    Each row carries hours, the effective hourly rate and the pay.
    """
    rows = []
    for shift_type in (DAY, NIGHT_A, NIGHT_B):
        hours = summary.hours_for(shift_type)
        if hours > 0:
            rows.append({
                "shift_type": shift_type,
                "label": SHIFT_TYPES[shift_type]["short_label"],
                "hours": hours,
                "rate": rates.rate_for(shift_type),
                "pay": summary.pay_for(shift_type),
            })
    return rows


def summary_dataframe(summary, rates):
    rows = [
        {
            "Category": row["label"],
            "Hours": row["hours"],
            "Rate ($/hr)": round(row["rate"], 2),
            "Pay ($)": round(row["pay"], 2),
        }
        for row in summary_rows(summary, rates)
    ]
    return pd.DataFrame(rows, columns=["Category", "Hours", "Rate ($/hr)", "Pay ($)"])


def period_bounds(shifts):
    """First and last shift dates, or (None, None) when there are no shifts."""
    dates = [to_calendar_date(s.date) for s in shifts]
    if not dates:
        return None, None
    return min(dates), max(dates)


def create_shift_workbook(shifts, rates):
    """Create Excel workbook with one row per shift and formula totals."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Pay Period"

    # Styles
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill("solid", fgColor="4472C4")
    night_fill = PatternFill("solid", fgColor="E4DFEC")  # Light purple for night shifts
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    headers = ["Date", "Shift Type", "Hours", "Rate ($/hr)", "Pay ($)"]
    date_col, type_col, hours_col, rate_col, pay_col = range(1, len(headers) + 1)

    # Row 1: Period header
    sorted_shifts = sort_shifts(shifts)
    start_date, end_date = period_bounds(sorted_shifts)
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(headers))
    period_cell = ws.cell(row=1, column=1)
    if start_date:
        period_cell.value = f"Pay Period: {format_date(start_date)} - {format_date(end_date)}"
    else:
        period_cell.value = "Pay Period: no shifts entered"
    period_cell.font = Font(bold=True, size=14)
    period_cell.alignment = Alignment(horizontal='center')

    # Row 2: Column headers
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=2, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
        cell.border = thin_border

    ws.column_dimensions['A'].width = 12
    ws.column_dimensions['B'].width = 26
    for col_idx in range(hours_col, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = 14

    data_start_row = 3
    for row_offset, shift in enumerate(sorted_shifts):
        row_idx = data_start_row + row_offset
        row_fill = night_fill if shift.shift_type in (NIGHT_A, NIGHT_B) else None
        info = SHIFT_TYPES.get(shift.shift_type, SHIFT_TYPES[DAY])

        values = {
            date_col: (format_date(shift.date), None),
            type_col: (info["label"], None),
            hours_col: (parse_hours(shift.hours), NUMBER_FORMAT),
            rate_col: (rates.rate_for(shift.shift_type), CURRENCY_FORMAT),
            # Pay = Hours * Rate
            pay_col: (
                f"={get_column_letter(hours_col)}{row_idx}*{get_column_letter(rate_col)}{row_idx}",
                CURRENCY_FORMAT,
            ),
        }
        for col, (value, number_format) in values.items():
            cell = ws.cell(row=row_idx, column=col, value=value)
            cell.border = thin_border
            if number_format:
                cell.number_format = number_format
            if row_fill:
                cell.fill = row_fill

    # Totals row
    last_data_row = data_start_row + len(sorted_shifts) - 1
    total_row = last_data_row + 1

    cell = ws.cell(row=total_row, column=1, value="TOTALS")
    cell.font = Font(bold=True)
    cell.border = thin_border

    for col in (hours_col, pay_col):
        col_letter = get_column_letter(col)
        if sorted_shifts:
            value = f"=SUM({col_letter}{data_start_row}:{col_letter}{last_data_row})"
        else:
            value = 0
        cell = ws.cell(row=total_row, column=col, value=value)
        cell.border = thin_border
        cell.font = Font(bold=True)
        if col == pay_col:
            cell.number_format = CURRENCY_FORMAT
            cell.fill = PatternFill("solid", fgColor="FFFF00")
        else:
            cell.number_format = NUMBER_FORMAT

    ws.row_dimensions[2].height = 30

    return wb


def workbook_bytes(wb):
    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer.getvalue()


def export_filename(shifts):
    start_date, end_date = period_bounds(shifts)
    if not start_date:
        return "physician_payroll.xlsx"
    return f"physician_payroll_{start_date.strftime('%Y%m%d')}_{end_date.strftime('%Y%m%d')}.xlsx"

# payroll_app.py - Physician Payroll Calculator (Streamlit)
#
# Run locally: streamlit run payroll_app.py

import dataclasses
import logging

import streamlit as st

from payroll_calc import (
    DEFAULT_FORM_HOURS,
    DEFAULT_FORM_SHIFT_TYPE,
    NIGHT_A,
    NIGHT_B,
    SHIFT_TYPES,
    ShiftLog,
    ShiftRecord,
    calculate_pay_summary,
    default_rates,
    format_date,
    submit_for_approval,
    update_rates,
)
from payroll_export import (
    XLSX_MIME,
    create_shift_workbook,
    export_filename,
    shifts_dataframe,
    summary_dataframe,
    summary_rows,
    workbook_bytes,
)

# Extension point for a future approval service: called with (shifts, summary)
APPROVAL_HOOK = None


# --- Helper Functions ---
def format_amount(value):
    """Show a number the way it was typed: 100 -> '100', 27.5 -> '27.5', blank -> ''."""
    if value is None:
        return ""
    return ("%f" % value).rstrip("0").rstrip(".")


def hours_text(value):
    """Hours are kept as entered text; a cleared field becomes ''."""
    if value is None:
        return ""
    return format_amount(value)


@st.cache_data(max_entries=64)
def get_pay_summary(shift_rows, base_rate, night_a_increase, night_b_increase):
    """Cached on plain values: (id, date, hours, shift_type) rows and the three rate fields."""
    shifts = [ShiftRecord(*row) for row in shift_rows]
    return calculate_pay_summary(shifts, update_rates(base_rate, night_a_increase, night_b_increase))


def reset_shift_form():
    st.session_state.form_date = None
    st.session_state.form_hours = float(DEFAULT_FORM_HOURS)
    st.session_state.form_shift_type = DEFAULT_FORM_SHIFT_TYPE


def add_shift_clicked():
    record = st.session_state.shift_log.add_shift(
        st.session_state.form_date,
        hours_text(st.session_state.form_hours),
        st.session_state.form_shift_type or DEFAULT_FORM_SHIFT_TYPE,
    )
    if record is not None:
        reset_shift_form()


def remove_shift_clicked(shift_id):
    st.session_state.shift_log.remove_shift(shift_id)


def start_editing_rates():
    rates = st.session_state.rates
    st.session_state.edit_base_rate = rates.base_rate
    st.session_state.edit_night_a_increase = rates.night_a_increase
    st.session_state.edit_night_b_increase = rates.night_b_increase
    st.session_state.editing_rates = True


def stop_editing_rates():
    st.session_state.editing_rates = False


def submit_clicked():
    submit_for_approval(st.session_state.shift_log, st.session_state.rates, hook=APPROVAL_HOOK)
    st.session_state.submit_clicks += 1


# Initialize session state
if 'shift_log' not in st.session_state:
    st.session_state.shift_log = ShiftLog()
if 'rates' not in st.session_state:
    st.session_state.rates = default_rates()
if 'editing_rates' not in st.session_state:
    st.session_state.editing_rates = False
if 'submit_clicks' not in st.session_state:
    st.session_state.submit_clicks = 0
if 'form_hours' not in st.session_state:
    reset_shift_form()

# --- Sidebar ---
st.sidebar.header("Options")

# Debug mode toggle
DEBUG_MODE = st.sidebar.checkbox("🐛 Enable Debug Mode", value=False, help="Show detailed debugging information")
logging.getLogger("payroll_calc").setLevel(logging.DEBUG if DEBUG_MODE else logging.WARNING)

# --- Main Title ---
st.title("Physician Payroll Calculator")
st.write("Enter your shifts for the current pay period")

# --- Rate Structure ---
with st.container(border=True):
    header_col, button_col = st.columns([4, 1])
    header_col.subheader("💲 Your Rate Structure")
    if not st.session_state.editing_rates:
        button_col.button("✏️ Edit Rates", key="edit_rates", on_click=start_editing_rates)
    else:
        button_col.button("✅ Done", key="done_rates", on_click=stop_editing_rates)

    if st.session_state.editing_rates:
        c1, c2, c3 = st.columns(3)
        base_rate = c1.number_input(
            "☀️ Base Rate ($/hour)", min_value=0.0, value=None, step=0.01, key="edit_base_rate"
        )
        night_a_increase = c2.number_input(
            "🌙 Night A % Increase (7pm-3am)", min_value=0.0, value=None, step=0.1, key="edit_night_a_increase"
        )
        night_b_increase = c3.number_input(
            "🌙 Night B % Increase (10pm-6am)", min_value=0.0, value=None, step=0.1, key="edit_night_b_increase"
        )
        st.session_state.rates = update_rates(base_rate, night_a_increase, night_b_increase)

    rates = st.session_state.rates
    if not st.session_state.editing_rates:
        c1, c2, c3 = st.columns(3)
        c1.markdown(f"☀️ Base Rate: **${format_amount(rates.base_rate)}/hour**")
        c2.markdown(
            f"🌙 Night A (7pm-3am): **+{format_amount(rates.night_a_increase)}%** "
            f"(${rates.rate_for(NIGHT_A):.2f}/hour)"
        )
        c3.markdown(
            f"🌙 Night B (10pm-6am): **+{format_amount(rates.night_b_increase)}%** "
            f"(${rates.rate_for(NIGHT_B):.2f}/hour)"
        )

# --- Shift Entry ---
with st.container(border=True):
    c1, c2, c3, c4 = st.columns(4)
    c1.date_input("Shift Date", value=None, format="MM/DD/YYYY", key="form_date")
    c2.number_input("Hours", min_value=0.0, value=None, step=0.5, placeholder="8", key="form_hours")
    c3.selectbox(
        "Shift Type",
        options=list(SHIFT_TYPES),
        index=None,
        format_func=lambda key: SHIFT_TYPES[key]["label"],
        key="form_shift_type",
    )
    c4.button("➕ Add Shift", key="add_shift", on_click=add_shift_clicked, type="primary")

shift_log = st.session_state.shift_log

# --- Shifts List ---
if len(shift_log) > 0:
    st.subheader("Your Shifts This Period")
    for shift in shift_log.sorted():
        c1, c2, c3, c4 = st.columns([2, 2, 4, 1])
        c1.write(f"📅 **{format_date(shift.date)}**")
        c2.write(f"{shift.hours} hours")
        c3.write(shift.label)
        c4.button("🗑️", key=f"remove_{shift.id}", on_click=remove_shift_clicked, args=(shift.id,), help="Remove shift")

# --- Pay Summary ---
summary = get_pay_summary(
    tuple(dataclasses.astuple(s) for s in shift_log),
    rates.base_rate,
    rates.night_a_increase,
    rates.night_b_increase,
)

with st.container(border=True):
    st.subheader("Pay Period Summary")
    for row in summary_rows(summary, rates):
        c1, c2 = st.columns([3, 1])
        c1.markdown(
            f"**{row['label']}** ({format_amount(row['hours'])}h × ${row['rate']:.2f})"
        )
        c2.markdown(f"**${row['pay']:.2f}**")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Total Hours", f"{summary.total_hours:.1f}")
    with col2:
        st.metric("Total Pay", f"${summary.total_pay:,.2f}")

if len(shift_log) > 0:
    st.button("Submit for Approval", key="submit_for_approval", on_click=submit_clicked, type="primary")

    wb = create_shift_workbook(shift_log, rates)
    st.sidebar.download_button(
        label="📥 Download Pay Period (Excel)",
        data=workbook_bytes(wb),
        file_name=export_filename(shift_log),
        mime=XLSX_MIME,
    )

if DEBUG_MODE:
    st.sidebar.write(f"🔍 **DEBUG: {len(shift_log)} shifts in log**")
    st.sidebar.json({
        "rates": dataclasses.asdict(rates),
        "summary": dataclasses.asdict(summary),
        "shifts": [dataclasses.asdict(s) for s in shift_log],
        "editing_rates": st.session_state.editing_rates,
        "submit_clicks": st.session_state.submit_clicks,
    })
    st.write("🔍 **DEBUG: Shifts as entered (sorted)**")
    st.dataframe(shifts_dataframe(shift_log), hide_index=True)
    st.write("🔍 **DEBUG: Category totals**")
    st.dataframe(summary_dataframe(summary, rates), hide_index=True)

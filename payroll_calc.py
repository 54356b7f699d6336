# payroll_calc.py - Shift, rate and pay calculations for the Physician Payroll Calculator

import datetime
import logging
import os
import re
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

# --- Constants ---
DAY = "day"
NIGHT_A = "nightA"
NIGHT_B = "nightB"

DEFAULT_BASE_RATE = 100.0
DEFAULT_NIGHT_A_INCREASE = 20.0
DEFAULT_NIGHT_B_INCREASE = 27.5

# Form defaults after a shift has been added
DEFAULT_FORM_DATE = ""
DEFAULT_FORM_HOURS = "8"
DEFAULT_FORM_SHIFT_TYPE = DAY

SHIFT_TYPES = {
    DAY: {"label": "Day Shift", "short_label": "Day Shift", "icon": "☀️"},
    NIGHT_A: {"label": "Night Shift A (7pm-3am)", "short_label": "Night Shift A", "icon": "🌙"},
    NIGHT_B: {"label": "Night Shift B (10pm-6am)", "short_label": "Night Shift B", "icon": "🌙"},
}

# Environment overrides for the starting rate structure
BASE_RATE_ENV = "PAYROLL_BASE_RATE"
NIGHT_A_INCREASE_ENV = "PAYROLL_NIGHT_A_INCREASE"
NIGHT_B_INCREASE_ENV = "PAYROLL_NIGHT_B_INCREASE"

# Leading numeric prefix, the way a browser number field is read back
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# --- Helper Functions ---
def parse_hours(value):
    """
    Parse user-entered hours into a float.
    Empty, missing or unparseable values count as 0 hours.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(0))
    # NaN never counts towards a total
    if number != number:
        return 0.0
    return number


def _as_amount(value):
    """Blank rate fields take part in arithmetic as zero."""
    return 0.0 if value is None else float(value)


def _is_blank(value):
    return value is None or (isinstance(value, str) and value == "")


def to_calendar_date(date_str):
    """Parse an ISO 'YYYY-MM-DD' string as a plain calendar date (no time zone)."""
    if isinstance(date_str, datetime.date):
        return date_str
    return datetime.date.fromisoformat(date_str)


def format_date(date_str):
    """
    Format an ISO calendar date as MM-DD-YY.
    The value is read as a calendar day, so the displayed day never shifts.
    Malformed input raises ValueError.
    """
    return to_calendar_date(date_str).strftime("%m-%d-%y")


# --- Rate Configuration ---
@dataclass(frozen=True)
class RateConfiguration:
    """Base hourly rate plus percentage premiums for the two night categories.

    Any field may be None while it is being edited; it is shown blank and
    counts as zero in calculations.
    """

    base_rate: Optional[float] = DEFAULT_BASE_RATE
    night_a_increase: Optional[float] = DEFAULT_NIGHT_A_INCREASE
    night_b_increase: Optional[float] = DEFAULT_NIGHT_B_INCREASE

    @property
    def night_a_multiplier(self):
        return 1 + _as_amount(self.night_a_increase) / 100

    @property
    def night_b_multiplier(self):
        return 1 + _as_amount(self.night_b_increase) / 100

    def multiplier_for(self, shift_type):
        if shift_type == NIGHT_A:
            return self.night_a_multiplier
        if shift_type == NIGHT_B:
            return self.night_b_multiplier
        return 1.0

    def rate_for(self, shift_type):
        """Effective hourly rate for a shift category."""
        return _as_amount(self.base_rate) * self.multiplier_for(shift_type)

    def replace(self, **changes):
        return replace(self, **changes)


def update_rates(base_rate, night_a_increase, night_b_increase):
    """Build a new rate configuration; the previous one is discarded."""
    return RateConfiguration(
        base_rate=base_rate,
        night_a_increase=night_a_increase,
        night_b_increase=night_b_increase,
    )


def _env_amount(environ, name, default):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        amount = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default
    if amount < 0:
        logger.warning("Ignoring %s=%r: negative, using %s", name, raw, default)
        return default
    return amount


def default_rates(environ=None):
    """
    Returns the starting rate structure.
    Defaults are 100 $/hr, +20% and +27.5%, each overridable from the environment.
    """
    if environ is None:
        environ = os.environ
    return RateConfiguration(
        base_rate=_env_amount(environ, BASE_RATE_ENV, DEFAULT_BASE_RATE),
        night_a_increase=_env_amount(environ, NIGHT_A_INCREASE_ENV, DEFAULT_NIGHT_A_INCREASE),
        night_b_increase=_env_amount(environ, NIGHT_B_INCREASE_ENV, DEFAULT_NIGHT_B_INCREASE),
    )


# --- Shift Log ---
@dataclass(frozen=True)
class ShiftRecord:
    id: int
    date: str
    hours: Union[str, float]
    shift_type: str = DAY

    @property
    def parsed_hours(self):
        return parse_hours(self.hours)

    @property
    def label(self):
        info = SHIFT_TYPES.get(self.shift_type, SHIFT_TYPES[DAY])
        return f"{info['icon']} {info['label']}"


def _now_millis():
    return int(time.time() * 1000)


@dataclass
class ShiftLog:
    """Shifts entered for the current pay period, in insertion order."""

    records: list = field(default_factory=list)
    clock: Callable[[], int] = field(default=_now_millis, repr=False, compare=False)

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def _next_id(self):
        shift_id = self.clock()
        if self.records:
            # Two adds in the same millisecond still get distinct ids
            shift_id = max(shift_id, max(r.id for r in self.records) + 1)
        return shift_id

    def add_shift(self, date, hours, shift_type=DAY):
        """
        Append a shift. Silently ignored unless both date and hours are filled in.
        Returns the new record, or None when nothing was added.
        """
        if _is_blank(date) or _is_blank(hours):
            logger.debug("Shift not added: date=%r hours=%r", date, hours)
            return None
        if isinstance(date, datetime.date):
            date = date.isoformat()
        record = ShiftRecord(id=self._next_id(), date=date, hours=hours, shift_type=shift_type)
        self.records = self.records + [record]
        logger.debug("Added shift %s", record)
        return record

    def remove_shift(self, shift_id):
        """Remove the shift with this id; unknown ids are ignored."""
        remaining = [r for r in self.records if r.id != shift_id]
        if len(remaining) == len(self.records):
            logger.debug("No shift with id %s to remove", shift_id)
            return False
        self.records = remaining
        return True

    def sorted(self):
        return sort_shifts(self.records)


def sort_shifts(shifts):
    """Shifts ordered oldest to newest; same-day shifts keep their entry order."""
    return sorted(shifts, key=lambda s: to_calendar_date(s.date))


# --- Pay Aggregator ---
@dataclass(frozen=True)
class PaySummary:
    day_hours: float = 0.0
    night_a_hours: float = 0.0
    night_b_hours: float = 0.0
    total_hours: float = 0.0
    day_pay: float = 0.0
    night_a_pay: float = 0.0
    night_b_pay: float = 0.0
    total_pay: float = 0.0

    def hours_for(self, shift_type):
        return {DAY: self.day_hours, NIGHT_A: self.night_a_hours, NIGHT_B: self.night_b_hours}[shift_type]

    def pay_for(self, shift_type):
        return {DAY: self.day_pay, NIGHT_A: self.night_a_pay, NIGHT_B: self.night_b_pay}[shift_type]


def calculate_pay_summary(shifts, rates):
    """
    Calculate hours and pay per shift category plus totals.
    Nothing is rounded here; rounding is left to display.
    """
    day_hours = 0.0
    night_a_hours = 0.0
    night_b_hours = 0.0

    for shift in shifts:
        hours = parse_hours(shift.hours)
        if shift.shift_type == NIGHT_A:
            night_a_hours += hours
        elif shift.shift_type == NIGHT_B:
            night_b_hours += hours
        else:
            # TODO: decide whether unknown categories should be rejected instead of paid as day shifts
            if shift.shift_type != DAY:
                logger.debug("Unknown shift type %r counted as day shift", shift.shift_type)
            day_hours += hours

    total_hours = day_hours + night_a_hours + night_b_hours

    base_rate = _as_amount(rates.base_rate)
    day_pay = day_hours * base_rate
    night_a_pay = night_a_hours * base_rate * rates.night_a_multiplier
    night_b_pay = night_b_hours * base_rate * rates.night_b_multiplier
    total_pay = day_pay + night_a_pay + night_b_pay

    return PaySummary(
        day_hours=day_hours,
        night_a_hours=night_a_hours,
        night_b_hours=night_b_hours,
        total_hours=total_hours,
        day_pay=day_pay,
        night_a_pay=night_a_pay,
        night_b_pay=night_b_pay,
        total_pay=total_pay,
    )


# --- Approval submission ---
def submit_for_approval(shifts, rates, hook=None):
    """
    Hand the current pay period to an approval hook.
    Without a hook this does nothing; no approval service exists yet.
    """
    if hook is None:
        logger.debug("Submit for approval pressed with no approval hook configured")
        return None
    shifts = list(shifts)
    return hook(shifts, calculate_pay_summary(shifts, rates))

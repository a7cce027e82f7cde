"""Period calculator.

Two windowing schemes exist and must not be mixed:

- ``billing_periods`` returns calendar-month windows. These select the
  readings behind every bill and rate-of-change figure.
- ``display_periods`` returns rolling N-day windows. These only label
  rate-of-change output and are never used to select readings.
"""

import re
from datetime import date, timedelta

from submeter.core.config import settings
from submeter.core.exceptions import InvalidInputError
from submeter.schemas.periods import BillingPeriods, DateWindow, DisplayPeriods

_YMD_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_end_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` end date, rejecting anything else."""
    if not isinstance(value, str) or not _YMD_PATTERN.match(value):
        raise InvalidInputError("Invalid end_date format. Use YYYY-MM-DD.")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInputError("Invalid end_date format. Use YYYY-MM-DD.") from exc


def _previous_month_window(first_of_month: date) -> DateWindow:
    """Full calendar month immediately before the month starting at ``first_of_month``."""
    last_day = first_of_month - timedelta(days=1)
    return DateWindow(start=last_day.replace(day=1), end=last_day)


def billing_periods(end: date) -> BillingPeriods:
    """Calendar billing windows for an end date.

    current: first day of the end date's month .. end date
    previous: the full preceding calendar month
    pre_previous: the full month before that
    """
    current = DateWindow(start=end.replace(day=1), end=end)
    previous = _previous_month_window(current.start)
    pre_previous = _previous_month_window(previous.start)
    return BillingPeriods(current=current, previous=previous, pre_previous=pre_previous)


def display_periods(end: date, window_days: int | None = None) -> DisplayPeriods:
    """Rolling display windows of ``window_days`` ending at ``end``."""
    days = settings.ROC_DISPLAY_WINDOW_DAYS if window_days is None else window_days
    if days < 1:
        raise InvalidInputError("Display window must be at least one day")

    current_start = end - timedelta(days=days - 1)
    previous_end = current_start - timedelta(days=1)
    previous_start = previous_end - timedelta(days=days - 1)
    return DisplayPeriods(
        current=DateWindow(start=current_start, end=end),
        previous=DateWindow(start=previous_start, end=previous_end),
        window_days=days,
    )


def format_window(window: DateWindow) -> str:
    """Render a window as ``start..end`` for error messages."""
    return f"{window.start.isoformat()}..{window.end.isoformat()}"

"""Period window schemas.

Calendar billing periods and rolling display periods deliberately have
different shapes so one cannot be passed where the other is expected.
"""

from datetime import date

from pydantic import BaseModel


class DateWindow(BaseModel):
    """Inclusive date window."""

    start: date
    end: date


class BillingPeriods(BaseModel):
    """Calendar-month aligned windows used to select readings."""

    current: DateWindow
    previous: DateWindow
    pre_previous: DateWindow


class DisplayPeriods(BaseModel):
    """Rolling windows used only to label output."""

    current: DateWindow
    previous: DateWindow
    window_days: int


class CalendarPeriod(BaseModel):
    """Current and previous calendar windows reported with a result."""

    current: DateWindow
    previous: DateWindow

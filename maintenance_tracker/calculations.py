"""Helper functions for service due calculations."""

from datetime import date
from dateutil.relativedelta import relativedelta
from typing import Optional

from .status import Status

DUE_SOON_FRACTION = 0.2
DUE_SOON_MIN_MILES = 1000


def calc_next_due_miles(
    last_miles: Optional[float], interval: float, current_miles: float
) -> float:
    """
    Calculate next due mileage.

    - With history: last_miles + interval
    - Without history: the next interval boundary strictly above current
      mileage, as if the vehicle had been serviced on schedule from zero
    - Non-positive interval without history: due now (current_miles)
    """
    if last_miles is not None:
        return last_miles + interval
    if interval <= 0:
        return current_miles
    return (current_miles // interval + 1) * interval


def due_soon_threshold(interval: float) -> float:
    """Miles before the due point at which a service becomes due soon."""
    return max(interval * DUE_SOON_FRACTION, DUE_SOON_MIN_MILES)


def check_status(miles_until_due: float, interval: float) -> Status:
    """Classify urgency from the signed distance to the due point."""
    if miles_until_due <= 0:
        return Status.OVERDUE
    if miles_until_due <= due_soon_threshold(interval):
        return Status.DUE_SOON
    return Status.UPCOMING


def calc_due_date(
    last_date: Optional[date], interval_months: Optional[float]
) -> Optional[date]:
    """Calculate next due date: last + interval months."""
    if interval_months is None or last_date is None:
        return None
    months = int(interval_months)
    days = int((interval_months - months) * 30)
    return last_date + relativedelta(months=months, days=days)

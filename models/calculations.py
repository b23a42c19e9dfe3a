"""Helper functions for service due calculations."""

import math
from datetime import datetime, timedelta
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from .status import Status

WARNING_KM = 500
WARNING_DAYS = 30


def calc_next_due_km(
    last_odometer: Optional[int],
    interval_km: Optional[int],
    current_odometer: int,
    explicit_target: Optional[int] = None,
) -> Optional[int]:
    """
    Calculate next due odometer.

    - With history: last_odometer + interval
    - Without history, explicit target set: the target, as-is
    - Without history, below first interval: the interval (first service from 0)
    - Without history otherwise: next multiple of the interval above current
      (assumes earlier services were done on schedule)
    """
    if last_odometer is not None:
        if not interval_km:
            return None
        return last_odometer + interval_km
    if explicit_target:
        return explicit_target
    if not interval_km:
        return None
    if current_odometer < interval_km:
        return interval_km
    return (current_odometer // interval_km + 1) * interval_km


def calc_next_due_date(
    last_date: Optional[datetime], interval_months: Optional[int]
) -> Optional[datetime]:
    """Calculate next due date: last + interval calendar months."""
    if not interval_months or last_date is None:
        return None
    return last_date + relativedelta(months=int(interval_months))


def calc_days_left(due: datetime, now: datetime) -> int:
    """Whole days until due, rounded up. Negative when past due."""
    return math.ceil((due - now) / timedelta(days=1))


def check_status(
    km_left: Optional[int], days_left: Optional[int], interval_months: Optional[int]
) -> Status:
    """Classify urgency. Danger takes precedence over warning."""
    if (km_left is not None and km_left < 0) or (
        days_left is not None and days_left < 0
    ):
        return Status.DANGER
    if km_left is not None and km_left <= WARNING_KM:
        return Status.WARNING
    if days_left is not None and days_left <= WARNING_DAYS and (interval_months or 0) > 0:
        return Status.WARNING
    return Status.OK


def status_sort_key(service_status) -> Tuple[int, float]:
    """Sort key: tier first, then km left ascending (missing km last)."""
    km_left = service_status.km_left
    return (
        service_status.status.value,
        km_left if km_left is not None else math.inf,
    )

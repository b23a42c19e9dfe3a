"""
Maintenance status calculator.

Given the current odometer, the service definitions and the service log
history, derive for every definition when it is next due and how urgent it
is. Results are ordered most urgent first:

- DANGER before WARNING before OK
- within a tier, fewest km left first

The calculation is pure: inputs are never mutated and the same inputs (with
the same ``now``) always give the same result.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .calculations import (
    calc_days_left,
    calc_next_due_date,
    calc_next_due_km,
    check_status,
    status_sort_key,
)
from .service_definition import ServiceDefinition
from .service_log import ServiceLog, as_utc
from .service_status import ServiceStatus
from .status import Status


@dataclass
class MaintenanceSummary:
    """Sorted statuses plus aggregate counts, recomputed together."""

    statuses: List[ServiceStatus] = field(default_factory=list)
    urgent_count: int = 0
    upcoming_count: int = 0

    @property
    def headline(self) -> Optional[ServiceStatus]:
        """The single most urgent item."""
        return self.statuses[0] if self.statuses else None

    @property
    def critical(self) -> List[ServiceStatus]:
        return [s for s in self.statuses if s.is_due]

    def to_dict(self) -> dict:
        return {
            "statuses": [s.to_dict() for s in self.statuses],
            "urgentCount": self.urgent_count,
            "upcomingCount": self.upcoming_count,
        }


def _log_rank(log: ServiceLog):
    # Highest odometer wins; ties go to the latest date, then the greatest id
    return (log.odometer, log.parsed_date, str(log.id))


def select_last_log(
    logs: Iterable[ServiceLog], service_id: str
) -> Optional[ServiceLog]:
    """Get the last performed log for a service (highest odometer)."""
    relevant = [
        log for log in logs
        if log.service_id == service_id and log.odometer is not None
    ]
    if not relevant:
        return None
    return max(relevant, key=_log_rank)


def calculate_service_status(
    definition: ServiceDefinition,
    logs: Iterable[ServiceLog],
    current_odometer: int,
    now: Optional[datetime] = None,
) -> ServiceStatus:
    """
    Calculate the due status of one service definition.

    Logic:
    - Has history: due at last odometer + intervalKm, and (if intervalMonths)
      at last date + intervalMonths
    - No history: due at the explicit target if programmed, else at the
      first interval or the next interval multiple above current;
      never time-gated
    """
    now = as_utc(now) if now else datetime.now(timezone.utc)
    current_odometer = current_odometer or 0
    last_log = select_last_log(logs, definition.id)

    next_due_date = None
    days_left = None

    if last_log is not None:
        next_due_km = calc_next_due_km(
            last_log.odometer, definition.interval_km, current_odometer
        )
        next_due_date = calc_next_due_date(
            last_log.parsed_date, definition.interval_months
        )
        if next_due_date is not None:
            days_left = calc_days_left(next_due_date, now)
    else:
        next_due_km = calc_next_due_km(
            None,
            definition.interval_km,
            current_odometer,
            explicit_target=definition.next_due_odometer,
        )

    km_left = next_due_km - current_odometer if next_due_km is not None else None
    status = check_status(km_left, days_left, definition.interval_months)

    return ServiceStatus(
        service_id=definition.id,
        name=definition.name,
        status=status,
        last_performed_date=last_log.date if last_log else None,
        last_performed_odometer=last_log.odometer if last_log else None,
        next_due_date=next_due_date.isoformat() if next_due_date else None,
        next_due_odometer=next_due_km,
        days_left=days_left,
        km_left=km_left,
    )


def calculate_maintenance(
    current_odometer: int,
    definitions: Iterable[ServiceDefinition],
    logs: Iterable[ServiceLog],
    now: Optional[datetime] = None,
) -> MaintenanceSummary:
    """Calculate and sort the status of every definition."""
    now = as_utc(now) if now else datetime.now(timezone.utc)
    logs = list(logs)
    statuses = sorted(
        (
            calculate_service_status(d, logs, current_odometer, now)
            for d in definitions
        ),
        key=status_sort_key,
    )
    return MaintenanceSummary(
        statuses=statuses,
        urgent_count=sum(1 for s in statuses if s.status == Status.DANGER),
        upcoming_count=sum(1 for s in statuses if s.status == Status.WARNING),
    )

"""ServiceStatus dataclass for calculated service status."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .status import Status

# Legacy value reported for days_left when no time-based trigger applies
NO_TIME_TRIGGER = 99999


@dataclass
class ServiceStatus:
    """Calculated due information for a service definition."""

    service_id: str
    name: str
    status: Status
    last_performed_date: Optional[str] = None
    last_performed_odometer: Optional[int] = None
    next_due_date: Optional[str] = None
    next_due_odometer: Optional[int] = None
    days_left: Optional[int] = None  # None = not time-gated
    km_left: Optional[int] = None  # None = km trigger disabled

    @property
    def is_due(self) -> bool:
        return self.status in (Status.DANGER, Status.WARNING)

    @property
    def never_performed(self) -> bool:
        return self.last_performed_odometer is None

    @property
    def days_left_value(self) -> int:
        """days_left with the NO_TIME_TRIGGER sentinel in place of None."""
        if self.days_left is None:
            return NO_TIME_TRIGGER
        return self.days_left

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape consumed by clients."""
        return {
            "serviceId": self.service_id,
            "name": self.name,
            "lastPerformedDate": self.last_performed_date,
            "lastPerformedOdometer": self.last_performed_odometer,
            "nextDueDate": self.next_due_date,
            "nextDueOdometer": self.next_due_odometer,
            "status": self.status.label,
            "daysLeft": self.days_left_value,
            "kmLeft": self.km_left,
        }

"""Status enum for maintenance urgency tiers."""

from enum import Enum


class Status(Enum):
    """Maintenance status tiers. Lower value = more urgent."""

    DANGER = 0  # Overdue by distance or time
    WARNING = 1
    OK = 2

    @property
    def label(self) -> str:
        return self.name.lower()

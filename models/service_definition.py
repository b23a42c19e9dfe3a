"""ServiceDefinition class for maintenance interval rules."""
from typing import Optional


class ServiceDefinition:
    """A maintenance rule: what to do and how often."""

    def __init__(
            self,
            id: str,
            name: str,
            interval_km: Optional[int] = None,
            interval_months: Optional[int] = 0,
            notes: Optional[str] = None,
            next_due_odometer: Optional[int] = None,
    ):
        self.id = id
        self.name = name
        self.interval_km = interval_km or 0
        self.interval_months = interval_months or 0
        self.notes = notes
        self.next_due_odometer = next_due_odometer

    @property
    def has_km_trigger(self) -> bool:
        return self.interval_km > 0

    @property
    def has_time_trigger(self) -> bool:
        return self.interval_months > 0

    @property
    def interval_label(self) -> str:
        """Human-readable interval, e.g. '5,000 km / 6 mo'."""
        parts = []
        if self.has_km_trigger:
            parts.append(f"{self.interval_km:,.0f} km")
        if self.has_time_trigger:
            parts.append(f"{self.interval_months} mo")
        return " / ".join(parts) if parts else "-"

    def __repr__(self) -> str:
        return f"ServiceDefinition(id={self.id!r}, name={self.name!r})"

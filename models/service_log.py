"""ServiceLog class for performed maintenance records."""
from datetime import datetime, timezone
from typing import Optional

from dateutil.parser import isoparse


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware datetime (naive values are UTC)."""
    return as_utc(isoparse(value))


class ServiceLog:
    """A record of maintenance actually performed."""

    def __init__(
            self,
            id: str,
            service_id: str,
            service_name: str,
            date: str,
            odometer: int,
            cost: float = 0,
            notes: str = "",
            receipt_photo: Optional[str] = None,
    ):
        self.id = id
        self.service_id = service_id
        # Snapshot of the definition name when the log was created
        self.service_name = service_name
        self.date = date
        self.odometer = odometer
        self.cost = cost
        self.notes = notes
        self.receipt_photo = receipt_photo

    @property
    def parsed_date(self) -> datetime:
        return parse_iso(self.date)

    def __repr__(self) -> str:
        return (
            f"ServiceLog(id={self.id!r}, service_id={self.service_id!r}, "
            f"odometer={self.odometer!r})"
        )

"""Vehicle class - the aggregate of settings, service rules and history."""

from datetime import datetime
from typing import List, Optional

from .fuel_log import FuelLog
from .fuel_stats import FuelStats, calc_fuel_efficiency, calc_fuel_stats
from .maintenance import MaintenanceSummary, calculate_maintenance, select_last_log
from .service_definition import ServiceDefinition
from .service_log import ServiceLog
from .vehicle_settings import VehicleSettings


class Vehicle:
    """Complete vehicle record with settings, service definitions and logs."""

    def __init__(
        self,
        settings: VehicleSettings,
        definitions: List[ServiceDefinition],
        service_logs: Optional[List[ServiceLog]] = None,
        fuel_logs: Optional[List[FuelLog]] = None,
    ):
        self.settings = settings
        self.definitions = definitions
        self.service_logs = service_logs or []
        self.fuel_logs = fuel_logs or []

    @property
    def current_odometer(self) -> int:
        return self.settings.current_odometer

    @property
    def last_service(self) -> Optional[ServiceLog]:
        """Get the most recent service log overall."""
        if not self.service_logs:
            return None
        return max(self.service_logs, key=lambda log: (log.parsed_date, log.odometer))

    @property
    def total_service_cost(self) -> float:
        return sum(log.cost or 0 for log in self.service_logs)

    def get_definition(self, service_id: str) -> Optional[ServiceDefinition]:
        """Find a definition by id."""
        for definition in self.definitions:
            if definition.id == service_id:
                return definition
        return None

    def get_logs_for_service(self, service_id: str) -> List[ServiceLog]:
        """Get all logs for a service, highest odometer first."""
        return sorted(
            (log for log in self.service_logs if log.service_id == service_id),
            key=lambda log: log.odometer,
            reverse=True,
        )

    def get_last_log(self, service_id: str) -> Optional[ServiceLog]:
        """Get the log that due calculations are based on."""
        return select_last_log(self.service_logs, service_id)

    def get_logs_sorted(
        self, sort_by: str = "date", reverse: bool = True
    ) -> List[ServiceLog]:
        """
        Get service logs sorted by specified field.

        Args:
            sort_by: "date", "odometer", or "service"
            reverse: If True, newest/highest first (default)
        """
        if sort_by == "date":
            return sorted(
                self.service_logs, key=lambda log: log.parsed_date, reverse=reverse
            )
        elif sort_by == "odometer":
            return sorted(
                self.service_logs, key=lambda log: log.odometer, reverse=reverse
            )
        elif sort_by == "service":
            return sorted(
                self.service_logs,
                key=lambda log: (log.service_name.lower(), log.parsed_date),
                reverse=reverse,
            )
        return list(self.service_logs)

    def get_all_service_status(
        self, now: Optional[datetime] = None
    ) -> MaintenanceSummary:
        """Calculate service status for all definitions."""
        return calculate_maintenance(
            self.current_odometer, self.definitions, self.service_logs, now
        )

    def fuel_efficiency(self) -> Optional[float]:
        """Efficiency over full-tank pairs, in the vehicle's unit system."""
        return calc_fuel_efficiency(self.fuel_logs, self.settings.unit_system)

    def fuel_stats(
        self, since: Optional[datetime] = None, until: Optional[datetime] = None
    ) -> FuelStats:
        """Spending and distance totals for fuel and service logs in a date range."""
        return calc_fuel_stats(
            self.fuel_logs,
            self.service_logs,
            self.settings.unit_system,
            since,
            until,
        )

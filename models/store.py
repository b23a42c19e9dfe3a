"""
Reactive maintenance store.

MaintenanceStore owns a Vehicle and is the only writer of its settings,
definitions and logs. Every change to the odometer, the service logs or the
definitions recomputes the maintenance summary synchronously, caches it,
publishes it to subscribers and then gives the notification trigger one
chance to fire.

Lists are replaced rather than mutated in place, so a summary or list handed
out earlier never changes underneath its holder.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .defaults import default_definitions
from .fuel_log import FuelLog
from .maintenance import MaintenanceSummary, calculate_maintenance
from .service_definition import ServiceDefinition
from .service_log import ServiceLog, parse_iso
from .service_status import ServiceStatus
from .vehicle import Vehicle
from .vehicle_settings import VehicleSettings

logger = logging.getLogger(__name__)

Subscriber = Callable[[MaintenanceSummary], None]


class NotFoundError(KeyError):
    """Raised when an id does not match any stored record."""


def _newest_first(logs):
    return sorted(logs, key=lambda log: parse_iso(log.date), reverse=True)


class MaintenanceStore:
    """Holds vehicle state and republishes maintenance status on change."""

    def __init__(
        self,
        vehicle: Vehicle,
        notifier=None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.vehicle = vehicle
        self.notifier = notifier
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._subscribers: List[Subscriber] = []
        self.summary = self._compute(self.clock())

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for new summaries. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _compute(self, now: datetime) -> MaintenanceSummary:
        return calculate_maintenance(
            self.vehicle.current_odometer,
            self.vehicle.definitions,
            self.vehicle.service_logs,
            now,
        )

    def recompute(self) -> MaintenanceSummary:
        """Recalculate, publish to subscribers and run the notification trigger."""
        now = self.clock()
        self.summary = self._compute(now)
        logger.debug(
            "Recomputed %d statuses (%d urgent, %d upcoming)",
            len(self.summary.statuses),
            self.summary.urgent_count,
            self.summary.upcoming_count,
        )
        for callback in list(self._subscribers):
            callback(self.summary)
        if self.notifier is not None:
            self.notifier.maybe_notify(self.summary.statuses, now)
        return self.summary

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def statuses(self) -> List[ServiceStatus]:
        return self.summary.statuses

    @property
    def urgent_count(self) -> int:
        return self.summary.urgent_count

    @property
    def upcoming_count(self) -> int:
        return self.summary.upcoming_count

    def status_for(self, service_id: str) -> Optional[ServiceStatus]:
        for status in self.summary.statuses:
            if status.service_id == service_id:
                return status
        return None

    def logs_for_service(self, service_id: str) -> List[ServiceLog]:
        return self.vehicle.get_logs_for_service(service_id)

    # -------------------------------------------------------------------------
    # Vehicle settings
    # -------------------------------------------------------------------------

    def update_vehicle(self, settings: VehicleSettings) -> None:
        """Replace vehicle settings. Recomputes only if the odometer changed."""
        changed = settings.current_odometer != self.vehicle.current_odometer
        self.vehicle.settings = settings
        if changed:
            self.recompute()

    def set_current_odometer(self, odometer: int) -> None:
        if odometer < 0:
            raise ValueError(f"Odometer cannot be negative: {odometer}")
        if odometer == self.vehicle.current_odometer:
            return
        self.vehicle.settings.current_odometer = odometer
        self.recompute()

    def _advance_odometer(self, odometer: Optional[int]) -> None:
        if odometer is not None and odometer > self.vehicle.current_odometer:
            logger.debug(
                "Advancing odometer %s -> %s", self.vehicle.current_odometer, odometer
            )
            self.vehicle.settings.current_odometer = odometer

    # -------------------------------------------------------------------------
    # Service logs
    # -------------------------------------------------------------------------

    def _find_service_log(self, log_id: str) -> int:
        for i, log in enumerate(self.vehicle.service_logs):
            if log.id == log_id:
                return i
        raise NotFoundError(f"Service log '{log_id}' not found")

    def add_service_log(self, log: ServiceLog) -> None:
        """Record a performed service, advancing the odometer if it is higher."""
        self.vehicle.service_logs = _newest_first([log, *self.vehicle.service_logs])
        self._advance_odometer(log.odometer)
        self.recompute()

    def update_service_log(self, log: ServiceLog) -> None:
        index = self._find_service_log(log.id)
        logs = list(self.vehicle.service_logs)
        logs[index] = log
        self.vehicle.service_logs = _newest_first(logs)
        self.recompute()

    def delete_service_log(self, log_id: str) -> None:
        self._find_service_log(log_id)
        self.vehicle.service_logs = [
            log for log in self.vehicle.service_logs if log.id != log_id
        ]
        self.recompute()

    # -------------------------------------------------------------------------
    # Fuel logs
    # -------------------------------------------------------------------------

    def _find_fuel_log(self, log_id: str) -> int:
        for i, log in enumerate(self.vehicle.fuel_logs):
            if log.id == log_id:
                return i
        raise NotFoundError(f"Fuel log '{log_id}' not found")

    def add_fuel_log(self, log: FuelLog) -> None:
        """Record a fill-up; only recomputes when it advances the odometer."""
        self.vehicle.fuel_logs = _newest_first([log, *self.vehicle.fuel_logs])
        if log.odometer is not None and log.odometer > self.vehicle.current_odometer:
            self._advance_odometer(log.odometer)
            self.recompute()

    def update_fuel_log(self, log: FuelLog) -> None:
        index = self._find_fuel_log(log.id)
        logs = list(self.vehicle.fuel_logs)
        logs[index] = log
        self.vehicle.fuel_logs = _newest_first(logs)

    def delete_fuel_log(self, log_id: str) -> None:
        self._find_fuel_log(log_id)
        self.vehicle.fuel_logs = [
            log for log in self.vehicle.fuel_logs if log.id != log_id
        ]

    # -------------------------------------------------------------------------
    # Service definitions
    # -------------------------------------------------------------------------

    def add_definition(self, definition: ServiceDefinition) -> None:
        if self.vehicle.get_definition(definition.id) is not None:
            raise ValueError(f"Service '{definition.id}' already exists")
        self.vehicle.definitions = [*self.vehicle.definitions, definition]
        self.recompute()

    def update_definition(self, definition: ServiceDefinition) -> None:
        if self.vehicle.get_definition(definition.id) is None:
            raise NotFoundError(f"Service '{definition.id}' not found")
        self.vehicle.definitions = [
            definition if d.id == definition.id else d
            for d in self.vehicle.definitions
        ]
        self.recompute()

    def delete_definition(self, service_id: str) -> int:
        """
        Delete a definition and every log that references it.

        Returns the number of logs removed.
        """
        if self.vehicle.get_definition(service_id) is None:
            raise NotFoundError(f"Service '{service_id}' not found")
        kept = [log for log in self.vehicle.service_logs if log.service_id != service_id]
        removed = len(self.vehicle.service_logs) - len(kept)
        self.vehicle.service_logs = kept
        self.vehicle.definitions = [
            d for d in self.vehicle.definitions if d.id != service_id
        ]
        logger.info("Deleted service %s and %d log(s)", service_id, removed)
        self.recompute()
        return removed

    def replace_definitions(self, definitions: List[ServiceDefinition]) -> None:
        self.vehicle.definitions = list(definitions)
        self.recompute()

    def reset_services_to_default(self) -> None:
        self.replace_definitions(default_definitions())

    def reset_all(self) -> None:
        """Clear logs and settings (keeping the theme) and restore default services."""
        theme = self.vehicle.settings.theme
        self.vehicle.settings = VehicleSettings(theme=theme)
        self.vehicle.service_logs = []
        self.vehicle.fuel_logs = []
        self.vehicle.definitions = default_definitions()
        self.recompute()

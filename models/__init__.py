"""
Vehicle maintenance tracking models.

This package provides data models for tracking vehicle maintenance:
- Status: Urgency tiers (DANGER, WARNING, OK)
- ServiceDefinition: Maintenance interval rules
- ServiceLog / FuelLog: Performed services and fill-ups
- VehicleSettings: Vehicle identification and odometer
- ServiceStatus: Calculated service status
- FuelStats: Fuel economy and spending totals
- Vehicle: Aggregate combining all data
- MaintenanceStore: Reactive store that recomputes status on change
"""

from .status import Status
from .vehicle_settings import UnitSystem, VehicleSettings
from .service_definition import ServiceDefinition
from .service_log import ServiceLog, as_utc, parse_iso
from .fuel_log import FuelLog
from .service_status import NO_TIME_TRIGGER, ServiceStatus
from .calculations import (
    calc_next_due_km,
    calc_next_due_date,
    calc_days_left,
    check_status,
    status_sort_key,
)
from .maintenance import (
    MaintenanceSummary,
    calculate_maintenance,
    calculate_service_status,
    select_last_log,
)
from .fuel_stats import FuelStats, calc_efficiency, calc_fuel_efficiency, calc_fuel_stats
from .vehicle import Vehicle
from .defaults import PREDEFINED_SERVICES, default_definitions, generate_id
from .loader import (
    load_vehicle,
    save_vehicle,
    create_vehicle,
    delete_vehicle,
    load_last_notified,
    save_last_notified,
)
from .notifications import (
    Notification,
    NotificationError,
    NotificationTrigger,
    MemoryTimestampStore,
    YamlTimestampStore,
    ConsoleSender,
    LogSender,
    build_notification,
)
from .store import MaintenanceStore, NotFoundError

__all__ = [
    "Status",
    "UnitSystem",
    "VehicleSettings",
    "ServiceDefinition",
    "ServiceLog",
    "as_utc",
    "parse_iso",
    "FuelLog",
    "NO_TIME_TRIGGER",
    "ServiceStatus",
    "calc_next_due_km",
    "calc_next_due_date",
    "calc_days_left",
    "check_status",
    "status_sort_key",
    "MaintenanceSummary",
    "calculate_maintenance",
    "calculate_service_status",
    "select_last_log",
    "FuelStats",
    "calc_efficiency",
    "calc_fuel_efficiency",
    "calc_fuel_stats",
    "Vehicle",
    "PREDEFINED_SERVICES",
    "default_definitions",
    "generate_id",
    "load_vehicle",
    "save_vehicle",
    "create_vehicle",
    "delete_vehicle",
    "load_last_notified",
    "save_last_notified",
    "Notification",
    "NotificationError",
    "NotificationTrigger",
    "MemoryTimestampStore",
    "YamlTimestampStore",
    "ConsoleSender",
    "LogSender",
    "build_notification",
    "MaintenanceStore",
    "NotFoundError",
]

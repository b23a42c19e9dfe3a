"""YAML loading and saving utilities for vehicle data."""

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .defaults import default_definitions
from .fuel_log import FuelLog
from .service_definition import ServiceDefinition
from .service_log import ServiceLog, parse_iso
from .vehicle import Vehicle
from .vehicle_settings import UnitSystem, VehicleSettings


def _parse_unit_system(value: Optional[str]) -> UnitSystem:
    try:
        return UnitSystem(value)
    except ValueError:
        return UnitSystem.KM_GAL


def _parse_object(
    dct: Dict[str, Any]
) -> Union[VehicleSettings, ServiceDefinition, ServiceLog, FuelLog, Vehicle, dict]:
    """Parse dictionary into appropriate object type."""
    # Service log
    if "serviceId" in dct and "odometer" in dct:
        return ServiceLog(
            dct["id"],
            dct["serviceId"],
            dct.get("serviceName") or "",
            dct["date"],
            dct["odometer"],
            dct.get("cost") or 0,
            dct.get("notes") or "",
            dct.get("receiptPhoto"),
        )
    # Fuel log
    elif "volume" in dct and "odometer" in dct:
        return FuelLog(
            dct["id"],
            dct["date"],
            dct["odometer"],
            dct["volume"],
            dct.get("pricePerUnit") or 0,
            dct.get("totalCost") or 0,
            dct.get("fuelType"),
            dct.get("isFullTank", True),
            dct.get("receiptPhoto"),
        )
    # Service definition
    elif "id" in dct and "name" in dct and (
        "intervalKm" in dct or "intervalMonths" in dct
    ):
        return ServiceDefinition(
            dct["id"],
            dct["name"],
            dct.get("intervalKm"),
            dct.get("intervalMonths"),
            dct.get("notes"),
            dct.get("nextDueOdometer"),
        )
    # Vehicle settings (inside 'vehicle' key)
    elif "currentOdometer" in dct or ("brand" in dct and "model" in dct):
        return VehicleSettings(
            dct.get("brand") or "",
            dct.get("model") or "",
            str(dct.get("year") or ""),
            dct.get("plate") or "",
            dct.get("currentOdometer") or 0,
            dct.get("fuelType") or "Gasoline",
            dct.get("oilTypeEngine") or "",
            dct.get("oilTypeTransmission") or "",
            _parse_unit_system(dct.get("unitSystem")),
            dct.get("theme") or "dark",
            dct.get("photoUrl"),
        )
    # Top-level vehicle object
    elif isinstance(dct.get("vehicle"), VehicleSettings):
        services = dct.get("services")
        return Vehicle(
            dct["vehicle"],
            services if services is not None else default_definitions(),
            dct.get("serviceLogs"),
            dct.get("fuelLogs"),
        )
    else:
        # Return dict as-is for unknown structures (like 'state')
        return dct


def _read_yaml(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_yaml(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def load_vehicle(filename: Union[str, Path]) -> Vehicle:
    """Load a vehicle from a YAML file."""
    with open(filename, "rb") as fp:
        # Unquoted YAML dates load as date objects; keep them as ISO strings
        json_data = json.dumps(
            yaml.load(fp, Loader=yaml.SafeLoader), indent=4, default=str
        )
        return json.loads(json_data, object_hook=_parse_object)


# =============================================================================
# Serialization (camelCase keys, None values omitted)
# =============================================================================


def _settings_to_dict(settings: VehicleSettings) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "brand": settings.brand,
        "model": settings.model,
        "year": settings.year,
        "plate": settings.plate,
        "currentOdometer": settings.current_odometer,
        "fuelType": settings.fuel_type,
        "oilTypeEngine": settings.oil_type_engine,
        "oilTypeTransmission": settings.oil_type_transmission,
        "unitSystem": settings.unit_system.value,
        "theme": settings.theme,
    }
    if settings.photo_url is not None:
        d["photoUrl"] = settings.photo_url
    return d


def definition_to_dict(definition: ServiceDefinition) -> Dict[str, Any]:
    """Serialize a ServiceDefinition to the YAML dict format."""
    d: Dict[str, Any] = {
        "id": definition.id,
        "name": definition.name,
        "intervalKm": definition.interval_km,
        "intervalMonths": definition.interval_months,
    }
    if definition.notes:
        d["notes"] = definition.notes
    if definition.next_due_odometer:
        d["nextDueOdometer"] = definition.next_due_odometer
    return d


def service_log_to_dict(log: ServiceLog) -> Dict[str, Any]:
    """Serialize a ServiceLog to the YAML dict format."""
    d: Dict[str, Any] = {
        "id": log.id,
        "serviceId": log.service_id,
        "serviceName": log.service_name,
        "date": log.date,
        "odometer": log.odometer,
        "cost": log.cost,
        "notes": log.notes,
    }
    if log.receipt_photo is not None:
        d["receiptPhoto"] = log.receipt_photo
    return d


def _fuel_log_to_dict(log: FuelLog) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": log.id,
        "date": log.date,
        "odometer": log.odometer,
        "volume": log.volume,
        "pricePerUnit": log.price_per_unit,
        "totalCost": log.total_cost,
        "isFullTank": log.is_full_tank,
    }
    if log.fuel_type is not None:
        d["fuelType"] = log.fuel_type
    if log.receipt_photo is not None:
        d["receiptPhoto"] = log.receipt_photo
    return d


# =============================================================================
# Whole-file operations
# =============================================================================


def save_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """
    Write a vehicle to a YAML file.

    An existing state section (e.g. lastNotifiedAt) is carried over.
    """
    state: Dict[str, Any] = {}
    if Path(filename).exists():
        state = _read_yaml(filename).get("state") or {}

    data: Dict[str, Any] = {
        "vehicle": _settings_to_dict(vehicle.settings),
        "services": [definition_to_dict(d) for d in vehicle.definitions],
        "serviceLogs": [service_log_to_dict(log) for log in vehicle.service_logs],
        "fuelLogs": [_fuel_log_to_dict(log) for log in vehicle.fuel_logs],
    }
    if state:
        data["state"] = state

    _write_yaml(filename, data)


def create_vehicle(
    filename: Union[str, Path],
    settings: VehicleSettings,
    definitions: Optional[List[ServiceDefinition]] = None,
) -> Vehicle:
    """
    Create a new vehicle YAML file.

    Starts with no logs and, unless given, the predefined services.
    """
    vehicle = Vehicle(
        settings,
        definitions if definitions is not None else default_definitions(),
    )
    save_vehicle(filename, vehicle)
    return vehicle


def delete_vehicle(filename: Union[str, Path]) -> None:
    """Remove a vehicle YAML file from disk."""
    Path(filename).unlink()


# =============================================================================
# Notification state
# =============================================================================


def load_last_notified(filename: Union[str, Path]) -> Optional[datetime]:
    """Read state.lastNotifiedAt, or None if never notified."""
    state = _read_yaml(filename).get("state") or {}
    value = state.get("lastNotifiedAt")
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return parse_iso(str(value))


def save_last_notified(filename: Union[str, Path], when: datetime) -> None:
    """Update state.lastNotifiedAt, leaving the rest of the file unchanged."""
    data = _read_yaml(filename)

    if data.get("state") is None:
        data["state"] = {}
    data["state"]["lastNotifiedAt"] = when.isoformat()

    _write_yaml(filename, data)

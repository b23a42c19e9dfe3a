"""Flask JSON API for vehicle maintenance tracking."""

import os
from datetime import date
from pathlib import Path

from flask import Flask, jsonify, request

# Add parent directory to path for model imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import (
    LogSender,
    MaintenanceStore,
    NotFoundError,
    NotificationTrigger,
    ServiceDefinition,
    ServiceLog,
    YamlTimestampStore,
    generate_id,
    load_vehicle,
    parse_iso,
    save_vehicle,
)
from models.loader import definition_to_dict, service_log_to_dict

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
app.config["VEHICLE_FILE"] = os.environ.get(
    "MOTORCHECK_VEHICLE_FILE",
    str(Path(__file__).parent.parent / "vehicles" / "mazda3.yaml"),
)
app.config["NOTIFY"] = os.environ.get("MOTORCHECK_NOTIFY", "true").lower() == "true"


class ApiError(Exception):
    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


@app.errorhandler(ApiError)
def handle_api_error(e: ApiError):
    return jsonify({"error": e.message}), e.status


@app.errorhandler(NotFoundError)
def handle_not_found(e: NotFoundError):
    return jsonify({"error": str(e.args[0]) if e.args else "Not found"}), 404


def get_vehicle_path() -> Path:
    return Path(app.config["VEHICLE_FILE"])


def open_store() -> MaintenanceStore:
    """Load the configured vehicle into a store wired to logged reminders."""
    path = get_vehicle_path()
    if not path.exists():
        raise ApiError(f"Vehicle file not found: {path.name}", 404)
    notifier = None
    if app.config["NOTIFY"]:
        notifier = NotificationTrigger(LogSender(app.logger), YamlTimestampStore(path))
    return MaintenanceStore(load_vehicle(path), notifier=notifier)


def commit(store: MaintenanceStore):
    """Persist the store and return the fresh summary."""
    save_vehicle(get_vehicle_path(), store.vehicle)
    return jsonify(store.summary.to_dict())


def get_json() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ApiError("Expected a JSON object")
    return data


def parse_date(value, key: str) -> str:
    """Check that value is an ISO-8601 date and return it unchanged."""
    try:
        parse_iso(value)
    except (TypeError, ValueError):
        raise ApiError(f"'{key}' must be an ISO-8601 date")
    return value


def parse_int(data: dict, key: str, required: bool = False):
    value = data.get(key)
    if value is None or value == "":
        if required:
            raise ApiError(f"'{key}' is required")
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ApiError(f"'{key}' must be an integer")
    if number < 0:
        raise ApiError(f"'{key}' cannot be negative")
    return number


@app.route("/api/status")
def status():
    """Current maintenance status, most urgent first."""
    store = open_store()
    if app.config["NOTIFY"]:
        store.recompute()
    summary = store.summary
    vehicle = store.vehicle
    return jsonify({
        "vehicle": vehicle.settings.name,
        "currentOdometer": vehicle.current_odometer,
        **summary.to_dict(),
    })


@app.route("/api/odometer", methods=["POST"])
def update_odometer():
    data = get_json()
    odometer = parse_int(data, "odometer", required=True)
    store = open_store()
    store.set_current_odometer(odometer)
    return commit(store)


# =============================================================================
# Service definitions
# =============================================================================


def definition_from_json(data: dict, service_id: str) -> ServiceDefinition:
    name = (data.get("name") or "").strip()
    if not name:
        raise ApiError("'name' is required")
    return ServiceDefinition(
        id=service_id,
        name=name,
        interval_km=parse_int(data, "intervalKm", required=True),
        interval_months=parse_int(data, "intervalMonths") or 0,
        notes=data.get("notes"),
        next_due_odometer=parse_int(data, "nextDueOdometer"),
    )


@app.route("/api/services")
def list_services():
    vehicle = open_store().vehicle
    return jsonify([definition_to_dict(d) for d in vehicle.definitions])


@app.route("/api/services", methods=["POST"])
def add_service():
    data = get_json()
    definition = definition_from_json(data, data.get("id") or generate_id())
    store = open_store()
    try:
        store.add_definition(definition)
    except ValueError as e:
        raise ApiError(str(e), 409)
    save_vehicle(get_vehicle_path(), store.vehicle)
    return jsonify(definition_to_dict(definition)), 201


@app.route("/api/services/<service_id>", methods=["PUT"])
def update_service(service_id: str):
    definition = definition_from_json(get_json(), service_id)
    store = open_store()
    store.update_definition(definition)
    return commit(store)


@app.route("/api/services/<service_id>", methods=["DELETE"])
def delete_service(service_id: str):
    """Delete a service and its history."""
    store = open_store()
    store.delete_definition(service_id)
    return commit(store)


# =============================================================================
# Service logs
# =============================================================================


@app.route("/api/logs")
def list_logs():
    vehicle = open_store().vehicle
    service_id = request.args.get("service")
    logs = vehicle.get_logs_sorted(sort_by=request.args.get("sort", "date"))
    if service_id:
        logs = [log for log in logs if log.service_id == service_id]
    return jsonify([service_log_to_dict(log) for log in logs])


@app.route("/api/logs", methods=["POST"])
def add_log():
    """Log a performed service. The name is snapshotted from the definition."""
    data = get_json()
    store = open_store()

    service_id = data.get("serviceId")
    definition = store.vehicle.get_definition(service_id) if service_id else None
    if definition is not None:
        service_name = definition.name
    elif data.get("serviceName"):
        # Custom one-off service without a definition
        service_id = service_id or f"custom_{generate_id()}"
        service_name = data["serviceName"]
    else:
        raise ApiError("'serviceId' of an existing service or 'serviceName' is required")

    try:
        cost = round(float(data.get("cost") or 0), 2)
    except (TypeError, ValueError):
        raise ApiError("'cost' must be a number")

    log = ServiceLog(
        id=generate_id(),
        service_id=service_id,
        service_name=service_name,
        date=parse_date(data.get("date") or date.today().isoformat(), "date"),
        odometer=parse_int(data, "odometer", required=True),
        cost=cost,
        notes=data.get("notes") or "",
        receipt_photo=data.get("receiptPhoto"),
    )
    store.add_service_log(log)
    save_vehicle(get_vehicle_path(), store.vehicle)
    return jsonify(service_log_to_dict(log)), 201


@app.route("/api/logs/<log_id>", methods=["DELETE"])
def delete_log(log_id: str):
    store = open_store()
    store.delete_service_log(log_id)
    return commit(store)


# =============================================================================
# Fuel and spending statistics
# =============================================================================


@app.route("/api/stats")
def stats():
    """Fuel efficiency plus totals, optionally limited to ?since= and ?until=."""
    since = request.args.get("since")
    until = request.args.get("until")
    vehicle = open_store().vehicle
    fuel_stats = vehicle.fuel_stats(
        parse_iso(parse_date(since, "since")) if since else None,
        parse_iso(parse_date(until, "until")) if until else None,
    )
    return jsonify({
        "unitSystem": vehicle.settings.unit_system.value,
        "fuelEfficiency": vehicle.fuel_efficiency(),
        **fuel_stats.to_dict(),
    })


if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5001)

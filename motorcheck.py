#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance tracking.

Commands:
  init            - Create a new vehicle file with the default services
  status          - Show what maintenance is overdue, due soon, or ok
  history         - View service history
  log             - Add a performed service
  fuel            - Add a fuel fill-up
  update-odometer - Update current odometer reading
  services        - List service definitions
  program         - Create or edit a service definition
  delete-service  - Delete a service definition and its history
  reset-services  - Restore the default service definitions
  stats           - Show fuel economy and spending
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from models import (
    ConsoleSender,
    FuelLog,
    MaintenanceStore,
    NotificationTrigger,
    ServiceDefinition,
    ServiceLog,
    ServiceStatus,
    Status,
    Vehicle,
    VehicleSettings,
    YamlTimestampStore,
    create_vehicle,
    generate_id,
    load_vehicle,
    parse_iso,
    save_vehicle,
)

logger = logging.getLogger("motorcheck")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_date(value: Optional[str]) -> str:
    """Show only the date part of an ISO timestamp."""
    return value[:10] if value else "-"


def format_km_left(svc: ServiceStatus) -> str:
    """Format remaining km for display."""
    if svc.km_left is None:
        return "-"
    if svc.km_left < 0:
        return f"-{abs(svc.km_left):,.0f}"
    return f"{svc.km_left:,.0f}"


def format_days_left(svc: ServiceStatus) -> str:
    """Format remaining time for display (e.g., '3mo 15d' or '-2mo 5d')."""
    if svc.days_left is None:
        return "-"

    days = abs(svc.days_left)
    sign = "-" if svc.days_left < 0 else ""
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def check_date(value: str) -> Optional[str]:
    """Return an error message if value is not an ISO date, else None."""
    try:
        parse_iso(value)
    except (TypeError, ValueError) as e:
        return f"Invalid date '{value}': {e}"
    return None


def open_store(path: Path, notify: bool = False) -> MaintenanceStore:
    """Load a vehicle file into a store, optionally wired to console reminders."""
    notifier = None
    if notify:
        notifier = NotificationTrigger(ConsoleSender(), YamlTimestampStore(path))
    return MaintenanceStore(load_vehicle(path), notifier=notifier)


def print_header(vehicle: Vehicle) -> None:
    print(f"Vehicle: {vehicle.settings.name}")
    print(f"Current odometer: {vehicle.current_odometer:,.0f} km")


# =============================================================================
# Status command
# =============================================================================


def make_status_table(services: List[ServiceStatus]) -> List[List[str]]:
    """Convert service status list to table rows."""
    rows = []
    for svc in services:
        last_done = "-"
        if not svc.never_performed:
            last_done = (
                f"{format_date(svc.last_performed_date)} @ "
                f"{svc.last_performed_odometer:,.0f}"
            )

        rows.append(
            [
                svc.name,
                last_done,
                format_km(svc.next_due_odometer),
                format_date(svc.next_due_date),
                format_km_left(svc),
                format_days_left(svc),
            ]
        )
    return rows


def cmd_status(args):
    """Show what maintenance is overdue, due soon, or ok."""
    store = open_store(args.vehicle_file, notify=not args.no_notify)
    vehicle = store.vehicle

    print_header(vehicle)
    print(f"Services: {len(vehicle.definitions)}")
    print(f"Urgent: {store.urgent_count}  Upcoming: {store.upcoming_count}")
    print()

    if store.notifier is not None:
        store.recompute()
        print()

    headers = [
        "Service",
        "Last Done",
        "Due (km)",
        "Due (date)",
        "Remaining (km)",
        "Remaining (time)",
    ]

    # Statuses are already sorted by urgency
    sections = [
        ("OVERDUE:", Status.DANGER),
        ("DUE SOON:", Status.WARNING),
        ("OK:", Status.OK),
    ]
    for title, tier in sections:
        services = [s for s in store.statuses if s.status == tier]
        if services:
            print(title)
            print(
                tabulate(make_status_table(services), headers=headers, tablefmt="simple")
            )
            print()

    if not store.statuses:
        print("No services defined.")

    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(entries: List[ServiceLog]) -> List[List[str]]:
    """Convert service logs to table rows."""
    rows = []
    for entry in entries:
        rows.append(
            [
                entry.id,
                format_date(entry.date),
                format_km(entry.odometer),
                entry.service_name or entry.service_id,
                format_cost(entry.cost),
                truncate(entry.notes),
            ]
        )
    return rows


def cmd_history(args):
    """View service history."""
    vehicle = load_vehicle(args.vehicle_file)

    entries = vehicle.get_logs_sorted(sort_by=args.sort, reverse=not args.asc)

    # Apply filters
    if args.service:
        needle = args.service.lower()
        entries = [
            e for e in entries
            if needle in e.service_name.lower() or needle == e.service_id.lower()
        ]

    if args.since:
        entries = [e for e in entries if format_date(e.date) >= args.since]

    total_cost = sum(e.cost or 0 for e in entries)
    last_svc = vehicle.last_service

    print_header(vehicle)
    if last_svc:
        print(
            f"Last service: {format_date(last_svc.date)} @ {last_svc.odometer:,.0f} km"
        )
    print(f"Total services: {len(vehicle.service_logs)}")
    if args.service or args.since:
        print(f"Showing: {len(entries)} (filtered)")
    if total_cost > 0:
        print(f"Total cost: {format_cost(total_cost)}")
    print()

    if not entries:
        print("No history entries found.")
        return 0

    headers = ["Id", "Date", "Odometer", "Service", "Cost", "Notes"]
    print(tabulate(make_history_table(entries), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Log command
# =============================================================================


def find_definition(vehicle: Vehicle, key: str) -> Optional[ServiceDefinition]:
    """Match a definition by id, then by name (case-insensitive)."""
    definition = vehicle.get_definition(key)
    if definition is not None:
        return definition
    for d in vehicle.definitions:
        if d.name.lower() == key.lower():
            return d
    return None


def print_available_services(vehicle: Vehicle) -> None:
    print("\nAvailable services:")
    for d in sorted(vehicle.definitions, key=lambda d: d.name):
        print(f"  {d.name}")
        print(f"    Id: {d.id}")


def cmd_log(args):
    """Add a performed service."""
    store = open_store(args.vehicle_file, notify=not args.no_notify)
    vehicle = store.vehicle

    definition = find_definition(vehicle, args.service)
    if definition is None:
        print(f"Error: Unknown service '{args.service}'")
        print_available_services(vehicle)
        return 1

    entry_date = args.date or date.today().isoformat()
    error = check_date(entry_date)
    if error:
        print(f"Error: {error}")
        return 1

    entry = ServiceLog(
        id=generate_id(),
        service_id=definition.id,
        service_name=definition.name,
        date=entry_date,
        odometer=args.odometer,
        cost=round(args.cost or 0, 2),
        notes=args.notes or "",
    )

    print(f"Adding service entry to {args.vehicle_file}:")
    print(f"  Service:  {entry.service_name}")
    print(f"  Date:     {entry.date}")
    print(f"  Odometer: {entry.odometer:,.0f}")
    if entry.cost:
        print(f"  Cost:     {format_cost(entry.cost)}")
    if entry.notes:
        print(f"  Notes:    {entry.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    old_odometer = vehicle.current_odometer
    store.add_service_log(entry)
    save_vehicle(args.vehicle_file, vehicle)
    print("Entry saved.")
    if vehicle.current_odometer != old_odometer:
        print(f"Odometer advanced to {vehicle.current_odometer:,.0f} km.")

    return 0


# =============================================================================
# Fuel command
# =============================================================================


def cmd_fuel(args):
    """Add a fuel fill-up."""
    store = open_store(args.vehicle_file, notify=not args.no_notify)
    vehicle = store.vehicle

    entry_date = args.date or date.today().isoformat()
    error = check_date(entry_date)
    if error:
        print(f"Error: {error}")
        return 1

    total_cost = round(args.volume * args.price, 2)
    entry = FuelLog(
        id=generate_id(),
        date=entry_date,
        odometer=args.odometer,
        volume=args.volume,
        price_per_unit=args.price,
        total_cost=total_cost,
        fuel_type=args.fuel_type or vehicle.settings.fuel_type,
        is_full_tank=not args.partial,
    )

    store.add_fuel_log(entry)
    save_vehicle(args.vehicle_file, vehicle)
    print(f"Fuel log saved: {entry.volume} @ {format_cost(entry.price_per_unit)}")
    print(f"  Total: {format_cost(total_cost)}")

    return 0


# =============================================================================
# Update Odometer command
# =============================================================================


def cmd_update_odometer(args):
    """Update current odometer reading."""
    store = open_store(args.vehicle_file, notify=not args.no_notify)
    vehicle = store.vehicle
    old_odometer = vehicle.current_odometer

    print(f"Vehicle: {vehicle.settings.name}")
    print(f"Current odometer: {old_odometer:,.0f}")
    print(f"New odometer:     {args.odometer:,.0f}")
    print()

    if args.odometer < old_odometer:
        print("Warning: new reading is lower than the current one")

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    try:
        store.set_current_odometer(args.odometer)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    save_vehicle(args.vehicle_file, vehicle)
    print("Odometer updated.")

    return 0


# =============================================================================
# Services commands
# =============================================================================


def cmd_services(args):
    """List service definitions."""
    vehicle = load_vehicle(args.vehicle_file)

    print(f"Vehicle: {vehicle.settings.name}")
    print(f"Services: {len(vehicle.definitions)}")
    print()

    rows = []
    for d in sorted(vehicle.definitions, key=lambda d: d.name):
        rows.append(
            [
                d.id,
                d.name,
                d.interval_label,
                format_km(d.next_due_odometer or None),
                truncate(d.notes),
            ]
        )

    headers = ["Id", "Service", "Interval", "Target (km)", "Notes"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))

    return 0


def cmd_program(args):
    """Create or edit a service definition."""
    store = open_store(args.vehicle_file, notify=not args.no_notify)
    vehicle = store.vehicle

    existing = vehicle.get_definition(args.id) if args.id else None
    if args.id and existing is None:
        print(f"Error: Unknown service id '{args.id}'")
        print_available_services(vehicle)
        return 1

    if existing is None and args.interval_km is None:
        print("Error: --interval-km is required for a new service")
        return 1

    definition = ServiceDefinition(
        id=existing.id if existing else generate_id(),
        name=args.name or (existing.name if existing else ""),
        interval_km=(
            args.interval_km if args.interval_km is not None else existing.interval_km
        ),
        interval_months=(
            args.interval_months
            if args.interval_months is not None
            else (existing.interval_months if existing else 0)
        ),
        notes=args.notes if args.notes is not None else (existing.notes if existing else None),
        next_due_odometer=(
            args.target_km
            if args.target_km is not None
            else (existing.next_due_odometer if existing else None)
        ),
    )
    if not definition.name:
        print("Error: --name is required for a new service")
        return 1

    if existing:
        store.update_definition(definition)
        print(f"Updated service: {definition.name} ({definition.id})")
    else:
        store.add_definition(definition)
        print(f"Programmed service: {definition.name} ({definition.id})")

    status = store.status_for(definition.id)
    if status is not None:
        print(
            f"  Next due at {format_km(status.next_due_odometer)} km "
            f"({format_km_left(status)} km left)"
        )

    save_vehicle(args.vehicle_file, vehicle)
    return 0


def cmd_delete_service(args):
    """Delete a service definition and all of its history."""
    store = open_store(args.vehicle_file, notify=not args.no_notify)
    vehicle = store.vehicle

    definition = find_definition(vehicle, args.service)
    if definition is None:
        print(f"Error: Unknown service '{args.service}'")
        print_available_services(vehicle)
        return 1

    log_count = len(vehicle.get_logs_for_service(definition.id))
    print(f"Deleting service '{definition.name}' and {log_count} history entries.")

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    store.delete_definition(definition.id)
    save_vehicle(args.vehicle_file, vehicle)
    print("Service deleted.")

    return 0


def cmd_reset_services(args):
    """Restore the default service definitions."""
    store = open_store(args.vehicle_file, notify=not args.no_notify)
    store.reset_services_to_default()
    save_vehicle(args.vehicle_file, store.vehicle)
    print(f"Restored {len(store.vehicle.definitions)} default services.")
    return 0


# =============================================================================
# Stats command
# =============================================================================


def cmd_stats(args):
    """Show fuel economy and spending."""
    for value in (args.since, args.until):
        error = check_date(value) if value else None
        if error:
            print(f"Error: {error}")
            return 1

    vehicle = load_vehicle(args.vehicle_file)
    unit_system = vehicle.settings.unit_system
    volume = unit_system.volume_label
    since = parse_iso(args.since) if args.since else None
    until = parse_iso(args.until) if args.until else None
    stats = vehicle.fuel_stats(since, until)

    efficiency = vehicle.fuel_efficiency()
    print_header(vehicle)
    if efficiency is not None:
        print(f"Fuel efficiency: {efficiency} {unit_system.value}")
    else:
        print("Fuel efficiency: - (needs two consecutive full tanks)")
    if args.since or args.until:
        print(f"Range: {args.since or 'start'} to {args.until or 'today'}")
    print()

    rows = [
        ["Fill-ups", stats.fuel_visits],
        ["Fuel volume", f"{stats.total_volume:,.2f} {volume}"],
        ["Fuel spend", format_cost(stats.total_fuel_cost)],
        ["Average per fill-up", format_cost(stats.avg_cost_per_refuel)],
        ["Services", stats.service_visits],
        ["Service spend", format_cost(stats.total_service_cost)],
        ["Average per service", format_cost(stats.avg_cost_per_service)],
        ["Distance", f"{format_km(stats.distance)} km"],
        ["Efficiency", f"{stats.efficiency} {unit_system.value}"],
    ]
    print(tabulate(rows, tablefmt="simple"))

    return 0


def cmd_init(args):
    """Create a new vehicle file."""
    if args.vehicle_file.exists():
        print(f"Error: File already exists: {args.vehicle_file}")
        return 1

    settings = VehicleSettings(
        brand=args.brand or "",
        model=args.model or "",
        year=args.year or "",
        plate=args.plate or "",
        current_odometer=args.odometer,
    )
    vehicle = create_vehicle(args.vehicle_file, settings)
    print(f"Created {args.vehicle_file} with {len(vehicle.definitions)} services.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s vehicles/mazda.yaml init --brand Mazda --model 3 --odometer 42000
  %(prog)s vehicles/mazda.yaml status
  %(prog)s vehicles/mazda.yaml history --service oil
  %(prog)s vehicles/mazda.yaml log oil_engine --odometer 45000 --cost 120
  %(prog)s vehicles/mazda.yaml program --name "Coolant" --interval-km 40000 \\
      --interval-months 24 --target-km 60000
  %(prog)s vehicles/mazda.yaml update-odometer 46000
  %(prog)s vehicles/mazda.yaml stats --since 2025-01-01
""",
    )
    parser.add_argument(
        "vehicle_file",
        type=Path,
        help="Path to vehicle YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    # Shared by every command that can change maintenance status
    notify_parent = argparse.ArgumentParser(add_help=False)
    notify_parent.add_argument(
        "--no-notify",
        action="store_true",
        help="Do not emit a maintenance reminder",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Init subcommand
    init_parser = subparsers.add_parser("init", help="Create a new vehicle file")
    init_parser.add_argument("--brand", type=str)
    init_parser.add_argument("--model", type=str)
    init_parser.add_argument("--year", type=str)
    init_parser.add_argument("--plate", type=str)
    init_parser.add_argument(
        "--odometer", type=int, default=0, help="Current odometer (km)"
    )

    # Status subcommand
    subparsers.add_parser(
        "status",
        parents=[notify_parent],
        help="Show what maintenance is overdue, due soon, or ok",
    )

    # History subcommand
    history_parser = subparsers.add_parser("history", help="View service history")
    history_parser.add_argument(
        "--service",
        type=str,
        help="Filter to services containing text (case-insensitive) or by id",
    )
    history_parser.add_argument(
        "--since",
        type=str,
        help="Show only entries since date (YYYY-MM-DD)",
    )
    history_parser.add_argument(
        "--sort",
        choices=["date", "odometer", "service"],
        default="date",
        help="Sort order (default: date)",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )

    # Log subcommand
    log_parser = subparsers.add_parser(
        "log", parents=[notify_parent], help="Add a performed service"
    )
    log_parser.add_argument(
        "service",
        type=str,
        help="Service id or name (e.g., 'oil_engine')",
    )
    log_parser.add_argument(
        "--odometer",
        type=int,
        required=True,
        help="Odometer at time of service (km)",
    )
    log_parser.add_argument(
        "--date",
        type=str,
        help="Service date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument("--cost", type=float, help="Cost of service")
    log_parser.add_argument("--notes", type=str, help="Notes about the service")
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Fuel subcommand
    fuel_parser = subparsers.add_parser(
        "fuel", parents=[notify_parent], help="Add a fuel fill-up"
    )
    fuel_parser.add_argument("--odometer", type=int, required=True)
    fuel_parser.add_argument("--volume", type=float, required=True)
    fuel_parser.add_argument(
        "--price", type=float, required=True, help="Price per unit of volume"
    )
    fuel_parser.add_argument("--date", type=str)
    fuel_parser.add_argument("--fuel-type", type=str)
    fuel_parser.add_argument(
        "--partial", action="store_true", help="Tank was not filled completely"
    )

    # Update Odometer subcommand
    odometer_parser = subparsers.add_parser(
        "update-odometer",
        parents=[notify_parent],
        help="Update current odometer reading",
    )
    odometer_parser.add_argument("odometer", type=int, help="Current odometer (km)")
    odometer_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Services subcommands
    subparsers.add_parser("services", help="List service definitions")

    program_parser = subparsers.add_parser(
        "program", parents=[notify_parent], help="Create or edit a service definition"
    )
    program_parser.add_argument("--id", type=str, help="Existing service id to edit")
    program_parser.add_argument("--name", type=str)
    program_parser.add_argument("--interval-km", type=int)
    program_parser.add_argument("--interval-months", type=int)
    program_parser.add_argument("--notes", type=str)
    program_parser.add_argument(
        "--target-km",
        type=int,
        help="Explicit odometer at which the first service is due",
    )

    delete_parser = subparsers.add_parser(
        "delete-service",
        parents=[notify_parent],
        help="Delete a service definition and its history",
    )
    delete_parser.add_argument("service", type=str, help="Service id or name")
    delete_parser.add_argument("--dry-run", action="store_true")

    subparsers.add_parser(
        "reset-services", parents=[notify_parent], help="Restore the default services"
    )

    # Stats subcommand
    stats_parser = subparsers.add_parser(
        "stats", help="Show fuel economy and spending"
    )
    stats_parser.add_argument(
        "--since", type=str, help="Only count logs on or after date (YYYY-MM-DD)"
    )
    stats_parser.add_argument(
        "--until", type=str, help="Only count logs on or before date (YYYY-MM-DD)"
    )

    return parser


COMMANDS = {
    "status": cmd_status,
    "history": cmd_history,
    "log": cmd_log,
    "fuel": cmd_fuel,
    "update-odometer": cmd_update_odometer,
    "services": cmd_services,
    "program": cmd_program,
    "delete-service": cmd_delete_service,
    "reset-services": cmd_reset_services,
    "stats": cmd_stats,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "init":
        return cmd_init(args)

    # Validate vehicle file exists
    if not args.vehicle_file.exists():
        print(f"Error: File not found: {args.vehicle_file}")
        return 1

    logger.debug("Running %s on %s", args.command, args.vehicle_file)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)

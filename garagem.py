#!/usr/bin/env python3
"""
Command line for the Garagem Inteligente vehicle garage.

Commands:
  list         - List the vehicles in the garage
  show         - Show one vehicle and its maintenance history
  add          - Add a car, sports car or truck
  remove       - Remove a vehicle
  action       - Operate a vehicle (turn_on, accelerate, load, ...)
  maint-add    - Record or schedule maintenance for a vehicle
  maint-remove - Delete a maintenance record
  upcoming     - List maintenance scheduled from now on
  remind       - Show reminders for maintenance due today or tomorrow
  clear        - Delete every vehicle and the stored data
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from garage import (
    AMOUNT_ACTIONS,
    ConfigurationError,
    FileStorage,
    Garage,
    MaintenanceRecord,
    Outcome,
    ReminderScheduler,
    Severity,
    SportsCar,
    Truck,
    UpcomingMaintenance,
    ValidationError,
    Vehicle,
    load_settings,
)
from garage.formatting import format_cost, format_date, format_speed, format_weight, truncate

# =============================================================================
# Output helpers
# =============================================================================

_OUTCOME_LABELS = {
    Outcome.SUCCESS: "OK",
    Outcome.INFO: "INFO",
    Outcome.WARNING: "WARNING",
}


def print_notifier(message: str, severity: Severity, duration_ms: int = 0) -> None:
    """Notification sink for the terminal."""
    print(f"[{severity.value.upper()}] {message}", file=sys.stderr)


def vehicle_extra(vehicle: Vehicle) -> str:
    """Variant-specific state for display."""
    if isinstance(vehicle, SportsCar):
        return "turbo on" if vehicle.turbo_engaged else "turbo off"
    if isinstance(vehicle, Truck):
        return f"{vehicle.current_cargo:,.1f}/{format_weight(vehicle.cargo_capacity)}"
    return "-"


def make_vehicle_table(vehicles: List[Vehicle]) -> List[List[str]]:
    """Convert vehicles to table rows."""
    rows = []
    for vehicle in vehicles:
        rows.append(
            [
                vehicle.id,
                vehicle.variant_tag,
                vehicle.model,
                vehicle.color,
                "on" if vehicle.engine_on else "off",
                format_speed(vehicle.speed),
                vehicle_extra(vehicle),
                len(vehicle.maintenance_history),
            ]
        )
    return rows


def make_history_table(vehicle: Vehicle) -> List[List[str]]:
    """Convert a vehicle's maintenance history to table rows."""
    rows = []
    for record in vehicle.maintenance_history:
        rows.append(
            [
                format_date(record.parsed_date),
                record.service_type,
                format_cost(record.cost),
                truncate(record.description),
                record.id,
            ]
        )
    return rows


def make_upcoming_table(items: List[UpcomingMaintenance]) -> List[List[str]]:
    """Convert upcoming maintenance to table rows."""
    return [
        [
            format_date(item.when, with_time=True),
            item.vehicle.model,
            item.record.service_type,
            format_cost(item.record.cost),
            truncate(item.record.description),
        ]
        for item in items
    ]


def build_vehicle(args) -> Vehicle:
    """Create the vehicle described by the add subcommand's arguments."""
    if args.kind == "truck":
        if args.capacity is None:
            raise ValidationError("Trucks need --capacity", field="cargo_capacity")
        return Truck(args.model, args.color, args.capacity, id=args.id)
    if args.kind == "sports":
        return SportsCar(args.model, args.color, id=args.id)
    return Vehicle(args.model, args.color, id=args.id)


# =============================================================================
# Commands
# =============================================================================


def cmd_list(garage: Garage, args, settings) -> int:
    """List the vehicles in the garage."""
    vehicles = garage.list_vehicles()
    if not vehicles:
        print("The garage is empty.")
        return 0
    headers = ["ID", "Type", "Model", "Color", "Engine", "Speed", "Extra", "Services"]
    print(tabulate(make_vehicle_table(vehicles), headers=headers, tablefmt="simple"))
    return 0


def cmd_show(garage: Garage, args, settings) -> int:
    """Show one vehicle and its maintenance history."""
    vehicle = garage.find_vehicle(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Vehicle not found: {args.vehicle_id}")
        return 1
    print(vehicle.describe())
    print(vehicle.interact())
    print()
    if not vehicle.maintenance_history:
        print("No maintenance records found.")
        return 0
    total_cost = sum(r.cost for r in vehicle.maintenance_history)
    print(f"Maintenance records: {len(vehicle.maintenance_history)}")
    print(f"Total cost: {format_cost(total_cost)}")
    print()
    headers = ["Date", "Service", "Cost", "Description", "ID"]
    print(tabulate(make_history_table(vehicle), headers=headers, tablefmt="simple"))
    return 0


def cmd_add(garage: Garage, args, settings) -> int:
    """Add a vehicle."""
    try:
        vehicle = build_vehicle(args)
    except ValidationError as e:
        print(f"Error: {e}")
        return 1
    if not garage.add_vehicle(vehicle):
        return 1
    print(f"Added {vehicle.variant_tag} {vehicle.model} ({vehicle.id}).")
    return 0


def cmd_remove(garage: Garage, args, settings) -> int:
    """Remove a vehicle."""
    if not garage.remove_vehicle(args.vehicle_id):
        print(f"Error: Vehicle not found: {args.vehicle_id}")
        return 1
    print(f"Removed {args.vehicle_id}.")
    return 0


def cmd_action(garage: Garage, args, settings) -> int:
    """Operate a vehicle, using the configured default amount when none is given."""
    vehicle = garage.find_vehicle(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Vehicle not found: {args.vehicle_id}")
        return 1
    amount = args.amount
    if amount is None and args.action in AMOUNT_ACTIONS:
        amount = settings.defaults.amount_for(vehicle.variant_tag, args.action)
    result = garage.operate(args.vehicle_id, args.action, amount)
    print(f"{_OUTCOME_LABELS[result.outcome]}: {result.message}")
    return 1 if result.is_rejected else 0


def cmd_maint_add(garage: Garage, args, settings) -> int:
    """Record or schedule maintenance."""
    if garage.find_vehicle(args.vehicle_id) is None:
        print(f"Error: Vehicle not found: {args.vehicle_id}")
        return 1
    try:
        record = MaintenanceRecord(
            args.date, args.type, args.cost, args.description, args.vehicle_id
        )
    except ValidationError as e:
        print(f"Error: {e}")
        return 1

    print(f"Adding maintenance to {args.vehicle_id}:")
    print(f"  {record.format()}")
    print()
    if args.dry_run:
        print("(dry run - no changes made)")
        return 0
    garage.add_maintenance(args.vehicle_id, record)
    print("Maintenance saved.")
    return 0


def cmd_maint_remove(garage: Garage, args, settings) -> int:
    """Delete a maintenance record."""
    if not garage.remove_maintenance(args.vehicle_id, args.record_id):
        print(f"Error: No maintenance {args.record_id} on vehicle {args.vehicle_id}")
        return 1
    print("Maintenance removed.")
    return 0


def cmd_upcoming(garage: Garage, args, settings) -> int:
    """List maintenance scheduled from now on."""
    items = garage.list_upcoming_maintenance()
    if not items:
        print("No upcoming maintenance.")
        return 0
    headers = ["When", "Vehicle", "Service", "Cost", "Description"]
    print(tabulate(make_upcoming_table(items), headers=headers, tablefmt="simple"))
    return 0


def cmd_remind(garage: Garage, args, settings) -> int:
    """Show reminders once, or keep checking with --watch."""
    scheduler = ReminderScheduler(
        garage, print_notifier, lookahead_days=settings.reminder_lookahead_days
    )
    if args.watch:
        try:
            scheduler.run(settings.reminder_interval_minutes * 60)
        except KeyboardInterrupt:
            print()
        return 0
    if not scheduler.check():
        print("No maintenance due today or tomorrow.")
    return 0


def cmd_clear(garage: Garage, args, settings) -> int:
    """Delete every vehicle and the stored data."""
    if not args.yes:
        print("Refusing to clear without --yes (this cannot be undone).")
        return 1
    if not garage.clear():
        return 1
    print("Stored data cleared.")
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "remove": cmd_remove,
    "action": cmd_action,
    "maint-add": cmd_maint_add,
    "maint-remove": cmd_maint_remove,
    "upcoming": cmd_upcoming,
    "remind": cmd_remind,
    "clear": cmd_clear,
}


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Garagem Inteligente - vehicle garage and maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add truck --model FH16 --color white --capacity 1000
  %(prog)s action veh_123 turn_on
  %(prog)s action veh_123 accelerate 20
  %(prog)s action veh_123 load
  %(prog)s maint-add veh_123 --date 2025-06-01T10:00 --type "Oil change" --cost 150
  %(prog)s upcoming
  %(prog)s remind --watch
""",
    )
    parser.add_argument("--settings", type=Path, help="Path to settings YAML file")
    parser.add_argument("--storage-dir", type=Path, help="Directory for the stored garage")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List the vehicles in the garage")

    show_parser = subparsers.add_parser("show", help="Show a vehicle and its history")
    show_parser.add_argument("vehicle_id", type=str)

    add_parser = subparsers.add_parser("add", help="Add a vehicle")
    add_parser.add_argument("kind", choices=["car", "sports", "truck"])
    add_parser.add_argument("--model", type=str, required=True)
    add_parser.add_argument("--color", type=str, required=True)
    add_parser.add_argument("--capacity", type=float, help="Cargo capacity in kg (trucks)")
    add_parser.add_argument("--id", type=str, help="Explicit vehicle id")

    remove_parser = subparsers.add_parser("remove", help="Remove a vehicle")
    remove_parser.add_argument("vehicle_id", type=str)

    action_parser = subparsers.add_parser("action", help="Operate a vehicle")
    action_parser.add_argument("vehicle_id", type=str)
    action_parser.add_argument(
        "action",
        choices=[
            "turn_on",
            "turn_off",
            "accelerate",
            "brake",
            "engage_turbo",
            "disengage_turbo",
            "load",
            "unload",
        ],
    )
    action_parser.add_argument(
        "amount",
        type=float,
        nargs="?",
        help="Amount for accelerate/brake (km/h) or load/unload (kg); default from settings",
    )

    maint_parser = subparsers.add_parser("maint-add", help="Add a maintenance record")
    maint_parser.add_argument("vehicle_id", type=str)
    maint_parser.add_argument("--date", type=str, required=True, help="YYYY-MM-DD[THH:MM]")
    maint_parser.add_argument("--type", type=str, required=True, help="Service type")
    maint_parser.add_argument("--cost", type=float, default=0, help="Cost of the service")
    maint_parser.add_argument("--description", type=str, default="")
    maint_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    maint_remove_parser = subparsers.add_parser("maint-remove", help="Delete a maintenance record")
    maint_remove_parser.add_argument("vehicle_id", type=str)
    maint_remove_parser.add_argument("record_id", type=str)

    subparsers.add_parser("upcoming", help="List upcoming maintenance")

    remind_parser = subparsers.add_parser("remind", help="Reminders for maintenance due soon")
    remind_parser.add_argument(
        "--watch", action="store_true", help="Keep checking at the configured interval"
    )

    clear_parser = subparsers.add_parser("clear", help="Delete all stored data")
    clear_parser.add_argument("--yes", action="store_true", help="Confirm deletion")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    storage = FileStorage(args.storage_dir or settings.storage_dir, settings.quota_bytes)
    garage = Garage(storage, print_notifier, settings.storage_key)
    garage.load()

    return COMMANDS[args.command](garage, args, settings)


if __name__ == "__main__":
    sys.exit(main() or 0)

#!/usr/bin/env python3
"""
Unified CLI for the garage simulator.

Commands:
  status       - Table of every vehicle's state
  show         - Full description of one vehicle (or all)
  create       - Create or update the vehicle in a slot
  action       - Turn on/off, accelerate, brake, turbo, load/unload
  paint        - Repaint a vehicle
  refuel       - Add fuel
  log          - Record a completed service
  schedule     - Schedule a future service
  appointments - List upcoming scheduled services
  seed         - Create the default vehicles if the garage is empty
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from tabulate import tabulate

from fleet import (
    SLOTS,
    ActionResult,
    Appointment,
    FileStore,
    Garage,
    GarageError,
    VehicleDisplay,
)
from fleet import settings
from fleet.garage import ACTIONS

# =============================================================================
# Formatting helpers
# =============================================================================


def format_fuel(fuel: float) -> str:
    """Format fuel level for display."""
    return f"{fuel:.0f}%" if float(fuel).is_integer() else f"{fuel:.1f}%"


def format_gauge(percent: float, width: int = 10) -> str:
    """Render a speed gauge like '[###-------]'."""
    filled = int(round(percent / 100 * width))
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def make_status_table(displays: List[VehicleDisplay]) -> List[List[str]]:
    """Convert vehicle displays to table rows."""
    rows = []
    for display in displays:
        rows.append(
            [
                display.key,
                display.kind,
                display.details,
                display.status,
                display.speed,
                format_gauge(display.gauge_percent),
                format_fuel(display.fuel),
                display.info or "-",
            ]
        )
    return rows


def make_appointment_table(appointments: List[Appointment]) -> List[List[str]]:
    """Convert appointments to table rows."""
    rows = []
    for appt in appointments:
        rows.append(
            [
                appt.when.strftime("%d/%m/%Y"),
                appt.record.time or "-",
                appt.vehicle_name,
                appt.record.service_type,
                appt.record.description or "-",
            ]
        )
    return rows


def report(result: ActionResult) -> int:
    """Print an action result and return the exit code."""
    if result.ok:
        print(result.message)
        return 0
    print(f"Error: {result.message}")
    return 1


# =============================================================================
# Commands
# =============================================================================


def cmd_status(garage: Garage, args):
    """Table of every vehicle's state."""
    snapshot = garage.refresh()
    if snapshot.is_empty:
        print(snapshot.info_panel)
        return 0

    headers = ["Slot", "Type", "Vehicle", "Status", "Speed", "Gauge", "Fuel", "Info"]
    print(
        tabulate(
            make_status_table(list(snapshot.vehicles.values())),
            headers=headers,
            tablefmt="simple",
        )
    )
    print()
    print("Upcoming appointments:")
    for line in snapshot.appointments:
        print(f"  {line}")
    return 0


def cmd_show(garage: Garage, args):
    """Full description of one vehicle, or all of them."""
    if args.key:
        print(garage.describe(args.key))
        return 0

    descriptions = garage.describe_all()
    if not descriptions:
        print("No vehicles in the garage.")
        return 0
    for key, text in descriptions.items():
        print(f"=== {key} ===")
        print(text)
        print()
    return 0


def cmd_create(garage: Garage, args):
    """Create or update the vehicle in a slot."""
    existed = args.key in garage.vehicles
    vehicle = garage.create_or_update(args.key, args.model, args.color, args.capacity)
    print(f"{vehicle.KIND} {'updated' if existed else 'created'}: {vehicle.details_text()}")
    return 0


def cmd_action(garage: Garage, args):
    """Run an action on a vehicle."""
    return report(garage.interact(args.key, args.action, weight=args.weight))


def cmd_paint(garage: Garage, args):
    return report(garage.paint(args.key, args.color))


def cmd_refuel(garage: Garage, args):
    return report(garage.refuel(args.key, args.amount))


def cmd_log(garage: Garage, args):
    """Record a completed service."""
    return report(
        garage.record_maintenance(
            args.key, args.date, args.type, args.cost, args.description
        )
    )


def cmd_schedule(garage: Garage, args):
    """Schedule a future service."""
    return report(
        garage.schedule_maintenance(
            args.key, args.date, args.time, args.type, args.notes
        )
    )


def cmd_appointments(garage: Garage, args):
    """List upcoming scheduled services."""
    appointments = garage.upcoming_appointments(within_months=args.within_months)
    if not appointments:
        print("No upcoming appointments.")
        return 0

    headers = ["Date", "Time", "Vehicle", "Service", "Notes"]
    print(
        tabulate(
            make_appointment_table(appointments), headers=headers, tablefmt="simple"
        )
    )
    return 0


def cmd_seed(garage: Garage, args):
    """Create the default vehicles if the garage is empty."""
    created = garage.seed_defaults(args.file)
    if created:
        print(f"Created {created} default vehicle(s).")
    else:
        print("Garage already has vehicles; nothing seeded.")
    return 0


COMMANDS = {
    "status": cmd_status,
    "show": cmd_show,
    "create": cmd_create,
    "action": cmd_action,
    "paint": cmd_paint,
    "refuel": cmd_refuel,
    "log": cmd_log,
    "schedule": cmd_schedule,
    "appointments": cmd_appointments,
    "seed": cmd_seed,
}


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Garage simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s seed
  %(prog)s status
  %(prog)s create truck --model "Hauler" --color White --capacity 5000
  %(prog)s action sportsCar turn_on
  %(prog)s action truck load --weight 3000
  %(prog)s log myCar --date 2024-05-10 --type "Oil change" --cost 150
  %(prog)s schedule motorcycle --date 2030-01-15 --time 09:30 --type Inspection
  %(prog)s appointments --within-months 3
""",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=settings.DATA_DIR,
        help=f"Directory holding the garage document (default: {settings.DATA_DIR})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    slots = sorted(SLOTS)

    subparsers.add_parser("status", help="Table of every vehicle's state")

    show_parser = subparsers.add_parser("show", help="Describe one vehicle or all")
    show_parser.add_argument("key", nargs="?", choices=slots)

    create_parser = subparsers.add_parser("create", help="Create or update a vehicle")
    create_parser.add_argument("key", choices=slots)
    create_parser.add_argument("--model", type=str, help="Model name")
    create_parser.add_argument("--color", type=str, help="Color")
    create_parser.add_argument(
        "--capacity", type=float, help="Cargo capacity in kg (truck only)"
    )

    action_parser = subparsers.add_parser("action", help="Run an action on a vehicle")
    action_parser.add_argument("key", choices=slots)
    action_parser.add_argument("action", choices=sorted(ACTIONS))
    action_parser.add_argument(
        "--weight", type=str, help="Weight in kg for load/unload"
    )

    paint_parser = subparsers.add_parser("paint", help="Repaint a vehicle")
    paint_parser.add_argument("key", choices=slots)
    paint_parser.add_argument("color", type=str)

    refuel_parser = subparsers.add_parser("refuel", help="Add fuel (percent)")
    refuel_parser.add_argument("key", choices=slots)
    refuel_parser.add_argument("amount", type=str)

    log_parser = subparsers.add_parser("log", help="Record a completed service")
    log_parser.add_argument("key", choices=slots)
    log_parser.add_argument("--date", type=str, required=True, help="YYYY-MM-DD")
    log_parser.add_argument("--type", type=str, required=True, help="Service type")
    log_parser.add_argument("--cost", type=float, help="Cost of service")
    log_parser.add_argument("--description", type=str, default="", help="Notes")

    schedule_parser = subparsers.add_parser("schedule", help="Schedule a service")
    schedule_parser.add_argument("key", choices=slots)
    schedule_parser.add_argument("--date", type=str, required=True, help="YYYY-MM-DD")
    schedule_parser.add_argument("--time", type=str, help="HH:MM")
    schedule_parser.add_argument("--type", type=str, required=True, help="Service type")
    schedule_parser.add_argument("--notes", type=str, default="", help="Notes")

    appointments_parser = subparsers.add_parser(
        "appointments", help="List upcoming scheduled services"
    )
    appointments_parser.add_argument(
        "--within-months",
        type=float,
        help="Only show appointments within this many months",
    )

    seed_parser = subparsers.add_parser("seed", help="Create default vehicles")
    seed_parser.add_argument(
        "file", type=Path, nargs="?", help="YAML seed file (default: built-in)"
    )

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.LOG_LEVEL)

    garage = Garage(FileStore(args.data_dir))
    if garage.load_warning:
        print(f"Warning: {garage.load_warning}")

    try:
        return COMMANDS[args.command](garage, args)
    except GarageError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)

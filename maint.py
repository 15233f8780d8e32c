#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance tracking.

Commands:
  vehicles       - List vehicles in the garage
  add-vehicle    - Add a vehicle from the catalog
  remove-vehicle - Remove a vehicle and its service log
  status         - Show what maintenance is overdue, due soon, or upcoming
  history        - View service history
  log            - Record a completed service
  remove-log     - Delete a service record
  update-miles   - Update current vehicle mileage
  catalog        - Browse manufacturers and models
  schedule       - Show the manufacturer schedule for a vehicle
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from maintenance_tracker import (
    Catalog,
    MaintenanceStatus,
    MaintenanceTrackerError,
    ServiceLogEntry,
    Settings,
    Status,
    Vehicle,
    VehicleStore,
    YamlStorage,
    build_dashboard,
    drivetrain_label,
    group_by_month,
    load_catalog,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_miles(miles: Optional[float]) -> str:
    """Format mileage for display."""
    return f"{miles:,.0f}" if miles is not None else "-"


def format_remaining(svc: MaintenanceStatus) -> str:
    """Format miles until due; overdue shows as negative."""
    if svc.miles_until_due < 0:
        return f"-{abs(svc.miles_until_due):,.0f}"
    return f"{svc.miles_until_due:,.0f}"


def format_next_due(svc: MaintenanceStatus) -> str:
    """Next due mileage, starred when estimated rather than from the log."""
    text = format_miles(svc.next_due_miles)
    return f"{text}*" if svc.is_estimated else text


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def type_name(catalog: Catalog, key: str) -> str:
    """Display name of a maintenance type, falling back to its key."""
    type_info = catalog.types.get(key)
    return type_info.name if type_info else key


# =============================================================================
# State helpers
# =============================================================================


def open_store(args) -> VehicleStore:
    return VehicleStore(YamlStorage(args.data_dir), strict=args.strict).load()


def resolve_vehicle(store: VehicleStore, vehicle_id: Optional[str]) -> Optional[Vehicle]:
    """The requested vehicle, or the selected one. Prints an error if missing."""
    vehicle = store.get_vehicle(vehicle_id) if vehicle_id else store.selected_vehicle
    if vehicle is None:
        if vehicle_id:
            print(f"Error: Unknown vehicle '{vehicle_id}'")
        else:
            print("Error: No vehicles. Add one with add-vehicle first.")
    return vehicle


# =============================================================================
# Vehicle commands
# =============================================================================


def cmd_vehicles(args, store: VehicleStore, catalog: Catalog):
    """List vehicles in the garage."""
    vehicles = store.vehicles
    if not vehicles:
        print("No vehicles. Add one with: add-vehicle MAKE MODEL YEAR DRIVETRAIN MILEAGE")
        return 0

    rows = []
    for vehicle in vehicles:
        marker = "*" if vehicle.id == store.selected_vehicle_id else ""
        rows.append(
            [
                marker,
                vehicle.id,
                vehicle.display_name,
                vehicle.name,
                vehicle.drivetrain,
                format_miles(vehicle.mileage),
                len(store.list_service_log(vehicle.id)),
            ]
        )
    headers = ["", "ID", "Name", "Vehicle", "Drivetrain", "Mileage", "Services"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_add_vehicle(args, store: VehicleStore, catalog: Catalog):
    """Add a vehicle; make, model, year and drivetrain must exist in the catalog."""
    manufacturer = catalog.find_manufacturer(args.make)
    if manufacturer is None:
        print(f"Error: Unknown make '{args.make}'")
        print("\nAvailable makes:")
        for m in catalog.list_manufacturers():
            print(f"  {m.name}")
        return 1

    model = catalog.find_model(manufacturer.name, args.model, args.year)
    if model is None:
        years = catalog.model_years(manufacturer.name, args.model)
        if years:
            print(f"Error: {manufacturer.name} {args.model} not available for {args.year}")
            print(f"Available years: {', '.join(str(y) for y in years)}")
        else:
            print(f"Error: Unknown model '{args.model}' for {manufacturer.name}")
            print(f"Available models: {', '.join(catalog.model_names(manufacturer.name))}")
        return 1

    drivetrain = args.drivetrain.upper()
    if drivetrain not in model.drivetrains:
        print(f"Error: Drivetrain '{args.drivetrain}' not offered for this model")
        print("Available drivetrains:")
        for code in model.drivetrains:
            print(f"  {drivetrain_label(code)}")
        return 1

    vehicle = store.add_vehicle(
        manufacturer.name,
        model.name,
        args.year,
        drivetrain,
        args.mileage,
        args.nickname,
    )
    print(f"Added {vehicle.display_name} ({vehicle.id})")
    return 0


def cmd_remove_vehicle(args, store: VehicleStore, catalog: Catalog):
    """Remove a vehicle and all of its service records."""
    vehicle = store.get_vehicle(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1
    count = len(store.list_service_log(vehicle.id))
    store.remove_vehicle(vehicle.id)
    print(f"Removed {vehicle.display_name} and {count} service record(s).")
    return 0


# =============================================================================
# Status command
# =============================================================================


def make_status_table(services: List[MaintenanceStatus]) -> List[List[str]]:
    """Convert maintenance status list to table rows."""
    rows = []
    for svc in services:
        last_done = "-"
        if svc.last_service_mileage is not None:
            last_done = format_miles(svc.last_service_mileage)
            if svc.last_service_date:
                last_done = f"{svc.last_service_date[:10]} @ {last_done}"

        rows.append(
            [
                svc.type_info.name,
                svc.type_info.severity.label,
                last_done,
                format_next_due(svc),
                format_remaining(svc),
                svc.due_date or "-",
            ]
        )
    return rows


def cmd_status(args, store: VehicleStore, catalog: Catalog):
    """Show what maintenance is overdue, due soon, or upcoming."""
    vehicle = resolve_vehicle(store, args.vehicle)
    if vehicle is None:
        return 1

    dashboard = build_dashboard(store, catalog, vehicle.id)
    summary = dashboard.summary

    print(f"Vehicle: {vehicle.display_name} ({vehicle.name}, {vehicle.drivetrain})")
    print(f"Current mileage: {vehicle.mileage:,.0f}")
    if not dashboard.has_schedule:
        print("No manufacturer schedule found for this vehicle.")
        return 0
    print(
        f"Overall: {summary.overall_status.value.upper()} "
        f"({summary.overdue} overdue, {summary.due_soon} due soon, "
        f"{summary.upcoming} upcoming)"
    )
    print()

    headers = ["Service", "Severity", "Last Done", "Next Due (mi)", "Remaining (mi)", "Due (date)"]
    for status in Status:
        group = [s for s in dashboard.statuses if s.status == status]
        if not group:
            continue
        print(f"{status.label.upper()}:")
        print(tabulate(make_status_table(group), headers=headers, tablefmt="simple"))
        print()

    if any(s.is_estimated for s in dashboard.statuses):
        print("* estimated from the manufacturer interval (no service on record)")
    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(entries: List[ServiceLogEntry], catalog: Catalog) -> List[List[str]]:
    """Convert log entries to table rows."""
    rows = []
    for entry in entries:
        rows.append(
            [
                entry.date[:10],
                format_miles(entry.mileage),
                type_name(catalog, entry.service_type),
                truncate(entry.notes),
                entry.id,
            ]
        )
    return rows


def cmd_history(args, store: VehicleStore, catalog: Catalog):
    """View service history grouped by month, newest first."""
    vehicle = resolve_vehicle(store, args.vehicle)
    if vehicle is None:
        return 1

    entries = store.vehicle_history(vehicle.id)
    print(f"Vehicle: {vehicle.display_name}")
    print(f"Total services: {len(entries)}")
    print()

    if not entries:
        print("No history entries found.")
        return 0

    headers = ["Date", "Mileage", "Service", "Notes", "ID"]
    for group in group_by_month(entries):
        print(f"{group['label']}:")
        print(tabulate(make_history_table(group["entries"], catalog),
                       headers=headers, tablefmt="simple"))
        print()
    return 0


# =============================================================================
# Log commands
# =============================================================================


def cmd_log(args, store: VehicleStore, catalog: Catalog):
    """Record a completed service."""
    vehicle = resolve_vehicle(store, args.vehicle)
    if vehicle is None:
        return 1

    service_type = args.service_type.lower()
    if service_type not in catalog.types:
        print(f"Error: Unknown service type '{args.service_type}'")
        print("\nAvailable service types:")
        for category in catalog.types.categories():
            print(f"  {category}:")
            for type_info in catalog.types.by_category(category):
                print(f"    {type_info.key:<22} {type_info.name}")
        return 1

    mileage = args.mileage if args.mileage is not None else vehicle.mileage
    entry_date = args.date or date.today().isoformat()

    print(f"Adding service entry for {vehicle.display_name}:")
    print(f"  Service: {type_name(catalog, service_type)}")
    print(f"  Date:    {entry_date}")
    print(f"  Mileage: {mileage:,.0f}")
    if args.notes:
        print(f"  Notes:   {args.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    entry = store.log_service(vehicle.id, service_type, mileage, entry_date, args.notes)
    print(f"Entry saved ({entry.id}).")
    return 0


def cmd_remove_log(args, store: VehicleStore, catalog: Catalog):
    """Delete a service record."""
    entry = store.get_service_log_entry(args.entry_id)
    if entry is None:
        print(f"Error: Unknown log entry '{args.entry_id}'")
        return 1
    store.remove_service_log_entry(entry.id)
    print(f"Removed {type_name(catalog, entry.service_type)} record from {entry.date[:10]}.")
    return 0


# =============================================================================
# Update Miles command
# =============================================================================


def cmd_update_miles(args, store: VehicleStore, catalog: Catalog):
    """Update current vehicle mileage."""
    vehicle = resolve_vehicle(store, args.vehicle)
    if vehicle is None:
        return 1

    print(f"Vehicle: {vehicle.display_name}")
    print(f"Current mileage: {vehicle.mileage:,.0f}")
    print(f"New mileage:     {args.mileage:,.0f}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    store.update_vehicle_mileage(vehicle.id, args.mileage)
    print("Mileage updated.")
    return 0


# =============================================================================
# Catalog commands
# =============================================================================


def cmd_catalog(args, store: VehicleStore, catalog: Catalog):
    """Browse manufacturers, their models, or a model's years."""
    if not args.make:
        rows = [
            [m.name, m.region or "-", len({model.name for model in m.models})]
            for m in catalog.list_manufacturers()
        ]
        print(tabulate(rows, headers=["Make", "Region", "Models"], tablefmt="simple"))
        return 0

    manufacturer = catalog.find_manufacturer(args.make)
    if manufacturer is None:
        print(f"Error: Unknown make '{args.make}'")
        return 1

    models = [m for m in manufacturer.models if not args.model or m.name == args.model]
    if not models:
        print(f"Error: Unknown model '{args.model}' for {manufacturer.name}")
        return 1

    rows = [
        [m.name, f"{m.year_start}-{m.year_end}", ", ".join(m.drivetrains), m.schedule_group]
        for m in sorted(models, key=lambda m: (m.name, m.year_start))
    ]
    print(f"{manufacturer.name}:")
    print(tabulate(rows, headers=["Model", "Years", "Drivetrains", "Schedule"],
                   tablefmt="simple"))
    return 0


def cmd_schedule(args, store: VehicleStore, catalog: Catalog):
    """Show the manufacturer schedule for a make/model/year."""
    items = catalog.resolve_schedule(args.make, args.model, args.year)
    if not items:
        print(f"No schedule found for {args.year} {args.make} {args.model}.")
        return 1

    drivetrain = args.drivetrain.upper() if args.drivetrain else None
    if drivetrain:
        items = [i for i in items if i.applies_to(drivetrain)]

    rows = []
    for item in items:
        interval = [f"{item.interval_miles:,.0f} mi"]
        if item.interval_months:
            interval.append(f"{item.interval_months} mo")
        rows.append(
            [
                type_name(catalog, item.service_type),
                " / ".join(interval),
                ", ".join(item.drivetrains) if item.drivetrains else "All",
                truncate(item.notes, 40),
            ]
        )

    print(f"Schedule: {args.year} {args.make} {args.model}")
    print(tabulate(rows, headers=["Service", "Interval", "Drivetrains", "Notes"],
                   tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


COMMANDS = {
    "vehicles": cmd_vehicles,
    "add-vehicle": cmd_add_vehicle,
    "remove-vehicle": cmd_remove_vehicle,
    "status": cmd_status,
    "history": cmd_history,
    "log": cmd_log,
    "remove-log": cmd_remove_log,
    "update-miles": cmd_update_miles,
    "catalog": cmd_catalog,
    "schedule": cmd_schedule,
}


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add-vehicle Toyota Camry 2019 FWD 42000 --nickname "Daily"
  %(prog)s status
  %(prog)s log oil_change --mileage 42000 --notes "0W-16 synthetic"
  %(prog)s update-miles 45500
  %(prog)s history
  %(prog)s catalog Toyota
  %(prog)s schedule Subaru Outback 2021
""",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=settings.data_dir,
        help=f"Directory holding vehicles and service log (default: {settings.data_dir})",
    )
    parser.add_argument(
        "--catalog-dir",
        type=Path,
        default=settings.catalog_dir,
        help="Directory holding catalog data (default: bundled catalog)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict_saves,
        help="Fail instead of warning when saving state fails",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("vehicles", help="List vehicles in the garage")

    add_parser = subparsers.add_parser("add-vehicle", help="Add a vehicle from the catalog")
    add_parser.add_argument("make", type=str, help="Manufacturer (e.g., 'Toyota')")
    add_parser.add_argument("model", type=str, help="Model (e.g., 'Camry')")
    add_parser.add_argument("year", type=int, help="Model year")
    add_parser.add_argument("drivetrain", type=str, help="FWD, RWD, AWD or 4WD")
    add_parser.add_argument("mileage", type=int, help="Current mileage")
    add_parser.add_argument("--nickname", type=str, help="Optional nickname")

    remove_parser = subparsers.add_parser(
        "remove-vehicle", help="Remove a vehicle and its service log"
    )
    remove_parser.add_argument("vehicle_id", type=str, help="Vehicle ID")

    status_parser = subparsers.add_parser(
        "status", help="Show what maintenance is overdue, due soon, or upcoming"
    )
    status_parser.add_argument("--vehicle", type=str, help="Vehicle ID (default: selected)")

    history_parser = subparsers.add_parser("history", help="View service history")
    history_parser.add_argument("--vehicle", type=str, help="Vehicle ID (default: selected)")

    log_parser = subparsers.add_parser("log", help="Record a completed service")
    log_parser.add_argument(
        "service_type", type=str, help="Service type key (e.g., 'oil_change')"
    )
    log_parser.add_argument("--vehicle", type=str, help="Vehicle ID (default: selected)")
    log_parser.add_argument(
        "--mileage", type=int, help="Mileage at time of service (default: current)"
    )
    log_parser.add_argument(
        "--date", type=str, help="Service date in YYYY-MM-DD format (default: today)"
    )
    log_parser.add_argument("--notes", type=str, help="Notes about the service")
    log_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    remove_log_parser = subparsers.add_parser("remove-log", help="Delete a service record")
    remove_log_parser.add_argument("entry_id", type=str, help="Log entry ID")

    update_miles_parser = subparsers.add_parser(
        "update-miles", help="Update current vehicle mileage"
    )
    update_miles_parser.add_argument("mileage", type=int, help="Current mileage")
    update_miles_parser.add_argument("--vehicle", type=str, help="Vehicle ID (default: selected)")
    update_miles_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be updated without saving"
    )

    catalog_parser = subparsers.add_parser("catalog", help="Browse manufacturers and models")
    catalog_parser.add_argument("make", nargs="?", help="Manufacturer")
    catalog_parser.add_argument("model", nargs="?", help="Model")

    schedule_parser = subparsers.add_parser(
        "schedule", help="Show the manufacturer schedule for a vehicle"
    )
    schedule_parser.add_argument("make", type=str)
    schedule_parser.add_argument("model", type=str)
    schedule_parser.add_argument("year", type=int)
    schedule_parser.add_argument("--drivetrain", type=str, help="Only items for this drivetrain")

    return parser


def main(argv: Optional[List[str]] = None):
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        catalog = load_catalog(args.catalog_dir)
        store = open_store(args)
        return COMMANDS[args.command](args, store, catalog)
    except MaintenanceTrackerError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)

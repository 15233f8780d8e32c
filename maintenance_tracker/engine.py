"""
Scheduling engine: turns a vehicle, its schedule and its service log into a
ranked list of maintenance statuses.

Logic for each schedule item:
1. Skip items restricted to drivetrains the vehicle doesn't have
2. Skip items whose service type isn't registered
3. Last service = log entry for this vehicle/type with the highest mileage
4. Next due = last + interval, or the next interval boundary from zero
5. Classify OVERDUE / DUE_SOON / UPCOMING by miles until due

The result is ordered by status, then by miles until due. The engine is
pure: it never touches the store.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .calculations import calc_due_date, calc_next_due_miles, check_status
from .catalog import default_catalog
from .exceptions import InvalidInput
from .maintenance_status import MaintenanceStatus
from .maintenance_type import MaintenanceTypeRegistry
from .schedule_item import ScheduleItem
from .service_log_entry import ServiceLogEntry
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def find_last_service(
    vehicle_id: str, service_type: str, service_log: Iterable[ServiceLogEntry]
) -> Optional[ServiceLogEntry]:
    """
    Get the service with the greatest mileage for a vehicle and type.

    Ties go to the entry logged last.
    """
    matches = [
        e for e in service_log
        if e.vehicle_id == vehicle_id and e.service_type == service_type
    ]
    if not matches:
        return None
    return sorted(matches, key=lambda e: e.mileage)[-1]


def _due_date(last_service: Optional[ServiceLogEntry], item: ScheduleItem) -> Optional[str]:
    if last_service is None or item.interval_months is None:
        return None
    try:
        last_date = last_service.performed_at.date()
    except ValueError:
        logger.debug("Unparseable service date %r on %s", last_service.date, last_service.id)
        return None
    due = calc_due_date(last_date, item.interval_months)
    return due.isoformat() if due else None


def calculate_status(
    vehicle: Vehicle,
    item: ScheduleItem,
    types: MaintenanceTypeRegistry,
    service_log: Sequence[ServiceLogEntry],
) -> Optional[MaintenanceStatus]:
    """Calculate the status of one schedule item, or None if it doesn't apply."""
    if not item.applies_to(vehicle.drivetrain):
        return None

    type_info = types.get(item.service_type)
    if type_info is None:
        logger.debug("Skipping unregistered service type %r", item.service_type)
        return None

    current_miles = vehicle.mileage
    last_service = find_last_service(vehicle.id, item.service_type, service_log)
    last_miles = last_service.mileage if last_service else None

    next_due = calc_next_due_miles(last_miles, item.interval_miles, current_miles)
    miles_until_due = next_due - current_miles

    return MaintenanceStatus(
        item=item,
        type_info=type_info,
        status=check_status(miles_until_due, item.interval_miles),
        next_due_miles=next_due,
        miles_until_due=miles_until_due,
        last_service_mileage=last_miles,
        last_service_date=last_service.date if last_service else None,
        due_date=_due_date(last_service, item),
    )


def compute_upcoming(
    vehicle: Vehicle,
    schedule_items: Sequence[ScheduleItem],
    service_log: Optional[Sequence[ServiceLogEntry]] = None,
    types: Optional[MaintenanceTypeRegistry] = None,
) -> List[MaintenanceStatus]:
    """
    Calculate and rank maintenance statuses for a vehicle.

    Args:
        vehicle: Vehicle with a non-negative current mileage
        schedule_items: Resolved schedule (may be empty)
        service_log: Completed services; entries for other vehicles are ignored
        types: Maintenance type registry (defaults to the bundled catalog's)

    Raises:
        InvalidInput: vehicle or schedule_items is missing, or the
            vehicle's mileage is not a non-negative number
    """
    if vehicle is None:
        raise InvalidInput("vehicle is required")
    if schedule_items is None:
        raise InvalidInput("schedule_items is required")
    mileage = getattr(vehicle, "mileage", None)
    if isinstance(mileage, bool) or not isinstance(mileage, (int, float)) or mileage < 0:
        raise InvalidInput(f"vehicle mileage must be a non-negative number, got {mileage!r}")

    if types is None:
        types = default_catalog().types

    log = list(service_log or [])
    statuses = []
    for item in schedule_items:
        status = calculate_status(vehicle, item, types, log)
        if status is not None:
            statuses.append(status)

    # Stable: equal keys keep schedule order
    statuses.sort(key=lambda s: (s.status.value, s.miles_until_due))
    return statuses

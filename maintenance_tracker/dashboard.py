"""Wire the store and catalog into the scheduling engine for one vehicle."""

from dataclasses import dataclass, field
from typing import List, Optional

from .catalog import Catalog
from .engine import compute_upcoming
from .maintenance_status import MaintenanceStatus
from .schedule_item import ScheduleItem
from .store import VehicleStore
from .summary import Summary, summarize
from .vehicle import Vehicle


@dataclass
class Dashboard:
    """Everything needed to show a vehicle's maintenance state."""

    vehicle: Vehicle
    schedule: List[ScheduleItem] = field(default_factory=list)
    statuses: List[MaintenanceStatus] = field(default_factory=list)
    summary: Optional[Summary] = None

    @property
    def has_schedule(self) -> bool:
        """False when the catalog has no schedule for this vehicle."""
        return bool(self.schedule)


def build_dashboard(
    store: VehicleStore, catalog: Catalog, vehicle_id: Optional[str] = None
) -> Optional[Dashboard]:
    """
    Compute statuses for a vehicle (default: the selected one).

    Returns None when there is no such vehicle.
    """
    if vehicle_id is not None:
        vehicle = store.get_vehicle(vehicle_id)
    else:
        vehicle = store.selected_vehicle
    if vehicle is None:
        return None

    schedule = catalog.resolve_schedule(vehicle.make, vehicle.model, vehicle.year)
    statuses = compute_upcoming(
        vehicle, schedule, store.list_service_log(vehicle.id), catalog.types
    )
    return Dashboard(
        vehicle=vehicle,
        schedule=schedule,
        statuses=statuses,
        summary=summarize(statuses),
    )

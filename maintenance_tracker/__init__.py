"""
Vehicle maintenance scheduling.

This package provides the maintenance scheduling engine and its data:
- Status / OverallStatus: urgency levels (OVERDUE, DUE_SOON, UPCOMING)
- MaintenanceTypeDef / MaintenanceTypeRegistry: canonical service types
- ScheduleItem, Model, Manufacturer, Catalog: manufacturer schedules
- Vehicle, ServiceLogEntry: user records
- compute_upcoming: ranked maintenance statuses for a vehicle
- summarize: counts and overall health
- VehicleStore / YamlStorage: state container and its persistence
"""

from .status import Status, OverallStatus
from .exceptions import (
    MaintenanceTrackerError,
    InvalidInput,
    StaleReference,
    PersistenceFailure,
    CatalogError,
)
from .maintenance_type import Severity, MaintenanceTypeDef, MaintenanceTypeRegistry
from .schedule_item import ScheduleItem
from .manufacturer import Model, Manufacturer, drivetrain_label
from .catalog import Catalog, load_catalog, default_catalog
from .vehicle import Vehicle
from .service_log_entry import ServiceLogEntry, group_by_month
from .maintenance_status import MaintenanceStatus
from .calculations import calc_next_due_miles, calc_due_date, check_status, due_soon_threshold
from .engine import compute_upcoming, find_last_service
from .summary import Summary, summarize
from .storage import YamlStorage, VEHICLES_KEY, MAINTENANCE_LOG_KEY
from .store import VehicleStore, generate_id
from .dashboard import Dashboard, build_dashboard
from .config import Settings

__all__ = [
    "Status",
    "OverallStatus",
    "MaintenanceTrackerError",
    "InvalidInput",
    "StaleReference",
    "PersistenceFailure",
    "CatalogError",
    "Severity",
    "MaintenanceTypeDef",
    "MaintenanceTypeRegistry",
    "ScheduleItem",
    "Model",
    "Manufacturer",
    "drivetrain_label",
    "Catalog",
    "load_catalog",
    "default_catalog",
    "Vehicle",
    "ServiceLogEntry",
    "group_by_month",
    "MaintenanceStatus",
    "calc_next_due_miles",
    "calc_due_date",
    "check_status",
    "due_soon_threshold",
    "compute_upcoming",
    "find_last_service",
    "Summary",
    "summarize",
    "YamlStorage",
    "VEHICLES_KEY",
    "MAINTENANCE_LOG_KEY",
    "VehicleStore",
    "generate_id",
    "Dashboard",
    "build_dashboard",
    "Settings",
]

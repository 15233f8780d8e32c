"""
Vehicle and service log store.

Holds the application state (vehicles, the append-only service log and the
selected vehicle) and persists each collection through a storage backend.
Mutations serialize on a single lock: in-memory state changes first, then
the affected collection is written, both under the lock.

Persistence policy: a failed load degrades to an empty collection; a failed
save is logged and dropped unless the store is ``strict``.
"""

import itertools
import logging
import secrets
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .exceptions import InvalidInput, PersistenceFailure, StaleReference
from .service_log_entry import ServiceLogEntry
from .storage import MAINTENANCE_LOG_KEY, VEHICLES_KEY, YamlStorage
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

_id_counter = itertools.count(1)


def generate_id(prefix: str) -> str:
    """Process-unique id: timestamp, monotonic counter and random suffix."""
    millis = int(time.time() * 1000)
    return f"{prefix}_{millis}_{next(_id_counter)}_{secrets.token_hex(4)}"


def _validate_mileage(mileage: Any) -> int:
    if isinstance(mileage, bool) or not isinstance(mileage, (int, float)):
        raise InvalidInput(f"mileage must be a number, got {mileage!r}")
    if mileage < 0:
        raise InvalidInput(f"mileage must be >= 0, got {mileage!r}")
    return int(mileage)


class VehicleStore:
    """State container for vehicles and their service log."""

    def __init__(self, storage: Optional[YamlStorage] = None, strict: bool = False):
        self.storage = storage
        self.strict = strict
        self._lock = threading.RLock()
        self._vehicles: List[Vehicle] = []
        self._log: List[ServiceLogEntry] = []
        self.selected_vehicle_id: Optional[str] = None

    # -------------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------------

    def _load_collection(self, key: str, parse: Callable[[Dict[str, Any]], Any]) -> list:
        if self.storage is None:
            return []
        try:
            return [parse(d) for d in self.storage.load(key)]
        except PersistenceFailure as e:
            logger.error("Error loading %s, starting empty: %s", key, e)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Malformed record in %s, starting empty: %r", key, e)
        return []

    def load(self) -> "VehicleStore":
        """Load both collections; selection falls to the first vehicle."""
        with self._lock:
            self._vehicles = self._load_collection(VEHICLES_KEY, Vehicle.from_dict)
            self._log = self._load_collection(MAINTENANCE_LOG_KEY, ServiceLogEntry.from_dict)
            self.selected_vehicle_id = self._vehicles[0].id if self._vehicles else None
            logger.info(
                "Loaded %d vehicles and %d log entries",
                len(self._vehicles),
                len(self._log),
            )
        return self

    def _save(self, key: str, items: list) -> None:
        if self.storage is None:
            return
        try:
            self.storage.save(key, [item.to_dict() for item in items])
        except PersistenceFailure as e:
            if self.strict:
                raise
            # TODO: retry with backoff instead of dropping the write
            logger.error("Error saving %s: %s", key, e)

    def _save_vehicles(self) -> None:
        self._save(VEHICLES_KEY, self._vehicles)

    def _save_log(self) -> None:
        self._save(MAINTENANCE_LOG_KEY, self._log)

    # -------------------------------------------------------------------------
    # Vehicles
    # -------------------------------------------------------------------------

    @property
    def vehicles(self) -> List[Vehicle]:
        with self._lock:
            return list(self._vehicles)

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        with self._lock:
            for vehicle in self._vehicles:
                if vehicle.id == vehicle_id:
                    return vehicle
        return None

    def _require_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle is None:
            raise StaleReference(f"Unknown vehicle: {vehicle_id}")
        return vehicle

    @property
    def selected_vehicle(self) -> Optional[Vehicle]:
        with self._lock:
            if self.selected_vehicle_id is None:
                return None
            return self.get_vehicle(self.selected_vehicle_id)

    def select_vehicle(self, vehicle_id: str) -> Vehicle:
        with self._lock:
            vehicle = self._require_vehicle(vehicle_id)
            self.selected_vehicle_id = vehicle.id
            return vehicle

    def add_vehicle(
        self,
        make: str,
        model: str,
        year: int,
        drivetrain: str,
        mileage: int,
        nickname: Optional[str] = None,
    ) -> Vehicle:
        """Create a vehicle with a generated id; it becomes the selection."""
        if not make or not model or not drivetrain:
            raise InvalidInput("make, model and drivetrain are required")
        try:
            year = int(year)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid model year {year!r}") from e
        vehicle = Vehicle(
            id=generate_id("vehicle"),
            make=make,
            model=model,
            year=year,
            drivetrain=drivetrain,
            mileage=_validate_mileage(mileage),
            nickname=nickname or None,
            added_date=datetime.now().isoformat(timespec="seconds"),
        )
        with self._lock:
            self._vehicles.append(vehicle)
            self.selected_vehicle_id = vehicle.id
            self._save_vehicles()
        logger.info("Added vehicle %s (%s)", vehicle.id, vehicle.name)
        return vehicle

    def update_vehicle_mileage(self, vehicle_id: str, mileage: int) -> Vehicle:
        miles = _validate_mileage(mileage)
        with self._lock:
            vehicle = self._require_vehicle(vehicle_id)
            vehicle.mileage = miles
            self._save_vehicles()
        logger.info("Updated mileage of %s to %d", vehicle_id, miles)
        return vehicle

    def remove_vehicle(self, vehicle_id: str) -> None:
        """Remove a vehicle and every log entry that refers to it."""
        with self._lock:
            self._require_vehicle(vehicle_id)
            self._vehicles = [v for v in self._vehicles if v.id != vehicle_id]
            self._log = [e for e in self._log if e.vehicle_id != vehicle_id]
            if self.selected_vehicle_id == vehicle_id:
                self.selected_vehicle_id = self._vehicles[0].id if self._vehicles else None
            self._save_vehicles()
            self._save_log()
        logger.info("Removed vehicle %s", vehicle_id)

    # -------------------------------------------------------------------------
    # Service log
    # -------------------------------------------------------------------------

    @property
    def service_log(self) -> List[ServiceLogEntry]:
        with self._lock:
            return list(self._log)

    def list_service_log(self, vehicle_id: str) -> List[ServiceLogEntry]:
        """Entries for one vehicle, in the order they were logged."""
        with self._lock:
            return [e for e in self._log if e.vehicle_id == vehicle_id]

    def vehicle_history(self, vehicle_id: str) -> List[ServiceLogEntry]:
        """Entries for one vehicle, newest service date first."""
        return sorted(
            self.list_service_log(vehicle_id),
            key=lambda e: e.performed_at.replace(tzinfo=None),
            reverse=True,
        )

    def get_service_log_entry(self, entry_id: str) -> Optional[ServiceLogEntry]:
        with self._lock:
            for entry in self._log:
                if entry.id == entry_id:
                    return entry
        return None

    def add_service_log_entry(self, entry: ServiceLogEntry) -> ServiceLogEntry:
        _validate_mileage(entry.mileage)
        try:
            entry.performed_at
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid service date {entry.date!r}") from e
        with self._lock:
            self._require_vehicle(entry.vehicle_id)
            if self.get_service_log_entry(entry.id) is not None:
                raise InvalidInput(f"Duplicate log entry id: {entry.id}")
            self._log.append(entry)
            self._save_log()
        logger.info(
            "Logged %s for %s at %s mi", entry.service_type, entry.vehicle_id, entry.mileage
        )
        return entry

    def log_service(
        self,
        vehicle_id: str,
        service_type: str,
        mileage: int,
        date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ServiceLogEntry:
        """Build and append a log entry; date defaults to now."""
        entry = ServiceLogEntry(
            id=generate_id("log"),
            vehicle_id=vehicle_id,
            service_type=service_type,
            mileage=_validate_mileage(mileage),
            date=date or datetime.now().isoformat(timespec="seconds"),
            notes=notes or None,
        )
        return self.add_service_log_entry(entry)

    def remove_service_log_entry(self, entry_id: str) -> None:
        with self._lock:
            if self.get_service_log_entry(entry_id) is None:
                raise StaleReference(f"Unknown log entry: {entry_id}")
            self._log = [e for e in self._log if e.id != entry_id]
            self._save_log()
        logger.info("Removed log entry %s", entry_id)

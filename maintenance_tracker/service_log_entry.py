"""ServiceLogEntry class for completed maintenance records."""
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from dateutil.parser import isoparse


class ServiceLogEntry:
    """A record of maintenance performed. Immutable once logged."""

    def __init__(
            self,
            id: str,
            vehicle_id: str,
            service_type: str,
            mileage: int,
            date: str,
            notes: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.service_type = service_type
        self.mileage = mileage
        self.date = date
        self.notes = notes

    @property
    def performed_at(self) -> datetime:
        """Service date parsed from ISO date or timestamp."""
        return isoparse(self.date)

    def __repr__(self) -> str:
        return f"ServiceLogEntry({self.id!r}, {self.service_type!r}, {self.mileage!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase document format."""
        d: Dict[str, Any] = {
            "id": self.id,
            "vehicleId": self.vehicle_id,
            "type": self.service_type,
            "mileage": self.mileage,
            "date": self.date,
        }
        if self.notes:
            d["notes"] = self.notes
        return d

    @classmethod
    def from_dict(cls, dct: Dict[str, Any]) -> "ServiceLogEntry":
        """Build from a stored record; raises ValueError for an unparseable date."""
        entry = cls(
            dct["id"],
            dct["vehicleId"],
            dct["type"],
            int(dct["mileage"]),
            str(dct["date"]),
            dct.get("notes") or None,
        )
        entry.performed_at
        return entry


def group_by_month(entries: Iterable[ServiceLogEntry]) -> List[Dict[str, Any]]:
    """
    Group entries by calendar month, newest month first.

    Each group is {"key": "2025-01", "label": "January 2025", "entries": [...]};
    entries keep their incoming order within a group.
    """
    groups: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for entry in entries:
        when = entry.performed_at
        key = f"{when.year}-{when.month:02d}"
        if key not in groups:
            groups[key] = {"key": key, "label": when.strftime("%B %Y"), "entries": []}
        groups[key]["entries"].append(entry)
    return sorted(groups.values(), key=lambda g: g["key"], reverse=True)

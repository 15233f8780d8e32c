"""MaintenanceStatus dataclass for calculated service status."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from .status import Status

if TYPE_CHECKING:
    from .maintenance_type import MaintenanceTypeDef
    from .schedule_item import ScheduleItem


@dataclass
class MaintenanceStatus:
    """Calculated due information for one schedule item. Never persisted."""

    item: "ScheduleItem"
    type_info: "MaintenanceTypeDef"
    status: Status
    next_due_miles: float
    miles_until_due: float
    last_service_mileage: Optional[float] = None
    last_service_date: Optional[str] = None
    due_date: Optional[str] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.DUE_SOON)

    @property
    def is_estimated(self) -> bool:
        """True when next due was projected from zero, not from a log entry."""
        return self.last_service_mileage is None

    def to_dict(self) -> Dict[str, Any]:
        d = self.item.to_dict()
        d.update(
            {
                "typeInfo": self.type_info.to_dict(),
                "status": self.status.key,
                "statusLabel": self.status.label,
                "nextDueMiles": self.next_due_miles,
                "milesUntilDue": self.miles_until_due,
                "lastServiceMileage": self.last_service_mileage,
                "lastServiceDate": self.last_service_date,
                "dueDate": self.due_date,
                "estimated": self.is_estimated,
            }
        )
        return d

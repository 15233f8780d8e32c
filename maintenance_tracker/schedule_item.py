"""ScheduleItem class for manufacturer maintenance intervals."""
from typing import Any, Dict, List, Optional


class ScheduleItem:
    """A service the manufacturer asks for at a fixed mileage interval."""

    def __init__(
            self,
            service_type: str,
            interval_miles: float,
            interval_months: Optional[float] = None,
            drivetrains: Optional[List[str]] = None,
            notes: Optional[str] = None,
    ):
        self.service_type = service_type
        self.interval_miles = interval_miles
        self.interval_months = interval_months
        self.drivetrains = list(drivetrains) if drivetrains is not None else None
        self.notes = notes

    def applies_to(self, drivetrain: Optional[str]) -> bool:
        """Check if this item applies to the given drivetrain code."""
        if self.drivetrains is None:
            return True
        return drivetrain in self.drivetrains

    def __repr__(self) -> str:
        return f"ScheduleItem({self.service_type!r}, {self.interval_miles!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase document format."""
        d: Dict[str, Any] = {
            "type": self.service_type,
            "intervalMiles": self.interval_miles,
        }
        if self.interval_months is not None:
            d["intervalMonths"] = self.interval_months
        if self.drivetrains is not None:
            d["drivetrainSpecific"] = list(self.drivetrains)
        if self.notes is not None:
            d["notes"] = self.notes
        return d

"""Manufacturer and Model classes for the schedule catalog."""

from typing import Dict, List, Optional, Sequence

from .schedule_item import ScheduleItem

DRIVETRAIN_LABELS = {
    "FWD": "Front-Wheel Drive (FWD)",
    "RWD": "Rear-Wheel Drive (RWD)",
    "AWD": "All-Wheel Drive (AWD)",
    "4WD": "Four-Wheel Drive (4WD)",
}


def drivetrain_label(code: str) -> str:
    """Human-readable drivetrain name, falling back to the code itself."""
    return DRIVETRAIN_LABELS.get(code, code)


class Model:
    """One generation of a model: a year range sharing a schedule group."""

    def __init__(
        self,
        name: str,
        year_start: int,
        year_end: int,
        drivetrains: Sequence[str],
        schedule_group: str,
    ):
        self.name = name
        self.year_start = year_start
        self.year_end = year_end
        self.drivetrains = tuple(drivetrains)
        self.schedule_group = schedule_group

    @property
    def years(self) -> range:
        return range(self.year_start, self.year_end + 1)

    def covers(self, year: int) -> bool:
        """Check if the model year falls within this generation (inclusive)."""
        return self.year_start <= year <= self.year_end

    def overlaps(self, other: "Model") -> bool:
        return (
            self.name == other.name
            and self.year_start <= other.year_end
            and other.year_start <= self.year_end
        )

    def __repr__(self) -> str:
        return f"Model({self.name!r}, {self.year_start}-{self.year_end})"


class Manufacturer:
    """A make with its models and the schedule groups they refer to."""

    def __init__(
        self,
        name: str,
        models: List[Model],
        schedules: Dict[str, List[ScheduleItem]],
        region: Optional[str] = None,
    ):
        self.name = name
        self.models = models
        self.schedules = schedules
        self.region = region

    def find_model(self, name: str, year: int) -> Optional[Model]:
        """First model in declaration order matching name and year."""
        for model in self.models:
            if model.name == name and model.covers(year):
                return model
        return None

    def __repr__(self) -> str:
        return f"Manufacturer({self.name!r})"

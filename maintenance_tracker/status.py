"""Status enums for maintenance urgency and overall vehicle health."""

from enum import Enum


class Status(Enum):
    """Maintenance status categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE_SOON = 2
    UPCOMING = 3

    @property
    def key(self) -> str:
        """Serialized form (e.g. 'due_soon')."""
        return self.name.lower()

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Status.OVERDUE: "Overdue",
    Status.DUE_SOON: "Due Soon",
    Status.UPCOMING: "On Track",
}


class OverallStatus(Enum):
    """Health of a vehicle as a whole, derived from its item statuses."""

    GOOD = "good"
    MONITOR = "monitor"
    ATTENTION = "attention"

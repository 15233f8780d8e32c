"""Reduce a list of maintenance statuses to counts and overall health."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable

from .maintenance_status import MaintenanceStatus
from .status import OverallStatus, Status


@dataclass(frozen=True)
class Summary:
    """Status counts for one vehicle."""

    overdue: int
    due_soon: int
    upcoming: int
    overall_status: OverallStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overdueCount": self.overdue,
            "dueSoonCount": self.due_soon,
            "upcomingCount": self.upcoming,
            "overallStatus": self.overall_status.value,
        }


def summarize(statuses: Iterable[MaintenanceStatus]) -> Summary:
    """Count statuses; ATTENTION if anything is overdue, MONITOR if due soon."""
    counts = {status: 0 for status in Status}
    for svc in statuses:
        counts[svc.status] += 1

    overall = OverallStatus.GOOD
    if counts[Status.OVERDUE] > 0:
        overall = OverallStatus.ATTENTION
    elif counts[Status.DUE_SOON] > 0:
        overall = OverallStatus.MONITOR

    return Summary(
        overdue=counts[Status.OVERDUE],
        due_soon=counts[Status.DUE_SOON],
        upcoming=counts[Status.UPCOMING],
        overall_status=overall,
    )

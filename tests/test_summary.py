#!/usr/bin/env python3
"""Tests for summarize."""

from maintenance_tracker import (
    MaintenanceStatus,
    MaintenanceTypeDef,
    OverallStatus,
    ScheduleItem,
    Status,
    Summary,
    summarize,
)


def make_status(status):
    return MaintenanceStatus(
        item=ScheduleItem("oil_change", 7500),
        type_info=MaintenanceTypeDef("oil_change", "Oil Change"),
        status=status,
        next_due_miles=30000,
        miles_until_due=0,
    )


class TestSummarize:
    """Tests for summarize counts and overall status."""

    def test_empty_is_good(self):
        assert summarize([]) == Summary(0, 0, 0, OverallStatus.GOOD)

    def test_all_upcoming_is_good(self):
        result = summarize([make_status(Status.UPCOMING)] * 3)
        assert result == Summary(0, 0, 3, OverallStatus.GOOD)

    def test_due_soon_is_monitor(self):
        result = summarize([make_status(Status.DUE_SOON), make_status(Status.UPCOMING)])
        assert result.overall_status == OverallStatus.MONITOR

    def test_any_overdue_is_attention(self):
        statuses = (
            [make_status(Status.OVERDUE)] * 2
            + [make_status(Status.DUE_SOON)]
            + [make_status(Status.UPCOMING)] * 3
        )
        assert summarize(statuses) == Summary(2, 1, 3, OverallStatus.ATTENTION)

    def test_counts_sum_to_length(self):
        statuses = [make_status(s) for s in (Status.OVERDUE, Status.UPCOMING, Status.DUE_SOON)]
        result = summarize(statuses)
        assert result.overdue + result.due_soon + result.upcoming == len(statuses)

    def test_to_dict(self):
        result = summarize([make_status(Status.DUE_SOON)])
        assert result.to_dict() == {
            "overdueCount": 0,
            "dueSoonCount": 1,
            "upcomingCount": 0,
            "overallStatus": "monitor",
        }

#!/usr/bin/env python3
"""Tests for build_dashboard."""
import pytest

from maintenance_tracker import (
    OverallStatus,
    Status,
    VehicleStore,
    build_dashboard,
    default_catalog,
)


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def store():
    return VehicleStore()


class TestBuildDashboard:
    """Tests for build_dashboard against the bundled catalog."""

    def test_no_vehicle(self, store, catalog):
        assert build_dashboard(store, catalog) is None
        assert build_dashboard(store, catalog, "nope") is None

    def test_selected_vehicle(self, store, catalog):
        vehicle = store.add_vehicle("Toyota", "Camry", 2019, "FWD", 23000)
        dashboard = build_dashboard(store, catalog)
        assert dashboard.vehicle is vehicle
        assert dashboard.has_schedule

    def test_fwd_skips_awd_items(self, store, catalog):
        store.add_vehicle("Toyota", "Camry", 2019, "FWD", 23000)
        dashboard = build_dashboard(store, catalog)
        types = [s.item.service_type for s in dashboard.statuses]
        assert "differential_fluid" not in types
        assert len(dashboard.statuses) == len(dashboard.schedule) - 1

    def test_awd_includes_awd_items(self, store, catalog):
        store.add_vehicle("Toyota", "Camry", 2019, "AWD", 23000)
        dashboard = build_dashboard(store, catalog)
        types = [s.item.service_type for s in dashboard.statuses]
        assert "differential_fluid" in types

    def test_ranking_and_summary(self, store, catalog):
        vehicle = store.add_vehicle("Toyota", "Camry", 2019, "FWD", 23000)
        dashboard = build_dashboard(store, catalog)
        # No history: everything projected from zero, nearest is the 5,000 mi rotation
        assert dashboard.statuses[0].item.service_type == "tire_rotation"
        assert dashboard.statuses[0].next_due_miles == 25000
        assert all(s.is_estimated for s in dashboard.statuses)
        assert dashboard.summary.overall_status == OverallStatus.GOOD

        store.log_service(vehicle.id, "oil_change", 12000, "2024-06-01")
        dashboard = build_dashboard(store, catalog)
        assert dashboard.statuses[0].item.service_type == "oil_change"
        assert dashboard.statuses[0].status == Status.OVERDUE
        assert dashboard.summary.overall_status == OverallStatus.ATTENTION
        assert dashboard.summary.overdue == 1

    def test_only_own_history(self, store, catalog):
        first = store.add_vehicle("Toyota", "Camry", 2019, "FWD", 23000)
        second = store.add_vehicle("Toyota", "Camry", 2019, "FWD", 23000)
        store.log_service(second.id, "oil_change", 12000, "2024-06-01")
        dashboard = build_dashboard(store, catalog, first.id)
        assert dashboard.summary.overdue == 0

    def test_vehicle_outside_catalog(self, store, catalog):
        store.add_vehicle("Yugo", "GV", 1987, "FWD", 80000)
        dashboard = build_dashboard(store, catalog)
        assert not dashboard.has_schedule
        assert dashboard.statuses == []
        assert dashboard.summary.overall_status == OverallStatus.GOOD

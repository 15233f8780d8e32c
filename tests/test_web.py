#!/usr/bin/env python3
"""Tests for the Flask JSON API."""
import pytest

from maintenance_tracker import (
    PersistenceFailure,
    Settings,
    VehicleStore,
    YamlStorage,
    default_catalog,
)
from web.app import create_app


class FailingStorage(YamlStorage):

    def save(self, key, items):
        raise PersistenceFailure(key, "disk full")


@pytest.fixture
def store():
    return VehicleStore()


@pytest.fixture
def client(store, tmp_path):
    app = create_app(store=store, catalog=default_catalog(), settings=Settings(data_dir=tmp_path))
    app.config["TESTING"] = True
    return app.test_client()


CAMRY = {"make": "Toyota", "model": "Camry", "year": 2019, "drivetrain": "FWD", "mileage": 23000}


@pytest.fixture
def vehicle_id(client):
    return client.post("/api/vehicles", json=CAMRY).get_json()["id"]


class TestCatalogRoutes:
    """Tests for catalog browsing."""

    def test_manufacturers(self, client):
        resp = client.get("/api/manufacturers")
        assert resp.status_code == 200
        assert {"name": "Toyota", "region": "japanese"} in resp.get_json()

    def test_models(self, client):
        resp = client.get("/api/manufacturers/toyota/models")
        data = resp.get_json()
        assert data["make"] == "Toyota"
        camry = next(m for m in data["models"] if m["name"] == "Camry")
        assert camry["years"][0] == 2024
        assert camry["years"][-1] == 2012

    def test_models_unknown_make(self, client):
        resp = client.get("/api/manufacturers/Yugo/models")
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "not_found"

    def test_schedule(self, client):
        resp = client.get("/api/schedule?make=Toyota&model=Camry&year=2019")
        data = resp.get_json()
        assert data["items"][0] == {
            "type": "oil_change",
            "intervalMiles": 10000,
            "intervalMonths": 12,
            "notes": "0W-16 synthetic.",
        }
        assert {"code": "AWD", "label": "All-Wheel Drive (AWD)"} in data["drivetrains"]

    def test_schedule_miss_is_empty(self, client):
        data = client.get("/api/schedule?make=Toyota&model=Camry&year=1990").get_json()
        assert data == {"items": [], "drivetrains": []}

    def test_schedule_bad_year(self, client):
        resp = client.get("/api/schedule?make=Toyota&model=Camry&year=soon")
        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "invalid_input"


class TestVehicleRoutes:
    """Tests for vehicle management."""

    def test_add_and_list(self, client):
        resp = client.post("/api/vehicles", json={**CAMRY, "make": "toyota", "drivetrain": "fwd"})
        assert resp.status_code == 201
        vehicle = resp.get_json()
        assert vehicle["make"] == "Toyota"
        assert vehicle["drivetrain"] == "FWD"

        data = client.get("/api/vehicles").get_json()
        assert data["selectedVehicleId"] == vehicle["id"]
        assert [v["id"] for v in data["vehicles"]] == [vehicle["id"]]

    def test_add_not_in_catalog(self, client, store):
        resp = client.post("/api/vehicles", json={**CAMRY, "year": 1990})
        assert resp.status_code == 400
        assert store.vehicles == []

    def test_add_drivetrain_not_offered(self, client):
        resp = client.post("/api/vehicles", json={**CAMRY, "drivetrain": "4WD"})
        assert resp.status_code == 400

    def test_add_negative_mileage(self, client):
        resp = client.post("/api/vehicles", json={**CAMRY, "mileage": -1})
        assert resp.status_code == 400

    def test_add_rejects_non_string_fields(self, client, store):
        for field, value in (("make", 123), ("model", ["Camry"]), ("drivetrain", 4),
                             ("nickname", {"a": 1})):
            resp = client.post("/api/vehicles", json={**CAMRY, field: value})
            assert resp.status_code == 400, field
            assert resp.get_json()["error"]["code"] == "invalid_input"
        assert store.vehicles == []

    def test_add_missing_make(self, client):
        payload = {k: v for k, v in CAMRY.items() if k != "make"}
        assert client.post("/api/vehicles", json=payload).status_code == 400

    def test_add_requires_json_object(self, client):
        resp = client.post("/api/vehicles", data="nope", content_type="text/plain")
        assert resp.status_code == 400

    def test_select(self, client, vehicle_id):
        second = client.post("/api/vehicles", json=CAMRY).get_json()["id"]
        assert client.get("/api/vehicles").get_json()["selectedVehicleId"] == second
        resp = client.post(f"/api/vehicles/{vehicle_id}/select")
        assert resp.get_json() == {"selectedVehicleId": vehicle_id}
        assert client.post("/api/vehicles/nope/select").status_code == 404

    def test_update_mileage(self, client, vehicle_id):
        resp = client.post(f"/api/vehicles/{vehicle_id}/mileage", json={"mileage": 26000})
        assert resp.get_json()["mileage"] == 26000
        resp = client.post(f"/api/vehicles/{vehicle_id}/mileage", json={"mileage": -1})
        assert resp.status_code == 400
        resp = client.post("/api/vehicles/nope/mileage", json={"mileage": 1})
        assert resp.status_code == 404

    def test_remove(self, client, vehicle_id):
        resp = client.delete(f"/api/vehicles/{vehicle_id}")
        assert resp.get_json() == {"selectedVehicleId": None}
        assert client.get(f"/api/vehicles/{vehicle_id}/maintenance").status_code == 404
        assert client.delete(f"/api/vehicles/{vehicle_id}").status_code == 404


class TestMaintenanceRoutes:
    """Tests for maintenance status and the service log."""

    def test_maintenance(self, client, vehicle_id):
        data = client.get(f"/api/vehicles/{vehicle_id}/maintenance").get_json()
        assert data["hasSchedule"] is True
        assert data["items"][0]["type"] == "tire_rotation"
        assert data["items"][0]["estimated"] is True
        assert data["summary"]["overallStatus"] == "good"

    def test_log_changes_status(self, client, vehicle_id):
        resp = client.post(
            f"/api/vehicles/{vehicle_id}/log",
            json={"type": "oil_change", "mileage": 12000, "date": "2024-06-01"},
        )
        assert resp.status_code == 201
        data = client.get(f"/api/vehicles/{vehicle_id}/maintenance").get_json()
        assert data["items"][0]["type"] == "oil_change"
        assert data["items"][0]["status"] == "overdue"
        assert data["summary"]["overdueCount"] == 1

    def test_log_defaults_to_current_mileage(self, client, vehicle_id):
        entry = client.post(f"/api/vehicles/{vehicle_id}/log", json={"type": "oil_change"}).get_json()
        assert entry["mileage"] == 23000

    def test_log_unknown_type(self, client, vehicle_id):
        resp = client.post(f"/api/vehicles/{vehicle_id}/log", json={"type": "blinker_fluid"})
        assert resp.status_code == 400

    def test_log_rejects_non_string_fields(self, client, store, vehicle_id):
        for payload in (
            {"type": ["oil_change"]},
            {"type": "oil_change", "date": 20250115},
            {"type": "oil_change", "notes": ["synthetic"]},
        ):
            resp = client.post(f"/api/vehicles/{vehicle_id}/log", json=payload)
            assert resp.status_code == 400, payload
            assert resp.get_json()["error"]["code"] == "invalid_input"
        assert store.service_log == []

    def test_log_missing_type(self, client, vehicle_id):
        resp = client.post(f"/api/vehicles/{vehicle_id}/log", json={"mileage": 20000})
        assert resp.status_code == 400

    def test_log_unknown_vehicle(self, client):
        resp = client.post("/api/vehicles/nope/log", json={"type": "oil_change"})
        assert resp.status_code == 404

    def test_history_newest_first(self, client, vehicle_id):
        for date in ("2024-06-01", "2025-01-15", "2024-11-20"):
            client.post(
                f"/api/vehicles/{vehicle_id}/log",
                json={"type": "oil_change", "mileage": 12000, "date": date},
            )
        data = client.get(f"/api/vehicles/{vehicle_id}/log").get_json()
        assert [e["date"] for e in data] == ["2025-01-15", "2024-11-20", "2024-06-01"]

    def test_remove_log_entry(self, client, vehicle_id):
        entry = client.post(f"/api/vehicles/{vehicle_id}/log", json={"type": "oil_change"}).get_json()
        assert client.delete(f"/api/log/{entry['id']}").status_code == 204
        assert client.get(f"/api/vehicles/{vehicle_id}/log").get_json() == []
        assert client.delete(f"/api/log/{entry['id']}").status_code == 404


class TestPersistenceFailure:

    def test_strict_save_failure(self, tmp_path):
        store = VehicleStore(FailingStorage(tmp_path), strict=True)
        app = create_app(store=store, catalog=default_catalog(),
                         settings=Settings(data_dir=tmp_path))
        resp = app.test_client().post("/api/vehicles", json=CAMRY)
        assert resp.status_code == 503
        assert resp.get_json()["error"]["code"] == "persistence_failure"

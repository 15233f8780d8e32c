"""Flask JSON API for vehicle maintenance tracking."""

import logging
from typing import Optional

from flask import Flask, current_app, jsonify, request

from maintenance_tracker import (
    Catalog,
    InvalidInput,
    PersistenceFailure,
    Settings,
    StaleReference,
    VehicleStore,
    YamlStorage,
    build_dashboard,
    drivetrain_label,
    load_catalog,
)

logger = logging.getLogger(__name__)


def get_store() -> VehicleStore:
    return current_app.extensions["maintenance_store"]


def get_catalog() -> Catalog:
    return current_app.extensions["maintenance_catalog"]


def error_response(code: str, message: str, status: int):
    return jsonify({"error": {"code": code, "message": message}}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("Expected a JSON object body")
    return data


def int_field(data: dict, name: str, required: bool = True) -> Optional[int]:
    """Parse an integer field from a request body or query string."""
    value = data.get(name)
    if value is None or value == "":
        if required:
            raise InvalidInput(f"'{name}' is required")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"'{name}' must be an integer")


def str_field(data: dict, name: str, required: bool = True) -> Optional[str]:
    """Get a string field from a request body; empty counts as missing."""
    value = data.get(name)
    if value is None or value == "":
        if required:
            raise InvalidInput(f"'{name}' is required")
        return None
    if not isinstance(value, str):
        raise InvalidInput(f"'{name}' must be a string")
    return value


def register_routes(app: Flask) -> None:
    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    @app.route("/api/manufacturers")
    def list_manufacturers():
        """All makes, alphabetically."""
        return jsonify([
            {"name": m.name, "region": m.region}
            for m in get_catalog().list_manufacturers()
        ])

    @app.route("/api/manufacturers/<make>/models")
    def list_models(make: str):
        """Models of a make with their years and drivetrains."""
        catalog = get_catalog()
        manufacturer = catalog.find_manufacturer(make)
        if manufacturer is None:
            return error_response("not_found", f"Unknown make '{make}'", 404)
        models = []
        for name in catalog.model_names(manufacturer.name):
            years = catalog.model_years(manufacturer.name, name)
            models.append({"name": name, "years": years})
        return jsonify({"make": manufacturer.name, "models": models})

    @app.route("/api/schedule")
    def get_schedule():
        """Resolved schedule for ?make=&model=&year= (empty list on a miss)."""
        catalog = get_catalog()
        make = request.args.get("make", "")
        model = request.args.get("model", "")
        year = int_field(request.args, "year")
        items = catalog.resolve_schedule(make, model, year)
        matching = catalog.find_model(make, model, year)
        drivetrains = matching.drivetrains if matching else ()
        return jsonify({
            "items": [item.to_dict() for item in items],
            "drivetrains": [{"code": d, "label": drivetrain_label(d)} for d in drivetrains],
        })

    # -------------------------------------------------------------------------
    # Vehicles
    # -------------------------------------------------------------------------

    @app.route("/api/vehicles", methods=["GET"])
    def list_vehicles():
        store = get_store()
        return jsonify({
            "selectedVehicleId": store.selected_vehicle_id,
            "vehicles": [v.to_dict() for v in store.vehicles],
        })

    @app.route("/api/vehicles", methods=["POST"])
    def add_vehicle():
        """Add a vehicle; the make/model/year/drivetrain must exist in the catalog."""
        data = json_body()
        make = str_field(data, "make")
        model_name = str_field(data, "model")
        drivetrain = str_field(data, "drivetrain").upper()
        nickname = str_field(data, "nickname", required=False)
        year = int_field(data, "year")
        mileage = int_field(data, "mileage")
        catalog = get_catalog()
        manufacturer = catalog.find_manufacturer(make)
        model = manufacturer.find_model(model_name, year) if manufacturer else None
        if model is None:
            raise InvalidInput("Vehicle not found in catalog")
        if drivetrain not in model.drivetrains:
            raise InvalidInput(f"Drivetrain '{drivetrain}' not offered for this model")

        vehicle = get_store().add_vehicle(
            manufacturer.name,
            model.name,
            year,
            drivetrain,
            mileage,
            nickname,
        )
        return jsonify(vehicle.to_dict()), 201

    @app.route("/api/vehicles/<vehicle_id>", methods=["DELETE"])
    def remove_vehicle(vehicle_id: str):
        store = get_store()
        store.remove_vehicle(vehicle_id)
        return jsonify({"selectedVehicleId": store.selected_vehicle_id})

    @app.route("/api/vehicles/<vehicle_id>/select", methods=["POST"])
    def select_vehicle(vehicle_id: str):
        vehicle = get_store().select_vehicle(vehicle_id)
        return jsonify({"selectedVehicleId": vehicle.id})

    @app.route("/api/vehicles/<vehicle_id>/mileage", methods=["POST"])
    def update_mileage(vehicle_id: str):
        mileage = int_field(json_body(), "mileage")
        vehicle = get_store().update_vehicle_mileage(vehicle_id, mileage)
        return jsonify(vehicle.to_dict())

    @app.route("/api/vehicles/<vehicle_id>/maintenance")
    def vehicle_maintenance(vehicle_id: str):
        """Ranked maintenance statuses and summary for a vehicle."""
        dashboard = build_dashboard(get_store(), get_catalog(), vehicle_id)
        if dashboard is None:
            raise StaleReference(f"Unknown vehicle: {vehicle_id}")
        return jsonify({
            "vehicle": dashboard.vehicle.to_dict(),
            "hasSchedule": dashboard.has_schedule,
            "items": [s.to_dict() for s in dashboard.statuses],
            "summary": dashboard.summary.to_dict(),
        })

    # -------------------------------------------------------------------------
    # Service log
    # -------------------------------------------------------------------------

    @app.route("/api/vehicles/<vehicle_id>/log", methods=["GET"])
    def vehicle_log(vehicle_id: str):
        """Service history, newest first."""
        store = get_store()
        if store.get_vehicle(vehicle_id) is None:
            raise StaleReference(f"Unknown vehicle: {vehicle_id}")
        return jsonify([e.to_dict() for e in store.vehicle_history(vehicle_id)])

    @app.route("/api/vehicles/<vehicle_id>/log", methods=["POST"])
    def log_service(vehicle_id: str):
        """Record a service; mileage defaults to the vehicle's current mileage."""
        store = get_store()
        vehicle = store.get_vehicle(vehicle_id)
        if vehicle is None:
            raise StaleReference(f"Unknown vehicle: {vehicle_id}")
        data = json_body()
        service_type = str_field(data, "type")
        if service_type not in get_catalog().types:
            raise InvalidInput(f"Unknown service type '{service_type}'")
        mileage = int_field(data, "mileage", required=False)
        entry = store.log_service(
            vehicle.id,
            service_type,
            vehicle.mileage if mileage is None else mileage,
            str_field(data, "date", required=False),
            str_field(data, "notes", required=False),
        )
        return jsonify(entry.to_dict()), 201

    @app.route("/api/log/<entry_id>", methods=["DELETE"])
    def remove_log_entry(entry_id: str):
        get_store().remove_service_log_entry(entry_id)
        return "", 204


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InvalidInput)
    def handle_invalid_input(e):
        return error_response("invalid_input", str(e), 400)

    @app.errorhandler(StaleReference)
    def handle_stale_reference(e):
        return error_response("not_found", str(e), 404)

    @app.errorhandler(PersistenceFailure)
    def handle_persistence_failure(e):
        logger.error("Persistence failure: %s", e)
        return error_response("persistence_failure", "Could not save changes", 503)


def create_app(
    store: Optional[VehicleStore] = None,
    catalog: Optional[Catalog] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Build the app around an injected store and catalog."""
    settings = settings or Settings.from_env()
    app = Flask(__name__)

    if catalog is None:
        catalog = load_catalog(settings.catalog_dir)
    if store is None:
        store = VehicleStore(YamlStorage(settings.data_dir), strict=settings.strict_saves)
        store.load()

    app.extensions["maintenance_catalog"] = catalog
    app.extensions["maintenance_store"] = store

    register_routes(app)
    register_error_handlers(app)
    return app


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    logging.basicConfig(level=Settings.from_env().log_level)
    create_app().run(debug=True, host="0.0.0.0", port=5001)

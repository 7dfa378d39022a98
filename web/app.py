"""Flask JSON application exposing the garage."""

from typing import Optional

from flask import Flask, jsonify, request

from garage import (
    AMOUNT_ACTIONS,
    FileStorage,
    Garage,
    MaintenanceRecord,
    NotificationLog,
    SportsCar,
    Truck,
    Settings,
    ValidationError,
    Vehicle,
    load_settings,
)

VEHICLE_KINDS = {
    "Vehicle": Vehicle,
    "SportsCar": SportsCar,
    "Truck": Truck,
}


def build_vehicle(data: dict) -> Vehicle:
    """Create a vehicle from a request body ({"type", "model", "color", ...})."""
    kind = data.get("type") or "Vehicle"
    if not isinstance(kind, str) or kind not in VEHICLE_KINDS:
        raise ValidationError(f"Unknown vehicle type {kind!r}", field="type")
    if kind == "Truck":
        return Truck(data.get("model"), data.get("color"), data.get("cargoCapacity"), data.get("id"))
    return VEHICLE_KINDS[kind](data.get("model"), data.get("color"), data.get("id"))


def request_object() -> Optional[dict]:
    """The JSON body as a dict ({} when absent), or None when it is not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def create_app(
    garage: Optional[Garage] = None,
    notifications: Optional[NotificationLog] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Build the app around a garage (by default the one from the settings file)."""
    app = Flask(__name__)

    if settings is None:
        settings = load_settings()
    if notifications is None:
        notifications = NotificationLog()
    if garage is None:
        storage = FileStorage(settings.storage_dir, settings.quota_bytes)
        garage = Garage(storage, notifications, settings.storage_key)
        garage.load()

    app.config["GARAGE"] = garage
    app.config["NOTIFICATIONS"] = notifications

    def not_found(vehicle_id: str):
        return jsonify({"error": f"Vehicle '{vehicle_id}' not found"}), 404

    def not_an_object():
        return jsonify({"error": "Request body must be a JSON object"}), 400

    @app.route("/vehicles", methods=["GET"])
    def list_vehicles():
        """All vehicles in the garage."""
        return jsonify([v.to_dict() for v in garage.list_vehicles()])

    @app.route("/vehicles", methods=["POST"])
    def add_vehicle():
        data = request_object()
        if data is None:
            return not_an_object()
        try:
            vehicle = build_vehicle(data)
        except ValidationError as e:
            return jsonify({"error": str(e), "field": e.field}), 400
        if not garage.add_vehicle(vehicle):
            return jsonify({"error": f"Vehicle {vehicle.id} already exists"}), 409
        return jsonify(vehicle.to_dict()), 201

    @app.route("/vehicles/<vehicle_id>", methods=["GET"])
    def vehicle_detail(vehicle_id: str):
        vehicle = garage.find_vehicle(vehicle_id)
        if vehicle is None:
            return not_found(vehicle_id)
        data = vehicle.to_dict()
        data["description"] = vehicle.describe()
        data["history"] = [r.format() for r in vehicle.maintenance_history]
        return jsonify(data)

    @app.route("/vehicles/<vehicle_id>", methods=["DELETE"])
    def remove_vehicle(vehicle_id: str):
        if not garage.remove_vehicle(vehicle_id):
            return not_found(vehicle_id)
        return "", 204

    @app.route("/vehicles/<vehicle_id>/actions/<action>", methods=["POST"])
    def vehicle_action(vehicle_id: str, action: str):
        """Run an action; amount-taking actions fall back to the configured default."""
        vehicle = garage.find_vehicle(vehicle_id)
        if vehicle is None:
            return not_found(vehicle_id)
        data = request_object()
        if data is None:
            return not_an_object()
        amount = data.get("amount")
        if amount is None and action in AMOUNT_ACTIONS:
            amount = settings.defaults.amount_for(vehicle.variant_tag, action)
        result = garage.operate(vehicle_id, action, amount)
        body = result.to_dict()
        body["vehicle"] = vehicle.to_dict()
        return jsonify(body)

    @app.route("/vehicles/<vehicle_id>/maintenance", methods=["POST"])
    def add_maintenance(vehicle_id: str):
        if garage.find_vehicle(vehicle_id) is None:
            return not_found(vehicle_id)
        data = request_object()
        if data is None:
            return not_an_object()
        try:
            record = MaintenanceRecord(
                data.get("date"),
                data.get("serviceType"),
                data.get("cost"),
                data.get("description"),
                vehicle_id,
            )
        except ValidationError as e:
            return jsonify({"error": str(e), "field": e.field}), 400
        garage.add_maintenance(vehicle_id, record)
        return jsonify(record.to_dict()), 201

    @app.route("/vehicles/<vehicle_id>/maintenance/<record_id>", methods=["DELETE"])
    def remove_maintenance(vehicle_id: str, record_id: str):
        if not garage.remove_maintenance(vehicle_id, record_id):
            return jsonify({"error": f"Maintenance '{record_id}' not found"}), 404
        return "", 204

    @app.route("/maintenance/upcoming")
    def upcoming_maintenance():
        return jsonify([item.to_dict() for item in garage.list_upcoming_maintenance()])

    @app.route("/notifications")
    def drain_notifications():
        """Notifications since the last call."""
        return jsonify([n.to_dict() for n in notifications.drain()])

    return app


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    create_app().run(debug=True, host="0.0.0.0", port=5001)

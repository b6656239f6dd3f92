"""Flask web application exposing the garage as a JSON API."""

import logging
from dataclasses import asdict
from pathlib import Path

from flask import Flask, jsonify, request

# Add parent directory to path for fleet imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fleet import FileStore, Garage, GarageError, UnknownVehicle
from fleet import settings
from fleet.loader import record_to_dict


def result_response(result):
    """JSON body and status code for an ActionResult."""
    body = {
        "ok": result.ok,
        "message": result.message,
        "errors": result.errors,
        "saved": result.saved,
    }
    return jsonify(body), (200 if result.ok else 400)


def error_response(error: GarageError):
    status = 404 if isinstance(error, UnknownVehicle) else 400
    return jsonify({"ok": False, "message": str(error), "errors": [str(error)]}), status


def appointment_to_dict(appt):
    return {
        "vehicleKey": appt.vehicle_key,
        "vehicleName": appt.vehicle_name,
        "when": appt.when.isoformat(),
        "label": appt.label,
        "record": record_to_dict(appt.record),
    }


def create_app(garage: Garage = None) -> Flask:
    """Build the app around a garage (default: file store from settings)."""
    app = Flask(__name__)
    if garage is None:
        garage = Garage(FileStore(settings.DATA_DIR))
        garage.seed_defaults()
    app.config["GARAGE"] = garage

    def payload():
        return request.get_json(silent=True) or {}

    @app.errorhandler(GarageError)
    def handle_garage_error(error):
        return error_response(error)

    @app.route("/")
    def index():
        """Snapshot of the whole garage."""
        snapshot = garage.refresh()
        body = asdict(snapshot)
        body["warning"] = garage.load_warning
        return jsonify(body)

    @app.route("/vehicles/<key>", methods=["GET"])
    def vehicle_detail(key: str):
        vehicle = garage.get(key)
        return jsonify(
            {
                "key": key,
                "description": vehicle.describe(),
                "display": asdict(vehicle.display()),
            }
        )

    @app.route("/vehicles/<key>", methods=["POST"])
    def create_vehicle(key: str):
        data = payload()
        existed = key in garage.vehicles
        vehicle = garage.create_or_update(
            key, data.get("model"), data.get("color"), data.get("capacity")
        )
        return (
            jsonify({"ok": True, "display": asdict(vehicle.display())}),
            200 if existed else 201,
        )

    @app.route("/vehicles/<key>/actions/<action>", methods=["POST"])
    def vehicle_action(key: str, action: str):
        return result_response(
            garage.interact(key, action, weight=payload().get("weight"))
        )

    @app.route("/vehicles/<key>/paint", methods=["POST"])
    def paint(key: str):
        return result_response(garage.paint(key, payload().get("color")))

    @app.route("/vehicles/<key>/refuel", methods=["POST"])
    def refuel(key: str):
        return result_response(garage.refuel(key, payload().get("amount")))

    @app.route("/vehicles/<key>/maintenance", methods=["POST"])
    def record_maintenance(key: str):
        data = payload()
        return result_response(
            garage.record_maintenance(
                key,
                data.get("date"),
                data.get("serviceType"),
                data.get("cost"),
                data.get("description"),
            )
        )

    @app.route("/vehicles/<key>/appointments", methods=["POST"])
    def schedule_maintenance(key: str):
        data = payload()
        return result_response(
            garage.schedule_maintenance(
                key,
                data.get("date"),
                data.get("time"),
                data.get("serviceType"),
                data.get("notes"),
            )
        )

    @app.route("/appointments")
    def appointments():
        within = request.args.get("within_months", type=float)
        upcoming = garage.upcoming_appointments(within_months=within)
        return jsonify([appointment_to_dict(a) for a in upcoming])

    return app


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    create_app().run(debug=True, port=5000)

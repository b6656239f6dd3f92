"""JSON (de)serialization of the fleet and YAML seed loading."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml

from .calculations import clamp, is_number
from .car import Car, Motorcycle, SportsCar
from .errors import CorruptedData, InvalidInput
from .maintenance_record import MaintenanceRecord
from .status import EngineState
from .truck import Truck
from .vehicle import MAX_FUEL, Vehicle

logger = logging.getLogger(__name__)


def _parse_object(dct: Dict[str, Any]) -> Union[MaintenanceRecord, dict]:
    """Turn history entries into records while the document is decoded."""
    if "serviceType" in dct and "status" in dct:
        return MaintenanceRecord.from_dict(dct)
    # Vehicle entries and the top-level mapping stay dicts; they are
    # dispatched on their type discriminator afterwards
    return dct


def record_to_dict(record: MaintenanceRecord) -> Dict[str, Any]:
    """Serialize a record with every field, camelCase keys."""
    status = getattr(record.status, "value", record.status)
    return {
        "date": record.date,
        "serviceType": record.service_type,
        "cost": record.cost,
        "description": record.description,
        "time": record.time,
        "status": status,
    }


def vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a vehicle with its discriminator and variant fields."""
    d: Dict[str, Any] = {
        "type": vehicle.KIND,
        "model": vehicle.model,
        "color": vehicle.color,
        "fuel": vehicle.fuel,
        "maintenanceHistory": [record_to_dict(m) for m in vehicle.history],
        "ignition": vehicle.ignition,
        "speed": vehicle.speed,
        "maxSpeed": vehicle.max_speed,
    }
    if isinstance(vehicle, SportsCar):
        d["turboEnabled"] = vehicle.turbo_enabled
    if isinstance(vehicle, Truck):
        d["cargoCapacity"] = vehicle.cargo_capacity
        d["currentCargo"] = vehicle.current_cargo
    return d


def fleet_to_dict(vehicles: Mapping) -> Dict[str, Dict[str, Any]]:
    return {key: vehicle_to_dict(vehicle) for key, vehicle in vehicles.items()}


def dump_fleet(vehicles: Mapping) -> str:
    """The whole fleet as one JSON document."""
    return json.dumps(fleet_to_dict(vehicles), ensure_ascii=False)


# =============================================================================
# Decoding
# =============================================================================


def _rehydrate_history(key: str, raw: Any) -> list:
    if not isinstance(raw, list):
        return []
    history = []
    for item in raw:
        if isinstance(item, MaintenanceRecord):
            history.append(item)
        elif isinstance(item, Mapping):
            history.append(MaintenanceRecord.from_dict(item))
        else:
            logger.warning("Skipping malformed history entry for %s: %r", key, item)
    return history


def _restore_common(vehicle: Vehicle, key: str, data: Mapping) -> Vehicle:
    fuel = data.get("fuel")
    vehicle.fuel = clamp(fuel, 0, MAX_FUEL) if is_number(fuel) else MAX_FUEL

    max_speed = data.get("maxSpeed")
    if is_number(max_speed) and max_speed > 0:
        vehicle.max_speed = max_speed

    speed = data.get("speed")
    vehicle.speed = clamp(speed, 0, vehicle.max_speed) if is_number(speed) else 0

    vehicle.engine = EngineState.RUNNING if data.get("ignition") else EngineState.OFF
    vehicle.history = _rehydrate_history(key, data.get("maintenanceHistory"))
    vehicle.garage_key = key
    return vehicle


def _decode_car(data: Mapping) -> Car:
    return Car(data.get("model"), data.get("color"))


def _decode_sports_car(data: Mapping) -> SportsCar:
    car = SportsCar(data.get("model"), data.get("color"))
    if "turboEnabled" in data:
        car.turbo_enabled = bool(data["turboEnabled"])
    return car


def _decode_truck(data: Mapping) -> Truck:
    truck = Truck(data.get("model"), data.get("color"), data.get("cargoCapacity"))
    cargo = data.get("currentCargo")
    if is_number(cargo):
        truck.current_cargo = clamp(cargo, 0, truck.cargo_capacity)
    return truck


def _decode_motorcycle(data: Mapping) -> Motorcycle:
    return Motorcycle(data.get("model"), data.get("color"))


DECODERS: Dict[str, Callable[[Mapping], Vehicle]] = {
    Car.KIND: _decode_car,
    SportsCar.KIND: _decode_sports_car,
    Truck.KIND: _decode_truck,
    Motorcycle.KIND: _decode_motorcycle,
}


def vehicle_from_dict(key: str, data: Any) -> Optional[Vehicle]:
    """
    Rebuild one vehicle from its stored record.

    Returns None (and logs a warning) for entries that are not mappings or
    whose type discriminator is unknown; the caller skips them.
    """
    if not isinstance(data, Mapping):
        logger.warning("Skipping malformed entry %r", key)
        return None
    kind = data.get("type")
    decoder = DECODERS.get(kind) if isinstance(kind, str) else None
    if decoder is None:
        logger.warning("Unknown vehicle type %r for %r, skipping", kind, key)
        return None
    return _restore_common(decoder(data), key, data)


def parse_fleet(text: str) -> Dict[str, Vehicle]:
    """
    Decode a stored garage document.

    Raises CorruptedData when the text is not a JSON object. Individual
    entries that cannot be decoded are skipped.
    """
    try:
        data = json.loads(text, object_hook=_parse_object)
    except (TypeError, ValueError, RecursionError) as e:
        raise CorruptedData(f"Stored garage is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CorruptedData("Stored garage is not a JSON object")

    vehicles = {}
    for key, entry in data.items():
        vehicle = vehicle_from_dict(key, entry)
        if vehicle is not None:
            vehicles[key] = vehicle
    return vehicles


def load_seed_file(filename: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """Load default vehicles ({key: {model, color, capacity?}}) from YAML."""
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)
    if not isinstance(data, dict):
        raise InvalidInput(f"Seed file {filename} must contain a mapping")
    return {
        key: dict(params or {})
        for key, params in data.items()
    }

"""
Garage fleet simulation models.

This package provides the core of the garage simulator:
- MaintenanceRecord: Completed and scheduled service events
- Vehicle: Shared state, history and kinematics
- Car, SportsCar, Truck, Motorcycle: Vehicle variants
- Garage: The fleet, its persistence and the scheduling view
- FileStore, MemoryStore: Key-value slots holding the persisted document
"""

from .status import EngineState, LoadOutcome, MaintenanceStatus
from .errors import (
    GarageError,
    InvalidInput,
    ValidationFailed,
    IllegalOperation,
    UnknownVehicle,
    StorageError,
    StorageQuotaExceeded,
    CorruptedData,
)
from .maintenance_record import MaintenanceRecord
from .vehicle import Tuning, Vehicle
from .car import Car, SportsCar, Motorcycle
from .truck import Truck
from .appointment import Appointment
from .display import VehicleDisplay, FleetSnapshot
from .storage import KeyValueStore, FileStore, MemoryStore
from .calculations import resolve_datetime, format_cost
from .loader import dump_fleet, parse_fleet, vehicle_from_dict, vehicle_to_dict
from .garage import ActionResult, Garage, SLOTS

__all__ = [
    "EngineState",
    "LoadOutcome",
    "MaintenanceStatus",
    "GarageError",
    "InvalidInput",
    "ValidationFailed",
    "IllegalOperation",
    "UnknownVehicle",
    "StorageError",
    "StorageQuotaExceeded",
    "CorruptedData",
    "MaintenanceRecord",
    "Tuning",
    "Vehicle",
    "Car",
    "SportsCar",
    "Motorcycle",
    "Truck",
    "Appointment",
    "VehicleDisplay",
    "FleetSnapshot",
    "KeyValueStore",
    "FileStore",
    "MemoryStore",
    "resolve_datetime",
    "format_cost",
    "dump_fleet",
    "parse_fleet",
    "vehicle_from_dict",
    "vehicle_to_dict",
    "ActionResult",
    "Garage",
    "SLOTS",
]

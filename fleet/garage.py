"""Garage - owns the fleet, persists it and exposes the operations the UI calls."""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, Union

import yaml

from . import settings
from .appointment import Appointment
from .calculations import calc_horizon
from .car import Car, Motorcycle, SportsCar
from .display import FleetSnapshot
from .errors import (
    CorruptedData,
    GarageError,
    InvalidInput,
    StorageError,
    StorageQuotaExceeded,
    UnknownVehicle,
    ValidationFailed,
)
from .loader import dump_fleet, load_seed_file, parse_fleet
from .maintenance_record import MaintenanceRecord
from .status import LoadOutcome, MaintenanceStatus
from .storage import KeyValueStore
from .truck import Truck
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text_or(value: Any, default: Any) -> Any:
    """value unless it is blank, else default."""
    return default if _is_blank(value) else value


# One logical slot per vehicle kind
SLOTS: Dict[str, Type[Vehicle]] = {
    "myCar": Car,
    "sportsCar": SportsCar,
    "truck": Truck,
    "motorcycle": Motorcycle,
}

# action name -> (method, class that supports it)
ACTIONS: Dict[str, tuple] = {
    "turn_on": ("turn_on", Vehicle),
    "turn_off": ("turn_off", Vehicle),
    "accelerate": ("accelerate", Vehicle),
    "brake": ("brake", Vehicle),
    "enable_turbo": ("enable_turbo", SportsCar),
    "disable_turbo": ("disable_turbo", SportsCar),
    "load": ("load", Truck),
    "unload": ("unload", Truck),
}
WEIGHT_ACTIONS = {"load", "unload"}

EMPTY_GARAGE_TEXT = "No vehicles in the garage. Create one first."
NO_APPOINTMENTS_TEXT = "No upcoming appointments."
CORRUPTED_TEXT = "Could not load garage data. The corrupted data was removed."


@dataclass
class ActionResult:
    """Outcome of a user-facing operation."""

    ok: bool
    message: str
    errors: List[str] = field(default_factory=list)
    changed: bool = False
    saved: bool = False


class Garage:
    """
    The fleet of named vehicles and its persistence.

    Every successful state change is followed by exactly one save().
    Failures are returned as ActionResult (or raised as GarageError from the
    lower-level helpers) and never leave partial state behind.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = settings.STORAGE_KEY,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Any] = time.sleep,
        step_delay: float = settings.STEP_DELAY,
        autoload: bool = True,
        defaults_file: Union[str, Path] = settings.DEFAULTS_FILE,
    ):
        self.store = store
        self.storage_key = storage_key
        self.clock = clock
        self.sleep = sleep
        self.step_delay = step_delay
        self.defaults_file = defaults_file
        self._slot_defaults: Optional[Dict[str, Dict[str, Any]]] = None
        self.vehicles: Dict[str, Vehicle] = {}
        self.load_warning: Optional[str] = None
        self.save_error: Optional[str] = None
        if autoload:
            self.load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """Write the whole fleet to the store. False (and save_error) on failure."""
        try:
            document = dump_fleet(self.vehicles)
            self.store.set(self.storage_key, document)
        except StorageQuotaExceeded as e:
            logger.error("Error saving garage: %s", e)
            self.save_error = "Error: storage limit exceeded."
            return False
        except (StorageError, TypeError, ValueError) as e:
            logger.error("Error saving garage: %s", e)
            self.save_error = f"Error saving garage: {e}"
            return False
        self.save_error = None
        logger.info("Garage saved (key: %s)", self.storage_key)
        return True

    def load(self) -> LoadOutcome:
        """
        Replace the fleet with the stored one.

        A missing document leaves the fleet empty. An unparsable one is
        removed from the store, the fleet is emptied and load_warning is
        set for the UI.
        """
        self.load_warning = None
        try:
            text = self.store.get(self.storage_key)
        except CorruptedData as e:
            return self._discard_corrupted(e)
        except StorageError as e:
            logger.error("Error reading garage (key: %s): %s", self.storage_key, e)
            self.vehicles = {}
            return LoadOutcome.EMPTY
        if not text:
            logger.info("No saved data (key: %s)", self.storage_key)
            self.vehicles = {}
            return LoadOutcome.EMPTY

        try:
            self.vehicles = parse_fleet(text)
        except CorruptedData as e:
            return self._discard_corrupted(e)

        logger.info("Garage loaded (key: %s): %d vehicle(s)", self.storage_key, len(self.vehicles))
        return LoadOutcome.LOADED

    def _discard_corrupted(self, error: CorruptedData) -> LoadOutcome:
        """Remove the unreadable document, empty the fleet and warn the UI."""
        logger.warning("Discarding corrupted garage (key: %s): %s", self.storage_key, error)
        try:
            self.store.remove(self.storage_key)
        except StorageError as remove_error:
            logger.error("Could not remove corrupted garage: %s", remove_error)
        self.vehicles = {}
        self.load_warning = CORRUPTED_TEXT
        return LoadOutcome.CORRUPTED

    # ------------------------------------------------------------------
    # Lookup and creation
    # ------------------------------------------------------------------

    def get(self, key: str) -> Vehicle:
        vehicle = self.vehicles.get(key)
        if vehicle is None:
            raise UnknownVehicle(
                f'Vehicle "{key}" has not been created yet. Create it first.'
            )
        return vehicle

    def create_or_update(
        self,
        key: str,
        model: Optional[str],
        color: Optional[str],
        capacity: Any = None,
    ) -> Vehicle:
        """
        Create the vehicle for a slot, or update the one already there.

        Blank model or color (and, on creation, a missing truck capacity)
        fall back to the slot's entry in the defaults file. Updating keeps
        the instance (and its history and engine state) and only replaces
        model and color; a truck whose capacity changes is emptied.
        """
        cls = SLOTS.get(key)
        if cls is None:
            raise InvalidInput(f"Unknown vehicle slot '{key}'")

        defaults = self.slot_defaults(key)
        model = _text_or(model, defaults.get("model"))
        color = _text_or(color, defaults.get("color"))
        if _is_blank(capacity):
            capacity = None

        existing = self.vehicles.get(key)
        if existing is None:
            if cls is Truck:
                if capacity is None:
                    capacity = defaults.get("capacity")
                vehicle = Truck(model, color, capacity)
            else:
                vehicle = cls(model, color)
            vehicle.garage_key = key
            self.vehicles[key] = vehicle
            logger.info("%s created under %s", cls.KIND, key)
        else:
            vehicle = existing
            replacement = cls(model, color)
            vehicle.model = replacement.model
            vehicle.color = replacement.color
            if isinstance(vehicle, Truck) and capacity is not None:
                vehicle.set_capacity(capacity)
            logger.info("%s updated under %s", cls.KIND, key)

        self.save()
        return vehicle

    def slot_defaults(self, key: str) -> Dict[str, Any]:
        """The defaults file entry for a slot ({} if the file has none)."""
        if self._slot_defaults is None:
            try:
                self._slot_defaults = load_seed_file(self.defaults_file)
            except (OSError, yaml.YAMLError, InvalidInput) as e:
                logger.warning("Could not read vehicle defaults %s: %s", self.defaults_file, e)
                self._slot_defaults = {}
        return self._slot_defaults.get(key, {})

    def seed_defaults(self, filename: Union[str, Path, None] = None) -> int:
        """Create the vehicles of a YAML seed file if the garage is empty."""
        if self.vehicles:
            return 0
        defaults = load_seed_file(filename or settings.DEFAULTS_FILE)
        for key, params in defaults.items():
            self.create_or_update(
                key, params.get("model"), params.get("color"), params.get("capacity")
            )
        return len(defaults)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _run(self, key: str, operation: Callable[[Vehicle], Any], verb: str) -> ActionResult:
        """Run a vehicle mutation, finish any shutdown it started, then save once."""
        try:
            vehicle = self.get(key)
            outcome = operation(vehicle)
        except ValidationFailed as e:
            logger.warning("%s on %s rejected: %s", verb, key, "; ".join(e.errors))
            return ActionResult(False, f"{e}:\n" + "\n".join(e.errors), e.errors)
        except GarageError as e:
            logger.warning("%s on %s rejected: %s", verb, key, e)
            return ActionResult(False, str(e), [str(e)])

        if outcome is False:
            return ActionResult(True, f"{vehicle.model}: nothing to {verb}.")

        if vehicle.stopping:
            self._finish_shutdown(vehicle)
        saved = self.save()
        message = f"{vehicle.model}: {verb} done. {self._summary(vehicle)}"
        if not saved:
            message += f" ({self.save_error})"
        return ActionResult(True, message, changed=True, saved=saved)

    def _finish_shutdown(self, vehicle: Vehicle) -> None:
        """Brake step by step until the engine is off. Each step removes >= 2 km/h."""
        delay = vehicle.TUNING.step_interval * self.step_delay
        while vehicle.stopping:
            if delay > 0:
                self.sleep(delay)
            vehicle.shutdown_step()

    @staticmethod
    def _summary(vehicle: Vehicle) -> str:
        parts = [vehicle.status_text(), vehicle.speed_text(), f"fuel {vehicle.fuel:g}%"]
        if vehicle.info_text():
            parts.append(vehicle.info_text())
        return ", ".join(parts)

    def interact(self, key: str, action: str, weight: Any = None) -> ActionResult:
        """Dispatch a named action (turn_on, accelerate, load, ...) to a vehicle."""
        if action not in ACTIONS:
            return ActionResult(False, f"Unknown action '{action}'.")
        method_name, supported = ACTIONS[action]
        verb = action.replace("_", " ")

        def operation(vehicle: Vehicle):
            if not isinstance(vehicle, supported):
                raise InvalidInput(f"Action unavailable for {key}.")
            method = getattr(vehicle, method_name)
            if action in WEIGHT_ACTIONS:
                return method(weight)
            return method()

        return self._run(key, operation, verb)

    def paint(self, key: str, color: Any) -> ActionResult:
        return self._run(key, lambda vehicle: vehicle.paint(color), "paint")

    def refuel(self, key: str, amount: Any) -> ActionResult:
        return self._run(key, lambda vehicle: vehicle.refuel(amount), "refuel")

    def add_maintenance(self, key: str, record: Any) -> ActionResult:
        return self._run(key, lambda vehicle: vehicle.add_maintenance(record), "record maintenance")

    def record_maintenance(
        self,
        key: str,
        date: Optional[str],
        service_type: Optional[str],
        cost: Optional[float],
        description: Optional[str] = "",
    ) -> ActionResult:
        """Add a completed service (no time) to a vehicle's history."""
        record = MaintenanceRecord(
            date,
            (service_type or "").strip(),
            cost,
            (description or "").strip(),
            None,
            MaintenanceStatus.COMPLETED,
        )
        return self.add_maintenance(key, record)

    def schedule_maintenance(
        self,
        key: str,
        date: Optional[str],
        time_of_day: Optional[str],
        service_type: Optional[str],
        notes: Optional[str] = "",
    ) -> ActionResult:
        """Schedule a future service. Past date-times are rejected."""
        record = MaintenanceRecord(
            date,
            (service_type or "").strip(),
            None,
            (notes or "").strip(),
            time_of_day or None,
            MaintenanceStatus.SCHEDULED,
        )
        when = record.resolved_datetime()
        if when is None:
            message = "Invalid date or time for the appointment."
            return ActionResult(False, message, record.validate() or [message])
        now = self.clock().replace(second=0, microsecond=0)
        if when < now:
            message = "The appointment date/time must be in the future."
            return ActionResult(False, message, [message])
        return self.add_maintenance(key, record)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def upcoming_appointments(
        self,
        now: Optional[datetime] = None,
        within_months: Optional[float] = None,
    ) -> List[Appointment]:
        """
        Valid scheduled records at or after now, earliest first.

        within_months limits the list to a horizon (e.g. 3 -> the next
        three months).
        """
        now = now or self.clock()
        horizon = calc_horizon(now, within_months) if within_months is not None else None

        appointments = []
        for key, vehicle in self.vehicles.items():
            for record in vehicle.history:
                if not record.is_scheduled or not record.is_valid():
                    continue
                when = record.resolved_datetime()
                if when is None or when < now:
                    continue
                if horizon is not None and when > horizon:
                    continue
                appointments.append(Appointment(key, vehicle.name, record, when))

        appointments.sort(key=lambda a: a.when)
        return appointments

    def describe(self, key: str) -> str:
        return self.get(key).describe()

    def describe_all(self) -> Dict[str, str]:
        return {key: vehicle.describe() for key, vehicle in self.vehicles.items()}

    def refresh(self, now: Optional[datetime] = None) -> FleetSnapshot:
        """Presentation values for the whole garage. Reads only."""
        vehicles = {key: vehicle.display() for key, vehicle in self.vehicles.items()}
        if self.vehicles:
            info_panel = next(iter(self.vehicles.values())).describe()
        else:
            info_panel = EMPTY_GARAGE_TEXT
        appointments = [a.label for a in self.upcoming_appointments(now)]
        return FleetSnapshot(
            vehicles=vehicles,
            info_panel=info_panel,
            appointments=appointments or [NO_APPOINTMENTS_TEXT],
        )

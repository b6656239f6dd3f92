"""Vehicle base class - shared state, maintenance history and kinematics."""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .calculations import Number, format_number, parse_amount, slow_down, speed_up
from .display import VehicleDisplay
from .errors import IllegalOperation, InvalidInput, ValidationFailed
from .maintenance_record import MaintenanceRecord
from .status import EngineState

logger = logging.getLogger(__name__)

UNDEFINED = "Not defined"
MAX_FUEL = 100


@dataclass(frozen=True)
class Tuning:
    """Per-variant constants. Variants with load-dependent formulas override the step methods."""

    max_speed: Number
    increment: Number
    consumption: Number
    brake: Number
    step_interval: float = 0.1  # seconds between shutdown brake steps
    on_label: str = "On"
    off_label: str = "Off"


def _text_or_default(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return UNDEFINED


class Vehicle:
    """
    A garage vehicle: identity, fuel, maintenance history and engine state.

    Variants differ only in their Tuning table and in the step methods
    (acceleration_step, brake_reduction) that turn it into numbers. All
    mutating methods either succeed completely or raise a GarageError
    without touching state. Methods that can be a no-op return False.
    """

    KIND = "Vehicle"
    TUNING = Tuning(max_speed=200, increment=10, consumption=5, brake=10)

    def __init__(self, model: Optional[str] = None, color: Optional[str] = None):
        self.model = _text_or_default(model)
        self.color = _text_or_default(color)
        self.fuel: Number = MAX_FUEL
        self.history: List[MaintenanceRecord] = []
        self.garage_key: Optional[str] = None
        self.engine = EngineState.OFF
        self.speed: Number = 0
        self.max_speed: Number = self.TUNING.max_speed

    @property
    def name(self) -> str:
        """Display name used when listing appointments."""
        return self.model

    @property
    def ignition(self) -> bool:
        """Ignition stays on until a shutdown sequence has brought speed to 0."""
        return self.engine is not EngineState.OFF

    @property
    def stopping(self) -> bool:
        return self.engine is EngineState.STOPPING

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def add_maintenance(self, record: Any) -> MaintenanceRecord:
        """
        Append a record (or a mapping promotable to one) to the history.

        The record is appended only if it is valid; otherwise
        ValidationFailed carries the full error list and history is
        unchanged.
        """
        record = MaintenanceRecord.coerce(record)
        if not record.is_valid():
            action = "schedule" if record.is_scheduled else "add"
            raise ValidationFailed(
                f"Could not {action} maintenance", record.validate()
            )
        self.history.append(record)
        logger.info("%s: maintenance recorded: %s", self.model, record.format())
        return record

    def completed_history(self) -> Tuple[List[MaintenanceRecord], int]:
        """
        Valid completed records, newest first, plus the count of invalid ones.

        Records whose date-time cannot be resolved sort last.
        """
        completed = [m for m in self.history if m.is_completed]
        valid = [m for m in completed if m.is_valid()]

        def sort_key(record: MaintenanceRecord):
            resolved = record.resolved_datetime()
            return (resolved is not None, resolved.timestamp() if resolved else 0)

        valid.sort(key=sort_key, reverse=True)
        return valid, len(completed) - len(valid)

    def describe(self) -> str:
        """Multi-line description: identity, completed history, then state."""
        lines = [
            f"Model: {self.model}",
            f"Color: {self.color}",
            f"Fuel: {format_number(self.fuel)}%",
            "",
            "--- Completed Maintenance History ---",
        ]
        valid, invalid_count = self.completed_history()
        if not valid:
            lines.append("No completed maintenance recorded.")
            if invalid_count:
                lines.append("(There are completed records with invalid data)")
        else:
            lines.extend(record.format() for record in valid)
            if invalid_count:
                lines.append("")
                lines.append(
                    f"({invalid_count} completed record(s) could not be "
                    "displayed due to invalid data)"
                )
        lines.extend(self._describe_state())
        return "\n".join(lines)

    def _describe_state(self) -> List[str]:
        return [
            f"Ignition: {'Yes' if self.ignition else 'No'}",
            f"Speed: {self.speed_text()}",
        ]

    # ------------------------------------------------------------------
    # Appearance and fuel
    # ------------------------------------------------------------------

    def paint(self, new_color: Any) -> str:
        if not isinstance(new_color, str) or not new_color.strip():
            raise InvalidInput("Please enter a valid color.")
        self.color = new_color.strip()
        logger.info("%s painted %s", self.model, self.color)
        return self.color

    def refuel(self, amount: Any) -> Number:
        """Add fuel up to the tank limit. Returns the amount actually added."""
        amount = parse_amount(amount, allow_zero=True)
        before = self.fuel
        self.fuel = min(before + amount, MAX_FUEL)
        logger.info("%s refuelled to %s%%", self.model, format_number(self.fuel))
        return self.fuel - before

    # ------------------------------------------------------------------
    # Engine and kinematics
    # ------------------------------------------------------------------

    def acceleration_step(self) -> Tuple[Number, Number]:
        """(speed increment, fuel consumption) for one accelerate() call."""
        return self.TUNING.increment, self.TUNING.consumption

    def brake_reduction(self) -> Number:
        """Speed removed by one brake step."""
        return self.TUNING.brake

    def turn_on(self) -> bool:
        if self.engine is EngineState.RUNNING:
            return False
        if self.stopping:
            raise IllegalOperation(f"{self.model} is still stopping.")
        if self.fuel <= 0:
            raise IllegalOperation(f"{self.model} is out of fuel. Refuel first.")
        self.engine = EngineState.RUNNING
        logger.info("%s turned on", self.model)
        return True

    def turn_off(self) -> bool:
        """
        Start turning the engine off.

        A stationary vehicle switches off immediately. A moving one enters
        STOPPING and keeps reporting ignition on until shutdown_step() has
        braked it to a standstill. Returns False if already off or stopping.
        """
        if self.engine is not EngineState.RUNNING:
            return False
        if self.speed > 0:
            self.engine = EngineState.STOPPING
            logger.info("%s stopping before shutdown", self.model)
        else:
            self.engine = EngineState.OFF
            logger.info("%s turned off", self.model)
        return True

    def shutdown_step(self) -> bool:
        """One brake step of a shutdown sequence. True once the engine is off."""
        if not self.stopping:
            return self.engine is EngineState.OFF
        self._apply_brake()
        return self.engine is EngineState.OFF

    def accelerate(self) -> bool:
        """
        Speed up by one variant step, burning fuel.

        Returns False (and burns nothing) at max speed. When this call
        empties the tank the vehicle begins an automatic shutdown.
        """
        if self.engine is not EngineState.RUNNING:
            if self.stopping:
                raise IllegalOperation(f"{self.model} is stopping.")
            raise IllegalOperation(f"Turn on the {self.model} first!")
        if self.fuel <= 0:
            raise IllegalOperation(f"{self.model} is out of fuel. Refuel first.")
        if self.speed >= self.max_speed:
            self.speed = self.max_speed
            return False

        increment, consumption = self.acceleration_step()
        self.speed, self.fuel = speed_up(
            self.speed, self.max_speed, self.fuel, increment, consumption
        )
        logger.info(
            "%s accelerating: speed %s, fuel %s%%",
            self.model,
            format_number(self.speed),
            format_number(self.fuel),
        )
        if self.fuel <= 0:
            logger.info("%s ran out of fuel, shutting down", self.model)
            self._on_fuel_exhausted()
            self.turn_off()
        return True

    def _on_fuel_exhausted(self) -> None:
        """Hook for variants that must drop extra state when the tank empties."""

    def brake(self) -> bool:
        """One brake step. Returns False if already stopped."""
        if self.speed <= 0:
            return False
        self._apply_brake()
        logger.info("%s braking: speed %s", self.model, format_number(self.speed))
        return True

    def _apply_brake(self) -> None:
        self.speed = slow_down(self.speed, self.brake_reduction())
        if self.speed == 0 and self.stopping:
            self.engine = EngineState.OFF
            logger.info("%s turned off after stopping", self.model)

    # ------------------------------------------------------------------
    # Display reads (pure)
    # ------------------------------------------------------------------

    def details_text(self) -> str:
        return f"{self.model} ({self.color})"

    def status_text(self) -> str:
        return self.TUNING.on_label if self.ignition else self.TUNING.off_label

    def speed_text(self) -> str:
        return f"{format_number(self.speed)} km/h"

    def speed_gauge_percent(self) -> float:
        if not self.max_speed:
            return 0.0
        return min(self.speed / self.max_speed * 100, 100.0)

    def info_text(self) -> str:
        """Variant-specific info panel text; empty for plain vehicles."""
        return ""

    def display(self) -> VehicleDisplay:
        return VehicleDisplay(
            key=self.garage_key,
            kind=self.KIND,
            details=self.details_text(),
            status=self.status_text(),
            speed=self.speed_text(),
            gauge_percent=self.speed_gauge_percent(),
            info=self.info_text(),
            fuel=self.fuel,
            can_brake=self.speed > 0,
        )

"""Car, SportsCar and Motorcycle variants."""

import logging
from typing import List, Tuple

from .calculations import Number
from .errors import IllegalOperation
from .vehicle import Tuning, Vehicle

logger = logging.getLogger(__name__)

TURBO_MIN_FUEL = 20


class Car(Vehicle):
    """Everyday car: +10 km/h and -5% fuel per step, brakes 10 km/h."""

    KIND = "Car"
    TUNING = Tuning(max_speed=200, increment=10, consumption=5, brake=10)


class SportsCar(Vehicle):
    """Faster car with a turbo that trades fuel for acceleration."""

    KIND = "SportsCar"
    TUNING = Tuning(max_speed=300, increment=20, consumption=10, brake=20)
    TURBO_INCREMENT = 50
    TURBO_CONSUMPTION = 15

    def __init__(self, model=None, color=None):
        super().__init__(model, color)
        self.turbo_enabled = False

    def acceleration_step(self) -> Tuple[Number, Number]:
        if self.turbo_enabled:
            return self.TURBO_INCREMENT, self.TURBO_CONSUMPTION
        return super().acceleration_step()

    def enable_turbo(self) -> bool:
        if not self.ignition:
            raise IllegalOperation(f"Turn on the {self.model} first!")
        if self.turbo_enabled:
            return False
        if self.fuel < TURBO_MIN_FUEL:
            raise IllegalOperation("Fuel too low to enable the turbo!")
        self.turbo_enabled = True
        logger.info("%s turbo enabled", self.model)
        return True

    def disable_turbo(self) -> bool:
        if not self.turbo_enabled:
            return False
        self.turbo_enabled = False
        logger.info("%s turbo disabled", self.model)
        return True

    def _on_fuel_exhausted(self) -> None:
        self.disable_turbo()

    def _describe_state(self) -> List[str]:
        return super()._describe_state() + [f"Turbo: {self._turbo_label()}"]

    def _turbo_label(self) -> str:
        return "Enabled" if self.turbo_enabled else "Disabled"

    def info_text(self) -> str:
        return f"Turbo: {self._turbo_label()}"


class Motorcycle(Vehicle):
    """Light and efficient: +15 km/h, -3% fuel, brakes 15 km/h."""

    KIND = "Motorcycle"
    TUNING = Tuning(
        max_speed=180,
        increment=15,
        consumption=3,
        brake=15,
        step_interval=0.08,
        on_label="Running",
        off_label="Stopped",
    )

    def _describe_state(self) -> List[str]:
        return [f"Status: {self.status_text()}", f"Speed: {self.speed_text()}"]

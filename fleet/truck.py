"""Truck variant - cargo capacity drives acceleration, braking and consumption."""

import logging
from typing import Any, List, Tuple

from .calculations import (
    Number,
    cargo_ratio,
    format_number,
    parse_amount,
    truck_brake_reduction,
    truck_consumption,
    truck_increment,
)
from .errors import InvalidInput
from .vehicle import Tuning, Vehicle

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000


def normalize_capacity(capacity: Any) -> Number:
    """Positive numeric capacity, else the default."""
    try:
        return parse_amount(capacity)
    except InvalidInput:
        return DEFAULT_CAPACITY


class Truck(Vehicle):
    """Cargo truck. The heavier the load, the slower and thirstier it gets."""

    KIND = "Truck"
    TUNING = Tuning(max_speed=120, increment=10, consumption=8, brake=10)

    def __init__(self, model=None, color=None, cargo_capacity: Any = DEFAULT_CAPACITY):
        super().__init__(model, color)
        self.cargo_capacity = normalize_capacity(cargo_capacity)
        self.current_cargo: Number = 0

    @property
    def cargo_ratio(self) -> float:
        return cargo_ratio(self.current_cargo, self.cargo_capacity)

    @property
    def remaining_capacity(self) -> Number:
        return self.cargo_capacity - self.current_cargo

    def acceleration_step(self) -> Tuple[Number, Number]:
        ratio = self.cargo_ratio
        return truck_increment(ratio), truck_consumption(ratio)

    def brake_reduction(self) -> Number:
        return truck_brake_reduction(self.cargo_ratio)

    def set_capacity(self, capacity: Any) -> bool:
        """Change capacity; a real change empties the truck. Returns True if changed."""
        capacity = normalize_capacity(capacity)
        if capacity == self.cargo_capacity:
            return False
        self.cargo_capacity = capacity
        self.current_cargo = 0
        logger.info("%s capacity changed to %skg, cargo reset", self.model, capacity)
        return True

    def load(self, weight: Any) -> Number:
        weight = self._parse_weight(weight, "load")
        if weight > self.remaining_capacity:
            raise InvalidInput(
                f"Load exceeds the maximum capacity of "
                f"{format_number(self.cargo_capacity)}kg! "
                f"Current cargo: {format_number(self.current_cargo)}kg."
            )
        self.current_cargo += weight
        logger.info("%s loaded %skg", self.model, format_number(weight))
        return self.current_cargo

    def unload(self, weight: Any) -> Number:
        weight = self._parse_weight(weight, "unload")
        if weight > self.current_cargo:
            raise InvalidInput(
                f"Cannot unload {format_number(weight)}kg. "
                f"Current cargo: {format_number(self.current_cargo)}kg."
            )
        self.current_cargo -= weight
        logger.info("%s unloaded %skg", self.model, format_number(weight))
        return self.current_cargo

    @staticmethod
    def _parse_weight(weight: Any, verb: str) -> Number:
        try:
            return parse_amount(weight)
        except InvalidInput:
            raise InvalidInput(f"Please enter a valid positive weight to {verb}.")

    def _cargo_text(self) -> str:
        return (
            f"{format_number(self.current_cargo)}kg / "
            f"{format_number(self.cargo_capacity)}kg"
        )

    def details_text(self) -> str:
        return f"{super().details_text()} - {self._cargo_text()}"

    def _describe_state(self) -> List[str]:
        return super()._describe_state() + [f"Cargo: {self._cargo_text()}"]

    def info_text(self) -> str:
        return (
            f"Current cargo: {format_number(self.current_cargo)}kg "
            f"(Capacity: {format_number(self.cargo_capacity)}kg)"
        )

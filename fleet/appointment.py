"""Appointment dataclass for upcoming scheduled maintenance."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .maintenance_record import MaintenanceRecord


@dataclass
class Appointment:
    """A valid scheduled record paired with the vehicle it belongs to."""

    vehicle_key: str
    vehicle_name: str
    record: "MaintenanceRecord"
    when: datetime

    @property
    def label(self) -> str:
        return f"[{self.vehicle_name}] {self.record.format()}"

"""Presentation dataclasses returned by the refresh operations."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .calculations import Number


@dataclass
class VehicleDisplay:
    """Current presentation values for one vehicle."""

    key: Optional[str]
    kind: str
    details: str
    status: str
    speed: str
    gauge_percent: float
    info: str
    fuel: Number
    can_brake: bool


@dataclass
class FleetSnapshot:
    """Everything the UI needs to redraw the garage."""

    vehicles: Dict[str, VehicleDisplay] = field(default_factory=dict)
    info_panel: str = ""
    appointments: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.vehicles

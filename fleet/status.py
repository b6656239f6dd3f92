"""Enums for maintenance status, engine state and load outcomes."""

from enum import Enum


class MaintenanceStatus(Enum):
    """Lifecycle of a maintenance record."""

    COMPLETED = "completed"
    SCHEDULED = "scheduled"


class EngineState(Enum):
    """Ignition state machine. STOPPING still reports ignition on."""

    OFF = "off"
    RUNNING = "running"
    STOPPING = "stopping"


class LoadOutcome(Enum):
    """Result of reading the persisted fleet."""

    EMPTY = 1  # Nothing stored yet
    LOADED = 2
    CORRUPTED = 3  # Stored document was discarded

"""Exception hierarchy for garage operations."""

from typing import List, Optional


class GarageError(Exception):
    """Base class for every reported garage failure."""


class InvalidInput(GarageError):
    """User-supplied primitive input was rejected."""


class ValidationFailed(InvalidInput):
    """A maintenance record failed validation."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class IllegalOperation(GarageError):
    """The operation is not allowed in the vehicle's current state."""


class UnknownVehicle(GarageError):
    """No vehicle has been created under the requested key."""


class StorageError(GarageError):
    """Writing to or reading from the key-value store failed."""


class StorageQuotaExceeded(StorageError):
    """The store has no room left for the document."""


class CorruptedData(GarageError):
    """The persisted document could not be parsed."""

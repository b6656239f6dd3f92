"""MaintenanceRecord class for completed and scheduled service events."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, List, Optional, Union

from .calculations import (
    format_cost,
    is_date_text,
    is_number,
    is_time_text,
    resolve_datetime,
)
from .errors import InvalidInput
from .status import MaintenanceStatus

DATE_FORMAT_ERROR = "Invalid date format (expected YYYY-MM-DD)."
TIME_FORMAT_ERROR = "Invalid time format (expected HH:MM)."
DATE_VALUE_ERROR = "Invalid date or time (e.g. day 31 in a 30-day month)."
SERVICE_TYPE_ERROR = "Service type cannot be empty."
COST_ERROR = (
    "For completed maintenance, the cost must be a number "
    "greater than or equal to zero."
)
DESCRIPTION_ERROR = "Description must be text."
STATUS_ERROR = "Invalid maintenance status."


def _concerns_cost(error: str) -> bool:
    return "cost" in error.lower()


def _coerce_status(status: Any) -> Any:
    """Map user/stored status values onto the enum; unknown values pass through."""
    if status is None or status == "":
        return MaintenanceStatus.COMPLETED
    if isinstance(status, MaintenanceStatus):
        return status
    if isinstance(status, str):
        for member in MaintenanceStatus:
            if member.value == status.strip().lower():
                return member
    return status


class MaintenanceRecord:
    """A completed or scheduled service event."""

    def __init__(
            self,
            date: Optional[str],
            service_type: Optional[str],
            cost: Optional[float] = None,
            description: Optional[str] = "",
            time: Optional[str] = None,
            status: Union[MaintenanceStatus, str, None] = MaintenanceStatus.COMPLETED,
    ):
        self.date = date or ""
        self.service_type = service_type or ""
        self.status = _coerce_status(status)
        # Scheduled work has no cost yet
        self.cost = None if self.status is MaintenanceStatus.SCHEDULED else cost
        self.description = description or ""
        self.time = time or None

    @classmethod
    def from_dict(cls, data: Mapping) -> "MaintenanceRecord":
        """Build a record from the persisted camelCase shape."""
        return cls(
            data.get("date"),
            data.get("serviceType"),
            data.get("cost"),
            data.get("description"),
            data.get("time"),
            data.get("status"),
        )

    @classmethod
    def coerce(cls, value: Any) -> "MaintenanceRecord":
        """
        Promote a structurally similar mapping to a MaintenanceRecord.

        Records pass through unchanged. Mappings need at least a date and a
        service type; anything else is an internal error.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping) and value.get("date") and value.get("serviceType"):
            return cls.from_dict(value)
        raise InvalidInput("Internal error: invalid maintenance record object.")

    @property
    def is_scheduled(self) -> bool:
        return self.status is MaintenanceStatus.SCHEDULED

    @property
    def is_completed(self) -> bool:
        return self.status is MaintenanceStatus.COMPLETED

    def resolved_datetime(self) -> Optional[datetime]:
        """Concrete timestamp of date (+ time), or None if it is not real."""
        return resolve_datetime(self.date, self.time)

    def validate(self) -> List[str]:
        """Return every violated rule, in check order. Empty means valid."""
        errors = []

        if self.resolved_datetime() is None:
            if not is_date_text(self.date):
                errors.append(DATE_FORMAT_ERROR)
            elif self.time and not is_time_text(self.time):
                errors.append(TIME_FORMAT_ERROR)
            else:
                errors.append(DATE_VALUE_ERROR)

        if not isinstance(self.service_type, str) or not self.service_type.strip():
            errors.append(SERVICE_TYPE_ERROR)

        if self.status is MaintenanceStatus.COMPLETED:
            if not is_number(self.cost) or self.cost < 0:
                errors.append(COST_ERROR)

        if self.description and not isinstance(self.description, str):
            errors.append(DESCRIPTION_ERROR)

        if not isinstance(self.status, MaintenanceStatus):
            errors.append(STATUS_ERROR)

        return errors

    def blocking_errors(self) -> List[str]:
        """
        Errors that make the record unusable.

        Scheduled records are legitimately cost-less, so cost errors are
        dropped for them; completed records keep every error.
        """
        errors = self.validate()
        if self.is_scheduled:
            return [e for e in errors if not _concerns_cost(e)]
        return errors

    def is_valid(self) -> bool:
        return not self.blocking_errors()

    def format(self) -> str:
        """Display text for lists and detail panels."""
        errors = self.blocking_errors()
        if errors:
            return f"Invalid maintenance data: {', '.join(errors)}"

        resolved = self.resolved_datetime()
        date_text = resolved.strftime("%d/%m/%Y") if resolved else "invalid date"

        if self.is_scheduled:
            info = f"Scheduled: {self.service_type} on {date_text}"
            if self.time:
                info += f" at {self.time}"
            if self.description.strip():
                info += f" (Note: {self.description})"
            return info

        cost_text = format_cost(self.cost if is_number(self.cost) else None)
        info = f"- {self.service_type} on {date_text} - {cost_text}"
        if self.description.strip():
            info += f" ({self.description})"
        return info

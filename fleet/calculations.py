"""Helper functions for date resolution, kinematics and input parsing."""

import math
import re
from datetime import datetime
from typing import Any, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from .errors import InvalidInput

Number = Union[int, float]

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


def is_date_text(value: Any) -> bool:
    """True if value looks like YYYY-MM-DD (shape only, not calendar validity)."""
    return isinstance(value, str) and bool(DATE_PATTERN.match(value))


def is_time_text(value: Any) -> bool:
    """True if value looks like HH:MM (shape only)."""
    return isinstance(value, str) and bool(TIME_PATTERN.match(value))


def resolve_datetime(date_text: Any, time_text: Any = None) -> Optional[datetime]:
    """
    Resolve a YYYY-MM-DD date and optional HH:MM time to a datetime.

    Returns None when the date is not a real calendar date, or when a time
    is supplied that is malformed or does not survive the round trip.
    Without a time the result is midnight.

    The constructed value is decomposed again and compared part by part, so
    an input that a lenient parser would roll over into a neighbouring day
    (2023-02-30 becoming 2023-03-02) is rejected instead of accepted.
    """
    if not is_date_text(date_text):
        return None
    year, month, day = (int(part) for part in date_text.split("-"))
    hour, minute = 0, 0
    has_time = bool(time_text)
    if has_time:
        if not is_time_text(time_text):
            return None
        hour, minute = (int(part) for part in time_text.split(":"))

    try:
        resolved = datetime.strptime(
            f"{date_text} {hour:02d}:{minute:02d}", "%Y-%m-%d %H:%M"
        )
    except ValueError:
        return None

    if (resolved.year, resolved.month, resolved.day) != (year, month, day):
        return None
    if has_time and (resolved.hour, resolved.minute) != (hour, minute):
        return None
    return resolved


def is_number(value: Any) -> bool:
    """True for real, finite numbers (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def parse_amount(value: Any, allow_zero: bool = False) -> Number:
    """
    Parse user input (number or numeric text) into a positive number.

    Integral values come back as int so displays read "3000kg" rather than
    "3000.0kg". Raises InvalidInput for anything else.
    """
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise InvalidInput(f"'{value}' is not a number")
    if not is_number(value):
        raise InvalidInput(f"'{value}' is not a number")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "zero or greater" if allow_zero else "greater than zero"
        raise InvalidInput(f"Amount must be {bound}, got {value}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def clamp(value: Number, low: Number, high: Number) -> Number:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))


def speed_up(
    speed: Number, max_speed: Number, fuel: Number, increment: Number, consumption: Number
) -> Tuple[Number, Number]:
    """Apply one acceleration step: speed capped at max, fuel floored at 0."""
    return min(speed + increment, max_speed), max(fuel - consumption, 0)


def slow_down(speed: Number, reduction: Number) -> Number:
    """Apply one brake step, floored at 0."""
    return max(speed - reduction, 0)


def cargo_ratio(current_cargo: Number, capacity: Number) -> float:
    """currentCargo / capacity; an empty or capacity-less truck has ratio 0."""
    if not capacity:
        return 0.0
    return current_cargo / capacity


def truck_increment(ratio: float) -> float:
    """Loaded trucks accelerate slower, never below 5 per step."""
    return max(5, 10 * (1 - ratio / 2))


def truck_consumption(ratio: float) -> float:
    """Loaded trucks burn more fuel: 8 empty, 12 at full capacity."""
    return 8 + 4 * ratio


def truck_brake_reduction(ratio: float) -> float:
    """Loaded trucks brake weaker, never below 2 per step."""
    return max(10 / (1 + ratio), 2)


def format_number(value: Number) -> str:
    """Render a number without a trailing '.0' and with at most one decimal."""
    if isinstance(value, float) and not value.is_integer():
        return f"{value:.1f}"
    return f"{value:.0f}"


def format_cost(cost: Optional[Number]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "cost not informed"


def calc_horizon(start: datetime, months: float) -> datetime:
    """start + months; the fractional part counts as 30-day months."""
    whole = int(months)
    days = int((months - whole) * 30)
    return start + relativedelta(months=whole, days=days)

"""Shared validation utilities"""

import re
from typing import Optional

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_time_of_day(value: Optional[str]) -> str:
    """
    Validate a shift boundary.

    Args:
        value: "HH:MM" in 24h format, or empty for "not set"

    Returns:
        The stripped value ("" when unset)

    Raises:
        ValueError: If the time is not HH:MM
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("Time must be in HH:MM format")

    value = value.strip()
    if value and not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


from __future__ import annotations

import re

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_time(value: str) -> str:
    """Accept ``HH:MM`` or ``HH:MM:SS`` and return ``HH:MM``."""
    trimmed = value.strip()
    if len(trimmed) == 8 and trimmed.count(":") == 2:
        trimmed = trimmed[:5]
    if not TIME_PATTERN.match(trimmed):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return trimmed


def day_name(day_of_week: int) -> str:
    return DAY_NAMES[day_of_week]

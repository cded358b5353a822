"""Formatting and ordering helpers for dashboard views."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional

from models.readings import AxisRange, ReadingType, Sensor

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
SECONDS_PER_WEEK = 7 * SECONDS_PER_DAY
# Ages switch to years after 365 days but are divided by a 364-day year.
AGE_YEAR_THRESHOLD_SECONDS = 365 * SECONDS_PER_DAY
AGE_YEAR_DIVISOR_SECONDS = 364 * SECONDS_PER_DAY

FIXED_AXIS_RANGES: Dict[ReadingType, AxisRange] = {
    ReadingType.voltage: AxisRange(min=2.9, max=3.1),
}

READING_UNITS: Dict[ReadingType, str] = {
    ReadingType.temperature: "°C",
    ReadingType.pressure: "hPa",
    ReadingType.voltage: "V",
}


def sort_sensors(sensors: Iterable[Sensor]) -> List[Sensor]:
    """Internal sensors first, then by ascending id."""
    return sorted(sensors, key=lambda sensor: (not sensor.internal, sensor.sensor_id))


def format_decimal(value: float, places: int) -> str:
    return f"{value:,.{places}f}"


def format_age(event_ms: float, now_ms: float) -> str:
    elapsed = now_ms / 1000 - event_ms / 1000
    if elapsed < SECONDS_PER_MINUTE:
        value, unit = elapsed, "s"
    elif elapsed < SECONDS_PER_HOUR:
        value, unit = elapsed / SECONDS_PER_MINUTE, "m"
    elif elapsed < SECONDS_PER_DAY:
        value, unit = elapsed / SECONDS_PER_HOUR, "h"
    elif elapsed < SECONDS_PER_WEEK:
        value, unit = elapsed / SECONDS_PER_DAY, "d"
    elif elapsed < AGE_YEAR_THRESHOLD_SECONDS:
        value, unit = elapsed / SECONDS_PER_WEEK, "w"
    else:
        value, unit = elapsed / AGE_YEAR_DIVISOR_SECONDS, "y"
    return f"{math.floor(value)} {unit}"


def chart_axis(
    reading_type: ReadingType,
    comparable: bool,
    scale: Dict[ReadingType, AxisRange],
) -> Optional[AxisRange]:
    """Axis bounds for one chart; ``None`` lets the chart auto-scale."""
    fixed = FIXED_AXIS_RANGES.get(reading_type)
    if fixed is not None:
        return fixed
    if not comparable:
        return None
    return scale.get(reading_type)

"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

NS_PER_MS = 1_000_000
NS_PER_DAY = 24 * 3600 * 1_000_000_000


class ReadingType(str, Enum):
    """Kinds of measurement a sensor can report."""

    unknown = "unknown"
    temperature = "temperature"
    pressure = "pressure"
    voltage = "voltage"

    @classmethod
    def from_code(cls, code: int) -> "ReadingType":
        """Map a wire type code to a reading type; unmatched codes are ``unknown``."""
        if 0 <= code < len(_TYPE_CODES):
            return _TYPE_CODES[code]
        return cls.unknown


# Positional: index is the code the sensors transmit.
_TYPE_CODES = (
    ReadingType.unknown,
    ReadingType.temperature,
    ReadingType.pressure,
    ReadingType.voltage,
)


class Interval(str, Enum):
    """Named lookback windows ending at the session's "now"."""

    day = "1D"
    week = "1W"
    month = "1M"
    year = "1Y"

    @property
    def duration_ns(self) -> int:
        return INTERVAL_WINDOWS_NS[self]

    @classmethod
    def parse(cls, value: str) -> "Interval":
        candidate = value.strip().upper()
        for interval in cls:
            if interval.value == candidate:
                return interval
        choices = ", ".join(interval.value for interval in cls)
        raise ValueError(f"Unknown interval {value!r}; expected one of {choices}.")


INTERVAL_WINDOWS_NS = {
    Interval.day: NS_PER_DAY,
    Interval.week: NS_PER_DAY * 7,
    Interval.month: NS_PER_DAY * 30,
    Interval.year: NS_PER_DAY * 365,
}


@dataclass(frozen=True, slots=True)
class Reading:
    """A single raw measurement as delivered by the readings API."""

    time: int
    reading_type_code: int
    sensor_id: int
    value: float


@dataclass(frozen=True, slots=True)
class Point:
    """Time/value pair; ``x`` is milliseconds since the epoch."""

    x: int
    y: float


@dataclass(frozen=True, slots=True)
class Observation:
    sensor_id: int
    reading_type: ReadingType
    point: Point


@dataclass(frozen=True, slots=True)
class Sensor:
    sensor_id: int
    name: str
    internal: bool = False


@dataclass(frozen=True, slots=True)
class TimeWindow:
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class AxisRange:
    min: float
    max: float

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pytest

from models.readings import Reading, Sensor
from sources.http_source import FetchError


class StubSource:
    """In-memory reading source that records the windows it was asked for."""

    def __init__(
        self,
        sensors: Optional[Sequence[Sensor]] = None,
        readings: Optional[Sequence[Reading]] = None,
        latest: Optional[Sequence[Reading]] = None,
    ) -> None:
        self.sensors = list(sensors or [])
        self.readings = list(readings or [])
        self.latest = list(latest or [])
        self.range_calls: List[Tuple[int, int]] = []
        self.fail_with: Optional[Exception] = None
        self.closed = False

    def fetch_sensors(self) -> List[Sensor]:
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.sensors)

    def fetch_readings(self, start: int, end: int) -> List[Reading]:
        self.range_calls.append((start, end))
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.readings)

    def fetch_latest(self) -> List[Reading]:
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.latest)

    def close(self) -> None:
        self.closed = True


def temperature(sensor_id: int, seconds: int, value: float) -> Reading:
    return Reading(
        time=seconds * 1_000_000_000,
        reading_type_code=1,
        sensor_id=sensor_id,
        value=value,
    )


def voltage(sensor_id: int, seconds: int, value: float) -> Reading:
    return Reading(
        time=seconds * 1_000_000_000,
        reading_type_code=3,
        sensor_id=sensor_id,
        value=value,
    )


@pytest.fixture()
def unreachable() -> FetchError:
    return FetchError("/api/v1/readings", "connection refused")

from __future__ import annotations

import logging
import threading
from typing import Iterator, List

import pytest

from models.readings import AxisRange, Interval, Point, Reading, ReadingType, Sensor
from services.dashboard import DashboardService
from services.interval_cache import IntervalStatus

from conftest import StubSource, temperature, voltage

NOW_NS = 1_700_000_000 * 1_000_000_000
NOW_MS = NOW_NS // 1_000_000

SENSORS = [
    Sensor(sensor_id=3, name="garden", internal=False),
    Sensor(sensor_id=2, name="bedroom", internal=True),
    Sensor(sensor_id=1, name="kitchen", internal=True),
]


@pytest.fixture()
def source() -> StubSource:
    return StubSource(
        sensors=SENSORS,
        readings=[
            temperature(1, 100, 19.2),
            temperature(2, 100, 17.6),
            temperature(3, 100, -4.0),
            temperature(1, 200, 21.4),
            voltage(1, 200, 3.02),
            Reading(time=300 * 1_000_000_000, reading_type_code=7, sensor_id=2, value=1.0),
        ],
        latest=[
            temperature(1, 1_700_000_000 - 90, 21.0),
            temperature(3, 1_700_000_000 - 7200, 2.5),
        ],
    )


@pytest.fixture()
def dashboard(source: StubSource) -> Iterator[DashboardService]:
    service = DashboardService(source=source, workers=1, now_ns=NOW_NS)
    yield service
    service.shutdown()


def test_load_sensors_sorts_internal_first(dashboard: DashboardService) -> None:
    loaded = dashboard.load_sensors()

    assert [sensor.sensor_id for sensor in loaded] == [1, 2, 3]
    assert dashboard.sensor(3) == SENSORS[0]
    assert dashboard.sensor(42) is None


def test_load_failure_keeps_previous_state(
    dashboard: DashboardService, source: StubSource, unreachable, caplog
) -> None:
    dashboard.load_sensors()
    dashboard.load_latest()
    source.fail_with = unreachable

    with caplog.at_level(logging.WARNING, logger="services.dashboard"):
        sensors = dashboard.load_sensors()
        latest = dashboard.load_latest()

    assert [sensor.sensor_id for sensor in sensors] == [1, 2, 3]
    assert 1 in latest
    warnings = [record for record in caplog.records if record.levelno >= logging.WARNING]
    messages = [record.getMessage() for record in warnings]
    assert "Could not load sensors" in messages
    assert "Could not load latest readings" in messages
    assert all(getattr(record, "reason", None) == "connection refused" for record in warnings)


def test_overview_rows(dashboard: DashboardService) -> None:
    dashboard.load_sensors()
    dashboard.load_latest()

    rows = dashboard.overview(now_ms=NOW_MS)

    assert [row.name for row in rows] == ["KITCHEN", "BEDROOM", "GARDEN"]
    kitchen, bedroom, garden = rows
    assert kitchen.display_value == "21.0"
    assert kitchen.unit == "°C"
    assert kitchen.age == "1 m"
    assert bedroom.value is None
    assert bedroom.age is None
    assert garden.age == "2 h"


def test_live_readings_override_snapshot(dashboard: DashboardService) -> None:
    dashboard.load_sensors()
    dashboard.load_latest()

    dashboard.ingest_live(temperature(1, 1_700_000_000 - 5, 22.75))
    dashboard.ingest_live(temperature(2, 1_700_000_000 - 30, 18.0))

    assert dashboard.latest_points(1)[ReadingType.temperature] == Point(
        x=(1_700_000_000 - 5) * 1000, y=22.75
    )
    rows = {row.sensor_id: row for row in dashboard.overview(now_ms=NOW_MS)}
    assert rows[1].display_value == "22.8"
    assert rows[2].age == "30 s"
    assert dashboard.cache.cached_intervals() == []


def test_interval_view(dashboard: DashboardService, source: StubSource) -> None:
    dashboard.load_sensors()

    view = dashboard.interval_view(Interval.day)

    assert source.range_calls == [(NOW_NS - Interval.day.duration_ns, NOW_NS)]
    assert view.scale[ReadingType.temperature] == AxisRange(min=17, max=22)
    assert [sensor_view.sensor.sensor_id for sensor_view in view.sensors] == [1, 2, 3]

    kitchen = view.sensor(1)
    assert kitchen is not None
    temp = kitchen.series[ReadingType.temperature]
    assert temp.min_point == Point(x=100_000, y=19.2)
    assert temp.max_point == Point(x=200_000, y=21.4)
    assert temp.axis == AxisRange(min=17, max=22)
    assert kitchen.series[ReadingType.voltage].axis == AxisRange(min=2.9, max=3.1)

    bedroom = view.sensor(2)
    assert bedroom is not None
    assert ReadingType.unknown not in bedroom.series

    garden = view.sensor(3)
    assert garden is not None
    assert garden.series[ReadingType.temperature].axis is None


def test_interval_view_reuses_cached_store(dashboard: DashboardService, source: StubSource) -> None:
    dashboard.load_sensors()

    dashboard.interval_view(Interval.week)
    dashboard.interval_view(Interval.week)

    assert len(source.range_calls) == 1


def test_request_interval_runs_in_background(dashboard: DashboardService) -> None:
    status = dashboard.request_interval(Interval.month)
    assert status in {IntervalStatus.pending, IntervalStatus.ready}

    dashboard.executor.shutdown(wait=True)

    assert dashboard.interval_status(Interval.month) is IntervalStatus.ready
    assert dashboard.request_interval(Interval.month) is IntervalStatus.ready


def test_shutdown_closes_source(source: StubSource) -> None:
    service = DashboardService(source=source, workers=1, now_ns=NOW_NS)

    service.shutdown()

    assert source.closed is True


def test_shutdown_waits_for_running_fetch_before_closing_source(source: StubSource) -> None:
    service = DashboardService(source=source, workers=1, now_ns=NOW_NS)
    started = threading.Event()
    release = threading.Event()
    closed_during_fetch: List[bool] = []
    fetch_readings = source.fetch_readings

    def slow_fetch(start: int, end: int) -> List[Reading]:
        started.set()
        release.wait(timeout=5)
        closed_during_fetch.append(source.closed)
        return fetch_readings(start, end)

    source.fetch_readings = slow_fetch  # type: ignore[method-assign]
    service.request_interval(Interval.year)
    started.wait(timeout=5)
    assert service.request_interval(Interval.day) is IntervalStatus.pending

    threading.Timer(0.05, release.set).start()
    service.shutdown()

    assert closed_during_fetch == [False]
    assert source.closed is True
    assert service.interval_status(Interval.year) is IntervalStatus.ready
    assert service.interval_status(Interval.day) is IntervalStatus.failed

"""Session orchestration for the sensor dashboard."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import lru_cache
from threading import Lock
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from models.readings import (
    NS_PER_MS,
    AxisRange,
    Interval,
    Point,
    Reading,
    ReadingType,
    Sensor,
    TimeWindow,
)
from services.interval_cache import IntervalRangeCache, IntervalStatus
from services.presentation import (
    READING_UNITS,
    chart_axis,
    format_age,
    format_decimal,
    sort_sensors,
)
from services.scale import ScaleMap, compute_scale, is_internal
from services.series_store import SeriesStore, add_reading, build_store, latest_view
from settings import get_settings
from sources.http_source import FetchError, HttpReadingSource

logger = logging.getLogger(__name__)


class ReadingSource(Protocol):
    def fetch_sensors(self) -> Sequence[Sensor]: ...

    def fetch_readings(self, start: int, end: int) -> Sequence[Reading]: ...

    def fetch_latest(self) -> Sequence[Reading]: ...

    def close(self) -> None: ...


@dataclass
class OverviewRow:
    """One line of the sensor overview table."""

    sensor_id: int
    name: str
    value: Optional[float] = None
    display_value: Optional[str] = None
    unit: str = READING_UNITS[ReadingType.temperature]
    observed_at: Optional[int] = None
    age: Optional[str] = None


@dataclass
class SeriesView:
    reading_type: ReadingType
    points: List[Point]
    min_index: int
    max_index: int
    min_point: Point
    max_point: Point
    axis: Optional[AxisRange] = None


@dataclass
class SensorView:
    sensor: Sensor
    series: Dict[ReadingType, SeriesView] = field(default_factory=dict)


@dataclass
class IntervalView:
    interval: Interval
    window: TimeWindow
    scale: ScaleMap
    sensors: List[SensorView]

    def sensor(self, sensor_id: int) -> Optional[SensorView]:
        for view in self.sensors:
            if view.sensor.sensor_id == sensor_id:
                return view
        return None


class DashboardService:
    """Holds one dashboard session: sensors, latest readings, live updates and interval data."""

    def __init__(
        self,
        source: ReadingSource,
        workers: int = 2,
        now_ns: Optional[int] = None,
        is_comparable: Callable[[Sensor], bool] = is_internal,
    ) -> None:
        self.source = source
        self.session_start_ns = now_ns if now_ns is not None else time.time_ns()
        self.cache = IntervalRangeCache(self.session_start_ns)
        self.executor = ThreadPoolExecutor(max_workers=workers)
        self.is_comparable = is_comparable
        self._sensors: List[Sensor] = []
        self._latest: SeriesStore = {}
        self._live: SeriesStore = {}
        self._state_lock = Lock()

    @property
    def sensors(self) -> List[Sensor]:
        with self._state_lock:
            return list(self._sensors)

    def sensor(self, sensor_id: int) -> Optional[Sensor]:
        for sensor in self.sensors:
            if sensor.sensor_id == sensor_id:
                return sensor
        return None

    def load_sensors(self) -> List[Sensor]:
        """Refresh the sensor list; on failure the previous list is kept."""
        try:
            fetched = self.source.fetch_sensors()
        except FetchError as exc:
            logger.warning("Could not load sensors", extra={"reason": exc.reason})
            return self.sensors
        ordered = sort_sensors(fetched)
        with self._state_lock:
            self._sensors = ordered
        logger.info("Loaded sensors", extra={"sensor_count": len(ordered)})
        return list(ordered)

    def load_latest(self) -> SeriesStore:
        """Refresh the latest-readings snapshot; on failure the previous one is kept."""
        try:
            readings = self.source.fetch_latest()
        except FetchError as exc:
            logger.warning("Could not load latest readings", extra={"reason": exc.reason})
            with self._state_lock:
                return self._latest
        store = build_store(readings)
        with self._state_lock:
            self._latest = store
        logger.info("Loaded latest readings", extra={"reading_count": len(readings)})
        return store

    def ingest_live(self, reading: Reading) -> None:
        """Feed a single reading from the live-update channel."""
        with self._state_lock:
            add_reading(self._live, reading)
        logger.debug(
            "Ingested live reading",
            extra={
                "sensor_id": reading.sensor_id,
                "reading_type_code": reading.reading_type_code,
            },
        )

    def latest_points(self, sensor_id: int) -> Dict[ReadingType, Point]:
        """Most recent point per reading type; live updates win over the snapshot."""
        with self._state_lock:
            points = dict(latest_view(self._latest).get(sensor_id, {}))
            for reading_type, series in self._live.get(sensor_id, {}).items():
                if series.last_point is not None:
                    points[reading_type] = series.last_point
        return points

    def overview(self, now_ms: Optional[int] = None) -> List[OverviewRow]:
        now = now_ms if now_ms is not None else time.time_ns() // NS_PER_MS
        rows: List[OverviewRow] = []
        for sensor in self.sensors:
            row = OverviewRow(sensor_id=sensor.sensor_id, name=sensor.name.upper())
            point = self.latest_points(sensor.sensor_id).get(ReadingType.temperature)
            if point is not None:
                row.value = point.y
                row.display_value = format_decimal(point.y, 1)
                row.observed_at = point.x
                row.age = format_age(point.x, now)
            rows.append(row)
        return rows

    def interval_store(self, interval: Interval) -> SeriesStore:
        return self.cache.get_or_fetch(interval, self.source.fetch_readings)

    def request_interval(self, interval: Interval) -> IntervalStatus:
        return self.cache.request(interval, self.source.fetch_readings, self.executor)

    def interval_status(self, interval: Interval) -> IntervalStatus:
        return self.cache.status(interval)

    def interval_view(self, interval: Interval) -> IntervalView:
        store = self.interval_store(interval)
        sensors = self.sensors
        sensors_by_id = {sensor.sensor_id: sensor for sensor in sensors}
        scale = compute_scale(store, sensors_by_id, self.is_comparable)

        views: List[SensorView] = []
        for sensor in sensors:
            view = SensorView(sensor=sensor)
            comparable = self.is_comparable(sensor)
            for reading_type, series in store.get(sensor.sensor_id, {}).items():
                if reading_type is ReadingType.unknown or not series.data:
                    continue
                view.series[reading_type] = SeriesView(
                    reading_type=reading_type,
                    points=list(series.data),
                    min_index=series.min_index,
                    max_index=series.max_index,
                    min_point=series.data[series.min_index],
                    max_point=series.data[series.max_index],
                    axis=chart_axis(reading_type, comparable, scale),
                )
            views.append(view)

        return IntervalView(
            interval=interval,
            window=self.cache.window(interval),
            scale=scale,
            sensors=views,
        )

    def shutdown(self) -> None:
        """Release the worker pool and the source's connections."""
        self.executor.shutdown(wait=True, cancel_futures=True)
        self.source.close()


@lru_cache
def build_default_service(workers: Optional[int] = None) -> DashboardService:
    """Factory that wires the dashboard against the configured readings API."""
    settings = get_settings()
    source = HttpReadingSource(settings.api_base_url, timeout=settings.http_timeout)
    return DashboardService(source=source, workers=workers or settings.fetch_workers)

"""Folding batches of readings into per-sensor series."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from models.readings import Point, Reading, ReadingType
from services.normalizer import normalize
from services.observations import ObservationSeries, insert

SensorSeriesMap = Dict[ReadingType, ObservationSeries]
SeriesStore = Dict[int, SensorSeriesMap]


def add_reading(store: SeriesStore, reading: Reading) -> SeriesStore:
    observation = normalize(reading)
    sensor_series = store.setdefault(observation.sensor_id, {})
    series = sensor_series.setdefault(observation.reading_type, ObservationSeries())
    insert(series, observation.point)
    return store


def build_store(readings: Iterable[Reading]) -> SeriesStore:
    """Fold readings in input order into a fresh store."""
    store: SeriesStore = {}
    for reading in readings:
        add_reading(store, reading)
    return store


def get_series(
    store: SeriesStore, sensor_id: int, reading_type: ReadingType
) -> Optional[ObservationSeries]:
    sensor_series = store.get(sensor_id)
    if sensor_series is None:
        return None
    return sensor_series.get(reading_type)


def latest_view(store: SeriesStore) -> Dict[int, Dict[ReadingType, Point]]:
    """First point of every series, as delivered by the latest-readings endpoint."""
    view: Dict[int, Dict[ReadingType, Point]] = {}
    for sensor_id, sensor_series in store.items():
        points = {
            reading_type: series.first_point
            for reading_type, series in sensor_series.items()
            if series.first_point is not None
        }
        view[sensor_id] = points
    return view


def reading_count(store: SeriesStore) -> int:
    return sum(len(series) for sensor_series in store.values() for series in sensor_series.values())

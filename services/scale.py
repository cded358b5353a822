"""Shared vertical axis bounds across comparable sensors."""

from __future__ import annotations

import math
from typing import Callable, Dict, Mapping

from models.readings import AxisRange, ReadingType, Sensor
from services.series_store import SeriesStore

ScaleMap = Dict[ReadingType, AxisRange]


def is_internal(sensor: Sensor) -> bool:
    return sensor.internal


def compute_scale(
    store: SeriesStore,
    sensors_by_id: Mapping[int, Sensor],
    is_comparable: Callable[[Sensor], bool] = is_internal,
) -> ScaleMap:
    """Widen one ``{floor(min), ceil(max)}`` range per reading type.

    Sensors missing from ``sensors_by_id`` are treated as not comparable.
    """
    scale: ScaleMap = {}
    for sensor_id, sensor_series in store.items():
        sensor = sensors_by_id.get(sensor_id)
        if sensor is None or not is_comparable(sensor):
            continue
        for reading_type, series in sensor_series.items():
            if not series.data:
                continue
            local_min = math.floor(series.data[series.min_index].y)
            local_max = math.ceil(series.data[series.max_index].y)
            existing = scale.get(reading_type)
            if existing is None:
                scale[reading_type] = AxisRange(min=local_min, max=local_max)
            else:
                scale[reading_type] = AxisRange(
                    min=min(existing.min, local_min),
                    max=max(existing.max, local_max),
                )
    return scale

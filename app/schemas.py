"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models.readings import AxisRange, Interval, Point, ReadingType, Sensor
from services.dashboard import IntervalView, OverviewRow, SeriesView
from services.interval_cache import IntervalStatus


class SensorOut(BaseModel):
    sensor_id: int
    name: str
    internal: bool

    @classmethod
    def from_sensor(cls, sensor: Sensor) -> "SensorOut":
        return cls(sensor_id=sensor.sensor_id, name=sensor.name, internal=sensor.internal)


class PointOut(BaseModel):
    """Time/value pair with ``x`` in milliseconds since the epoch."""

    x: int
    y: float

    @classmethod
    def from_point(cls, point: Point) -> "PointOut":
        return cls(x=point.x, y=point.y)


class AxisRangeOut(BaseModel):
    min: float
    max: float

    @classmethod
    def from_range(cls, axis: AxisRange) -> "AxisRangeOut":
        return cls(min=axis.min, max=axis.max)


class OverviewRowOut(BaseModel):
    """Latest temperature for a sensor; value fields are null when nothing was reported."""

    sensor_id: int
    name: str
    value: Optional[float] = None
    display_value: Optional[str] = None
    unit: str
    observed_at: Optional[int] = Field(default=None, description="Milliseconds since the epoch.")
    age: Optional[str] = None

    @classmethod
    def from_row(cls, row: OverviewRow) -> "OverviewRowOut":
        return cls(
            sensor_id=row.sensor_id,
            name=row.name,
            value=row.value,
            display_value=row.display_value,
            unit=row.unit,
            observed_at=row.observed_at,
            age=row.age,
        )


class SeriesOut(BaseModel):
    data: List[PointOut]
    min_index: int = Field(..., ge=0)
    max_index: int = Field(..., ge=0)
    min: float
    max: float
    axis: Optional[AxisRangeOut] = None

    @classmethod
    def from_view(cls, view: SeriesView) -> "SeriesOut":
        return cls(
            data=[PointOut.from_point(point) for point in view.points],
            min_index=view.min_index,
            max_index=view.max_index,
            min=view.min_point.y,
            max=view.max_point.y,
            axis=AxisRangeOut.from_range(view.axis) if view.axis else None,
        )


class SensorSeriesOut(BaseModel):
    sensor: SensorOut
    series: Dict[ReadingType, SeriesOut] = Field(default_factory=dict)


class IntervalViewOut(BaseModel):
    interval: Interval
    start: int = Field(..., description="Window start in nanoseconds since the epoch.")
    end: int = Field(..., description="Window end in nanoseconds since the epoch.")
    scale: Dict[ReadingType, AxisRangeOut] = Field(default_factory=dict)
    sensors: List[SensorSeriesOut] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: IntervalView) -> "IntervalViewOut":
        return cls(
            interval=view.interval,
            start=view.window.start,
            end=view.window.end,
            scale={
                reading_type: AxisRangeOut.from_range(axis)
                for reading_type, axis in view.scale.items()
            },
            sensors=[
                SensorSeriesOut(
                    sensor=SensorOut.from_sensor(sensor_view.sensor),
                    series={
                        reading_type: SeriesOut.from_view(series)
                        for reading_type, series in sensor_view.series.items()
                    },
                )
                for sensor_view in view.sensors
            ],
        )


class IntervalStatusOut(BaseModel):
    interval: Interval
    status: IntervalStatus
    reason: Optional[str] = Field(default=None, description="Failure detail of the last attempt.")

"""Arrival-ordered series with incrementally tracked extrema."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from models.readings import Point


@dataclass
class ObservationSeries:
    """Points for one sensor and reading type, in arrival order.

    ``min_index`` and ``max_index`` always point at the earliest occurrence
    of the smallest and largest ``y`` seen so far.
    """

    data: List[Point] = field(default_factory=list)
    min_index: int = 0
    max_index: int = 0

    def __len__(self) -> int:
        return len(self.data)

    @property
    def min_point(self) -> Optional[Point]:
        return self.data[self.min_index] if self.data else None

    @property
    def max_point(self) -> Optional[Point]:
        return self.data[self.max_index] if self.data else None

    @property
    def first_point(self) -> Optional[Point]:
        return self.data[0] if self.data else None

    @property
    def last_point(self) -> Optional[Point]:
        return self.data[-1] if self.data else None


def insert(series: ObservationSeries, point: Point) -> ObservationSeries:
    """Append ``point`` and move the extrema indices if it is a strict new extreme."""
    if not series.data:
        series.data.append(point)
        series.min_index = 0
        series.max_index = 0
        return series

    new_index = len(series.data)
    series.data.append(point)
    if point.y > series.data[series.max_index].y:
        series.max_index = new_index
    elif point.y < series.data[series.min_index].y:
        series.min_index = new_index
    return series

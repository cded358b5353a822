"""Conversion of raw readings into typed observations."""

from __future__ import annotations

import logging

from models.readings import NS_PER_MS, Observation, Point, Reading, ReadingType

logger = logging.getLogger(__name__)


def ns_to_ms(timestamp_ns: int) -> int:
    """Scale nanoseconds to milliseconds, truncating toward zero."""
    millis = abs(timestamp_ns) // NS_PER_MS
    return millis if timestamp_ns >= 0 else -millis


def normalize(reading: Reading) -> Observation:
    reading_type = ReadingType.from_code(reading.reading_type_code)
    if reading_type is ReadingType.unknown:
        logger.debug(
            "Reading carries an unrecognised type code",
            extra={
                "sensor_id": reading.sensor_id,
                "reading_type_code": reading.reading_type_code,
            },
        )
    return Observation(
        sensor_id=reading.sensor_id,
        reading_type=reading_type,
        point=Point(x=ns_to_ms(reading.time), y=reading.value),
    )

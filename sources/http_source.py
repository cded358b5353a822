"""HTTP client for the thermograph readings API."""

from __future__ import annotations

from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, Field, TypeAdapter

from models.readings import Reading, Sensor

API_PREFIX = "/api/v1"


class FetchError(RuntimeError):
    """Raised when the readings API cannot be reached or answers with an error."""

    def __init__(self, path: str, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Fetching {path} failed: {reason}")
        self.path = path
        self.reason = reason
        self.status_code = status_code


class ReadingPayload(BaseModel):
    """Reading record as serialized by the readings API."""

    time: int = Field(..., description="Nanoseconds since the epoch.")
    rtype: int = Field(..., description="Positional reading type code.")
    sensor_id: int
    value: float
    seqno: Optional[int] = None

    def to_reading(self) -> Reading:
        return Reading(
            time=self.time,
            reading_type_code=self.rtype,
            sensor_id=self.sensor_id,
            value=self.value,
        )


class SensorPayload(BaseModel):
    sensor_id: int
    name: str
    internal: bool = False

    def to_sensor(self) -> Sensor:
        return Sensor(sensor_id=self.sensor_id, name=self.name, internal=self.internal)


_READINGS = TypeAdapter(List[ReadingPayload])
_SENSORS = TypeAdapter(List[SensorPayload])


class HttpReadingSource:
    """Fetches sensors and readings; payload shape errors surface as ``ValidationError``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def fetch_sensors(self) -> List[Sensor]:
        payload = self._get_json(f"{API_PREFIX}/sensors")
        return [item.to_sensor() for item in _SENSORS.validate_python(payload)]

    def fetch_readings(self, start: int, end: int) -> List[Reading]:
        payload = self._get_json(
            f"{API_PREFIX}/readings", params={"start": start, "end": end}
        )
        return [item.to_reading() for item in _READINGS.validate_python(payload)]

    def fetch_latest(self) -> List[Reading]:
        payload = self._get_json(f"{API_PREFIX}/readings/latest")
        return [item.to_reading() for item in _READINGS.validate_python(payload)]

    def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text.strip() or exc.response.reason_phrase
            raise FetchError(
                path, f"status {exc.response.status_code}: {detail}", exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(path, str(exc) or type(exc).__name__) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(path, "response body is not JSON") from exc

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from models.readings import Interval


_API_BASE_URL_ENV = "THERMOGRAPH_API_BASE_URL"
_HTTP_TIMEOUT_ENV = "THERMOGRAPH_HTTP_TIMEOUT"
_FETCH_WORKERS_ENV = "DASHBOARD_FETCH_WORKERS"
_DEFAULT_INTERVAL_ENV = "DASHBOARD_DEFAULT_INTERVAL"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    http_timeout: float
    fetch_workers: int
    default_interval: Interval
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_interval(default: Interval) -> Interval:
    value = os.getenv(_DEFAULT_INTERVAL_ENV)
    if value is None:
        return default
    try:
        return Interval.parse(value)
    except ValueError:
        return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_base_url=_read_str_env(_API_BASE_URL_ENV, "http://localhost:8080").rstrip("/"),
        http_timeout=_read_positive_float(_HTTP_TIMEOUT_ENV, 10.0),
        fetch_workers=_read_positive_int(_FETCH_WORKERS_ENV, 2),
        default_interval=_read_interval(Interval.day),
        log_level=_read_log_level("INFO"),
    )

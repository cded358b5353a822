from __future__ import annotations

import logging

from logging_config import ContextualFormatter
from models.readings import Interval
from services.dashboard import build_default_service
from settings import get_settings


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("THERMOGRAPH_API_BASE_URL", "http://sensors.lan:9000/")
    monkeypatch.setenv("THERMOGRAPH_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("DASHBOARD_FETCH_WORKERS", "3")
    monkeypatch.setenv("DASHBOARD_DEFAULT_INTERVAL", "1m")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    get_settings.cache_clear()
    build_default_service.cache_clear()

    settings = get_settings()
    dashboard = build_default_service()

    try:
        assert settings.api_base_url == "http://sensors.lan:9000"
        assert settings.http_timeout == 2.5
        assert settings.default_interval is Interval.month
        assert settings.log_level == "DEBUG"
        assert dashboard.executor._max_workers == 3
        assert dashboard.source.base_url == "http://sensors.lan:9000"
    finally:
        dashboard.shutdown()
        build_default_service.cache_clear()
        get_settings.cache_clear()


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("THERMOGRAPH_HTTP_TIMEOUT", "-1")
    monkeypatch.setenv("DASHBOARD_FETCH_WORKERS", "many")
    monkeypatch.setenv("DASHBOARD_DEFAULT_INTERVAL", "2D")
    monkeypatch.setenv("THERMOGRAPH_API_BASE_URL", "   ")

    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.http_timeout == 10.0
        assert settings.fetch_workers == 2
        assert settings.default_interval is Interval.day
        assert settings.api_base_url == "http://localhost:8080"
    finally:
        get_settings.cache_clear()


def test_contextual_formatter_appends_known_extras() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")
    record = logging.LogRecord(
        name="services.interval_cache",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Cached interval",
        args=(),
        exc_info=None,
    )
    record.interval = "1D"
    record.reading_count = 12
    record.unrelated = "ignored"

    assert formatter.format(record) == "Cached interval | interval=1D reading_count=12"

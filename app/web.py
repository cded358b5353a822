from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from models.readings import Interval, ReadingType
from services.dashboard import DashboardService, build_default_service
from services.presentation import READING_UNITS, format_decimal
from settings import get_settings
from sources.http_source import FetchError


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
templates.env.filters["decimal"] = format_decimal


def get_dashboard() -> DashboardService:
    return build_default_service()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    dashboard: DashboardService = Depends(get_dashboard),
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {"rows": dashboard.overview()},
    )


@router.get("/ui/sensors/{sensor_id}", name="ui_sensor_detail", response_class=HTMLResponse)
def ui_sensor_detail(
    request: Request,
    sensor_id: int,
    interval: Optional[Interval] = None,
    dashboard: DashboardService = Depends(get_dashboard),
) -> HTMLResponse:
    sensor = dashboard.sensor(sensor_id)
    if sensor is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Sensor {sensor_id} not found.",
        )
    selected = interval or get_settings().default_interval

    sensor_view = None
    error = None
    try:
        sensor_view = dashboard.interval_view(selected).sensor(sensor_id)
    except FetchError as exc:
        error = exc.reason
    except ValidationError:
        error = "malformed readings payload"

    return templates.TemplateResponse(
        request,
        "ui/detail.html",
        {
            "sensor": sensor,
            "interval": selected,
            "intervals": list(Interval),
            "sensor_view": sensor_view,
            "error": error,
            "shown_types": (ReadingType.temperature, ReadingType.voltage),
            "units": READING_UNITS,
        },
    )

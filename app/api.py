"""HTTP route definitions for the dashboard."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from app.schemas import (
    IntervalStatusOut,
    IntervalViewOut,
    OverviewRowOut,
    SensorOut,
)
from models.readings import Interval
from services.dashboard import DashboardService, build_default_service
from sources.http_source import FetchError, ReadingPayload

router = APIRouter()


def get_dashboard() -> DashboardService:
    return build_default_service()


def _status_payload(dashboard: DashboardService, interval: Interval) -> IntervalStatusOut:
    return IntervalStatusOut(
        interval=interval,
        status=dashboard.interval_status(interval),
        reason=dashboard.cache.failure_reason(interval),
    )


@router.get(
    "/dashboard/sensors",
    response_model=List[SensorOut],
    summary="List sensors, internal sensors first.",
)
async def list_sensors(
    dashboard: DashboardService = Depends(get_dashboard),
) -> List[SensorOut]:
    return [SensorOut.from_sensor(sensor) for sensor in dashboard.sensors]


@router.get(
    "/dashboard/overview",
    response_model=List[OverviewRowOut],
    summary="Latest temperature and age for every sensor.",
)
async def overview(
    dashboard: DashboardService = Depends(get_dashboard),
) -> List[OverviewRowOut]:
    return [OverviewRowOut.from_row(row) for row in dashboard.overview()]


@router.get(
    "/dashboard/intervals/{interval}",
    response_model=IntervalViewOut,
    summary="Series, extrema and shared axis scale for an interval.",
)
def interval_view(
    interval: Interval,
    dashboard: DashboardService = Depends(get_dashboard),
) -> IntervalViewOut:
    try:
        view = dashboard.interval_view(interval)
    except FetchError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Readings API returned a malformed payload.",
        ) from exc
    return IntervalViewOut.from_view(view)


@router.post(
    "/dashboard/intervals/{interval}/request",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=IntervalStatusOut,
    summary="Start loading an interval in the background.",
)
async def request_interval(
    interval: Interval,
    dashboard: DashboardService = Depends(get_dashboard),
) -> IntervalStatusOut:
    dashboard.request_interval(interval)
    return _status_payload(dashboard, interval)


@router.get(
    "/dashboard/intervals/{interval}/status",
    response_model=IntervalStatusOut,
    summary="Loading state of an interval.",
)
async def interval_status(
    interval: Interval,
    dashboard: DashboardService = Depends(get_dashboard),
) -> IntervalStatusOut:
    return _status_payload(dashboard, interval)


@router.post(
    "/dashboard/live",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Feed one reading from the live-update channel.",
)
async def ingest_live(
    payload: ReadingPayload,
    dashboard: DashboardService = Depends(get_dashboard),
) -> None:
    dashboard.ingest_live(payload.to_reading())


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /ui for the dashboard."}

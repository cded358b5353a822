from __future__ import annotations

from typing import Any, Iterable, Sequence

import typer

from models.readings import Sensor
from services.dashboard import IntervalView, OverviewRow
from services.presentation import READING_UNITS, format_decimal


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_sensors(sensors: Sequence[Sensor]) -> None:
    echo_heading("Sensors")
    if not sensors:
        typer.echo("No sensors registered.")
        return
    for sensor in sensors:
        placement = "internal" if sensor.internal else "external"
        typer.echo(f"  {sensor.sensor_id:>3}  {sensor.name}  ({placement})")


def render_overview(rows: Sequence[OverviewRow]) -> None:
    echo_heading("Latest readings")
    if not rows:
        typer.echo("nothing yet")
        return
    for row in rows:
        if row.display_value is None:
            typer.echo(f"  {row.name:<16} no temperature data")
        else:
            typer.echo(f"  {row.name:<16} {row.display_value:>6} {row.unit}  {row.age}")


def render_interval(view: IntervalView) -> None:
    echo_heading(f"Interval {view.interval.value}")
    echo_key_values([("start", view.window.start), ("end", view.window.end)])

    typer.echo()
    echo_heading("Shared scale")
    if view.scale:
        for reading_type, axis in view.scale.items():
            typer.echo(f"  {reading_type.value}: {axis.min} .. {axis.max}")
    else:
        typer.echo("No comparable sensor data.")

    for sensor_view in view.sensors:
        typer.echo()
        echo_heading(sensor_view.sensor.name)
        if not sensor_view.series:
            typer.echo("  No observation data")
            continue
        for reading_type, series in sensor_view.series.items():
            unit = READING_UNITS.get(reading_type, "")
            typer.echo(
                f"  {reading_type.value}: "
                f"max {format_decimal(series.max_point.y, 1)}{unit} "
                f"min {format_decimal(series.min_point.y, 1)}{unit} "
                f"({len(series.points)} points)"
            )

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError

from cli.config import CLIConfig, load_config
from cli.render import render_interval, render_overview, render_sensors
from models.readings import Interval
from services.dashboard import DashboardService
from services.presentation import sort_sensors
from settings import get_settings
from sources.http_source import FetchError, HttpReadingSource


@dataclass
class CLIState:
    config: CLIConfig
    dashboard: DashboardService


app = typer.Typer(
    help="Inspect sensor readings served by a thermograph readings API.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _parse_interval(value: str) -> Interval:
    try:
        return Interval.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Readings API base URL (defaults to THERMOGRAPH_API_BASE_URL or http://localhost:8080).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    source = HttpReadingSource(config.base_url, timeout=config.timeout)
    dashboard = DashboardService(source=source, workers=1)
    ctx.obj = CLIState(config=config, dashboard=dashboard)
    ctx.call_on_close(dashboard.shutdown)


@app.command("sensors")
def sensors_command(ctx: typer.Context) -> None:
    """List sensors, internal sensors first."""
    state = _get_state(ctx)
    try:
        sensors = state.dashboard.source.fetch_sensors()
    except FetchError as exc:
        _fail(str(exc))
    render_sensors(sort_sensors(sensors))


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the latest temperature of every sensor."""
    state = _get_state(ctx)
    state.dashboard.load_sensors()
    state.dashboard.load_latest()
    render_overview(state.dashboard.overview())


@app.command("range")
def range_command(
    ctx: typer.Context,
    interval: Optional[str] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Lookback window: 1D, 1W, 1M or 1Y (defaults to DASHBOARD_DEFAULT_INTERVAL).",
    ),
) -> None:
    """Summarize every sensor's series over an interval with the shared scale."""
    state = _get_state(ctx)
    selected = _parse_interval(interval) if interval else get_settings().default_interval
    state.dashboard.load_sensors()
    try:
        view = state.dashboard.interval_view(selected)
    except FetchError as exc:
        _fail(str(exc))
    except ValidationError:
        _fail("Readings API returned a malformed payload.")
    render_interval(view)

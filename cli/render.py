from __future__ import annotations

from typing import Any, Iterable

import typer

from services.aggregator import RunSummary


def echo_heading(text: str, err: bool = False) -> None:
    typer.secho(text, bold=True, err=err)


def echo_key_values(pairs: Iterable[tuple[str, Any]], err: bool = False) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}", err=err)


def _fmt(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def render_summary(summary: RunSummary, destination: str, err: bool = False) -> None:
    echo_heading("Simulation Result", err=err)
    echo_key_values(
        [
            ("destination", destination),
            ("reading_count", summary.reading_count),
            ("sensor_count", len(summary.per_sensor)),
        ],
        err=err,
    )

    typer.echo(err=err)
    echo_heading("Sensors", err=err)
    if not summary.per_sensor:
        typer.echo("No sensors recorded.", err=err)
        return
    for entry in summary.per_sensor:
        sensor = entry.sensor
        typer.echo(
            f"  - {sensor.name} ({sensor.id}) @ {sensor.location}: "
            f"count={entry.count} min={_fmt(entry.min_value)} "
            f"max={_fmt(entry.max_value)} mean={_fmt(entry.mean_value)}",
            err=err,
        )

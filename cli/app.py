from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from cli.client import ApiClient, build_payload
from cli.config import DEFAULT_OUTPUT, CLIConfig, load_config
from cli.render import render_summary
from errors import SimulatorError
from logging_config import logging_session, normalize_level
from models.records import Sensor, TemperatureReading
from services.aggregator import Aggregator
from services.generator import ReadingGenerator
from services.loader import SimulationConfig, load_config_and_sensors
from settings import get_settings
from storage.ndjson_sink import STDOUT, write_readings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Generate simulated sensor temperature readings as NDJSON.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _load(path: Path) -> SimulationConfig:
    try:
        return load_config_and_sensors(path)
    except SimulatorError as exc:
        _fail(f"Error loading configuration and sensors: {exc}")


def _finish(
    readings: List[TemperatureReading],
    sensors: tuple[Sensor, ...],
    destination: str,
    summary: bool,
) -> None:
    if summary:
        result = Aggregator().aggregate(readings, sensors)
        render_summary(result, destination, err=destination == STDOUT)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Simulator API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for API responses.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, request_timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("run")
def run_command(
    sensor_config: Optional[Path] = typer.Option(
        None,
        "--sensor-config",
        "-c",
        help="Path to the sensor configuration JSON file (defaults to TEMPSIM_SENSOR_CONFIG).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (debug, info, warn, error).",
    ),
    log_output: Optional[str] = typer.Option(
        None,
        "--log-output",
        help="Log output ('stdout', 'stderr' or file path), overrides the config file log path.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for readings ('-' for stdout), overrides the config file output file.",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for a reproducible run (defaults to TEMPSIM_SEED).",
    ),
    simulate: Optional[bool] = typer.Option(
        None,
        "--simulate/--realtime",
        help="Override the config file's simulate flag.",
    ),
    summary: bool = typer.Option(
        True,
        "--summary/--no-summary",
        help="Print a per-sensor summary when the run completes.",
    ),
) -> None:
    """Generate readings locally and write them as NDJSON."""
    settings = get_settings()
    level = log_level or settings.log_level
    try:
        normalize_level(level)
    except ValueError as exc:
        if log_level is None:
            _fail(f"Invalid LOG_LEVEL environment variable: {exc}")
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    config_path = sensor_config or Path(settings.sensor_config_path)
    loaded = _load(config_path)
    run_config = loaded.config
    if simulate is not None:
        run_config = dataclasses.replace(run_config, simulate_mode=simulate)

    destination = output or settings.output_path or run_config.output_file_name or DEFAULT_OUTPUT
    log_target = log_output or run_config.log_file_path or settings.log_output
    if destination == STDOUT and log_target.strip().lower() == "stdout":
        log_target = "stderr"
    run_seed = seed if seed is not None else settings.seed

    try:
        with logging_session(level, log_target) as log:
            log.info("Starting temperature simulator", extra={"source": str(config_path)})
            generator = ReadingGenerator(seed=run_seed, log=log)
            readings = generator.generate(loaded.sensors, run_config)
            write_readings(readings, destination, log=log)
            log.info("Temperature simulation completed successfully.")
    except SimulatorError as exc:
        _fail(str(exc))
    except ValueError as exc:
        _fail(f"Error setting up logger: {exc}")

    _finish(readings, loaded.sensors, destination, summary)


@app.command("remote")
def remote_command(
    ctx: typer.Context,
    sensor_config: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Path to the sensor configuration JSON file."
    ),
    output: str = typer.Option(
        DEFAULT_OUTPUT,
        "--output",
        "-o",
        help="Output file for readings ('-' for stdout).",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed forwarded to the service."),
    summary: bool = typer.Option(
        True,
        "--summary/--no-summary",
        help="Print a per-sensor summary when the run completes.",
    ),
) -> None:
    """Ask a running simulator service to generate readings."""
    state = _get_state(ctx)
    loaded = _load(sensor_config)
    typer.echo(f"Requesting readings from {state.config.base_url} ...", err=output == STDOUT)
    readings = state.client.generate(build_payload(loaded, seed=seed))
    try:
        write_readings(readings, output)
    except SimulatorError as exc:
        _fail(str(exc))
    _finish(readings, loaded.sensors, output, summary)

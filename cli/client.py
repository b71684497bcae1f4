from __future__ import annotations

from typing import Any, Dict, List

import httpx
import typer

from cli.config import CLIConfig
from models.records import TemperatureReading
from services.loader import SimulationConfig
from storage.ndjson_sink import decode_reading


def build_payload(loaded: SimulationConfig, seed: int | None = None) -> Dict[str, Any]:
    """Translate a loaded configuration into the API's request body."""
    config = loaded.config
    payload: Dict[str, Any] = {
        "total_readings": config.total_ticks,
        "starting_temp": config.starting_temp,
        "max_temp_increase": config.max_ramp_amount,
        "temp_fluctuation": config.fluctuation_amplitude,
        "min_temp": config.min_temp,
        "max_temp": config.max_temp,
        "simulate": config.simulate_mode,
        "sensors": [sensor.to_dict() for sensor in loaded.sensors],
    }
    if seed is not None:
        payload["seed"] = seed
    return payload


class ApiClient:
    """Minimal HTTP client for the simulator service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def generate(self, payload: Dict[str, Any]) -> List[TemperatureReading]:
        try:
            response = self._client.post("/generate-temperature-readings/ndjson", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return [decode_reading(line) for line in response.text.splitlines() if line.strip()]

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

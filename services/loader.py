"""Loading of run parameters and sensor metadata from JSON sources."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO, Tuple, Union

from pydantic import ValidationError

from app.schemas import SensorConfigFile
from errors import ConfigLoadError, EmptySensorListError
from models.records import RunConfig, Sensor

logger = logging.getLogger(__name__)

ConfigSource = Union[str, Path, TextIO]


@dataclass(frozen=True)
class SimulationConfig:
    config: RunConfig
    sensors: Tuple[Sensor, ...]


def _read_source(source: ConfigSource) -> Tuple[str, str]:
    if isinstance(source, (str, Path)):
        path = Path(source)
        return path.read_text(encoding="utf-8"), str(path)
    return source.read(), getattr(source, "name", "<stream>")


def load_config_and_sensors(
    source: ConfigSource,
    log: Optional[logging.Logger] = None,
) -> SimulationConfig:
    """Parse a configuration file (or stream) into plain run data."""
    log = log or logger
    try:
        raw, label = _read_source(source)
    except (OSError, UnicodeDecodeError) as exc:
        log.error("Error opening configuration file", extra={"source": str(source), "reason": exc})
        raise ConfigLoadError(f"unable to open configuration file: {exc}") from exc

    try:
        payload = json.loads(raw)
        parsed = SensorConfigFile.model_validate(payload)
    except json.JSONDecodeError as exc:
        log.error("Error decoding JSON configuration", extra={"source": label, "reason": exc})
        raise ConfigLoadError(f"error decoding configuration JSON: {exc}") from exc
    except ValidationError as exc:
        log.error(
            "Invalid configuration",
            extra={"source": label, "reason": f"{exc.error_count()} validation error(s)"},
        )
        raise ConfigLoadError(f"invalid configuration in {label}: {exc}") from exc

    if not parsed.sensors:
        log.error("No sensors found in configuration", extra={"source": label})
        raise EmptySensorListError(f"no sensors found in configuration {label}")

    sensors = tuple(sensor.to_domain() for sensor in parsed.sensors)
    log.info(
        f"Loaded {len(sensors)} sensors from configuration",
        extra={"source": label, "sensor_count": len(sensors)},
    )
    return SimulationConfig(config=parsed.config.to_domain(), sensors=sensors)

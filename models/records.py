"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from errors import InvalidBoundsError

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True, slots=True)
class Sensor:
    """Identity of a simulated sensor. Names are not guaranteed to be unique."""

    name: str
    id: str
    version: str
    location: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "id": self.id,
            "version": self.version,
            "location": self.location,
        }


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Scalar parameters of one simulation run."""

    total_ticks: int
    starting_temp: float
    max_ramp_amount: float
    fluctuation_amplitude: float
    min_temp: float
    max_temp: float
    simulate_mode: bool = True
    output_file_name: Optional[str] = None
    log_file_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.total_ticks < 0:
            raise ValueError(f"total_ticks must be >= 0, got {self.total_ticks}.")
        if self.min_temp > self.max_temp:
            raise InvalidBoundsError(self.min_temp, self.max_temp)


@dataclass(frozen=True, slots=True)
class TemperatureReading:
    """A single timestamped temperature emitted by a sensor."""

    time: str
    temperature: float
    sensor: Sensor

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "temperature": self.temperature,
            "sensor": self.sensor.to_dict(),
        }

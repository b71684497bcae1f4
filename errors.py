"""Error taxonomy for simulation runs. Every error is terminal for a run."""

from __future__ import annotations


class SimulatorError(Exception):
    """Base class for all simulator failures."""


class ConfigLoadError(SimulatorError):
    """The configuration source could not be read or is malformed."""


class EmptySensorListError(SimulatorError):
    """The configuration parsed but declares no sensors."""


class InvalidBoundsError(SimulatorError, ValueError):
    """The temperature bounds are inverted."""

    def __init__(self, min_temp: float, max_temp: float) -> None:
        super().__init__(
            f"minTemp ({min_temp}) must not be greater than maxTemp ({max_temp})."
        )
        self.min_temp = min_temp
        self.max_temp = max_temp


class OutputWriteError(SimulatorError):
    """Readings could not be written to their destination."""

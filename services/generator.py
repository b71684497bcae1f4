"""Random-walk temperature generation with a recurring ramp phase."""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, List, Optional, Protocol, Sequence

from errors import EmptySensorListError, InvalidBoundsError
from models.records import TIME_FORMAT, RunConfig, Sensor, TemperatureReading

TICK = timedelta(seconds=60)
TICKS_PER_HOUR = 60
RAMP_WINDOW_TICKS = 5

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TickClock(Protocol):
    def advance(self) -> datetime:
        """Move forward one tick and return the time of the new tick."""


class SimulatedClock:
    """Virtual clock that advances a fixed step per tick without blocking."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = TICK) -> None:
        self.current = start if start is not None else _utcnow()
        self.step = step

    def advance(self) -> datetime:
        self.current = self.current + self.step
        return self.current


class RealTimeClock:
    """Blocks for one step, then samples wall-clock time."""

    def __init__(
        self,
        step: timedelta = TICK,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.step = step
        self._sleep = sleep
        self._now = now

    def advance(self) -> datetime:
        self._sleep(self.step.total_seconds())
        return self._now()


def build_clock(simulate_mode: bool) -> TickClock:
    return SimulatedClock() if simulate_mode else RealTimeClock()


def in_ramp_phase(
    tick: int,
    ticks_per_hour: int = TICKS_PER_HOUR,
    ramp_window_ticks: int = RAMP_WINDOW_TICKS,
) -> bool:
    return tick % ticks_per_hour < ramp_window_ticks


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def validate_inputs(sensors: Sequence[Sensor], config: RunConfig) -> None:
    """Reject inputs that the generator cannot run with."""
    if not sensors:
        raise EmptySensorListError("At least one sensor is required to generate readings.")
    if config.min_temp > config.max_temp:
        raise InvalidBoundsError(config.min_temp, config.max_temp)


def iter_readings(
    sensors: Sequence[Sensor],
    config: RunConfig,
    rng: Optional[random.Random] = None,
    clock: Optional[TickClock] = None,
) -> Iterator[TemperatureReading]:
    """Yield one reading per sensor per tick, tick by tick, in sensor order.

    Each sensor walks independently from ``config.starting_temp``: every tick
    adds a uniform fluctuation, plus the ramp increment during the first
    ``RAMP_WINDOW_TICKS`` ticks of every simulated hour, and the result is
    clamped to ``[min_temp, max_temp]``.
    """
    validate_inputs(sensors, config)
    rng = rng if rng is not None else random.Random()
    clock = clock if clock is not None else build_clock(config.simulate_mode)
    return _walk(sensors, config, rng, clock)


def _walk(
    sensors: Sequence[Sensor],
    config: RunConfig,
    rng: random.Random,
    clock: TickClock,
) -> Iterator[TemperatureReading]:
    ramp_increment = config.max_ramp_amount / RAMP_WINDOW_TICKS
    amplitude = config.fluctuation_amplitude
    current_temps: List[float] = [config.starting_temp] * len(sensors)

    for tick in range(config.total_ticks):
        timestamp = clock.advance().strftime(TIME_FORMAT)
        ramping = in_ramp_phase(tick)

        for index, sensor in enumerate(sensors):
            temp = current_temps[index] + rng.uniform(-amplitude, amplitude)
            if ramping:
                temp += ramp_increment
            temp = _clamp(temp, config.min_temp, config.max_temp)
            current_temps[index] = temp

            yield TemperatureReading(
                time=timestamp,
                temperature=_clamp(round(temp, 2), config.min_temp, config.max_temp),
                sensor=sensor,
            )


def generate_readings(
    sensors: Sequence[Sensor],
    config: RunConfig,
    rng: Optional[random.Random] = None,
    clock: Optional[TickClock] = None,
    log: Optional[logging.Logger] = None,
) -> List[TemperatureReading]:
    """Materialize a full run, logging its start and completion."""
    log = log or logger
    validate_inputs(sensors, config)
    log.info(
        "Starting temperature generation",
        extra={
            "sensor_count": len(sensors),
            "total_ticks": config.total_ticks,
            "simulate": config.simulate_mode,
        },
    )
    readings = list(iter_readings(sensors, config, rng=rng, clock=clock))
    log.info(
        "Completed temperature generation",
        extra={"reading_count": len(readings)},
    )
    return readings


class ReadingGenerator:
    """Runs generations with a per-run random source and an injected logger."""

    def __init__(
        self,
        seed: Optional[int] = None,
        log: Optional[logging.Logger] = None,
        clock_factory: Callable[[bool], TickClock] = build_clock,
    ) -> None:
        self.seed = seed
        self.log = log or logger
        self._clock_factory = clock_factory

    def new_rng(self) -> random.Random:
        # Fresh instance per run so concurrent runs never share state.
        return random.Random(self.seed)

    def generate(self, sensors: Sequence[Sensor], config: RunConfig) -> List[TemperatureReading]:
        if self.seed is not None:
            self.log.debug("Seeding run", extra={"seed": self.seed})
        return generate_readings(
            sensors,
            config,
            rng=self.new_rng(),
            clock=self._clock_factory(config.simulate_mode),
            log=self.log,
        )

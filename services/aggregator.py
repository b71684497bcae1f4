"""Per-sensor summaries of a generated run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from models.records import Sensor, TemperatureReading


@dataclass
class SensorSummary:
    """Statistics for the readings of one sensor position."""

    sensor: Sensor
    count: int = 0
    min_value: float | None = None
    max_value: float | None = None
    mean_value: float | None = None


@dataclass
class RunSummary:
    """Computed statistics for a batch of readings."""

    reading_count: int = 0
    per_sensor: List[SensorSummary] = field(default_factory=list)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def aggregate(
        self, readings: Iterable[TemperatureReading], sensors: Sequence[Sensor]
    ) -> RunSummary:
        """Summarize readings laid out tick by tick in ``sensors`` order.

        Readings are attributed by position, so sensors sharing a name are
        still reported separately.
        """
        summary = RunSummary(per_sensor=[SensorSummary(sensor=sensor) for sensor in sensors])
        if not sensors:
            return summary
        totals = [0.0] * len(sensors)

        for position, reading in enumerate(readings):
            index = position % len(sensors)
            entry = summary.per_sensor[index]
            if reading.sensor != entry.sensor:
                raise ValueError(
                    f"Reading {position} belongs to sensor {reading.sensor.id!r}, "
                    f"expected {entry.sensor.id!r}."
                )
            summary.reading_count += 1
            entry.count += 1
            value = reading.temperature
            totals[index] += value

            if entry.min_value is None or value < entry.min_value:
                entry.min_value = value
            if entry.max_value is None or value > entry.max_value:
                entry.max_value = value

        for entry, total in zip(summary.per_sensor, totals):
            if entry.count:
                entry.mean_value = total / entry.count

        return summary

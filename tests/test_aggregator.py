"""Unit tests for the aggregation logic."""

from __future__ import annotations

import pytest

from models.records import Sensor, TemperatureReading
from services.aggregator import Aggregator

SENSOR_A = Sensor(name="Twin", id="a", version="v1", location="east")
SENSOR_B = Sensor(name="Twin", id="b", version="v1", location="west")


def _reading(sensor: Sensor, value: float) -> TemperatureReading:
    """Helper to build deterministic readings."""

    return TemperatureReading(time="2024-01-01 00:01:00", temperature=value, sensor=sensor)


def test_aggregate_empty_iterable_returns_default_summary() -> None:
    aggregator = Aggregator()

    summary = aggregator.aggregate([], [SENSOR_A])

    assert summary.reading_count == 0
    assert len(summary.per_sensor) == 1
    entry = summary.per_sensor[0]
    assert entry.count == 0
    assert entry.min_value is None
    assert entry.max_value is None
    assert entry.mean_value is None


def test_aggregate_computes_statistics_per_position() -> None:
    aggregator = Aggregator()
    readings = [
        _reading(SENSOR_A, 10.0),
        _reading(SENSOR_B, 30.0),
        _reading(SENSOR_A, 20.0),
        _reading(SENSOR_B, 40.0),
    ]

    summary = aggregator.aggregate(readings, [SENSOR_A, SENSOR_B])

    assert summary.reading_count == 4
    first, second = summary.per_sensor
    assert (first.count, first.min_value, first.max_value, first.mean_value) == (2, 10.0, 20.0, 15.0)
    assert (second.count, second.min_value, second.max_value, second.mean_value) == (2, 30.0, 40.0, 35.0)


def test_aggregate_rejects_readings_out_of_order() -> None:
    aggregator = Aggregator()

    with pytest.raises(ValueError):
        aggregator.aggregate([_reading(SENSOR_B, 1.0)], [SENSOR_A, SENSOR_B])

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from errors import ConfigLoadError, EmptySensorListError
from models.records import RunConfig, Sensor
from services.loader import load_config_and_sensors

CONFIGS_DIR = Path(__file__).resolve().parent.parent / "configs"


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "sensors.json"
    path.write_text(json.dumps(payload))
    return path


def _payload(**config_overrides) -> dict:
    config = {
        "totalReadings": 10,
        "startingTemp": 20.0,
        "maxTempIncrease": 30.0,
        "tempFluctuation": 3.0,
        "minTemp": -10.0,
        "maxTemp": 50.0,
        "simulate": True,
    }
    config.update(config_overrides)
    return {
        "config": config,
        "sensors": [
            {"name": "SensorA", "id": "001", "version": "v1.0", "location": "LocationA"},
        ],
    }


def test_loads_bundled_test_configuration(caplog) -> None:
    with caplog.at_level(logging.INFO):
        loaded = load_config_and_sensors(CONFIGS_DIR / "test_sensors.json")

    assert len(loaded.sensors) == 2
    assert loaded.sensors[0] == Sensor(
        name="SensorA", id="001", version="v1.0", location="LocationA"
    )
    assert loaded.config == RunConfig(
        total_ticks=10,
        starting_temp=20.0,
        max_ramp_amount=30.0,
        fluctuation_amplitude=3.0,
        min_temp=-10.0,
        max_temp=50.0,
        simulate_mode=True,
        output_file_name="test-readings.json",
    )
    assert "Loaded 2 sensors from configuration" in caplog.text


def test_loads_from_stream() -> None:
    stream = io.StringIO(json.dumps(_payload()))

    loaded = load_config_and_sensors(stream)

    assert loaded.config.total_ticks == 10
    assert loaded.sensors[0].id == "001"


def test_missing_file_raises_config_load_error(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.ERROR):
        with pytest.raises(ConfigLoadError) as excinfo:
            load_config_and_sensors(tmp_path / "nonexistent.json")

    assert not isinstance(excinfo.value, EmptySensorListError)
    assert "unable to open configuration file" in str(excinfo.value)
    assert "Error opening configuration file" in caplog.text


def test_malformed_json_raises_config_load_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(ConfigLoadError, match="error decoding configuration JSON"):
        load_config_and_sensors(path)


def test_wrong_field_types_raise_config_load_error(tmp_path: Path) -> None:
    path = _write(tmp_path, _payload(totalReadings="many"))

    with pytest.raises(ConfigLoadError):
        load_config_and_sensors(path)


def test_inverted_bounds_raise_config_load_error(tmp_path: Path) -> None:
    path = _write(tmp_path, _payload(minTemp=60.0, maxTemp=50.0))

    with pytest.raises(ConfigLoadError, match="minTemp"):
        load_config_and_sensors(path)


def test_empty_sensor_list_is_a_distinct_error(tmp_path: Path) -> None:
    payload = _payload()
    payload["sensors"] = []
    path = _write(tmp_path, payload)

    with pytest.raises(EmptySensorListError):
        load_config_and_sensors(path)


def test_missing_sensor_list_is_treated_as_empty(tmp_path: Path) -> None:
    payload = _payload()
    del payload["sensors"]
    path = _write(tmp_path, payload)

    with pytest.raises(EmptySensorListError):
        load_config_and_sensors(path)


def test_optional_paths_default_to_none(tmp_path: Path) -> None:
    path = _write(tmp_path, _payload(logFilePath="", outputFileName=""))

    loaded = load_config_and_sensors(path)

    assert loaded.config.output_file_name is None
    assert loaded.config.log_file_path is None

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from storage.ndjson_sink import decode_reading

SENSORS = [
    {"name": "SensorA", "id": "001", "version": "v1.0", "location": "LocationA"},
    {"name": "SensorB", "id": "002", "version": "v1.1", "location": "LocationB"},
]


def _request(**overrides) -> dict:
    body = {
        "total_readings": 10,
        "starting_temp": 20.0,
        "max_temp_increase": 30.0,
        "temp_fluctuation": 3.0,
        "min_temp": -10.0,
        "max_temp": 50.0,
        "simulate": True,
        "sensors": SENSORS,
    }
    body.update(overrides)
    return body


@pytest.fixture
def api_client() -> Iterator[TestClient]:
    app = create_app()
    with TestClient(app) as client:
        yield client


def test_generate_returns_bounded_readings(api_client: TestClient) -> None:
    response = api_client.post("/generate-temperature-readings", json=_request())

    assert response.status_code == 200
    payload = response.json()
    assert len(payload) == 20
    assert {item["sensor"]["id"] for item in payload} == {"001", "002"}
    assert all(-10.0 <= item["temperature"] <= 50.0 for item in payload)
    assert [item["sensor"]["id"] for item in payload[:4]] == ["001", "002", "001", "002"]


def test_seeded_requests_are_reproducible(api_client: TestClient) -> None:
    first = api_client.post("/generate-temperature-readings", json=_request(seed=7)).json()
    second = api_client.post("/generate-temperature-readings", json=_request(seed=7)).json()

    assert [item["temperature"] for item in first] == [item["temperature"] for item in second]


def test_generate_ndjson(api_client: TestClient) -> None:
    response = api_client.post("/generate-temperature-readings/ndjson", json=_request(total_readings=3))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")
    lines = response.text.splitlines()
    assert len(lines) == 6
    readings = [decode_reading(line) for line in lines]
    assert readings[0].sensor.name == "SensorA"
    assert all(-10.0 <= reading.temperature <= 50.0 for reading in readings)


def test_zero_readings_returns_empty_list(api_client: TestClient) -> None:
    response = api_client.post("/generate-temperature-readings", json=_request(total_readings=0))

    assert response.status_code == 200
    assert response.json() == []


def test_empty_sensor_list_returns_bad_request(api_client: TestClient) -> None:
    response = api_client.post("/generate-temperature-readings", json=_request(sensors=[]))

    assert response.status_code == 400
    assert "sensor" in response.json()["detail"]


def test_inverted_bounds_return_validation_error(api_client: TestClient) -> None:
    response = api_client.post(
        "/generate-temperature-readings",
        json=_request(min_temp=60.0, max_temp=50.0),
    )

    assert response.status_code == 422


def test_invalid_payload_returns_validation_error(api_client: TestClient) -> None:
    response = api_client.post(
        "/generate-temperature-readings",
        json=_request(total_readings=-1),
    )

    assert response.status_code == 422


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "ok"

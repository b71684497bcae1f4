"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.schemas import GenerateRequest, ReadingModel
from errors import EmptySensorListError, InvalidBoundsError
from models.records import TemperatureReading
from services.generator import ReadingGenerator
from storage.ndjson_sink import iter_encoded

router = APIRouter()

logger = logging.getLogger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"


class GeneratorFactory:
    """Builds one generator per request so runs never share a random source."""

    def __call__(self, seed: Optional[int]) -> ReadingGenerator:
        return ReadingGenerator(seed=seed, log=logger)


def get_generator_factory() -> GeneratorFactory:
    return GeneratorFactory()


def _generate(request: GenerateRequest, factory: GeneratorFactory) -> List[TemperatureReading]:
    sensors = tuple(sensor.to_domain() for sensor in request.sensors)
    try:
        config = request.to_run_config()
        return factory(request.seed).generate(sensors, config)
    except EmptySensorListError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except InvalidBoundsError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc


@router.post(
    "/generate-temperature-readings",
    response_model=List[ReadingModel],
    summary="Generate simulated temperature readings for the given sensors.",
)
def generate_temperature_readings(
    request: GenerateRequest,
    factory: GeneratorFactory = Depends(get_generator_factory),
) -> List[ReadingModel]:
    readings = _generate(request, factory)
    return [ReadingModel.from_domain(reading) for reading in readings]


@router.post(
    "/generate-temperature-readings/ndjson",
    response_class=Response,
    summary="Generate readings as newline-delimited JSON.",
)
def generate_temperature_readings_ndjson(
    request: GenerateRequest,
    factory: GeneratorFactory = Depends(get_generator_factory),
) -> Response:
    readings = _generate(request, factory)
    return Response(content="".join(iter_encoded(readings)), media_type=NDJSON_MEDIA_TYPE)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}

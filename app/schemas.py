"""Pydantic schemas for configuration payloads and the HTTP API layer."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.records import RunConfig, Sensor, TemperatureReading


class SensorModel(BaseModel):
    """Sensor identity as it appears in configuration and output payloads."""

    name: str
    id: str
    version: str
    location: str

    def to_domain(self) -> Sensor:
        return Sensor(name=self.name, id=self.id, version=self.version, location=self.location)


class _BoundedTemperatures(BaseModel):

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min_temp > self.max_temp:
            raise ValueError(
                f"minTemp ({self.min_temp}) must not be greater than maxTemp ({self.max_temp})."
            )
        return self


class RunConfigModel(_BoundedTemperatures):
    """The ``config`` block of a sensor configuration file."""

    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    total_readings: int = Field(..., ge=0, alias="totalReadings")
    starting_temp: float = Field(..., alias="startingTemp")
    max_temp_increase: float = Field(0.0, alias="maxTempIncrease")
    temp_fluctuation: float = Field(0.0, ge=0, alias="tempFluctuation")
    min_temp: float = Field(..., alias="minTemp")
    max_temp: float = Field(..., alias="maxTemp")
    output_file_name: Optional[str] = Field(None, alias="outputFileName")
    log_file_path: Optional[str] = Field(None, alias="logFilePath")
    simulate: bool = False

    def to_domain(self) -> RunConfig:
        return RunConfig(
            total_ticks=self.total_readings,
            starting_temp=self.starting_temp,
            max_ramp_amount=self.max_temp_increase,
            fluctuation_amplitude=self.temp_fluctuation,
            min_temp=self.min_temp,
            max_temp=self.max_temp,
            simulate_mode=self.simulate,
            output_file_name=self.output_file_name or None,
            log_file_path=self.log_file_path or None,
        )


class SensorConfigFile(BaseModel):
    """Complete configuration file: run parameters plus the sensor list."""

    config: RunConfigModel
    sensors: List[SensorModel] = Field(default_factory=list)


class GenerateRequest(_BoundedTemperatures):
    """Request body accepted by the generation endpoints."""

    model_config = ConfigDict(allow_inf_nan=False)

    total_readings: int = Field(..., ge=0)
    starting_temp: float
    max_temp_increase: float = 0.0
    temp_fluctuation: float = Field(0.0, ge=0)
    min_temp: float
    max_temp: float
    simulate: bool = Field(
        True, description="Advance a virtual clock instead of sampling once per real minute."
    )
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible run.")
    sensors: List[SensorModel] = Field(default_factory=list)

    def to_run_config(self) -> RunConfig:
        return RunConfig(
            total_ticks=self.total_readings,
            starting_temp=self.starting_temp,
            max_ramp_amount=self.max_temp_increase,
            fluctuation_amplitude=self.temp_fluctuation,
            min_temp=self.min_temp,
            max_temp=self.max_temp,
            simulate_mode=self.simulate,
        )


class ReadingModel(BaseModel):
    """A generated reading as returned by the API."""

    time: str
    temperature: float
    sensor: SensorModel

    @classmethod
    def from_domain(cls, reading: TemperatureReading) -> "ReadingModel":
        return cls(
            time=reading.time,
            temperature=reading.temperature,
            sensor=SensorModel(**reading.sensor.to_dict()),
        )

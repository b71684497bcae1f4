from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_SENSOR_CONFIG_ENV = "TEMPSIM_SENSOR_CONFIG"
_OUTPUT_PATH_ENV = "TEMPSIM_OUTPUT_PATH"
_SEED_ENV = "TEMPSIM_SEED"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_LOG_OUTPUT_ENV = "LOG_OUTPUT"


@dataclass(frozen=True)
class Settings:
    sensor_config_path: str
    output_path: Optional[str]
    seed: Optional[int]
    log_level: str
    log_output: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_seed(default: Optional[int]) -> Optional[int]:
    value = os.getenv(_SEED_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return int(candidate)
    except ValueError:
        return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        sensor_config_path=_read_str_env(_SENSOR_CONFIG_ENV, "configs/sensors.json"),
        output_path=_read_optional_env(_OUTPUT_PATH_ENV, None),
        seed=_read_seed(None),
        log_level=_read_log_level("INFO"),
        log_output=_read_str_env(_LOG_OUTPUT_ENV, "stdout"),
    )

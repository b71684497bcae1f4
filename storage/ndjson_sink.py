from __future__ import annotations

import json
import logging
import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from errors import OutputWriteError
from models.records import Sensor, TemperatureReading

logger = logging.getLogger(__name__)

Destination = Union[str, Path, TextIO]

STDOUT = "-"

_SEPARATORS = (",", ":")


def encode_reading(reading: TemperatureReading) -> str:
    """Render a reading as one compact JSON object with a two-decimal temperature."""
    time_part = json.dumps(reading.time)
    sensor_part = json.dumps(reading.sensor.to_dict(), separators=_SEPARATORS)
    return f'{{"time":{time_part},"temperature":{reading.temperature:.2f},"sensor":{sensor_part}}}'


def decode_reading(line: str) -> TemperatureReading:
    payload = json.loads(line)
    sensor = payload["sensor"]
    return TemperatureReading(
        time=payload["time"],
        temperature=round(float(payload["temperature"]), 2),
        sensor=Sensor(
            name=sensor["name"],
            id=sensor["id"],
            version=sensor["version"],
            location=sensor["location"],
        ),
    )


def iter_encoded(readings: Iterable[TemperatureReading]) -> Iterator[str]:
    for reading in readings:
        yield encode_reading(reading) + "\n"


def _write_lines(readings: Iterable[TemperatureReading], handle: TextIO) -> int:
    count = 0
    for line in iter_encoded(readings):
        handle.write(line)
        count += 1
    handle.flush()
    return count


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_file(readings: Iterable[TemperatureReading], path: Path) -> int:
    directory = path.parent if str(path.parent) else Path(".")
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            count = _write_lines(readings, handle)
            os.fsync(handle.fileno())
        # mkstemp creates the file owner-only.
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return count


def write_readings(
    readings: Iterable[TemperatureReading],
    destination: Destination,
    log: Optional[logging.Logger] = None,
) -> int:
    """Write readings as NDJSON, in order, returning how many lines were written.

    File destinations are written to a sibling temporary file and renamed into
    place once complete, so a failed write never leaves a truncated file
    behind. ``"-"`` writes to stdout.
    """
    log = log or logger
    to_stdout = isinstance(destination, str) and destination == STDOUT
    if to_stdout:
        label = "<stdout>"
    elif isinstance(destination, (str, Path)):
        label = str(destination)
    else:
        label = str(getattr(destination, "name", "<stream>"))
    log.info("Saving data to JSON file", extra={"destination": label})

    try:
        if to_stdout:
            count = _write_lines(readings, sys.stdout)
        elif isinstance(destination, (str, Path)):
            count = _write_file(readings, Path(destination))
        else:
            count = _write_lines(readings, destination)
    except (OSError, ValueError) as exc:
        log.error("Error writing JSON data", extra={"destination": label, "reason": exc})
        raise OutputWriteError(f"error writing readings to {label}: {exc}") from exc

    log.info(
        "Data successfully saved",
        extra={"destination": label, "reading_count": count},
    )
    return count


def read_readings(source: Union[str, Path]) -> List[TemperatureReading]:
    """Parse an NDJSON file of readings, skipping blank lines."""
    with Path(source).open("r", encoding="utf-8") as handle:
        return [decode_reading(line) for line in handle if line.strip()]

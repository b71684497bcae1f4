from __future__ import annotations

import logging
from contextlib import contextmanager
from logging.config import dictConfig
from typing import Any, Dict, Iterable, Iterator, Sequence

from settings import get_settings

_DEFAULT_EXTRA_KEYS = (
    "source",
    "destination",
    "sensor_count",
    "total_ticks",
    "reading_count",
    "simulate",
    "seed",
    "reason",
)

_LEVEL_ALIASES = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "WARN": "WARNING",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
}

_STREAMS = {
    "stdout": "ext://sys.stdout",
    "stderr": "ext://sys.stderr",
}

_configured = False


class ContextualFormatter(logging.Formatter):

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context_parts: list[str] = []
        for key in self._extra_keys:
            if not hasattr(record, key):
                continue
            value = getattr(record, key, None)
            if value is None:
                continue
            context_parts.append(f"{key}={value}")
        if context_parts:
            return f"{message} | {' '.join(context_parts)}"
        return message


def normalize_level(level: str | int) -> str | int:
    """Map user supplied level names (``warn`` included) onto logging levels."""
    if isinstance(level, int):
        return level
    candidate = level.strip().upper()
    try:
        return _LEVEL_ALIASES[candidate]
    except KeyError:
        raise ValueError(f"unknown log level: {level}") from None


def _build_handler(output: str, log_level: str | int) -> Dict[str, Any]:
    target = output.strip() or "stdout"
    stream = _STREAMS.get(target.lower())
    if stream is not None:
        return {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "contextual",
            "stream": stream,
        }
    return {
        "class": "logging.FileHandler",
        "level": log_level,
        "formatter": "contextual",
        "filename": target,
        "mode": "a",
        "encoding": "utf-8",
    }


def configure_logging(
    level: str | int | None = None,
    output: str | None = None,
    *,
    force: bool = False,
) -> None:
    """Configure application-wide logging with contextual formatting."""
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    log_level = normalize_level(level if level is not None else settings.log_level)
    log_output = output if output is not None else settings.log_output

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(_DEFAULT_EXTRA_KEYS),
                }
            },
            "handlers": {"default": _build_handler(log_output, log_level)},
            "root": {"handlers": ["default"], "level": log_level},
        }
    )

    _configured = True


def shutdown_logging() -> None:
    """Flush and close the root handlers installed by ``configure_logging``."""
    global _configured
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.flush()
        handler.close()
        root.removeHandler(handler)
    _configured = False


@contextmanager
def logging_session(
    level: str | int | None = None,
    output: str | None = None,
    name: str = "tempsim",
) -> Iterator[logging.Logger]:
    """Configure logging for the duration of a run and hand out its logger."""
    configure_logging(level, output, force=True)
    try:
        yield logging.getLogger(name)
    finally:
        shutdown_logging()

"""Logging configuration: JSON lines for the service, plain text for scripts."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

_PLAIN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _json_formatter() -> logging.Formatter:
    return JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def setup_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Route root, httpx and uvicorn log records to a single stdout handler.

    ``extra={...}`` fields on records become top-level keys in JSON mode and
    are dropped in plain mode.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_json_formatter() if json_output else logging.Formatter(_PLAIN_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.addHandler(handler)
        uv_logger.propagate = False

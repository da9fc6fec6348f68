"""Logging configuration for settle.

This module provides structured logging via loguru. Logging is disabled
by default (library behavior) and enabled explicitly with a LogConfig.

Example:
    from settle.logging import LogConfig, setup_logging, teardown_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG", file="settle.log"))
    try:
        await cluster_created(client, "prod", timeout=1800)
    finally:
        teardown_logging(handler_ids)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Literal

from loguru import logger

# Disable by default (library behavior)
logger.disable("settle")

type LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]

# Detailed format for console (with colors)
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[waiter]}</cyan> - "
    "<level>{message}</level>"
)

# Format for file output (no colors)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} | {extra[waiter]} - {message}"
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging configuration for settle.

    Attributes:
        level: Minimum log level for the console sink.
        file: Path to log file. If provided, logs are written to this file.
        console: Whether to log to stderr. Defaults to True.
        rotation: File rotation policy (e.g., "50 MB", "1 day"). Defaults to "50 MB".
        retention: Number of old log files to keep. Defaults to 10.
    """

    level: LogLevel = "INFO"
    file: str | None = None
    console: bool = True
    rotation: str = "50 MB"
    retention: int = 10


def _with_waiter_default(record: dict) -> bool:
    record["extra"].setdefault("waiter", "-")
    return record["name"] is not None and record["name"].startswith("settle")


def setup_logging(config: LogConfig) -> list[int]:
    """Enable settle logging and return handler IDs for cleanup.

    Args:
        config: Logging configuration.

    Returns:
        List of handler IDs that were added (for later removal).
    """
    logger.enable("settle")
    handler_ids: list[int] = []

    if config.console:
        hid = logger.add(
            sys.stderr,
            level=config.level,
            format=CONSOLE_FORMAT,
            colorize=True,
            filter=_with_waiter_default,
        )
        handler_ids.append(hid)

    if config.file:
        hid = logger.add(
            config.file,
            level="TRACE",  # File always captures everything
            format=FILE_FORMAT,
            rotation=config.rotation,
            retention=config.retention,
            compression="zip",
            diagnose=False,  # Don't expose credentials in tracebacks
            enqueue=True,
            filter=_with_waiter_default,
        )
        handler_ids.append(hid)

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove handlers and disable logging.

    Args:
        handler_ids: List of handler IDs to remove.
    """
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("settle")

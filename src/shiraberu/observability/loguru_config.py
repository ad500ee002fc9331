"""Loguru configuration with timing for report generation.

This module provides centralized loguru configuration with:
- Colored console output on stderr
- Optional structured JSONL files with rotation
- Component binding (rollup, adapter, pipeline, cli)
- A context manager that times pipeline stages
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "configure_loguru",
    "get_logger",
    "timing_context",
]


def configure_loguru(
    *,
    log_dir: Path | None = None,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "10 days",
    compression: str = "zip",
    enable_console: bool = True,
) -> None:
    """Configure loguru sinks.

    Parameters
    ----------
    log_dir
        Directory for JSONL log files (no file sinks when None)
    level
        Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    rotation
        Log rotation policy (e.g., "10 MB", "1 day")
    retention
        Log retention policy (e.g., "10 days", "1 week")
    compression
        Compression for rotated logs (zip, gz, bz2, xz)
    enable_console
        Enable console output

    Example
    -------
    >>> configure_loguru(log_dir=Path("logs"), level="DEBUG")
    """
    # Remove default handler
    logger.remove()

    if enable_console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan> | "
            "<level>{message}</level>",
            level=level,
            colorize=True,
            backtrace=False,
            diagnose=False,
        )

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "shiraberu.jsonl",
            format="{message}",
            level=level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            serialize=True,
        )

        logger.add(
            log_dir / "timing.jsonl",
            format="{message}",
            level="DEBUG",
            rotation=rotation,
            retention=retention,
            compression=compression,
            serialize=True,
            filter=lambda record: record["extra"].get("timing", False),
        )

    logger.configure(extra={"component": "shiraberu"})
    logger.debug("Loguru configured", log_dir=str(log_dir) if log_dir else None, level=level)


def get_logger(component: str = "shiraberu") -> Any:
    """Get logger instance bound to a component.

    Parameters
    ----------
    component
        Component name (rollup, adapter, pipeline, cli)

    Returns
    -------
    Logger
        Loguru logger bound to component
    """
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "shiraberu",
    trace_id: str | None = None,
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Time an operation, logging its start and end.

    Parameters
    ----------
    operation
        Name of the operation being timed
    component
        Component name for filtering logs
    trace_id
        Trace ID for correlation
    **metadata
        Additional metadata to log

    Yields
    ------
    dict
        Context dictionary; keys added inside the block are logged at the end

    Example
    -------
    >>> with timing_context("fetch_current", component="pipeline", trace_id="abc") as ctx:
    ...     report = fetch()
    ...     ctx["days"] = len(report.days)
    """
    start_ns = time.perf_counter_ns()
    context: dict[str, Any] = dict(metadata)
    bound = logger.bind(component=component, timing=True, operation=operation, trace_id=trace_id)

    bound.debug(f"START: {operation}", phase="start", **metadata)

    try:
        yield context
    finally:
        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        context["duration_ms"] = duration_ms
        bound.debug(f"END: {operation}", phase="end", **context)

"""
utils/logging.py — structlog configuration for the pipeline and API.

Sets up structured logging with JSON or human-readable console output
controlled by settings.log_format. Call configure_logging() once at
process startup (the CLI and the API app factory both do).

Usage:
    from ausbiz_pipeline.utils.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger("ausbiz_pipeline.sources.worldbank")
    log.info("wb_fetch", indicator="NY.GDP.MKTP.CD")

    # Bind refresh-wide context for all subsequent log calls:
    log = log.bind(source_name="PrimaryAPI", refresh_id=refresh_id)
    log.info("series_replaced", series="state_revenue")
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from ausbiz_shared.config import settings

_configured = False


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
    *,
    force: bool = False,
) -> None:
    """
    Configure structlog for the current process.

    Repeated calls are no-ops unless force=True or an explicit level/format
    is passed.

    Args:
        log_level:  Override settings.log_level ("DEBUG", "INFO", …).
        log_format: Override settings.log_format ("json" | "console").
        force:      Reconfigure even if already configured.
    """
    global _configured
    if _configured and not (force or log_level or log_format):
        return

    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    fmt = log_format or settings.log_format

    # Standard library logging integration (httpx, uvicorn log through it)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if fmt == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """
    Return a bound structlog logger with optional initial context values.

    Args:
        name:             Logger name (conventionally the module __name__).
        **initial_values: Key-value pairs merged into every log record.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger  # type: ignore[return-value]

"""Structured logging.

structlog over the stdlib logging tree. Block operations bind the
building they work on into the context, so every event emitted while a
building is mutated carries its id.
"""
from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any
from uuid import UUID

import structlog

_configured = False

# Libraries that log every statement at INFO
_QUIET_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "aiosqlite", "asyncio")


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _handlers(log_file: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def configure_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | None = None,
) -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call more than once; only the first call has an effect.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" or "console"
        log_file: Optional file receiving the same records as stdout
    """
    global _configured
    if _configured:
        return

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=_renderer(log_format),
        foreign_pre_chain=pre_chain,
    )

    root_logger = logging.getLogger()
    for handler in _handlers(log_file):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring from settings on first use.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structured logger
    """
    if not _configured:
        from building_blocks.shared.config import settings
        configure_logging(
            level=settings.log_level,
            log_format=settings.log_format,
            log_file=settings.log_file,
        )

    return structlog.get_logger(name)


def building_context(building_id: UUID) -> AbstractContextManager[Any]:
    """Bind a building id to all log events inside the block.

    Example:
        with building_context(building.id):
            logger.info("Block created", block_id="B1")
    """
    return structlog.contextvars.bound_contextvars(building_id=str(building_id))

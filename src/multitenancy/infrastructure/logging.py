"""Structlog configuration for hosts embedding the multitenancy kernel.

Configures structlog with colored console output for development
and JSON output for production. Tenant ids bound through
``CurrentTenantAccessor.log_scope`` reach every event via
``merge_contextvars``.
"""

import logging
import os
import sys

import structlog


def _use_colors() -> bool:
    """Decide between console and JSON rendering.

    FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker).
    """
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stdout.isatty()


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with appropriate processors.

    Args:
        level: Minimum level name (e.g. "DEBUG", "INFO") emitted by loggers
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if _use_colors():
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

"""Structlog configuration for the application.

Configures structlog with colored console output for development
and JSON output for production.
"""

import logging
import os
import sys

import structlog

from infrastructure.settings import get_settings
from shared_kernel.observability_context import ObservationContext


def configure_logging(debug: bool | None = None) -> None:
    """Configure structlog with appropriate processors.

    Uses colored console output for development (when FORCE_COLOR is set
    or running in a TTY), otherwise uses JSON output for production.

    Probes log successful permission checks at debug level, so debug output
    is only enabled when ``debug`` (or ``Settings.debug``) is true.

    Args:
        debug: Override for the minimum log level; defaults to Settings.debug
    """
    if debug is None:
        debug = get_settings().debug

    # FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    is_tty = sys.stdout.isatty()
    use_colors = force_color or is_tty

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_colors:
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

    min_level = logging.DEBUG if debug else logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_observation_context(context: ObservationContext) -> None:
    """Bind an observation context to every log event of the current task.

    Values land in structlog's contextvars and are merged into events by
    ``merge_contextvars``, including events from probes that were never
    given the context explicitly. Call ``clear_observation_context`` when
    the unit of work ends.
    """
    structlog.contextvars.bind_contextvars(**context.as_dict())


def clear_observation_context() -> None:
    """Drop any context bound with ``bind_observation_context``."""
    structlog.contextvars.clear_contextvars()

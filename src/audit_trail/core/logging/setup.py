"""structlog configuration.

Call ``configure_logging()`` once at process start. Log lines go to
stderr so command output on stdout stays parseable.
"""

import logging
import sys

import structlog

from audit_trail.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog processors and level filtering.

    Args:
        settings: Settings to read the level and environment from
            (defaults to the cached settings)
    """
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.is_production
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

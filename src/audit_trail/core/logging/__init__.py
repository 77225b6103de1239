"""Structured logging setup."""

from audit_trail.core.logging.setup import configure_logging


__all__ = [
    "configure_logging",
]

"""Audit-trail records for data-store mutations."""

__version__ = "0.1.0"

"""Declarative base and mixins for audited models."""

from audit_trail.core.database.base import AuditMixin, Base, UUIDMixin


__all__ = [
    "AuditMixin",
    "Base",
    "UUIDMixin",
]

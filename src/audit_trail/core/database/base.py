"""SQLAlchemy declarative base and common mixins."""

from uuid import UUID, uuid4

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UUIDMixin:
    """Mixin that adds a UUID primary key."""

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
        index=True,
    )


class AuditMixin:
    """Marker mixin to enable automatic audit logging.

    Models that inherit from this mixin have their inserts, updates and
    deletes written to the audit log when the session flushes.

    The SQLAlchemy event listeners in audit_trail.core.audit.middleware
    check for the __audit__ attribute to determine if a model
    should be audited.

    Example:
        class Customer(Base, AuditMixin):
            __tablename__ = "customers"
            id: Mapped[int] = mapped_column(primary_key=True)
            name: Mapped[str] = mapped_column(String(255))
    """

    # Marker attribute checked by audit middleware
    __audit__: bool = True

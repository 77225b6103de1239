"""Audit log database model.

Stores audit entries produced by the auditor: who changed which record
of which table, when, and the values before and after.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from audit_trail.core.audit.entry import AuditLogEntry
from audit_trail.core.constants import (
    MAX_RECORD_ID_LENGTH,
    MAX_TABLE_NAME_LENGTH,
    MAX_USER_TOKEN_LENGTH,
)
from audit_trail.core.database.base import Base, UUIDMixin


class AuditLog(Base, UUIDMixin):
    """Stored audit entry.

    Attributes:
        user_token: Token of the user who made the change
        timestamp: Change time of the unit of work
        table_name: Affected table as "schema.table"
        operation: C, U or D
        record_id: Primary identifier of the affected record
        original_value: Delimited values before the change
        new_value: Delimited values after the change
    """

    __tablename__ = "audit_logs"

    user_token: Mapped[str] = mapped_column(
        String(MAX_USER_TOKEN_LENGTH),
        nullable=False,
        index=True,
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    table_name: Mapped[str] = mapped_column(
        String(MAX_TABLE_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    operation: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
    )
    record_id: Mapped[str] = mapped_column(
        String(MAX_RECORD_ID_LENGTH),
        nullable=False,
        index=True,
    )
    original_value: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    new_value: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    @classmethod
    def from_entry(cls, entry: AuditLogEntry) -> "AuditLog":
        """Build a row from an entry.

        Resolves the entry's record id, so for created records this must
        run after the insert has been flushed.
        """
        return cls(
            id=entry.id,
            user_token=entry.user_token,
            timestamp=entry.timestamp,
            table_name=entry.table_name,
            operation=entry.operation.value,
            record_id=entry.resolve_record_id(),
            original_value=entry.original_value,
            new_value=entry.new_value,
        )

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, operation={self.operation}, "
            f"table_name={self.table_name}, record_id={self.record_id})>"
        )

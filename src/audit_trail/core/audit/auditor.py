"""Build audit log entries from change notifications.

An ``Auditor`` serves one unit of work: its timestamp is captured once at
construction and stamped on every entry it builds, so all changes saved
together share one logical change time. Create a new auditor for each
transaction.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog

from audit_trail.core.audit.entry import AuditLogEntry, AuditOperation, RecordId
from audit_trail.core.audit.formatting import diff_values, serialize_values
from audit_trail.core.audit.notification import ChangeKind, ChangeNotification
from audit_trail.core.audit.tables import TableNameResolver
from audit_trail.core.audit.values import Composite
from audit_trail.core.errors import InvalidOperationKindError, MissingValuesError


log = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Auditor:
    """Turns change notifications into audit log entries.

    Example:
        auditor = Auditor(StaticTableNameResolver({"Customer": "dbo.Customers"}))
        entry = auditor.record_change(notification, user_token="alice")
    """

    def __init__(
        self,
        table_name_resolver: TableNameResolver,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the auditor and fix its change time.

        Args:
            table_name_resolver: Maps entity type names to "schema.table"
            clock: Source of the change time, read once here
        """
        self.table_name_resolver = table_name_resolver
        self.timestamp = clock()
        self._handlers: dict[
            ChangeKind, Callable[[ChangeNotification, str], AuditLogEntry]
        ] = {
            ChangeKind.CREATE: self._added_entry,
            ChangeKind.UPDATE: self._modified_entry,
            ChangeKind.DELETE: self._deleted_entry,
        }

    def record_change(
        self, notification: ChangeNotification, user_token: str
    ) -> AuditLogEntry:
        """Build the audit entry for one change.

        Args:
            notification: The change to audit
            user_token: Opaque token identifying who made the change

        Returns:
            The completed entry, ready to be stored by the caller

        Raises:
            InvalidOperationKindError: If the operation is not create,
                update or delete
            MissingValuesError: If the value set the operation needs is None
        """
        try:
            kind = ChangeKind(notification.operation)
        except ValueError:
            log.warning(
                "audit_operation_invalid",
                operation=str(notification.operation),
                entity_type=notification.entity_type,
            )
            raise InvalidOperationKindError(
                f"Cannot audit a '{notification.operation}' change",
                operation=notification.operation,
            ) from None

        entry = self._handlers[kind](notification, user_token)

        log.debug(
            "audit_entry_built",
            operation=entry.operation.value,
            entity_type=notification.entity_type,
            table_name=entry.table_name,
        )
        return entry

    def build_base(
        self, notification: ChangeNotification, user_token: str
    ) -> dict[str, Any]:
        """Return the fields every entry shares, regardless of operation."""
        return {
            "id": uuid4(),
            "user_token": user_token,
            "timestamp": self.timestamp,
            "table_name": self.table_name_resolver(notification.entity_type),
        }

    def _added_entry(
        self, notification: ChangeNotification, user_token: str
    ) -> AuditLogEntry:
        current = _require(notification.current_values, "current")
        # The key may not exist until the insert is flushed
        return AuditLogEntry(
            **self.build_base(notification, user_token),
            operation=AuditOperation.C,
            record_id=RecordId.pending(notification.record_id_from_current),
            original_value=None,
            new_value=serialize_values(current),
        )

    def _deleted_entry(
        self, notification: ChangeNotification, user_token: str
    ) -> AuditLogEntry:
        original = _require(notification.original_values, "original")
        return AuditLogEntry(
            **self.build_base(notification, user_token),
            operation=AuditOperation.D,
            record_id=RecordId.resolved(notification.record_id_from_original()),
            original_value=serialize_values(original),
            new_value=None,
        )

    def _modified_entry(
        self, notification: ChangeNotification, user_token: str
    ) -> AuditLogEntry:
        new_value, original_value = diff_values(
            _require(notification.original_values, "original"),
            _require(notification.current_values, "current"),
        )
        return AuditLogEntry(
            **self.build_base(notification, user_token),
            operation=AuditOperation.U,
            record_id=RecordId.resolved(notification.record_id_from_original()),
            original_value=original_value,
            new_value=new_value,
        )


def _require(values: Composite | None, side: str) -> Composite:
    if values is None:
        raise MissingValuesError(
            f"Change notification has no {side} values", side=side
        )
    return values

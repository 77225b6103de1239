"""Automatic audit capture via SQLAlchemy event listeners.

Provides automatic tracking of model changes for models that
inherit from AuditMixin. Each session transaction gets its own
``Auditor``, so every entry written by one commit shares a timestamp.
"""

from contextvars import ContextVar
from typing import Any

import structlog
from sqlalchemy import event, inspect
from sqlalchemy.orm import ColumnProperty, CompositeProperty, Session

from audit_trail.config import get_settings
from audit_trail.core.audit.auditor import Auditor
from audit_trail.core.audit.entry import AuditLogEntry
from audit_trail.core.audit.models import AuditLog
from audit_trail.core.audit.notification import ChangeKind, ChangeNotification
from audit_trail.core.audit.tables import (
    MetadataTableNameResolver,
    TableNameResolver,
    mapped_entity_type,
)
from audit_trail.core.audit.values import Composite, Leaf
from audit_trail.core.database.base import Base


log = structlog.get_logger()

_AUDITOR_KEY = "audit_trail.auditor"
_PENDING_KEY = "audit_trail.pending"


# ContextVar for async-safe audit context storage
# Each async task/request gets its own isolated context
_audit_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "audit_context", default=None
)


def set_audit_context(user_token: str | None = None) -> None:
    """Set the audit context for the current unit of work.

    Args:
        user_token: Token identifying the user making changes
    """
    _audit_context.set({"user_token": user_token})


def clear_audit_context() -> None:
    """Clear the audit context after the unit of work completes."""
    _audit_context.set(None)


def get_audit_context() -> dict[str, Any]:
    """Get the current audit context.

    Returns:
        Shallow copy of current audit context dict, or empty dict if not set
    """
    ctx = _audit_context.get()
    if ctx is None:
        return {}
    return ctx.copy()


def _current_user_token() -> str:
    return get_audit_context().get("user_token") or get_settings().system_user_token


def _committed_value(obj: Any, key: str) -> Any:
    attr = inspect(obj).attrs[key]
    history = attr.history
    if history.deleted:
        return history.deleted[0]
    if history.added:
        return None
    return attr.value


def _current_value(obj: Any, key: str) -> Any:
    return inspect(obj).attrs[key].value


def snapshot_values(obj: Any, committed: bool = False) -> Composite:
    """Build a value set from a mapped instance.

    Column attributes become leaves. ``composite()`` attributes become
    nested value sets keyed by their column attributes. Relationships
    are not included.

    Args:
        obj: SQLAlchemy model instance
        committed: Read the values as last loaded from the database
            instead of the in-memory ones

    Returns:
        The instance's property values
    """
    read = _committed_value if committed else _current_value
    mapper = inspect(obj).mapper

    composite_keys = {
        prop.key for composite in mapper.composites for prop in composite.props
    }

    properties: dict[str, Leaf | Composite] = {}
    for prop in mapper.attrs:
        if prop.key.startswith("_"):
            continue
        if isinstance(prop, CompositeProperty):
            properties[prop.key] = Composite(
                properties={
                    sub.key: Leaf.of(read(obj, sub.key)) for sub in prop.props
                }
            )
        elif isinstance(prop, ColumnProperty) and prop.key not in composite_keys:
            properties[prop.key] = Leaf.of(read(obj, prop.key))
    return Composite(properties=properties)


def notification_for(obj: Any, kind: ChangeKind) -> ChangeNotification:
    """Describe a pending change to a mapped instance.

    Args:
        obj: SQLAlchemy model instance
        kind: Whether the instance is being created, updated or deleted

    Returns:
        Notification with the real entity type and primary key names
    """
    mapper = inspect(obj).mapper
    key_properties = [
        mapper.get_property_by_column(column).key for column in mapper.primary_key
    ]

    original = None
    current = None
    if kind is not ChangeKind.CREATE:
        original = snapshot_values(obj, committed=True)
    if kind is not ChangeKind.DELETE:
        current = snapshot_values(obj)

    return ChangeNotification(
        operation=kind,
        entity_type=mapped_entity_type(type(obj)).__name__,
        original_values=original,
        current_values=current,
        key_properties=key_properties,
        refresh_current=lambda: snapshot_values(obj),
    )


def _should_audit(obj: Any) -> bool:
    """Check if an object should be audited.

    Args:
        obj: SQLAlchemy model instance

    Returns:
        True if the object has __audit__ = True
    """
    return getattr(obj, "__audit__", False)


def _auditor_for(session: Session, resolver: TableNameResolver) -> Auditor:
    auditor = session.info.get(_AUDITOR_KEY)
    if auditor is None:
        auditor = Auditor(resolver)
        session.info[_AUDITOR_KEY] = auditor
    return auditor


def _reset_unit_of_work(session: Session) -> None:
    session.info.pop(_AUDITOR_KEY, None)
    session.info.pop(_PENDING_KEY, None)


def setup_audit_listeners(
    target: Any = Session,
    table_name_resolver: TableNameResolver | None = None,
) -> None:
    """Set up SQLAlchemy event listeners for automatic auditing.

    Call this during application startup to enable automatic
    audit logging for models with __audit__ = True.

    Args:
        target: Session class, subclass or sessionmaker to listen on
        table_name_resolver: Table name lookup, defaults to the mapping
            metadata of the package's declarative Base
    """
    resolver = table_name_resolver or MetadataTableNameResolver(Base)

    @event.listens_for(target, "before_flush")
    def before_flush(
        session: Session,
        _flush_context: Any,
        _instances: Any,
    ) -> None:
        """Capture changes before they're flushed to the database."""
        auditor = _auditor_for(session, resolver)
        user_token = _current_user_token()
        pending: list[AuditLogEntry] = session.info.setdefault(_PENDING_KEY, [])
        written = 0

        # New objects have no key yet, so their rows wait for the flush
        for obj in session.new:
            if _should_audit(obj):
                pending.append(
                    auditor.record_change(
                        notification_for(obj, ChangeKind.CREATE), user_token
                    )
                )

        for obj in session.dirty:
            if _should_audit(obj) and session.is_modified(obj):
                entry = auditor.record_change(
                    notification_for(obj, ChangeKind.UPDATE), user_token
                )
                if entry.new_value or entry.original_value:
                    session.add(AuditLog.from_entry(entry))
                    written += 1

        for obj in session.deleted:
            if _should_audit(obj):
                entry = auditor.record_change(
                    notification_for(obj, ChangeKind.DELETE), user_token
                )
                session.add(AuditLog.from_entry(entry))
                written += 1

        if written:
            log.debug("audit_entries_flushed", count=written, stage="before_flush")

    @event.listens_for(target, "after_flush_postexec")
    def after_flush_postexec(session: Session, _flush_context: Any) -> None:
        """Store create entries now that their keys have been assigned."""
        pending: list[AuditLogEntry] = session.info.pop(_PENDING_KEY, [])
        for entry in pending:
            session.add(AuditLog.from_entry(entry))

        if pending:
            log.debug("audit_entries_flushed", count=len(pending), stage="after_flush")

    @event.listens_for(target, "after_transaction_end")
    def after_transaction_end(session: Session, transaction: Any) -> None:
        """Drop the auditor once the outermost transaction ends.

        Fires on commit, rollback and close alike. Flushes and savepoints
        run in nested transactions and keep the current auditor.
        """
        if transaction.parent is None:
            _reset_unit_of_work(session)

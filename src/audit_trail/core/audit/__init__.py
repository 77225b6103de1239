"""Audit logging for tracking data changes.

Provides:
- Auditor for turning change notifications into audit entries
- Value serialization and before/after diffing of nested value sets
- AuditLog model for storing audit entries
- Automatic capture via SQLAlchemy event listeners
"""

from audit_trail.core.audit.auditor import Auditor
from audit_trail.core.audit.entry import AuditLogEntry, AuditOperation, RecordId
from audit_trail.core.audit.formatting import (
    changed_leaves,
    diff_values,
    serialize_values,
)
from audit_trail.core.audit.models import AuditLog
from audit_trail.core.audit.notification import ChangeKind, ChangeNotification
from audit_trail.core.audit.tables import (
    MetadataTableNameResolver,
    StaticTableNameResolver,
    TableNameResolver,
    mapped_entity_type,
)
from audit_trail.core.audit.values import Composite, Leaf, Value, value_set


__all__ = [
    "AuditLog",
    "AuditLogEntry",
    "AuditOperation",
    "Auditor",
    "ChangeKind",
    "ChangeNotification",
    "Composite",
    "Leaf",
    "MetadataTableNameResolver",
    "RecordId",
    "StaticTableNameResolver",
    "TableNameResolver",
    "Value",
    "changed_leaves",
    "diff_values",
    "mapped_entity_type",
    "serialize_values",
    "value_set",
]

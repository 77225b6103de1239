"""Change notifications handed to the auditor.

A notification describes one record mutation: what kind it was, the
property values before and after, and which entity type it belongs to.
It is built by the change-tracking layer (see ``middleware``) or by
hand, and is only read by the auditor.
"""

import enum
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from audit_trail.config import get_settings
from audit_trail.core.audit.values import Composite, value_set
from audit_trail.core.constants import RECORD_ID_SEPARATOR
from audit_trail.core.errors import RecordIdUnavailableError


class ChangeKind(str, enum.Enum):
    """Kinds of record mutation that produce an audit entry."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ChangeNotification:
    """Description of a single record mutation.

    The ``operation`` is stored as given and only validated when the
    auditor dispatches on it, so a bad value surfaces as
    ``InvalidOperationKindError`` at the point of use.
    """

    def __init__(
        self,
        operation: ChangeKind | str,
        entity_type: str,
        original_values: Composite | Mapping[str, Any] | None = None,
        current_values: Composite | Mapping[str, Any] | None = None,
        key_properties: Iterable[str] | None = None,
        refresh_current: Callable[[], Composite] | None = None,
    ) -> None:
        """Initialize a change notification.

        Args:
            operation: Create, update or delete
            entity_type: Name of the real (non-proxy) entity type
            original_values: Values before the change (update, delete)
            current_values: Values after the change (create, update)
            key_properties: Primary key property names, defaults to the
                configured record id property
            refresh_current: Re-reads the live current values; used to
                resolve identifiers assigned after the notification was built
        """
        self.operation = operation
        self.entity_type = entity_type
        self.original_values = (
            value_set(original_values) if original_values is not None else None
        )
        self.current_values = (
            value_set(current_values) if current_values is not None else None
        )
        self.key_properties = tuple(
            key_properties or (get_settings().record_id_property,)
        )
        self.refresh_current = refresh_current

    def record_id(self, values: Composite | None) -> str:
        """Read the primary identifier from a value set.

        Raises:
            RecordIdUnavailableError: If a key property is missing or null
        """
        if values is None:
            raise RecordIdUnavailableError(
                f"No values to read the {self.entity_type} identifier from"
            )

        parts = []
        for name in self.key_properties:
            leaf = values.leaf(name)
            if leaf is None or leaf.text is None:
                raise RecordIdUnavailableError(
                    f"{self.entity_type} has no value for key property '{name}'",
                    property_name=name,
                )
            parts.append(leaf.text)
        return RECORD_ID_SEPARATOR.join(parts)

    def record_id_from_original(self) -> str:
        return self.record_id(self.original_values)

    def record_id_from_current(self) -> str:
        """Read the identifier from the live current values when available."""
        if self.refresh_current is not None:
            return self.record_id(self.refresh_current())
        return self.record_id(self.current_values)

    def __repr__(self) -> str:
        return (
            f"<ChangeNotification(operation={self.operation}, "
            f"entity_type={self.entity_type})>"
        )

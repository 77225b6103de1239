"""Pydantic schemas for audit-trail CLI input files."""

from typing import Any

from pydantic import BaseModel, Field

from audit_trail.core.audit.notification import ChangeNotification


class ChangeDocument(BaseModel):
    """A change notification written as YAML or JSON.

    Example:
        operation: update
        entity: Customer
        original: {id: 7, Name: Bob, Age: 30}
        current: {id: 7, Name: Bob, Age: 31}
        tables: {Customer: sales.customers}
    """

    operation: str = Field(..., description="create, update or delete")
    entity: str = Field(..., description="Entity type name")
    key: list[str] | None = Field(
        None, description="Primary key property names (defaults to 'id')"
    )
    original: dict[str, Any] | None = Field(
        None, description="Property values before the change"
    )
    current: dict[str, Any] | None = Field(
        None, description="Property values after the change"
    )
    tables: dict[str, str] = Field(
        default_factory=dict,
        description="Entity type to 'schema.table' mapping",
    )

    def to_notification(self) -> ChangeNotification:
        return ChangeNotification(
            operation=self.operation.lower(),
            entity_type=self.entity,
            original_values=self.original,
            current_values=self.current,
            key_properties=self.key,
        )

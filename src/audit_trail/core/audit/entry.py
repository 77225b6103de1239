"""Audit log entry value objects."""

import enum
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AuditOperation(str, enum.Enum):
    """Operation codes stored on audit entries."""

    C = "C"
    U = "U"
    D = "D"


class RecordId(BaseModel):
    """A record identifier that is either known now or resolved later.

    Freshly inserted records may not have their key until the unit of
    work commits, so a create entry carries a resolver instead of a value.
    Call ``resolve()`` once the key exists.
    """

    model_config = ConfigDict(frozen=True)

    value: str | None = None
    resolver: Callable[[], str] | None = Field(default=None, repr=False)

    @model_validator(mode="after")
    def validate_source(self) -> "RecordId":
        """Require exactly one of a value or a resolver."""
        if (self.value is None) == (self.resolver is None):
            raise ValueError("RecordId needs exactly one of value or resolver")
        return self

    @classmethod
    def resolved(cls, value: str) -> "RecordId":
        return cls(value=value)

    @classmethod
    def pending(cls, resolver: Callable[[], str]) -> "RecordId":
        return cls(resolver=resolver)

    @property
    def is_pending(self) -> bool:
        return self.value is None

    def resolve(self) -> str:
        """Return the identifier, invoking the resolver for pending ids.

        The resolver runs on every call; nothing is cached on the entry.
        """
        if self.resolver is None:
            return self.value
        return self.resolver()


class AuditLogEntry(BaseModel):
    """Immutable description of one audited change.

    Attributes:
        id: Unique identifier of this entry
        user_token: Opaque token identifying who made the change
        timestamp: Change time shared by every entry of one unit of work
        table_name: Storage location as "schema.table" ("" if unresolved)
        operation: C, U or D
        record_id: Identifier of the affected record
        original_value: Delimited values before the change (None for C)
        new_value: Delimited values after the change (None for D)
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    user_token: str
    timestamp: datetime
    table_name: str
    operation: AuditOperation
    record_id: RecordId
    original_value: str | None = None
    new_value: str | None = None

    def resolve_record_id(self) -> str:
        return self.record_id.resolve()

"""Error types for audit entry construction."""

from audit_trail.core.errors.exceptions import (
    AuditTrailError,
    ChangeDocumentError,
    InvalidOperationKindError,
    InvalidPropertyNameError,
    MismatchedValueShapeError,
    MissingValuesError,
    RecordIdUnavailableError,
)


__all__ = [
    "AuditTrailError",
    "ChangeDocumentError",
    "InvalidOperationKindError",
    "InvalidPropertyNameError",
    "MismatchedValueShapeError",
    "MissingValuesError",
    "RecordIdUnavailableError",
]

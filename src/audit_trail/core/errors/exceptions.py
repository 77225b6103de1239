"""Exceptions raised while building audit entries.

Every error carries a machine-readable ``error_code`` and a ``details``
dict so callers (and the CLI) can report it without parsing messages.
"""

from typing import Any


class AuditTrailError(Exception):
    """Base exception for all audit-trail errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional error details
    """

    message: str = "An unexpected audit error occurred"
    error_code: str = "audit_error"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidOperationKindError(AuditTrailError):
    """Raised when a change notification is not a create, update or delete.

    Example:
        raise InvalidOperationKindError(operation="detached")
    """

    message = "Change operation is not valid for auditing"
    error_code = "invalid_operation_kind"

    def __init__(
        self,
        message: str | None = None,
        operation: Any = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        details["operation"] = str(operation)
        super().__init__(message=message, details=details, **kwargs)


class MismatchedValueShapeError(AuditTrailError):
    """Raised when before/after value sets do not share the same shape.

    Example:
        raise MismatchedValueShapeError(path="Address.City")
    """

    message = "Original and current values have different shapes"
    error_code = "mismatched_value_shape"

    def __init__(
        self,
        message: str | None = None,
        path: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        super().__init__(message=message, details=details, **kwargs)


class RecordIdUnavailableError(AuditTrailError):
    """Raised when the primary identifier cannot be read from a value set."""

    message = "Record identifier is not available"
    error_code = "record_id_unavailable"

    def __init__(
        self,
        message: str | None = None,
        property_name: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if property_name:
            details["property"] = property_name
        super().__init__(message=message, details=details, **kwargs)


class MissingValuesError(AuditTrailError):
    """Raised when a notification lacks the value set its operation needs.

    Example:
        raise MissingValuesError(side="current")
    """

    message = "Change notification is missing its values"
    error_code = "missing_values"

    def __init__(
        self,
        message: str | None = None,
        side: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if side:
            details["side"] = side
        super().__init__(message=message, details=details, **kwargs)


class InvalidPropertyNameError(AuditTrailError):
    """Raised when a property name contains the path separator.

    Such a name would render to the same path as a nested property.
    """

    message = "Property name is not valid in a value set"
    error_code = "invalid_property_name"

    def __init__(
        self,
        message: str | None = None,
        name: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if name is not None:
            details["name"] = name
        super().__init__(message=message, details=details, **kwargs)


class ChangeDocumentError(AuditTrailError):
    """Raised when a change document file cannot be loaded.

    Example:
        raise ChangeDocumentError("File not found", details={"path": "x.yaml"})
    """

    message = "Invalid change document"
    error_code = "invalid_change_document"

"""Tests for audit_trail.schemas module."""

import pytest
from pydantic import ValidationError

from audit_trail.core.audit import ChangeKind
from audit_trail.schemas import ChangeDocument


class TestChangeDocument:
    """Tests for ChangeDocument schema."""

    def test_required_fields(self) -> None:
        """Verify operation and entity are required."""
        with pytest.raises(ValidationError):
            ChangeDocument(entity="Customer")

        with pytest.raises(ValidationError):
            ChangeDocument(operation="create")

    def test_optional_fields_default(self) -> None:
        """Verify optional fields have empty defaults."""
        document = ChangeDocument(operation="delete", entity="Customer")

        assert document.key is None
        assert document.original is None
        assert document.current is None
        assert document.tables == {}

    def test_to_notification(self) -> None:
        """Verify a document converts to a change notification."""
        document = ChangeDocument(
            operation="Update",
            entity="OrderLine",
            key=["order_id", "line"],
            original={"order_id": 1, "line": 2, "qty": 1},
            current={"order_id": 1, "line": 2, "qty": 5},
        )

        notification = document.to_notification()

        assert notification.operation == ChangeKind.UPDATE
        assert notification.entity_type == "OrderLine"
        assert notification.key_properties == ("order_id", "line")
        assert notification.record_id_from_original() == "1,2"

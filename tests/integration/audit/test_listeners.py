"""Integration tests for automatic auditing through session events."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from audit_trail.core.audit.middleware import clear_audit_context, set_audit_context
from audit_trail.core.audit.models import AuditLog


def _audit_rows(session: Session) -> list[AuditLog]:
    return list(session.scalars(select(AuditLog)))


class TestCreateAudit:
    """Tests for auditing inserts."""

    def test_insert_writes_create_row(self, db_session: Session, customer):
        """Verify an insert is logged with the key assigned by the database."""
        db_session.add(customer)
        db_session.commit()

        rows = _audit_rows(db_session)

        assert len(rows) == 1
        row = rows[0]
        assert row.operation == "C"
        assert row.table_name == "dbo.customers"
        assert row.record_id == str(customer.id)
        assert row.original_value is None
        assert "[name]=Alice" in row.new_value
        assert "[address.city]=NYC" in row.new_value
        assert "[address.street]=NULL" in row.new_value

    def test_insert_uses_system_token_without_context(
        self, db_session: Session, customer
    ):
        """Verify the configured system token is used by default."""
        clear_audit_context()
        db_session.add(customer)
        db_session.commit()

        assert _audit_rows(db_session)[0].user_token == "system"

    def test_insert_uses_context_token(self, db_session: Session, customer):
        """Verify the audit context supplies the user token."""
        set_audit_context(user_token="alice")
        db_session.add(customer)
        db_session.commit()

        assert _audit_rows(db_session)[0].user_token == "alice"

    def test_same_commit_shares_timestamp(self, db_session: Session, customer):
        """Verify entries written by one commit share their change time."""
        other = type(customer)(name="Bob")
        db_session.add_all([customer, other])
        db_session.commit()

        rows = _audit_rows(db_session)

        assert len(rows) == 2
        assert rows[0].timestamp == rows[1].timestamp
        assert {row.record_id for row in rows} == {str(customer.id), str(other.id)}

    def test_unaudited_models_are_skipped(self, db_session: Session, note):
        """Verify models without the audit marker are not logged."""
        db_session.add(note)
        db_session.commit()

        assert _audit_rows(db_session) == []


class TestUpdateAudit:
    """Tests for auditing updates."""

    def test_update_writes_changed_columns_only(self, db_session: Session, customer):
        """Verify only the changed column is recorded."""
        db_session.add(customer)
        db_session.commit()

        customer.age = 31
        db_session.commit()

        row = db_session.scalars(
            select(AuditLog).where(AuditLog.operation == "U")
        ).one()
        assert row.new_value == "[age]=31"
        assert row.original_value == "[age]=NULL"
        assert row.record_id == str(customer.id)

    def test_update_composite_uses_dotted_path(self, db_session: Session, customer):
        """Verify a composite change is recorded under its dotted path."""
        db_session.add(customer)
        db_session.commit()

        customer.address = type(customer.address)("LA", None)
        db_session.commit()

        row = db_session.scalars(
            select(AuditLog).where(AuditLog.operation == "U")
        ).one()
        assert row.new_value == "[address.city]=LA"
        assert row.original_value == "[address.city]=NYC"

    def test_update_to_same_value_is_not_logged(self, db_session: Session, customer):
        """Verify an update that changes nothing writes no row."""
        db_session.add(customer)
        db_session.commit()

        customer.name = "Alice"
        db_session.commit()

        operations = [row.operation for row in _audit_rows(db_session)]
        assert operations == ["C"]


class TestDeleteAudit:
    """Tests for auditing deletes."""

    def test_delete_writes_original_values(self, db_session: Session, customer):
        """Verify a delete is logged with every original value."""
        db_session.add(customer)
        db_session.commit()
        customer_id = customer.id

        db_session.delete(customer)
        db_session.commit()

        row = db_session.scalars(
            select(AuditLog).where(AuditLog.operation == "D")
        ).one()
        assert row.record_id == str(customer_id)
        assert row.new_value is None
        assert f"[id]={customer_id}" in row.original_value
        assert "[name]=Alice" in row.original_value
        assert "[address.city]=NYC" in row.original_value


class TestUnitOfWork:
    """Tests for per-transaction auditor handling."""

    def test_auditor_dropped_after_commit(self, db_session: Session, customer):
        """Verify each transaction gets a fresh auditor."""
        db_session.add(customer)
        db_session.flush()

        assert "audit_trail.auditor" in db_session.info

        db_session.commit()

        assert "audit_trail.auditor" not in db_session.info

    def test_rollback_discards_entries(self, db_session: Session, customer):
        """Verify rolled back changes leave no audit rows."""
        db_session.add(customer)
        db_session.flush()
        db_session.rollback()

        assert _audit_rows(db_session) == []
        assert "audit_trail.pending" not in db_session.info

    def test_close_starts_new_unit_of_work(self, db_session: Session, customer):
        """Verify closing a session drops its auditor and pending entries."""
        db_session.add(customer)
        db_session.flush()
        stale = db_session.info["audit_trail.auditor"]

        db_session.close()

        assert "audit_trail.auditor" not in db_session.info
        assert "audit_trail.pending" not in db_session.info

        db_session.add(type(customer)(name="Bob"))
        db_session.flush()

        assert db_session.info["audit_trail.auditor"] is not stale

        db_session.commit()

        rows = _audit_rows(db_session)
        assert len(rows) == 1
        assert "[name]=Bob" in rows[0].new_value

    def test_flush_keeps_auditor(self, db_session: Session, customer):
        """Verify flushes inside one transaction share an auditor."""
        db_session.add(customer)
        db_session.flush()
        auditor = db_session.info["audit_trail.auditor"]

        customer.age = 40
        db_session.flush()

        assert db_session.info["audit_trail.auditor"] is auditor

"""Pytest configuration and shared fixtures."""

import logging
import shutil
import sys
import tempfile
from collections.abc import Generator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import pytest
import structlog
from sqlalchemy import String, create_engine
from sqlalchemy.orm import Mapped, Session, composite, mapped_column, sessionmaker

from audit_trail.core.audit import Auditor, StaticTableNameResolver
from audit_trail.core.audit.middleware import clear_audit_context, setup_audit_listeners
from audit_trail.core.audit.models import AuditLog
from audit_trail.core.database import AuditMixin, Base


FIXED_TIME = datetime(2024, 1, 15, 10, 30, 45, tzinfo=UTC)


@dataclass
class Address:
    """Owned value stored in the customer's own columns."""

    city: str | None
    street: str | None


class Customer(Base, AuditMixin):
    """Audited model with a composite attribute."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    age: Mapped[int | None] = mapped_column(nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    street: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[Address] = composite("city", "street")


class Note(Base):
    """Model without the audit marker."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(primary_key=True)
    body: Mapped[str] = mapped_column(String(255))


@pytest.fixture(autouse=True, scope="session")
def quiet_logging() -> None:
    """Keep log lines off stdout so CLI output can be asserted on."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to the temporary directory
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fixed_time() -> datetime:
    """Change time used by the auditor fixture."""
    return FIXED_TIME


@pytest.fixture
def resolver() -> StaticTableNameResolver:
    """Table name resolver that knows the Customer entity."""
    return StaticTableNameResolver({"Customer": "dbo.Customers"})


@pytest.fixture
def auditor(resolver: StaticTableNameResolver, fixed_time: datetime) -> Auditor:
    """Auditor with a fixed change time."""
    return Auditor(resolver, clock=lambda: fixed_time)


@pytest.fixture
def customer() -> Customer:
    """Unsaved customer with a partially filled address."""
    return Customer(name="Alice", address=Address("NYC", None))


@pytest.fixture
def note() -> Note:
    """Unsaved instance of a model that is not audited."""
    return Note(body="hello")


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Session factory on an in-memory database with audit listeners."""
    engine = create_engine("sqlite://")
    tables = [Customer.__table__, Note.__table__, AuditLog.__table__]
    Base.metadata.create_all(bind=engine, tables=tables)

    factory = sessionmaker(bind=engine, expire_on_commit=False)
    setup_audit_listeners(factory)

    yield factory

    clear_audit_context()
    Base.metadata.drop_all(bind=engine, tables=tables)
    engine.dispose()


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Provide an audited database session."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

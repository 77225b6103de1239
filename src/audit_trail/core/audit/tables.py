"""Entity type to "schema.table" resolution.

The auditor only needs a callable that maps an entity type name to its
storage location. Unknown types resolve to "" rather than raising, so an
entry is still produced for them.
"""

from collections.abc import Mapping
from typing import Any, Protocol

import structlog
from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase, registry

from audit_trail.config import get_settings


log = structlog.get_logger()


class TableNameResolver(Protocol):
    """Maps an entity type name to "schema.table", or "" if unknown."""

    def __call__(self, entity_type: str) -> str: ...


class StaticTableNameResolver:
    """Resolve table names from a fixed mapping.

    Example:
        resolver = StaticTableNameResolver({"Customer": "sales.customers"})
    """

    def __init__(self, tables: Mapping[str, str]) -> None:
        self.tables = {name.lower(): table for name, table in tables.items()}

    def __call__(self, entity_type: str) -> str:
        table_name = self.tables.get(entity_type.lower(), "")
        if not table_name:
            log.warning("audit_table_unresolved", entity_type=entity_type)
        return table_name


class MetadataTableNameResolver:
    """Resolve table names from SQLAlchemy mapping metadata.

    Looks the entity type up by class name (case-insensitive) among the
    mappers of a registry and returns the mapped table's schema and name.
    Tables without a schema use the configured default schema.
    """

    def __init__(
        self,
        source: registry | type[DeclarativeBase],
        default_schema: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            source: A declarative base class or its registry
            default_schema: Schema for tables that declare none
        """
        self.registry = source if isinstance(source, registry) else source.registry
        self.default_schema = default_schema or get_settings().default_schema

    def __call__(self, entity_type: str) -> str:
        wanted = entity_type.lower()
        for mapper in self.registry.mappers:
            if mapper.class_.__name__.lower() != wanted:
                continue
            table = mapper.local_table
            schema = getattr(table, "schema", None) or self.default_schema
            return f"{schema}.{table.name}"

        log.warning("audit_table_unresolved", entity_type=entity_type)
        return ""


def _declares_table(cls: type) -> bool:
    return "__tablename__" in vars(cls) or "__table__" in vars(cls)


def mapped_entity_type(cls: type[Any]) -> type[Any]:
    """Return the entity class that actually declares the mapping.

    Dynamically generated subclasses (proxies) of a mapped class do not
    declare a table of their own, so the first class in the MRO that
    does is the real entity type.

    Raises:
        TypeError: If no class in the hierarchy declares a table
    """
    for candidate in cls.__mro__:
        if _declares_table(candidate):
            return candidate

    # Imperatively mapped classes carry no declarative attributes
    mapper = inspect(cls, raiseerr=False)
    if mapper is not None:
        return mapper.base_mapper.class_

    raise TypeError(f"{cls.__name__} is not a mapped entity type")

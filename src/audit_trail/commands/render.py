"""Command: audit-trail render - Build the audit entry for a change document."""

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text


console = Console()

PENDING_RECORD_ID = "(pending)"


def _entry_fields(entry: Any) -> dict[str, Any]:
    from audit_trail.core.errors import RecordIdUnavailableError

    try:
        record_id = entry.resolve_record_id()
    except RecordIdUnavailableError:
        record_id = None

    return {
        "id": str(entry.id),
        "user_token": entry.user_token,
        "timestamp": entry.timestamp.isoformat(),
        "table_name": entry.table_name,
        "operation": entry.operation.value,
        "record_id": record_id,
        "original_value": entry.original_value,
        "new_value": entry.new_value,
    }


def render(
    path: Path = typer.Argument(..., help="YAML or JSON change document"),
    user: str = typer.Option(
        "cli", "--user", "-u", help="User token recorded on the entry"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the entry as JSON"),
) -> None:
    """Render the audit entry for a change document.

    The document names the operation, the entity type, the values before
    and/or after the change, and optionally the entity's table.
    """
    from audit_trail.core.audit import Auditor, StaticTableNameResolver
    from audit_trail.core.errors import AuditTrailError
    from audit_trail.utils import load_change_document

    try:
        document = load_change_document(path)
        auditor = Auditor(StaticTableNameResolver(document.tables))
        entry = auditor.record_change(document.to_notification(), user)
    except AuditTrailError as e:
        console.print(Text.assemble(("Error: ", "red"), e.message))
        raise typer.Exit(1) from None

    fields = _entry_fields(entry)

    if as_json:
        typer.echo(json.dumps(fields, indent=2))
        return

    table = Table(title="Audit Entry", show_header=True)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")

    for name, value in fields.items():
        if value is None:
            shown = PENDING_RECORD_ID if name == "record_id" else "-"
            table.add_row(name, Text(shown, style="dim"))
        else:
            table.add_row(name, Text(value))

    console.print()
    console.print(table)
    console.print()

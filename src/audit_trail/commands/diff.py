"""Command: audit-trail diff - Show the changed properties of two value files."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text


console = Console()


def diff(
    before: Path = typer.Argument(..., help="Values before the change"),
    after: Path = typer.Argument(..., help="Values after the change"),
) -> None:
    """Show every property whose value differs between two files.

    Nested mappings are compared property by property under dotted paths.
    """
    from audit_trail.core.audit import changed_leaves, value_set
    from audit_trail.core.errors import AuditTrailError
    from audit_trail.utils import load_mapping

    try:
        changes = changed_leaves(
            value_set(load_mapping(before)), value_set(load_mapping(after))
        )
    except AuditTrailError as e:
        console.print(Text.assemble(("Error: ", "red"), e.message))
        raise typer.Exit(1) from None

    if not changes:
        console.print("[green]No changes.[/green]")
        return

    table = Table(title="Changed Properties", show_header=True)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Original")
    table.add_column("New", style="green")

    for path, original, current in changes:
        table.add_row(Text(path), Text(original.render()), Text(current.render()))

    console.print()
    console.print(table)
    console.print()

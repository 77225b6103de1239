"""Main audit-trail CLI application."""

import typer
from rich.console import Console

from audit_trail import __version__
from audit_trail.commands import diff, render


console = Console()

app = typer.Typer(
    name="audit-trail",
    help="Render audit-trail entries for record changes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="render")(render.render)
app.command(name="diff")(diff.diff)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """audit-trail - Render audit entries for record changes."""
    if version:
        console.print(f"[bold cyan]audit-trail[/bold cyan] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    from audit_trail.core.logging import configure_logging

    configure_logging()
    app()


if __name__ == "__main__":
    main()

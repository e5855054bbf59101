"""Database schema migration commands."""

import typer
from rich.panel import Panel
from rich.table import Table

from src.bookstore.core.services.database.db_manage import DbManageService
from src.bookstore.core.services.database.migrations import MigrationError

from .utils import console


def _service() -> DbManageService:
    return DbManageService()


def migrate(
    to: int | None = typer.Option(
        None, "--to", help="Target schema version (defaults to the latest)"
    ),
) -> None:
    """
    ⬆️  Apply pending schema migrations.

    Run this before starting the API; the application never creates or
    alters tables on its own.
    """
    service = _service()
    try:
        count = service.migrate(to)
    except MigrationError as e:
        console.print(f"[red]❌ Migration failed: {e}[/red]")
        raise typer.Exit(1) from e
    finally:
        service.dispose()

    if count:
        console.print(f"[green]✅ Applied {count} migration(s)[/green]")
    else:
        console.print("[green]Database schema is already up to date[/green]")


def rollback(
    to: int | None = typer.Option(
        None, "--to", help="Roll back down to this version (defaults to one step)"
    ),
) -> None:
    """⬇️  Roll back applied schema migrations."""
    service = _service()
    try:
        count = service.rollback(to)
    except MigrationError as e:
        console.print(f"[red]❌ Rollback failed: {e}[/red]")
        raise typer.Exit(1) from e
    finally:
        service.dispose()

    if count:
        console.print(f"[yellow]Rolled back {count} migration(s)[/yellow]")
    else:
        console.print("[yellow]Nothing to roll back[/yellow]")


def status() -> None:
    """📋 Show the migration history and the current schema version."""
    service = _service()
    try:
        info = service.status()
    finally:
        service.dispose()

    table = Table(title="Schema migrations")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Applied at")

    for migration in info["migrations"]:
        applied_at = migration["applied_at"]
        table.add_row(
            str(migration["version"]),
            migration["name"],
            str(applied_at) if applied_at else "[dim]pending[/dim]",
        )

    console.print(table)
    style = "green" if info["pending"] == 0 else "yellow"
    console.print(
        Panel.fit(
            f"Current version: {info['current_version']} / "
            f"latest: {info['latest_version']} ({info['pending']} pending)",
            border_style=style,
        )
    )

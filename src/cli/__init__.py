"""Main CLI application module."""

import typer

from .db_commands import migrate, rollback, status
from .server_commands import serve

app = typer.Typer(
    help="📚 Bookstore API CLI - schema migrations and server",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command(name="serve")(serve)
app.command(name="migrate")(migrate)
app.command(name="rollback")(rollback)
app.command(name="status")(status)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

"""API server command."""

import typer
from rich.panel import Panel

from src.bookstore.runtime.context import get_config

from .utils import console, get_project_root


def serve(
    host: str | None = typer.Option(
        None, help="Host to bind the server to (defaults to app.host)"
    ),
    port: int | None = typer.Option(
        None, help="Port to bind the server to (defaults to app.port)"
    ),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str | None = typer.Option(
        None, help="Uvicorn log level (defaults to logging.level)"
    ),
) -> None:
    """
    🚀 Start the Bookstore API server.

    Apply migrations first with `bookstore migrate`.
    """
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port
    log_level = (log_level or config.logging.level).lower()

    console.print(
        Panel.fit(
            "[bold green]Starting Bookstore API[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.bookstore.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        reload_dirs=[str(get_project_root() / "src")] if reload else None,
        log_level=log_level,
        access_log=False,  # log_requests middleware writes the access lines
    )

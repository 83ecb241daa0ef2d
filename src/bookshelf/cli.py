"""Command line entry point: run the server and manage the database."""

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel

console = Console()

app = typer.Typer(
    help="Books Directory API",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def _load_environment(
    env_file: str = typer.Option(".env", help="Environment file to load first"),
) -> None:
    # Configuration is read on first import, so .env must be loaded before that
    load_dotenv(env_file, override=False)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Host to bind (default from config)"),
    port: int | None = typer.Option(None, help="Port to bind (default from config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """Start the HTTP server."""
    import uvicorn

    from src.bookshelf.runtime.context import get_config

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit(
            f"[bold green]Books Directory API[/bold green] on http://{host}:{port}",
            border_style="green",
        )
    )
    uvicorn.run(
        "src.bookshelf.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        access_log=False,  # We handle access logging in middleware
    )


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    from src.bookshelf.core.services.database.db_session import DbSessionService
    from src.bookshelf.entities.book import BookRepository

    database_service = DbSessionService()
    database_service.create_all()
    with database_service.session_scope() as session:
        count = BookRepository(session).count()
    console.print(f"[green]Database tables created[/green] ({count} books stored)")


@app.command("check-db")
def check_db() -> None:
    """Check that the configured database is reachable."""
    from src.bookshelf.core.services.database.db_session import DbSessionService
    from src.bookshelf.runtime.context import get_config

    backend = get_config().database.backend
    if DbSessionService().health_check():
        console.print(f"[green]Connected to {backend} database[/green]")
        return

    console.print(f"[red]Could not connect to {backend} database[/red]")
    raise typer.Exit(code=1)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

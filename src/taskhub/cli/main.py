"""TaskHub CLI Entry Point"""

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from taskhub.config import get_settings

app = typer.Typer(name="taskhub", help="TaskHub task management backend")
console = Console()


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Listening host (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Listening port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API server"""
    settings = get_settings()
    console.print(
        f"Starting TaskHub on {host or settings.api.host}:{port or settings.api.port}",
        style="bold green",
    )
    uvicorn.run(
        "taskhub.api.main:create_app",
        factory=True,
        host=host or settings.api.host,
        port=port or settings.api.port,
        reload=reload,
        log_level=settings.api.log_level.lower(),
    )


@app.command()
def config() -> None:
    """Show which storage and queue backends are selected"""
    settings = get_settings()

    table = Table(title="TaskHub configuration")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("Environment", settings.api.environment)
    table.add_row("Listen", f"{settings.api.host}:{settings.api.port}")
    table.add_row("API prefix", settings.api.api_prefix)
    table.add_row(
        "Storage",
        f"mongodb ({settings.storage.database}.{settings.storage.collection})"
        if settings.storage.uses_document_store
        else "memory",
    )
    table.add_row(
        "Events",
        f"redis ({settings.queue.name})" if settings.queue.is_enabled else "noop",
    )
    table.add_row("Response mirroring", "on" if settings.queue.is_enabled else "off")
    console.print(table)


if __name__ == "__main__":
    app()

"""Serve mode: run the FastAPI formulation API under uvicorn."""

import sys

import typer
import uvicorn

from formulab.api.server import create_app
from formulab.config import API_PORT, SESSION_HEADER
from formulab.errors import ConfigurationError

from .shared import console, logger


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Bind host"),
) -> None:
    """Start the HTTP API for generating and saving formulations."""
    log = logger.bind(command="serve", port=port)
    log.info("serve.start")
    try:
        app = create_app()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        log.error("serve.configuration_error", error=str(e))
        raise typer.Exit(1) from e

    console.print(f"[green]Starting formulation API on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: POST /formulations, GET/POST /formulations/saved, POST /inquiries, GET /health[/dim]")
    console.print(f"[dim]Send {SESSION_HEADER} to keep separate sessions per client.[/dim]")
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)

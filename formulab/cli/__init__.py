"""CLI commands: one module per mode (generate, saved, inquire, serve)."""

from typer import Typer

from formulab.cli import (
    generate_mode,
    inquire_mode,
    saved_mode,
    serve_mode,
    validate_config as validate_config_module,
)
from formulab.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Formulation Lab: cosmetic formulation proposals")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(generate_mode.generate)
    app.command()(saved_mode.saved)
    app.command()(saved_mode.show)
    app.command()(saved_mode.delete)
    app.command()(inquire_mode.inquire)
    app.command()(serve_mode.serve)
    app.command(name="validate-config")(validate_config_module.validate_config)


register_commands()

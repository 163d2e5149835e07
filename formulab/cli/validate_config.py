"""Validate agents config: load YAML, resolve models and credentials, print summary table."""

from rich.table import Table

from formulab.agents.registry import get_agent_config, get_all_config, resolve_model_name
from formulab.config import require_model_credentials
from formulab.errors import ConfigurationError

from .shared import console, logger


def validate_config() -> None:
    """Load config/agents.yaml, check sampling settings and model credentials, print summary table."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start")

    try:
        config = get_all_config()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("validate_config.fail", error=str(e))
        raise SystemExit(1) from e

    agents = config.get("agents") or {}

    table = Table(title="Agents config")
    table.add_column("Agent ID", style="cyan")
    table.add_column("Model", style="green")
    table.add_column("temperature", justify="right")
    table.add_column("top_p", justify="right")
    table.add_column("Credential", justify="center")

    errors = []
    for agent_id in sorted(agents):
        merged = get_agent_config(agent_id)
        model = resolve_model_name(agent_id)
        try:
            credential = require_model_credentials(model) or "(none needed)"
        except ConfigurationError as e:
            errors.append(str(e))
            credential = "[red]missing[/red]"
        table.add_row(
            agent_id,
            model,
            str(merged.get("temperature", "-")),
            str(merged.get("top_p", "-")),
            credential,
        )

    console.print(table)
    if errors:
        for msg in errors:
            console.print(f"[red]{msg}[/red]")
        log.error("validate_config.validation_failed", errors=errors)
        raise SystemExit(1)
    console.print(f"[green]Config valid. {len(agents)} agents.[/green]")
    log.info("validate_config.ok", agents=len(agents))

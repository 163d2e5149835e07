"""Shared CLI helpers: console, logger, request loading, formulation rendering, output paths."""

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from formulab.agents.formulation_agent import ensure_ready
from formulab.config import OUTPUT_DIR, SAVED_FORMULATIONS_PATH
from formulab.errors import ConfigurationError
from formulab.models.formulation import Formulation, SavedFormulation
from formulab.models.inquiry import InquiryAction
from formulab.models.request import FormulationRequest
from formulab.store import SavedFormulationStore
from formulab.utils.logger import get_logger

console = Console()
logger = get_logger("formulab.cli")

# Form defaults shown to a new user (email has no default)
DEFAULT_REQUEST_FIELDS: dict[str, Any] = {
    "productName": "エイジングケア美容液",
    "concept": "最先端のペプチド技術と自然由来の成分を融合させた、次世代のエイジングケア体験を提供する美容液。",
    "productType": "美容液",
    "skinTypes": ["乾燥肌", "普通肌"],
    "effects": ["エイジングケア", "保湿"],
    "featuredIngredients": [],
    "includeIngredients": "レチノール, ヒアルロン酸",
    "excludeIngredients": "パラベン, 鉱物油",
    "texture": "さっぱり",
}


def get_store(path: Path | None = None) -> SavedFormulationStore:
    """Return the local saved-formulation store (JSON file under output/)."""
    return SavedFormulationStore(path or SAVED_FORMULATIONS_PATH)


def require_ready() -> str:
    """Check config + credential; exit with a message if anything is missing."""
    try:
        return ensure_ready()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        logger.error("cli.configuration_error", error=str(e))
        raise typer.Exit(1) from e


def load_request_file(path: Path) -> dict[str, Any]:
    """Read request fields from a YAML or JSON file (camelCase or snake_case keys)."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Cannot read request file {path}: {e}[/red]")
        raise typer.Exit(1) from e
    if not isinstance(data, dict):
        console.print(f"[red]Request file {path} must contain a mapping of fields[/red]")
        raise typer.Exit(1)
    return data


def build_request(fields: dict[str, Any]) -> FormulationRequest:
    """Validate merged fields into a FormulationRequest or exit with the validation errors."""
    try:
        return FormulationRequest.model_validate(fields)
    except ValidationError as e:
        console.print("[red]Invalid request:[/red]")
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            console.print(f"  [red]{loc}: {err['msg']}[/red]")
        logger.warning("cli.invalid_request", errors=len(e.errors()))
        raise typer.Exit(1) from e


def write_json_result(formulation: Formulation, path: Path | None = None) -> Path:
    path = path or OUTPUT_DIR / "formulation.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(formulation.model_dump(by_alias=True), f, indent=2, ensure_ascii=False)
    logger.info("results.write_json", path=str(path))
    return path


def phase_table(phase) -> Table:
    table = Table(title=phase.phase_name, title_justify="left")
    table.add_column("成分名", style="white")
    table.add_column("配合率 (%)", justify="right", style="cyan")
    table.add_column("役割", style="green")
    for ing in phase.ingredients:
        table.add_row(ing.name, f"{ing.percentage:.2f}", ing.role)
    return table


def print_formulation(formulation: Formulation) -> None:
    """Render a formulation: header, concept, phase tables, steps, cost/MOQ, notes."""
    console.print(f"\n[bold]{formulation.product_name}[/bold]  [cyan]{formulation.product_type}[/cyan]")
    console.print("\n[bold]コンセプト[/bold]")
    console.print(f"  {formulation.concept}")
    console.print(f"  [dim]{formulation.suitability}[/dim]")

    console.print("\n[bold]処方[/bold]")
    for phase in formulation.phases:
        console.print(phase_table(phase))
    total = formulation.total_percentage
    style = "green" if abs(total - 100) < 0.01 else "yellow"
    console.print(f"  合計: [{style}]{total:.2f}%[/{style}]")

    console.print("\n[bold]製造手順[/bold]")
    for i, step in enumerate(formulation.instructions, 1):
        console.print(f"  {i}. {step}")

    console.print("\n[bold]概算コスト / 最小発注ロット[/bold]")
    console.print(f"  {formulation.estimated_cost} / {formulation.moq}")

    console.print("\n[bold]注記事項[/bold]")
    console.print(f"  {formulation.notes}")

    actions = ", ".join(a.value for a in InquiryAction)
    console.print(f"\n[dim]お問い合わせ ({actions}): formulab inquire <ID> --action <action>[/dim]")


def saved_table(entries: list[SavedFormulation]) -> Table:
    table = Table(title="保存した処方")
    table.add_column("#", style="cyan")
    table.add_column("ID", style="green")
    table.add_column("製品名", style="white")
    table.add_column("保存日時", style="dim")
    for i, entry in enumerate(entries, 1):
        table.add_row(
            str(i),
            entry.id,
            entry.output.product_name,
            entry.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
        )
    return table

"""Saved mode: list, show and delete locally saved formulations."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from .shared import console, get_store, logger, print_formulation, saved_table, write_json_result


def saved() -> None:
    """List saved formulations, newest first."""
    log = logger.bind(command="saved")
    entries = asyncio.run(get_store().list_all())
    log.info("saved.list", count=len(entries))
    if not entries:
        console.print("[dim]保存した処方はありません。[/dim]")
        return
    console.print(saved_table(entries))


def show(
    formulation_id: str = typer.Argument(..., help="ID of a saved formulation"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the formulation JSON here"),
) -> None:
    """Render one saved formulation."""
    log = logger.bind(command="show", formulation_id=formulation_id)
    entry = asyncio.run(get_store().get(formulation_id))
    if entry is None:
        console.print(f"[red]No saved formulation with id {formulation_id}[/red]")
        log.warning("saved.show.not_found")
        raise typer.Exit(1)
    print_formulation(entry.output)
    if output is not None:
        path = write_json_result(entry.output, output)
        console.print(f"\n[green]Wrote {path}[/green]")
    log.info("saved.show", product_name=entry.output.product_name)


def delete(
    formulation_id: str = typer.Argument(..., help="ID of a saved formulation"),
) -> None:
    """Remove a formulation from the saved list."""
    log = logger.bind(command="delete", formulation_id=formulation_id)
    removed = asyncio.run(get_store().delete(formulation_id))
    if not removed:
        console.print(f"[red]No saved formulation with id {formulation_id}[/red]")
        log.warning("saved.delete.not_found")
        raise typer.Exit(1)
    console.print(f"[green]Deleted {formulation_id}[/green]")
    log.info("saved.delete")

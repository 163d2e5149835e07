"""Generate mode: build a request from options and/or a request file, call the model, render the result."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer

from formulab.errors import ConfigurationError, GenerationError
from formulab.models.request import Effect, ProductType, SkinType, Texture
from formulab.session import FormulationSession
from formulab.utils.logger import bind_context, clear_context

from .shared import (
    DEFAULT_REQUEST_FIELDS,
    build_request,
    console,
    get_store,
    load_request_file,
    logger,
    print_formulation,
    require_ready,
    write_json_result,
)


def generate(
    request_file: Optional[Path] = typer.Option(None, "--request", "-r", help="YAML/JSON file with request fields"),
    product_name: Optional[str] = typer.Option(None, "--name", "-n", help="Product name"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Contact email"),
    concept: Optional[str] = typer.Option(None, "--concept", help="Product concept"),
    product_type: Optional[ProductType] = typer.Option(None, "--type", "-t", help="Product type"),
    skin_types: Optional[List[SkinType]] = typer.Option(None, "--skin", "-s", help="Target skin type (repeatable)"),
    effects: Optional[List[Effect]] = typer.Option(None, "--effect", help="Desired effect (repeatable)"),
    featured: Optional[List[str]] = typer.Option(None, "--featured", help="Featured ingredient (repeatable)"),
    include: Optional[str] = typer.Option(None, "--include", help="Ingredients to include (comma separated)"),
    exclude: Optional[str] = typer.Option(None, "--exclude", help="Ingredients to exclude (comma separated)"),
    texture: Optional[Texture] = typer.Option(None, "--texture", help="Texture preference"),
    save: bool = typer.Option(False, "--save", help="Add the result to the saved list"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the formulation JSON here"),
) -> None:
    """Generate a formulation proposal for one request."""
    log = logger.bind(command="generate")
    log.info("generate.start", request_file=str(request_file) if request_file else None)
    model_name = require_ready()

    fields = dict(DEFAULT_REQUEST_FIELDS)
    if request_file is not None:
        fields.update(load_request_file(request_file))
    overrides = {
        "productName": product_name,
        "email": email,
        "concept": concept,
        "productType": product_type,
        "skinTypes": skin_types or None,
        "effects": effects or None,
        "featuredIngredients": featured or None,
        "includeIngredients": include,
        "excludeIngredients": exclude,
        "texture": texture,
    }
    fields.update({k: v for k, v in overrides.items() if v is not None})
    request = build_request(fields)

    session = FormulationSession(request=request, store=get_store())
    console.print(f"[dim]Generating with {model_name}...[/dim]")
    try:
        bind_context(command="generate", product_type=request.product_type.value)
        formulation = asyncio.run(session.submit())
    except (GenerationError, ConfigurationError) as e:
        console.print(f"[red]{session.error}[/red]")
        console.print(f"[dim]{e.error_kind}: {e}[/dim]")
        log.warning("generate.failed", error_kind=e.error_kind)
        raise typer.Exit(1) from e
    finally:
        clear_context()

    print_formulation(formulation)
    if output is not None:
        path = write_json_result(formulation, output)
        console.print(f"\n[green]Wrote {path}[/green]")
    if save:
        entry = asyncio.run(session.save_current())
        console.print(f"[green]Saved as {entry.id}[/green]")
    log.info("generate.complete", product_name=formulation.product_name, saved=save)

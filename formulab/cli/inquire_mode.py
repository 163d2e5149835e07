"""Inquire mode: record a consultation, sample or quote inquiry about a saved formulation."""

import asyncio
from typing import Optional

import typer
from pydantic import ValidationError

from formulab.errors import InquiryError
from formulab.models.inquiry import InquiryAction
from formulab.session import FormulationSession

from .shared import console, get_store, logger


def inquire(
    formulation_id: str = typer.Argument(..., help="ID of the saved formulation the inquiry refers to"),
    action: InquiryAction = typer.Option(InquiryAction.CONSULT, "--action", "-a", help="Inquiry type"),
    company: str = typer.Option(..., "--company", "-c", help="Company name"),
    contact: str = typer.Option(..., "--contact", help="Contact person"),
    email: str = typer.Option(..., "--email", "-e", help="Contact email"),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Message (defaults to a templated one)"),
) -> None:
    """Submit an inquiry. It is logged locally; nothing is sent anywhere."""
    log = logger.bind(command="inquire", formulation_id=formulation_id, action=action.value)
    session = FormulationSession(store=get_store(), session_id="cli")
    entry = asyncio.run(session.select_saved(formulation_id))
    if entry is None:
        console.print(f"[red]No saved formulation with id {formulation_id}[/red]")
        log.warning("inquire.not_found")
        raise typer.Exit(1)

    try:
        details = session.submit_inquiry(
            action,
            company_name=company,
            contact_name=contact,
            message=message,
            email=email,
        )
    except InquiryError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    except ValidationError as e:
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            console.print(f"[red]{loc}: {err['msg']}[/red]")
        log.warning("inquire.invalid", errors=len(e.errors()))
        raise typer.Exit(1) from e

    console.print(f"[bold]{action.title}[/bold]")
    console.print(f"  製品名: {details.product_name}")
    console.print(f"  会社名: {details.company_name} / ご担当者: {details.contact_name} <{details.email}>")
    console.print(f"  メッセージ: {details.message}")
    console.print("[green]お問い合わせを受け付けました。[/green]")

"""Formulation API routes: generate, session state, saved list, inquiries, form options."""

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from formulab.api.models import GenerationFailure, InquiryBody
from formulab.config import SESSION_HEADER
from formulab.errors import ConfigurationError, GenerationError, GenerationInProgressError, InquiryError
from formulab.models.formulation import Formulation, SavedFormulation
from formulab.models.inquiry import InquiryAction
from formulab.models.request import Effect, FormulationRequest, ProductType, SkinType, Texture
from formulab.session import FormulationSession

router = APIRouter(tags=["formulations"])


def _session_for(request: Request) -> FormulationSession:
    """Return (creating on first use) the session named by the session header."""
    session_id = (request.headers.get(SESSION_HEADER) or "default").strip() or "default"
    return request.app.state.sessions.get_or_create(session_id)


@router.get("/options")
async def form_options() -> dict[str, list[str]]:
    """Closed option sets for the request form widgets."""
    return {
        "productTypes": [m.value for m in ProductType],
        "skinTypes": [m.value for m in SkinType],
        "effects": [m.value for m in Effect],
        "textures": [m.value for m in Texture],
        "inquiryActions": [m.value for m in InquiryAction],
    }


@router.post(
    "/formulations",
    response_model=Formulation,
    responses={409: {"description": "Generation already in flight"}, 502: {"model": GenerationFailure}},
)
async def create_formulation(body: FormulationRequest, request: Request) -> Any:
    """Generate a formulation for the submitted request (one model call)."""
    session = _session_for(request)
    try:
        return await session.submit(body)
    except GenerationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except (GenerationError, ConfigurationError) as e:
        return JSONResponse(
            status_code=502,
            content=GenerationFailure(detail=session.error or str(e), error_kind=e.error_kind).model_dump(),
        )


@router.get("/formulations/current")
async def current_state(request: Request) -> dict[str, Any]:
    """Loading flag, error and current formulation of the caller's session."""
    return _session_for(request).state()


@router.post("/formulations/saved", response_model=SavedFormulation, status_code=201)
async def save_current(request: Request) -> SavedFormulation:
    session = _session_for(request)
    try:
        return await session.save_current()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get("/formulations/saved", response_model=list[SavedFormulation])
async def list_saved(request: Request) -> list[SavedFormulation]:
    return await _session_for(request).list_saved()


@router.get("/formulations/saved/{formulation_id}", response_model=SavedFormulation)
async def select_saved(formulation_id: str, request: Request) -> SavedFormulation:
    """Load a saved formulation and make it the session's current one."""
    entry = await _session_for(request).select_saved(formulation_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Unknown saved formulation: {formulation_id!r}")
    return entry


@router.delete("/formulations/saved/{formulation_id}")
async def delete_saved(formulation_id: str, request: Request) -> dict[str, str]:
    if not await _session_for(request).delete_saved(formulation_id):
        raise HTTPException(status_code=404, detail=f"Unknown saved formulation: {formulation_id!r}")
    return {"deleted": formulation_id}


@router.post("/inquiries", status_code=202)
async def submit_inquiry(body: InquiryBody, request: Request) -> dict[str, str]:
    """Accept a consult / sample / quote inquiry. Logged only; nothing is sent."""
    session = _session_for(request)
    try:
        details = session.submit_inquiry(
            body.action,
            company_name=body.company_name,
            contact_name=body.contact_name,
            message=body.message,
            email=body.email,
        )
    except InquiryError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return {"status": "logged", "title": details.action.title, "message": details.message}

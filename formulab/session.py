"""Presentation-side session state: request, loading flag, error, result, saved list, inquiries.

The session is the boundary between a UI (CLI, HTTP API) and the generation
client. It owns the replace-on-change discipline for the request and
guarantees the loading flag is reset whatever the outcome.
"""

import asyncio
from typing import Any

from formulab.agents.formulation_agent import FormulationGenerator, generate_formulation
from formulab.errors import ConfigurationError, GenerationError, GenerationInProgressError, InquiryError
from formulab.models.formulation import Formulation, SavedFormulation
from formulab.models.inquiry import InquiryAction, InquiryDetails, default_inquiry_message
from formulab.models.request import FormulationRequest
from formulab.store import SavedFormulationStore
from formulab.utils.logger import get_logger

logger = get_logger("formulab.session")

GENERATION_FAILED_MESSAGE = "処方の生成中にエラーが発生しました。入力内容を確認し、再度お試しください。"


class FormulationSession:
    """One user's generation state. At most one generation is in flight at a time."""

    def __init__(
        self,
        request: FormulationRequest | None = None,
        generator: FormulationGenerator = generate_formulation,
        store: SavedFormulationStore | None = None,
        session_id: str = "default",
    ):
        self.session_id = session_id
        self._request = request
        self._generator = generator
        self._store = store if store is not None else SavedFormulationStore()
        self._lock = asyncio.Lock()
        self.is_loading = False
        self.error: str | None = None
        self.error_kind: str | None = None
        self.formulation: Formulation | None = None
        self.current_saved_id: str | None = None

    @property
    def request(self) -> FormulationRequest | None:
        return self._request

    def set_request(self, request: FormulationRequest) -> FormulationRequest:
        """Replace the request wholesale."""
        self._request = request
        return request

    def update_request(self, **changes: Any) -> FormulationRequest:
        """Apply field changes by building a new request; the previous value is left untouched."""
        if self._request is None:
            raise ValueError("No request to update; call set_request first")
        self._request = self._request.with_changes(**changes)
        return self._request

    async def submit(self, request: FormulationRequest | None = None) -> Formulation:
        """Run one generation for ``request`` (or the current request).

        Raises GenerationInProgressError if a generation is already running. A
        GenerationError or ConfigurationError is recorded on the session, then re-raised.
        """
        if self._lock.locked():
            logger.warning("session.submit.rejected_in_flight", session_id=self.session_id)
            raise GenerationInProgressError("A formulation is already being generated for this session")
        if request is not None:
            self._request = request
        if self._request is None:
            raise ValueError("No request to submit")

        async with self._lock:
            self.is_loading = True
            self.error = None
            self.error_kind = None
            self.formulation = None
            self.current_saved_id = None
            try:
                self.formulation = await self._generator(self._request)
            except (GenerationError, ConfigurationError) as e:
                self.error = GENERATION_FAILED_MESSAGE
                self.error_kind = e.error_kind
                logger.error(
                    "session.submit.failed",
                    session_id=self.session_id,
                    error_kind=e.error_kind,
                    error=str(e),
                )
                raise
            finally:
                self.is_loading = False
        logger.info("session.submit.complete", session_id=self.session_id)
        return self.formulation

    async def save_current(self) -> SavedFormulation:
        if self.formulation is None:
            raise ValueError("No formulation to save")
        entry = await self._store.add(self.formulation)
        self.current_saved_id = entry.id
        return entry

    async def list_saved(self) -> list[SavedFormulation]:
        return await self._store.list_all()

    async def select_saved(self, formulation_id: str) -> SavedFormulation | None:
        """Make a saved formulation the current one. Returns None if the id is unknown."""
        entry = await self._store.get(formulation_id)
        if entry is None:
            return None
        self.formulation = entry.output
        self.current_saved_id = entry.id
        self.error = None
        self.error_kind = None
        return entry

    async def delete_saved(self, formulation_id: str) -> bool:
        removed = await self._store.delete(formulation_id)
        if removed and self.current_saved_id == formulation_id:
            self.current_saved_id = None
        return removed

    def submit_inquiry(
        self,
        action: InquiryAction,
        company_name: str,
        contact_name: str,
        message: str | None = None,
        email: str | None = None,
    ) -> InquiryDetails:
        """Accept an inquiry about the current formulation. Logged only; nothing is transmitted.

        The contact email defaults to the one on the current request.
        """
        if self.formulation is None:
            raise InquiryError("An inquiry needs a generated formulation to refer to")
        if email is None and self._request is None:
            raise InquiryError("An inquiry needs a contact email")
        product_name = self.formulation.product_name
        details = InquiryDetails(
            action=action,
            product_name=product_name,
            company_name=company_name,
            contact_name=contact_name,
            email=email if email is not None else self._request.email,
            message=message if message else default_inquiry_message(product_name, action),
        )
        logger.info(
            "inquiry.submitted",
            session_id=self.session_id,
            action=action.value,
            title=action.title,
            inquiry=details.model_dump(mode="json"),
        )
        return details

    def state(self) -> dict[str, Any]:
        """Snapshot for rendering: loading flag, error, current formulation."""
        return {
            "session_id": self.session_id,
            "is_loading": self.is_loading,
            "error": self.error,
            "error_kind": self.error_kind,
            "current_saved_id": self.current_saved_id,
            "formulation": self.formulation.model_dump(by_alias=True) if self.formulation else None,
        }

"""FastAPI server exposing formulation generation to a browser or other UI."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from formulab.agents.formulation_agent import FormulationGenerator, ensure_ready, generate_formulation
from formulab.api.routes import router as formulation_router
from formulab.api.sessions import SessionRegistry
from formulab.config import MAX_SESSIONS, SAVED_FORMULATIONS_PATH
from formulab.session import FormulationSession
from formulab.store import SavedFormulationStore
from formulab.utils.logger import get_logger

logger = get_logger("formulab.api.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    logger.info("api.lifespan.start", sessions=len(app.state.sessions))
    yield
    in_flight = [sid for sid, s in app.state.sessions.items() if s.is_loading]
    logger.info("api.lifespan.stop", sessions=len(app.state.sessions), in_flight=in_flight)


def create_app(
    generator: FormulationGenerator | None = None,
    store: SavedFormulationStore | None = None,
    max_sessions: int = MAX_SESSIONS,
) -> FastAPI:
    """
    Create FastAPI app.

    When no generator is passed, the model credential is checked here (ConfigurationError
    if missing) and the real generation client is used. Tests inject a fake generator.
    """
    if generator is None:
        model_name = ensure_ready()
        logger.info("api.model_ready", model=model_name)
        generator = generate_formulation

    app = FastAPI(title="Formulation Lab", version="0.1.0", lifespan=_lifespan)
    app.state.generator = generator
    app.state.store = store if store is not None else SavedFormulationStore(SAVED_FORMULATIONS_PATH)
    app.state.sessions = SessionRegistry(
        lambda session_id: FormulationSession(
            generator=app.state.generator,
            store=app.state.store,
            session_id=session_id,
        ),
        max_sessions=max_sessions,
    )

    app.include_router(formulation_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app

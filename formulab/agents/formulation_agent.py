"""Formulation agent: one prompt -> one model call -> validated Formulation."""

from collections.abc import Awaitable, Callable
from time import perf_counter

from opentelemetry.trace import Status, StatusCode
from pydantic_ai import Agent
from pydantic_ai.models import Model

from formulab.agents.prompt_builder import build_prompt
from formulab.agents.registry import build_agent, get_agent, resolve_model_name
from formulab.agents.schema import parse_formulation, schema_instructions
from formulab.config import require_model_credentials
from formulab.errors import ConfigurationError, SchemaViolationError, TransportError
from formulab.models.formulation import Formulation
from formulab.models.request import FormulationRequest
from formulab.utils.logger import get_logger, log_step
from formulab.utils.observability import (
    formulation_summary,
    request_summary,
    set_span_output,
    span_attributes_for_step,
)
from formulab.utils.tracing import get_tracer

logger = get_logger("formulab.agents.formulation")

FORMULATION_AGENT_ID = "formulation"

FormulationGenerator = Callable[[FormulationRequest], Awaitable[Formulation]]


def ensure_ready() -> str:
    """Check agent config and the model credential before any request is built.

    Returns the resolved model name; raises ConfigurationError otherwise.
    """
    try:
        model_name = resolve_model_name(FORMULATION_AGENT_ID)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigurationError(str(e)) from e
    require_model_credentials(model_name)
    return model_name


def _resolve_agent(model: Model | str | None) -> Agent:
    try:
        if model is None:
            return get_agent(FORMULATION_AGENT_ID, extra_instructions=schema_instructions())
        return build_agent(FORMULATION_AGENT_ID, extra_instructions=schema_instructions(), model=model)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigurationError(str(e)) from e


async def generate_formulation(
    request: FormulationRequest,
    model: Model | str | None = None,
) -> Formulation:
    """Generate a formulation for ``request``.

    Exactly one model call per invocation: no retry, no caching. Identical requests
    issue independent calls and may return different results.

    Raises:
        TransportError: the model call failed.
        SchemaViolationError: the reply is not JSON or does not match the schema.
    """
    tracer = get_tracer()
    summary = request_summary(request)
    log = logger.bind(product_type=summary["product_type"])
    log.info("formulation.generate.start", request=summary)

    prompt = build_prompt(request)
    log_step("formulation_agent", "formulation.prompt_built", {"prompt_chars": len(prompt)})
    agent = _resolve_agent(model)
    start = perf_counter()

    with tracer.start_as_current_span(
        "formulation.generate",
        attributes=span_attributes_for_step("CHAIN", summary),
    ) as span:
        try:
            result = await agent.run(prompt)
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            log.error(
                "formulation.generate.transport_error",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((perf_counter() - start) * 1000),
            )
            raise TransportError(f"Model call failed: {e}") from e

        raw_text = result.output
        try:
            formulation = parse_formulation(raw_text)
        except SchemaViolationError as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            log.warning(
                "formulation.generate.schema_violation",
                violations=e.violations[:10],
                raw_length=len(raw_text or ""),
            )
            raise

        out_summary = formulation_summary(formulation)
        set_span_output(span, out_summary)

    log.info(
        "formulation.generate.complete",
        duration_ms=round((perf_counter() - start) * 1000),
        **out_summary,
    )
    return formulation

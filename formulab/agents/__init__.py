"""Pydantic AI agents for formulation generation."""

from formulab.agents.registry import (
    build_agent,
    get_agent,
    get_agent_config,
    get_all_config,
    reload_config,
)
from formulab.agents.prompt_builder import NONE_SPECIFIED, build_prompt
from formulab.agents.schema import (
    FORMULATION_RESPONSE_SCHEMA,
    parse_formulation,
    strip_code_fences,
    validate_formulation_payload,
)
from formulab.agents.formulation_agent import (
    FORMULATION_AGENT_ID,
    FormulationGenerator,
    ensure_ready,
    generate_formulation,
)

__all__ = [
    "build_agent",
    "get_agent",
    "get_agent_config",
    "get_all_config",
    "reload_config",
    "NONE_SPECIFIED",
    "build_prompt",
    "FORMULATION_RESPONSE_SCHEMA",
    "parse_formulation",
    "strip_code_fences",
    "validate_formulation_payload",
    "FORMULATION_AGENT_ID",
    "FormulationGenerator",
    "ensure_ready",
    "generate_formulation",
]

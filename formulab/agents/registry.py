"""Agent registry: loads config from YAML, creates and caches Pydantic AI agents."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic_ai import Agent
from pydantic_ai.models import Model

from formulab.config import FORMULATION_MODEL, PROJECT_ROOT, model_provider
from formulab.utils.logger import get_logger

logger = get_logger("formulab.agents.registry")

_CONFIG_PATH = PROJECT_ROOT / "config" / "agents.yaml"
_config: dict[str, Any] | None = None
_agent_cache: dict[tuple[str, type, str | None], Agent] = {}


def _get_config_path() -> Path:
    raw = os.environ.get("AGENTS_CONFIG_PATH", "").strip()
    if raw:
        return Path(raw)
    return _CONFIG_PATH


def _load_config() -> dict[str, Any]:
    global _config
    if _config is not None:
        return _config
    path = _get_config_path()
    if not path.exists():
        raise FileNotFoundError(
            f"Agents config not found: {path}. Set AGENTS_CONFIG_PATH or create config/agents.yaml."
        )
    try:
        raw = path.read_text(encoding="utf-8")
        config = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in agents config {path}: {e}") from e
    if not isinstance(config, dict):
        raise ValueError(f"Agents config must be a YAML object (dict), got {type(config)}")
    _validate_config(config)
    _config = config
    logger.info(
        "agent_registry.config_loaded",
        path=str(path),
        agent_count=len(config.get("agents", {})),
    )
    return _config


def _validate_config(config: dict[str, Any]) -> None:
    """Validate that every agent has a system prompt and numeric sampling settings."""
    agents = config.get("agents") or {}
    if not isinstance(agents, dict) or not agents:
        raise ValueError("Agents config must define at least one agent under 'agents'")
    for agent_id, agent_cfg in agents.items():
        if not isinstance(agent_cfg, dict):
            raise ValueError(f"Agent {agent_id!r} must be a dict")
        prompt = agent_cfg.get("system_prompt")
        if not prompt or not isinstance(prompt, str):
            raise ValueError(f"Agent {agent_id!r} must have a non-empty system_prompt string")
        for key in ("temperature", "top_p"):
            value = agent_cfg.get(key)
            if value is not None and not isinstance(value, (int, float)):
                raise ValueError(f"Agent {agent_id!r}: {key} must be a number, got {value!r}")


def reload_config() -> dict[str, Any]:
    """Force-reload config from disk and clear agent cache."""
    global _config
    _config = None
    _agent_cache.clear()
    return _load_config()


def get_agent_config(agent_id: str) -> dict[str, Any]:
    """Return merged config (defaults + per-agent overrides) for an agent."""
    config = _load_config()
    defaults = config.get("defaults") or {}
    agent_cfg = (config.get("agents") or {}).get(agent_id)
    if agent_cfg is None:
        raise ValueError(f"Unknown agent {agent_id!r}. Known: {list((config.get('agents') or {}))}")
    return {**defaults, **agent_cfg}


def get_all_config() -> dict[str, Any]:
    """Return the full parsed config."""
    return dict(_load_config())


def resolve_model_name(agent_id: str) -> str:
    """Model string for an agent: FORMULATION_MODEL env wins over the YAML value."""
    cfg = get_agent_config(agent_id)
    return FORMULATION_MODEL or cfg.get("model", "openai:gpt-4o-mini")


def build_model_settings(agent_id: str) -> dict[str, Any]:
    """Sampling and response-format settings for an agent."""
    cfg = get_agent_config(agent_id)
    model_settings: dict[str, Any] = {}
    if cfg.get("temperature") is not None:
        model_settings["temperature"] = cfg["temperature"]
    if cfg.get("top_p") is not None:
        model_settings["top_p"] = cfg["top_p"]
    if cfg.get("max_tokens") is not None:
        model_settings["max_tokens"] = cfg["max_tokens"]
    # JSON mode is requested through the OpenAI response_format body field; other
    # providers rely on the schema in the system prompt (see config/agents.yaml)
    if cfg.get("json_response") and model_provider(resolve_model_name(agent_id)) == "openai":
        model_settings["extra_body"] = {"response_format": {"type": "json_object"}}
    return model_settings


def build_agent(
    agent_id: str,
    output_type: type = str,
    extra_instructions: str | None = None,
    model: Model | str | None = None,
) -> Agent:
    """Create a new (uncached) Pydantic AI Agent for agent_id."""
    cfg = get_agent_config(agent_id)
    system_prompt = cfg["system_prompt"].strip()
    if extra_instructions:
        system_prompt = f"{system_prompt}\n\n{extra_instructions}"
    model_settings = build_model_settings(agent_id)
    return Agent(
        model=model or resolve_model_name(agent_id),
        output_type=output_type,
        system_prompt=system_prompt,
        name=agent_id,
        retries=cfg.get("retries", 0),
        **({"model_settings": model_settings} if model_settings else {}),
    )


def get_agent(agent_id: str, output_type: type = str, extra_instructions: str | None = None) -> Agent:
    """Get or create the configured Agent. Cached per (agent_id, output_type, extra_instructions)."""
    key = (agent_id, output_type, extra_instructions)
    if key in _agent_cache:
        return _agent_cache[key]
    agent = build_agent(agent_id, output_type=output_type, extra_instructions=extra_instructions)
    _agent_cache[key] = agent
    return agent

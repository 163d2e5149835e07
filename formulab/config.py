"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

from formulab.errors import ConfigurationError

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
OUTPUT_DIR = Path(os.getenv("FORMULAB_OUTPUT_DIR", str(PROJECT_ROOT / "output")))
SAVED_FORMULATIONS_PATH = Path(
    os.getenv("SAVED_FORMULATIONS_PATH", str(OUTPUT_DIR / "saved_formulations.json"))
)

# Ensure directories exist
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Model (overrides the model named in config/agents.yaml when set)
FORMULATION_MODEL = os.getenv("FORMULATION_MODEL", "").strip()

# Credential variables per pydantic-ai provider prefix
MODEL_CREDENTIAL_ENV: dict[str, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "google-gla": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    "anthropic": ("ANTHROPIC_API_KEY",),
}

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Phoenix / OpenTelemetry
PHOENIX_ENABLED = os.getenv("PHOENIX_ENABLED", "false").lower() == "true"
PHOENIX_COLLECTOR_ENDPOINT = os.getenv(
    "PHOENIX_COLLECTOR_ENDPOINT",
    "http://localhost:6006/v1/traces",
)
PHOENIX_PROJECT_NAME = os.getenv("PHOENIX_PROJECT_NAME", "formulab")
PHOENIX_API_KEY = os.getenv("PHOENIX_API_KEY", "")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# HTTP API
API_PORT = int(os.getenv("API_PORT", "8000"))
SESSION_HEADER = os.getenv("SESSION_HEADER", "X-Session-Id")
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "1000"))


def model_provider(model: str) -> str:
    """Return the provider prefix of a pydantic-ai model string ("openai:gpt-4o-mini" -> "openai")."""
    return model.split(":", 1)[0].strip().lower() if ":" in model else ""


def require_model_credentials(model: str) -> str:
    """Return the name of the env variable holding the credential for ``model``.

    Raises ConfigurationError when the provider needs a credential and none is set.
    Providers without a known credential variable (e.g. "test") pass through.
    """
    provider = model_provider(model)
    names = MODEL_CREDENTIAL_ENV.get(provider)
    if not names:
        return ""
    for name in names:
        if os.getenv(name, "").strip():
            return name
    raise ConfigurationError(
        f"Missing API credential for model {model!r}: set {' or '.join(names)}"
    )

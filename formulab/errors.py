"""Error taxonomy for formulation generation."""


class FormulabError(Exception):
    """Base class for all formulab errors."""


class ConfigurationError(FormulabError):
    """Required configuration (e.g. the model API credential) is missing or invalid."""

    error_kind = "configuration"


class GenerationError(FormulabError):
    """A generation cycle failed; no partial result is available."""

    error_kind = "generation"


class TransportError(GenerationError):
    """The outbound call to the model failed (network, auth, quota)."""

    error_kind = "transport"


class SchemaViolationError(GenerationError):
    """The model reply was not valid JSON or did not conform to the response schema."""

    error_kind = "schema_violation"

    def __init__(self, message: str, violations: list[str] | None = None, raw_text: str | None = None):
        super().__init__(message)
        self.violations = violations or []
        self.raw_text = raw_text


class GenerationInProgressError(FormulabError):
    """A generation is already in flight for this session."""


class InquiryError(FormulabError):
    """An inquiry could not be accepted (e.g. no formulation to refer to)."""

"""Response schema for the formulation model and the parser that enforces it."""

import json
import re
from typing import Any

from pydantic import ValidationError

from formulab.errors import SchemaViolationError
from formulab.models.formulation import Formulation

# JSON Schema sent to the model; the pydantic model is the single source of truth
FORMULATION_RESPONSE_SCHEMA: dict[str, Any] = Formulation.model_json_schema()

_LEADING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?```$")


def strip_code_fences(text: str) -> str:
    """Remove one leading ```lang fence and one trailing ``` fence, if present.

    Best effort only: the result is still parsed and validated by the caller.
    """
    cleaned = (text or "").strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _format_violations(error: ValidationError) -> list[str]:
    out = []
    for err in error.errors():
        path = ".".join(str(p) for p in err["loc"]) or "(root)"
        out.append(f"{path}: {err['msg']}")
    return out


def validate_formulation_payload(data: Any, raw_text: str | None = None) -> Formulation:
    """Validate already-decoded JSON against the schema, recursing into phases and ingredients."""
    try:
        return Formulation.model_validate(data)
    except ValidationError as e:
        violations = _format_violations(e)
        raise SchemaViolationError(
            f"Model reply does not match the formulation schema ({len(violations)} violation(s))",
            violations=violations,
            raw_text=raw_text,
        ) from e


def parse_formulation(text: str) -> Formulation:
    """Strip fences, decode JSON and validate it as a Formulation."""
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise SchemaViolationError(
            f"Model reply is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            violations=[f"(root): {e.msg}"],
            raw_text=text,
        ) from e
    return validate_formulation_payload(data, raw_text=text)


def schema_instructions() -> str:
    """Instruction block appended to the system prompt describing the required output shape."""
    schema_json = json.dumps(FORMULATION_RESPONSE_SCHEMA, ensure_ascii=False, indent=2)
    return (
        "出力は次のJSON Schemaに厳密に従うJSONオブジェクトのみとしてください。"
        "前後に説明文やコードブロックを付けないでください。\n"
        f"{schema_json}"
    )

"""Reusable helpers for observability: span attributes and PII-free request/result summaries."""

import json
from typing import Any

from openinference.semconv.trace import OpenInferenceSpanKindValues, SpanAttributes

from formulab.models.formulation import Formulation
from formulab.models.request import FormulationRequest


def span_attributes_for_step(
    openinference_kind: str,
    input_summary: dict[str, Any] | str | None = None,
) -> dict[str, Any]:
    """Build span attributes for Phoenix: OpenInference kind and input.value.

    Args:
        openinference_kind: One of CHAIN, TOOL, AGENT (OpenInferenceSpanKindValues).
        input_summary: Dict or JSON string for input.value.
    """
    kind_val = getattr(OpenInferenceSpanKindValues, openinference_kind, None)
    attrs: dict[str, Any] = {
        SpanAttributes.OPENINFERENCE_SPAN_KIND: kind_val.value if kind_val is not None else openinference_kind,
    }
    if input_summary is not None:
        attrs[SpanAttributes.INPUT_VALUE] = (
            input_summary if isinstance(input_summary, str) else json.dumps(input_summary, ensure_ascii=False)
        )
        attrs[SpanAttributes.INPUT_MIME_TYPE] = "application/json"
    return attrs


def set_span_output(span: Any, output_summary: dict[str, Any] | str) -> None:
    """Set output.value (and mime_type) on an existing span."""
    s = output_summary if isinstance(output_summary, str) else json.dumps(output_summary, ensure_ascii=False)
    span.set_attribute(SpanAttributes.OUTPUT_VALUE, s)
    span.set_attribute(SpanAttributes.OUTPUT_MIME_TYPE, "application/json")


def request_summary(request: FormulationRequest) -> dict[str, Any]:
    """Request fields safe to log and trace (no contact email, no free-text concept)."""
    return {
        "product_type": request.product_type.value,
        "texture": request.texture.value,
        "skin_types": [s.value for s in request.skin_types],
        "effects": [e.value for e in request.effects],
        "featured_count": len(request.featured_ingredients),
    }


def formulation_summary(formulation: Formulation) -> dict[str, Any]:
    return {
        "product_name": formulation.product_name,
        "phase_count": len(formulation.phases),
        "ingredient_count": formulation.ingredient_count,
        "total_percentage": round(formulation.total_percentage, 2),
        "step_count": len(formulation.instructions),
    }

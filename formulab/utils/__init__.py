"""Utility modules."""

from formulab.utils.logger import bind_context, clear_context, get_logger, log_step
from formulab.utils.observability import formulation_summary, request_summary
from formulab.utils.tracing import get_tracer, init_tracing, shutdown_tracing

__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "log_step",
    "formulation_summary",
    "request_summary",
    "get_tracer",
    "init_tracing",
    "shutdown_tracing",
]

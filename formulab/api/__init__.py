"""HTTP API for formulation generation."""

from formulab.api.models import GenerationFailure, InquiryBody
from formulab.api.server import create_app

__all__ = [
    "GenerationFailure",
    "InquiryBody",
    "create_app",
]

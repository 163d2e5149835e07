"""Pydantic models for formulation requests, results and inquiries."""

from formulab.models.request import (
    Effect,
    FormulationRequest,
    ProductType,
    SkinType,
    Texture,
)
from formulab.models.formulation import (
    Formulation,
    Ingredient,
    Phase,
    SavedFormulation,
)
from formulab.models.inquiry import (
    INQUIRY_TITLES,
    InquiryAction,
    InquiryDetails,
    default_inquiry_message,
)

__all__ = [
    "Effect",
    "FormulationRequest",
    "ProductType",
    "SkinType",
    "Texture",
    "Formulation",
    "Ingredient",
    "Phase",
    "SavedFormulation",
    "INQUIRY_TITLES",
    "InquiryAction",
    "InquiryDetails",
    "default_inquiry_message",
]

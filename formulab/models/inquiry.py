"""Inquiry (lead capture) models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class InquiryAction(str, Enum):
    """Follow-up actions offered next to a generated formulation."""

    CONSULT = "相談"
    SAMPLE_REQUEST = "サンプル依頼"
    DETAILED_QUOTE = "詳細見積もり"

    @property
    def title(self) -> str:
        return INQUIRY_TITLES[self]


INQUIRY_TITLES: dict[InquiryAction, str] = {
    InquiryAction.CONSULT: "ご相談フォーム",
    InquiryAction.SAMPLE_REQUEST: "サンプル作成依頼",
    InquiryAction.DETAILED_QUOTE: "詳細お見積もり依頼",
}


def default_inquiry_message(product_name: str, action: InquiryAction) -> str:
    """Prefilled message body for the inquiry form."""
    return f"製品名「{product_name}」について、{action.value}を希望します。"


class InquiryDetails(BaseModel):
    """One inquiry submission. Ephemeral: logged, never persisted or transmitted."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    action: InquiryAction
    product_name: str
    company_name: str = Field(min_length=1)
    contact_name: str = Field(min_length=1)
    email: EmailStr
    message: str = ""

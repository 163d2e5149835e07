"""Request/response bodies for the HTTP API."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from formulab.models.inquiry import InquiryAction


class InquiryBody(BaseModel):
    """Inquiry form submission; the email defaults to the one on the session's request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    action: InquiryAction
    company_name: str = Field(min_length=1)
    contact_name: str = Field(min_length=1)
    message: str | None = None
    email: EmailStr | None = None


class GenerationFailure(BaseModel):
    """502 body: the generic user message plus the failure class."""

    detail: str
    error_kind: str

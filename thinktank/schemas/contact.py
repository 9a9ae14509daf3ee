"""
Contact form schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from thinktank.kernel.models.contact import InquiryType, SubmissionStatus


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    subject: str = Field(..., min_length=1, max_length=256)
    message: str = Field(..., min_length=10, max_length=10000)
    inquiry_type: InquiryType = InquiryType.GENERAL

    @field_validator("name", "subject")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class ContactStatusUpdate(BaseModel):
    status: SubmissionStatus


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str]
    subject: str
    message: str
    inquiry_type: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ContactAccepted(BaseModel):
    """Public acknowledgement; the stored record is not echoed back."""

    id: int
    status: str = "new"
    message: str = "Thank you for contacting us. We will respond shortly."

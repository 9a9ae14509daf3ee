"""
Membership schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from thinktank.kernel.models.membership import MembershipStatus


class MembershipTypeCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    benefits: Optional[str] = Field(None, max_length=1000)
    requires_approval: bool = True


class MembershipTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    benefits: Optional[str] = Field(None, max_length=1000)
    requires_approval: Optional[bool] = None


class MembershipTypeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    benefits: Optional[str]
    requires_approval: bool

    class Config:
        from_attributes = True


class MembershipApply(BaseModel):
    membership_type_id: int


class MembershipStatusUpdate(BaseModel):
    status: MembershipStatus


class MembershipResponse(BaseModel):
    id: int
    user_id: str
    membership_type_id: int
    status: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True

"""
Partner and team directory schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

from thinktank.kernel.models.directory import PartnerCategory, TeamMemberCategory


class PartnerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    category: PartnerCategory
    display_order: int = 0
    show_on_website: bool = True


class PartnerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    category: Optional[PartnerCategory] = None
    display_order: Optional[int] = None
    show_on_website: Optional[bool] = None


class PartnerResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    logo_url: Optional[str]
    website: Optional[str]
    category: str
    display_order: int
    show_on_website: bool

    class Config:
        from_attributes = True


class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    role: str = Field(..., min_length=1, max_length=256)
    bio: Optional[str] = None
    image_url: Optional[str] = None
    category: TeamMemberCategory
    display_order: int = 0
    show_on_website: bool = True


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    role: Optional[str] = Field(None, min_length=1, max_length=256)
    bio: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[TeamMemberCategory] = None
    display_order: Optional[int] = None
    show_on_website: Optional[bool] = None


class TeamMemberResponse(BaseModel):
    id: int
    name: str
    role: str
    bio: Optional[str]
    image_url: Optional[str]
    category: str
    display_order: int
    show_on_website: bool

    class Config:
        from_attributes = True

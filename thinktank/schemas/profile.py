"""
Profile schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ProfileUpdate(BaseModel):
    """Self-service profile edit."""

    name: Optional[str] = Field(None, min_length=1, max_length=256)
    position: Optional[str] = Field(None, max_length=256)
    bio: Optional[str] = Field(None, max_length=5000)


class ProfileResponse(BaseModel):
    """Profile as seen by its owner or an admin."""

    id: str
    name: Optional[str]
    email: Optional[str] = None
    position: Optional[str]
    bio: Optional[str]
    avatar_url: Optional[str]
    is_team_member: bool
    team_role: Optional[str] = None
    show_on_website: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PublicProfileResponse(BaseModel):
    """Team profile shown on the website."""

    id: str
    name: Optional[str]
    position: Optional[str]
    bio: Optional[str]
    avatar_url: Optional[str]
    team_role: Optional[str] = None

    class Config:
        from_attributes = True


class AdminProfileCreate(BaseModel):
    """Admin creates a profile ahead of first sign-in."""

    id: str = Field(..., min_length=1, max_length=255, description="Identity provider user id")
    name: Optional[str] = Field(None, max_length=256)
    email: Optional[EmailStr] = None
    position: Optional[str] = Field(None, max_length=256)
    bio: Optional[str] = None
    is_team_member: bool = False
    team_role: Optional[str] = Field(None, max_length=256)
    show_on_website: bool = False


class AdminProfileUpdate(BaseModel):
    """Team flag, role and directory visibility."""

    is_team_member: Optional[bool] = None
    team_role: Optional[str] = Field(None, max_length=256)
    show_on_website: Optional[bool] = None


class AdminCheckResponse(BaseModel):
    is_admin: bool
    profile_id: Optional[str] = None

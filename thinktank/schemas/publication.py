"""
Lifecycle content schemas: publications, policies, case studies, taxonomy
and moderation requests.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from thinktank.kernel.models.policy import PolicyCategory
from thinktank.kernel.models.publication import ContentStatus, PublicationType


# ---------------------------------------------------------------------------
# Publications
# ---------------------------------------------------------------------------

class PublicationCreate(BaseModel):
    """
    Member submission. Drafts may be incomplete; title and content are
    required once the draft is submitted for review.
    """

    title: str = Field("", max_length=256)
    content: str = ""
    type: PublicationType
    abstract: Optional[str] = Field(None, max_length=1000)
    pdf_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category_id: Optional[int] = None
    tag_id: Optional[int] = None
    submit: bool = Field(False, description="Submit for review immediately")


class PublicationUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=256)
    content: Optional[str] = None
    type: Optional[PublicationType] = None
    abstract: Optional[str] = Field(None, max_length=1000)
    pdf_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category_id: Optional[int] = None
    tag_id: Optional[int] = None


class AdminPublicationCreate(PublicationCreate):
    """Direct authoring, optionally on behalf of another profile."""

    author_id: Optional[str] = None
    status: ContentStatus = ContentStatus.DRAFT
    featured_order: Optional[int] = None


class PublicationResponse(BaseModel):
    id: int
    slug: str
    title: str
    abstract: Optional[str]
    content: str
    type: str
    status: str
    author_id: Optional[str]
    pdf_url: Optional[str]
    thumbnail_url: Optional[str]
    category_id: Optional[int]
    tag_id: Optional[int]
    featured_order: Optional[int] = None
    rejection_reason: Optional[str] = None
    rejection_details: Optional[str] = None
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PublicationSummary(BaseModel):
    """List item without the body."""

    id: int
    slug: str
    title: str
    abstract: Optional[str]
    type: str
    status: str
    author_id: Optional[str]
    thumbnail_url: Optional[str]
    published_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------

class ApproveRequest(BaseModel):
    """Optional edits applied together with the approval."""

    title: Optional[str] = Field(None, min_length=1, max_length=256)
    content: Optional[str] = None
    abstract: Optional[str] = Field(None, max_length=1000)
    type: Optional[PublicationType] = None
    category_id: Optional[int] = None
    tag_id: Optional[int] = None
    featured_order: Optional[int] = None


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)
    details: Optional[str] = Field(None, max_length=5000)


class TransitionRequest(BaseModel):
    to_status: ContentStatus
    reason: Optional[str] = Field(None, max_length=500)
    details: Optional[str] = None


# ---------------------------------------------------------------------------
# Policies and case studies
# ---------------------------------------------------------------------------

class PolicyCreate(BaseModel):
    title: str = Field("", max_length=256)
    content: str = ""
    summary: Optional[str] = Field(None, max_length=1000)
    category: PolicyCategory
    thumbnail_url: Optional[str] = None
    submit: bool = False


class PolicyUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=256)
    content: Optional[str] = None
    summary: Optional[str] = Field(None, max_length=1000)
    category: Optional[PolicyCategory] = None
    thumbnail_url: Optional[str] = None


class PolicyResponse(BaseModel):
    id: int
    slug: str
    title: str
    summary: Optional[str]
    content: str
    category: str
    status: str
    author_id: Optional[str]
    thumbnail_url: Optional[str]
    rejection_reason: Optional[str] = None
    published_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class CaseStudyCreate(BaseModel):
    title: str = Field("", max_length=256)
    content: str = ""
    summary: Optional[str] = Field(None, max_length=1000)
    thumbnail_url: Optional[str] = None
    submit: bool = False


class CaseStudyResponse(BaseModel):
    id: int
    slug: str
    title: str
    summary: Optional[str]
    content: str
    policy_id: Optional[int]
    status: str
    author_id: Optional[str]
    thumbnail_url: Optional[str]
    published_at: Optional[datetime]

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str]

    class Config:
        from_attributes = True


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)


class TagResponse(BaseModel):
    id: int
    name: str
    slug: str

    class Config:
        from_attributes = True

"""
Pydantic schemas for API request/response validation.
"""

from thinktank.schemas.audit import AuditLogResponse, UploadResponse
from thinktank.schemas.common import (
    ErrorResponse,
    HealthResponse,
    PaginatedResponse,
    SuccessResponse,
)
from thinktank.schemas.contact import (
    ContactAccepted,
    ContactCreate,
    ContactResponse,
    ContactStatusUpdate,
)
from thinktank.schemas.directory import (
    PartnerCreate,
    PartnerResponse,
    PartnerUpdate,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamMemberUpdate,
)
from thinktank.schemas.event import (
    EventCreate,
    EventResponse,
    EventUpdate,
    InitiativeCreate,
    InitiativeResponse,
    InitiativeUpdate,
)
from thinktank.schemas.membership import (
    MembershipApply,
    MembershipResponse,
    MembershipStatusUpdate,
    MembershipTypeCreate,
    MembershipTypeResponse,
    MembershipTypeUpdate,
)
from thinktank.schemas.profile import (
    AdminCheckResponse,
    AdminProfileCreate,
    AdminProfileUpdate,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
)
from thinktank.schemas.publication import (
    AdminPublicationCreate,
    ApproveRequest,
    CaseStudyCreate,
    CaseStudyResponse,
    CategoryCreate,
    CategoryResponse,
    PolicyCreate,
    PolicyResponse,
    PolicyUpdate,
    PublicationCreate,
    PublicationResponse,
    PublicationSummary,
    PublicationUpdate,
    RejectRequest,
    TagCreate,
    TagResponse,
    TransitionRequest,
)
from thinktank.schemas.search import SearchResponse, SearchResultItem

__all__ = [
    # Common
    "ErrorResponse",
    "HealthResponse",
    "PaginatedResponse",
    "SuccessResponse",
    # Profile
    "AdminCheckResponse",
    "AdminProfileCreate",
    "AdminProfileUpdate",
    "ProfileResponse",
    "ProfileUpdate",
    "PublicProfileResponse",
    # Lifecycle content
    "AdminPublicationCreate",
    "ApproveRequest",
    "CaseStudyCreate",
    "CaseStudyResponse",
    "CategoryCreate",
    "CategoryResponse",
    "PolicyCreate",
    "PolicyResponse",
    "PolicyUpdate",
    "PublicationCreate",
    "PublicationResponse",
    "PublicationSummary",
    "PublicationUpdate",
    "RejectRequest",
    "TagCreate",
    "TagResponse",
    "TransitionRequest",
    # Events
    "EventCreate",
    "EventResponse",
    "EventUpdate",
    "InitiativeCreate",
    "InitiativeResponse",
    "InitiativeUpdate",
    # Directory
    "PartnerCreate",
    "PartnerResponse",
    "PartnerUpdate",
    "TeamMemberCreate",
    "TeamMemberResponse",
    "TeamMemberUpdate",
    # Contact
    "ContactAccepted",
    "ContactCreate",
    "ContactResponse",
    "ContactStatusUpdate",
    # Memberships
    "MembershipApply",
    "MembershipResponse",
    "MembershipStatusUpdate",
    "MembershipTypeCreate",
    "MembershipTypeResponse",
    "MembershipTypeUpdate",
    # Search
    "SearchResponse",
    "SearchResultItem",
    # Audit / uploads
    "AuditLogResponse",
    "UploadResponse",
]

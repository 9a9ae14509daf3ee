"""
Kernel Data Models

SQLAlchemy models for profiles, lifecycle content, directory records and the
audit log. Importing this package registers every table on ``Base.metadata``.
"""

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, TimestampMixin, enum_value, utcnow
from thinktank.kernel.models.profile import Profile
from thinktank.kernel.models.publication import (
    Category,
    ContentStatus,
    LifecycleMixin,
    Publication,
    PublicationType,
    Tag,
)
from thinktank.kernel.models.policy import CaseStudy, Policy, PolicyCategory
from thinktank.kernel.models.event import (
    Event,
    EventStatus,
    EventType,
    Initiative,
    InitiativeCategory,
)
from thinktank.kernel.models.directory import (
    Partner,
    PartnerCategory,
    TeamMember,
    TeamMemberCategory,
)
from thinktank.kernel.models.contact import ContactSubmission, InquiryType, SubmissionStatus
from thinktank.kernel.models.membership import Membership, MembershipStatus, MembershipType
from thinktank.kernel.models.audit_log import AuditAction, AuditLog

__all__ = [
    # Base
    "Base",
    "IntPrimaryKeyMixin",
    "TimestampMixin",
    "enum_value",
    "utcnow",
    # Profiles
    "Profile",
    # Publications
    "Category",
    "ContentStatus",
    "LifecycleMixin",
    "Publication",
    "PublicationType",
    "Tag",
    # Policy
    "CaseStudy",
    "Policy",
    "PolicyCategory",
    # Events
    "Event",
    "EventStatus",
    "EventType",
    "Initiative",
    "InitiativeCategory",
    # Directory
    "Partner",
    "PartnerCategory",
    "TeamMember",
    "TeamMemberCategory",
    # Contact
    "ContactSubmission",
    "InquiryType",
    "SubmissionStatus",
    # Memberships
    "Membership",
    "MembershipStatus",
    "MembershipType",
    # Audit
    "AuditAction",
    "AuditLog",
]

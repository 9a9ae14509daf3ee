"""
Domain services: one class per record kind, each bound to a session.

Services take the resolved ``Caller`` on every call and enforce the
permission rules themselves; routers only translate HTTP.
"""

from thinktank.services.admin_records import AdminRecordService
from thinktank.services.contact_service import ContactService
from thinktank.services.directory_service import (
    CategoryService,
    PartnerService,
    TagService,
    TeamMemberService,
)
from thinktank.services.event_service import EventService, InitiativeService
from thinktank.services.lifecycle_service import (
    CaseStudyService,
    LifecycleService,
    PolicyService,
    PublicationService,
)
from thinktank.services.membership_service import MembershipService, MembershipTypeService

__all__ = [
    "AdminRecordService",
    "CaseStudyService",
    "CategoryService",
    "ContactService",
    "EventService",
    "InitiativeService",
    "LifecycleService",
    "MembershipService",
    "MembershipTypeService",
    "PartnerService",
    "PolicyService",
    "PublicationService",
    "TagService",
    "TeamMemberService",
]

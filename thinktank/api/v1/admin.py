"""
Admin endpoints: the moderation queue, direct authoring, user management
and the audit trail.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from thinktank.api.deps import AdminCaller, CurrentCaller, DbSession, get_client_ip
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.identity.identity_service import IdentityService
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.publication import ContentStatus
from thinktank.schemas.audit import AuditLogResponse
from thinktank.schemas.common import PaginatedResponse
from thinktank.schemas.profile import (
    AdminCheckResponse,
    AdminProfileCreate,
    AdminProfileUpdate,
    ProfileResponse,
)
from thinktank.schemas.publication import (
    AdminPublicationCreate,
    ApproveRequest,
    PublicationResponse,
    PublicationSummary,
    RejectRequest,
)
from thinktank.services.lifecycle_service import PublicationService

router = APIRouter()


@router.get("/check", response_model=AdminCheckResponse)
async def check_admin(caller: CurrentCaller):
    """Whether the caller holds admin rights. Never fails."""
    return AdminCheckResponse(is_admin=caller.is_admin, profile_id=caller.profile_id)


# ---------------------------------------------------------------------------
# Publications
# ---------------------------------------------------------------------------

@router.get("/publications", response_model=PaginatedResponse[PublicationSummary])
async def list_publications(
    caller: AdminCaller,
    db: DbSession,
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """Every publication regardless of status, newest first."""
    items, total = await PublicationService(db).list_for_admin(
        caller,
        status=status_filter.value if status_filter else None,
        search=search,
        limit=limit,
        offset=offset,
    )
    return PaginatedResponse.create(
        items=[PublicationSummary.model_validate(p) for p in items],
        total=total,
        page=offset // limit + 1,
        page_size=limit,
    )


@router.get("/publications/{publication_id}", response_model=PublicationResponse)
async def get_publication(publication_id: int, caller: AdminCaller, db: DbSession):
    return PublicationResponse.model_validate(await PublicationService(db).get(caller, publication_id))


@router.post("/publications", response_model=PublicationResponse, status_code=status.HTTP_201_CREATED)
async def author_publication(
    request: Request,
    data: AdminPublicationCreate,
    caller: AdminCaller,
    db: DbSession,
):
    """Create a publication directly, optionally on behalf of another author."""
    fields = data.model_dump(exclude={"submit", "author_id", "status"})
    publication = await PublicationService(db).author_as_admin(
        caller,
        fields,
        author_id=data.author_id,
        status=data.status.value,
        ip_address=get_client_ip(request),
    )
    return PublicationResponse.model_validate(publication)


@router.post("/publications/{publication_id}/approve", response_model=PublicationResponse)
async def approve_publication(
    request: Request,
    publication_id: int,
    caller: AdminCaller,
    db: DbSession,
    data: Optional[ApproveRequest] = None,
):
    modifications = data.model_dump(exclude_unset=True) if data else None
    publication = await PublicationService(db).approve(
        caller, publication_id, modifications, ip_address=get_client_ip(request)
    )
    return PublicationResponse.model_validate(publication)


@router.post("/publications/{publication_id}/reject", response_model=PublicationResponse)
async def reject_publication(
    request: Request,
    publication_id: int,
    data: RejectRequest,
    caller: AdminCaller,
    db: DbSession,
):
    publication = await PublicationService(db).reject(
        caller, publication_id, data.reason, data.details, ip_address=get_client_ip(request)
    )
    return PublicationResponse.model_validate(publication)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users", response_model=PaginatedResponse[ProfileResponse])
async def list_users(
    caller: AdminCaller,
    db: DbSession,
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    profiles, total = await IdentityService(db).list_profiles(search, limit, offset)
    return PaginatedResponse.create(
        items=[ProfileResponse.model_validate(p) for p in profiles],
        total=total,
        page=offset // limit + 1,
        page_size=limit,
    )


@router.post("/users", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: AdminProfileCreate, caller: AdminCaller, db: DbSession):
    profile = await IdentityService(db).create_profile(
        data.id,
        created_by=caller.profile_id,
        name=data.name,
        email=data.email,
        position=data.position,
        bio=data.bio,
        is_team_member=data.is_team_member,
        team_role=data.team_role,
        show_on_website=data.show_on_website,
    )
    return ProfileResponse.model_validate(profile)


@router.patch("/users/{profile_id}", response_model=ProfileResponse)
async def update_user(
    profile_id: str,
    data: AdminProfileUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    profile = await IdentityService(db).change_team_flags(
        profile_id,
        changed_by=caller.profile_id,
        is_team_member=data.is_team_member,
        team_role=data.team_role,
        show_on_website=data.show_on_website,
    )
    return ProfileResponse.model_validate(profile)


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

@router.get("/audit", response_model=PaginatedResponse[AuditLogResponse])
async def list_audit_entries(
    caller: AdminCaller,
    db: DbSession,
    action: Optional[AuditAction] = None,
    actor_id: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    entries, total = await AuditStore(db).list_recent(action, actor_id, limit, offset)
    return PaginatedResponse.create(
        items=[AuditLogResponse.model_validate(e) for e in entries],
        total=total,
        page=offset // limit + 1,
        page_size=limit,
    )


@router.get("/audit/{entity_type}/{entity_id}", response_model=List[AuditLogResponse])
async def entity_history(
    entity_type: str,
    entity_id: str,
    caller: AdminCaller,
    db: DbSession,
    limit: int = Query(50, ge=1, le=200),
):
    entries = await AuditStore(db).get_entity_history(entity_type, entity_id, limit=limit)
    return [AuditLogResponse.model_validate(e) for e in entries]

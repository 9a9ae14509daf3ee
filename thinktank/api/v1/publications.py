"""
Publication endpoints: public reads and the member submission flow.
"""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from thinktank.api.deps import CurrentCaller, DbSession, MemberCaller, get_client_ip
from thinktank.content.repository import ListFilter
from thinktank.kernel.models.publication import ContentStatus, PublicationType
from thinktank.schemas.common import PaginatedResponse
from thinktank.schemas.publication import (
    PublicationCreate,
    PublicationResponse,
    PublicationSummary,
    PublicationUpdate,
    TransitionRequest,
)
from thinktank.services.lifecycle_service import PublicationService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[PublicationSummary])
async def list_publications(
    caller: CurrentCaller,
    db: DbSession,
    type: Optional[PublicationType] = None,
    category_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
):
    """Published publications, newest first (plus the caller's own records)."""
    filters = ListFilter(
        type=type.value if type else None,
        category_id=category_id,
    )
    items, total = await PublicationService(db).list_visible(caller, filters, page, limit)
    return PaginatedResponse.create(
        items=[PublicationSummary.model_validate(p) for p in items],
        total=total,
        page=page,
        page_size=limit,
    )


@router.get("/mine", response_model=PaginatedResponse[PublicationSummary])
async def list_my_publications(
    caller: MemberCaller,
    db: DbSession,
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
):
    """The caller's own publications at every status."""
    items, total = await PublicationService(db).list_mine(
        caller, status_filter.value if status_filter else None, page, limit
    )
    return PaginatedResponse.create(
        items=[PublicationSummary.model_validate(p) for p in items],
        total=total,
        page=page,
        page_size=limit,
    )


@router.get("/id/{publication_id}", response_model=PublicationResponse)
async def get_publication(publication_id: int, caller: CurrentCaller, db: DbSession):
    publication = await PublicationService(db).get(caller, publication_id)
    return PublicationResponse.model_validate(publication)


@router.get("/{slug}", response_model=PublicationResponse)
async def get_publication_by_slug(slug: str, caller: CurrentCaller, db: DbSession):
    """Hidden (unpublished, not yours) publications are reported as not found."""
    publication = await PublicationService(db).get_by_slug(caller, slug)
    return PublicationResponse.model_validate(publication)


@router.post("", response_model=PublicationResponse, status_code=status.HTTP_201_CREATED)
async def create_publication(
    request: Request,
    data: PublicationCreate,
    caller: MemberCaller,
    db: DbSession,
):
    """Create a draft; with ``submit`` it goes straight to review."""
    fields = data.model_dump(exclude={"submit"})
    fields["type"] = data.type.value
    publication = await PublicationService(db).create(
        caller, fields, submit=data.submit, ip_address=get_client_ip(request)
    )
    return PublicationResponse.model_validate(publication)


@router.patch("/{publication_id}", response_model=PublicationResponse)
async def update_publication(
    request: Request,
    publication_id: int,
    data: PublicationUpdate,
    caller: MemberCaller,
    db: DbSession,
):
    """Edit a draft you own (admins: any publication)."""
    changes = data.model_dump(exclude_unset=True)
    if data.type is not None:
        changes["type"] = data.type.value
    publication = await PublicationService(db).update(
        caller, publication_id, changes, ip_address=get_client_ip(request)
    )
    return PublicationResponse.model_validate(publication)


@router.post("/{publication_id}/submit", response_model=PublicationResponse)
async def submit_publication(
    request: Request,
    publication_id: int,
    caller: MemberCaller,
    db: DbSession,
):
    """draft -> pending_review. Title and content must be filled in."""
    publication = await PublicationService(db).submit(
        caller, publication_id, ip_address=get_client_ip(request)
    )
    return PublicationResponse.model_validate(publication)


@router.post("/{publication_id}/revise", response_model=PublicationResponse)
async def revise_publication(
    request: Request,
    publication_id: int,
    caller: MemberCaller,
    db: DbSession,
):
    """rejected -> draft, so the author can edit and resubmit."""
    publication = await PublicationService(db).revise(
        caller, publication_id, ip_address=get_client_ip(request)
    )
    return PublicationResponse.model_validate(publication)


@router.post("/{publication_id}/transition", response_model=PublicationResponse)
async def transition_publication(
    request: Request,
    publication_id: int,
    data: TransitionRequest,
    caller: MemberCaller,
    db: DbSession,
):
    """Any lifecycle transition the caller is entitled to."""
    publication = await PublicationService(db).transition(
        caller,
        publication_id,
        data.to_status.value,
        reason=data.reason,
        details=data.details,
        ip_address=get_client_ip(request),
    )
    return PublicationResponse.model_validate(publication)

"""
Contact form endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from thinktank.api.deps import AdminCaller, CurrentCaller, DbSession, get_client_ip
from thinktank.kernel.models.contact import SubmissionStatus
from thinktank.schemas.common import PaginatedResponse
from thinktank.schemas.contact import (
    ContactAccepted,
    ContactCreate,
    ContactResponse,
    ContactStatusUpdate,
)
from thinktank.services.contact_service import ContactService

router = APIRouter()


@router.post("", response_model=ContactAccepted, status_code=status.HTTP_201_CREATED)
async def submit_contact_form(
    request: Request,
    data: ContactCreate,
    caller: CurrentCaller,
    db: DbSession,
):
    """Public contact form. Stored with status ``new``."""
    submission = await ContactService(db).submit(
        caller, data.model_dump(), ip_address=get_client_ip(request)
    )
    return ContactAccepted(id=submission.id)


@router.get("/submissions", response_model=PaginatedResponse[ContactResponse])
async def list_submissions(
    caller: AdminCaller,
    db: DbSession,
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    items, total = await ContactService(db).list(
        caller, status_filter.value if status_filter else None, limit, offset
    )
    return PaginatedResponse.create(
        items=[ContactResponse.model_validate(s) for s in items],
        total=total,
        page=offset // limit + 1,
        page_size=limit,
    )


@router.get("/submissions/{submission_id}", response_model=ContactResponse)
async def get_submission(submission_id: int, caller: AdminCaller, db: DbSession):
    return ContactResponse.model_validate(await ContactService(db).get(caller, submission_id))


@router.patch("/submissions/{submission_id}", response_model=ContactResponse)
async def update_submission_status(
    request: Request,
    submission_id: int,
    data: ContactStatusUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    submission = await ContactService(db).set_status(
        caller, submission_id, data.status.value, ip_address=get_client_ip(request)
    )
    return ContactResponse.model_validate(submission)

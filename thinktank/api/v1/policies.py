"""
Policy and case study endpoints.

Both kinds follow the publication lifecycle; admins moderate them through
the ``/transition`` endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from thinktank.api.deps import CurrentCaller, DbSession, MemberCaller, get_client_ip
from thinktank.content.repository import ListFilter
from thinktank.kernel.models.policy import PolicyCategory
from thinktank.schemas.common import PaginatedResponse
from thinktank.schemas.publication import (
    CaseStudyCreate,
    CaseStudyResponse,
    PolicyCreate,
    PolicyResponse,
    PolicyUpdate,
    TransitionRequest,
)
from thinktank.services.lifecycle_service import CaseStudyService, PolicyService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[PolicyResponse])
async def list_policies(
    caller: CurrentCaller,
    db: DbSession,
    category: Optional[PolicyCategory] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
):
    filters = ListFilter(category=category.value if category else None)
    items, total = await PolicyService(db).list_visible(caller, filters, page, limit)
    return PaginatedResponse.create(
        items=[PolicyResponse.model_validate(p) for p in items],
        total=total,
        page=page,
        page_size=limit,
    )


@router.get("/{slug}", response_model=PolicyResponse)
async def get_policy(slug: str, caller: CurrentCaller, db: DbSession):
    policy = await PolicyService(db).get_by_slug(caller, slug)
    return PolicyResponse.model_validate(policy)


@router.post("", response_model=PolicyResponse, status_code=status.HTTP_201_CREATED)
async def create_policy(
    request: Request,
    data: PolicyCreate,
    caller: MemberCaller,
    db: DbSession,
):
    fields = data.model_dump(exclude={"submit"})
    fields["category"] = data.category.value
    policy = await PolicyService(db).create(
        caller, fields, submit=data.submit, ip_address=get_client_ip(request)
    )
    return PolicyResponse.model_validate(policy)


@router.patch("/{policy_id}", response_model=PolicyResponse)
async def update_policy(
    request: Request,
    policy_id: int,
    data: PolicyUpdate,
    caller: MemberCaller,
    db: DbSession,
):
    changes = data.model_dump(exclude_unset=True)
    if data.category is not None:
        changes["category"] = data.category.value
    policy = await PolicyService(db).update(
        caller, policy_id, changes, ip_address=get_client_ip(request)
    )
    return PolicyResponse.model_validate(policy)


@router.post("/{policy_id}/transition", response_model=PolicyResponse)
async def transition_policy(
    request: Request,
    policy_id: int,
    data: TransitionRequest,
    caller: MemberCaller,
    db: DbSession,
):
    policy = await PolicyService(db).transition(
        caller,
        policy_id,
        data.to_status.value,
        reason=data.reason,
        details=data.details,
        ip_address=get_client_ip(request),
    )
    return PolicyResponse.model_validate(policy)


# ---------------------------------------------------------------------------
# Case studies
# ---------------------------------------------------------------------------

@router.get("/{policy_id}/case-studies", response_model=List[CaseStudyResponse])
async def list_case_studies(policy_id: int, caller: CurrentCaller, db: DbSession):
    studies = await CaseStudyService(db).list_for_policy(caller, policy_id)
    return [CaseStudyResponse.model_validate(s) for s in studies]


@router.post(
    "/{policy_id}/case-studies",
    response_model=CaseStudyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_case_study(
    request: Request,
    policy_id: int,
    data: CaseStudyCreate,
    caller: MemberCaller,
    db: DbSession,
):
    # The parent policy must be visible to the caller
    await PolicyService(db).get(caller, policy_id)
    fields = data.model_dump(exclude={"submit"})
    fields["policy_id"] = policy_id
    study = await CaseStudyService(db).create(
        caller, fields, submit=data.submit, ip_address=get_client_ip(request)
    )
    return CaseStudyResponse.model_validate(study)


@router.post("/case-studies/{case_study_id}/transition", response_model=CaseStudyResponse)
async def transition_case_study(
    request: Request,
    case_study_id: int,
    data: TransitionRequest,
    caller: MemberCaller,
    db: DbSession,
):
    study = await CaseStudyService(db).transition(
        caller,
        case_study_id,
        data.to_status.value,
        reason=data.reason,
        details=data.details,
        ip_address=get_client_ip(request),
    )
    return CaseStudyResponse.model_validate(study)

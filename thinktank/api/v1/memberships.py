"""
Membership endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from thinktank.api.deps import AdminCaller, CurrentCaller, DbSession, MemberCaller, get_client_ip
from thinktank.kernel.models.membership import MembershipStatus
from thinktank.schemas.membership import (
    MembershipApply,
    MembershipResponse,
    MembershipStatusUpdate,
    MembershipTypeCreate,
    MembershipTypeResponse,
    MembershipTypeUpdate,
)
from thinktank.services.membership_service import MembershipService, MembershipTypeService

router = APIRouter()


# ---------------------------------------------------------------------------
# Membership types
# ---------------------------------------------------------------------------

@router.get("/types", response_model=List[MembershipTypeResponse])
async def list_membership_types(caller: CurrentCaller, db: DbSession):
    items, _ = await MembershipTypeService(db).list(caller)
    return [MembershipTypeResponse.model_validate(t) for t in sorted(items, key=lambda t: t.id)]


@router.get("/types/{type_id}", response_model=MembershipTypeResponse)
async def get_membership_type(type_id: int, caller: CurrentCaller, db: DbSession):
    return MembershipTypeResponse.model_validate(await MembershipTypeService(db).get(caller, type_id))


@router.post("/types", response_model=MembershipTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_membership_type(
    request: Request,
    data: MembershipTypeCreate,
    caller: AdminCaller,
    db: DbSession,
):
    membership_type = await MembershipTypeService(db).create(
        caller, data.model_dump(), ip_address=get_client_ip(request)
    )
    return MembershipTypeResponse.model_validate(membership_type)


@router.patch("/types/{type_id}", response_model=MembershipTypeResponse)
async def update_membership_type(
    request: Request,
    type_id: int,
    data: MembershipTypeUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    membership_type = await MembershipTypeService(db).update(
        caller, type_id, data.model_dump(exclude_unset=True), ip_address=get_client_ip(request)
    )
    return MembershipTypeResponse.model_validate(membership_type)


@router.delete("/types/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_membership_type(request: Request, type_id: int, caller: AdminCaller, db: DbSession):
    await MembershipTypeService(db).delete(caller, type_id, ip_address=get_client_ip(request))


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

@router.post("", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
async def apply_for_membership(
    request: Request,
    data: MembershipApply,
    caller: MemberCaller,
    db: DbSession,
):
    membership = await MembershipService(db).apply(
        caller, data.membership_type_id, ip_address=get_client_ip(request)
    )
    return MembershipResponse.model_validate(membership)


@router.get("/mine", response_model=List[MembershipResponse])
async def list_my_memberships(caller: MemberCaller, db: DbSession):
    return [MembershipResponse.model_validate(m) for m in await MembershipService(db).list_mine(caller)]


@router.post("/{membership_id}/cancel", response_model=MembershipResponse)
async def cancel_membership(
    request: Request,
    membership_id: int,
    caller: MemberCaller,
    db: DbSession,
):
    membership = await MembershipService(db).cancel(
        caller, membership_id, ip_address=get_client_ip(request)
    )
    return MembershipResponse.model_validate(membership)


@router.get("", response_model=List[MembershipResponse])
async def list_all_memberships(
    caller: AdminCaller,
    db: DbSession,
    status_filter: Optional[MembershipStatus] = Query(None, alias="status"),
):
    memberships = await MembershipService(db).list_all(
        caller, status_filter.value if status_filter else None
    )
    return [MembershipResponse.model_validate(m) for m in memberships]


@router.patch("/{membership_id}", response_model=MembershipResponse)
async def update_membership_status(
    request: Request,
    membership_id: int,
    data: MembershipStatusUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    membership = await MembershipService(db).set_status(
        caller, membership_id, data.status.value, ip_address=get_client_ip(request)
    )
    return MembershipResponse.model_validate(membership)

"""
About pages: team and partner directories.

Public reads return only rows flagged ``show_on_website``; admins see all.
"""

from typing import List, Optional

from fastapi import APIRouter, Request, status

from thinktank.api.deps import AdminCaller, CurrentCaller, DbSession, get_client_ip
from thinktank.kernel.identity.identity_service import IdentityService
from thinktank.kernel.models.directory import PartnerCategory, TeamMemberCategory
from thinktank.schemas.directory import (
    PartnerCreate,
    PartnerResponse,
    PartnerUpdate,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamMemberUpdate,
)
from thinktank.schemas.profile import PublicProfileResponse
from thinktank.services.directory_service import PartnerService, TeamMemberService

router = APIRouter()


@router.get("/team", response_model=List[TeamMemberResponse])
async def list_team(
    caller: CurrentCaller,
    db: DbSession,
    category: Optional[TeamMemberCategory] = None,
):
    members = await TeamMemberService(db).by_category(caller, category.value if category else None)
    return [TeamMemberResponse.model_validate(m) for m in members]


@router.get("/team/profiles", response_model=List[PublicProfileResponse])
async def list_team_profiles(db: DbSession):
    """Signed-up team members who opted into the website."""
    profiles = await IdentityService(db).list_team_profiles()
    return [PublicProfileResponse.model_validate(p) for p in profiles]


@router.get("/partners", response_model=List[PartnerResponse])
async def list_partners(
    caller: CurrentCaller,
    db: DbSession,
    category: Optional[PartnerCategory] = None,
):
    partners = await PartnerService(db).by_category(caller, category.value if category else None)
    return [PartnerResponse.model_validate(p) for p in partners]


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

@router.post("/team", response_model=TeamMemberResponse, status_code=status.HTTP_201_CREATED)
async def create_team_member(
    request: Request,
    data: TeamMemberCreate,
    caller: AdminCaller,
    db: DbSession,
):
    member = await TeamMemberService(db).create(
        caller, data.model_dump(), ip_address=get_client_ip(request)
    )
    return TeamMemberResponse.model_validate(member)


@router.patch("/team/{member_id}", response_model=TeamMemberResponse)
async def update_team_member(
    request: Request,
    member_id: int,
    data: TeamMemberUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    member = await TeamMemberService(db).update(
        caller, member_id, data.model_dump(exclude_unset=True), ip_address=get_client_ip(request)
    )
    return TeamMemberResponse.model_validate(member)


@router.delete("/team/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team_member(request: Request, member_id: int, caller: AdminCaller, db: DbSession):
    await TeamMemberService(db).delete(caller, member_id, ip_address=get_client_ip(request))


@router.post("/partners", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
async def create_partner(
    request: Request,
    data: PartnerCreate,
    caller: AdminCaller,
    db: DbSession,
):
    partner = await PartnerService(db).create(
        caller, data.model_dump(), ip_address=get_client_ip(request)
    )
    return PartnerResponse.model_validate(partner)


@router.patch("/partners/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    request: Request,
    partner_id: int,
    data: PartnerUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    partner = await PartnerService(db).update(
        caller, partner_id, data.model_dump(exclude_unset=True), ip_address=get_client_ip(request)
    )
    return PartnerResponse.model_validate(partner)


@router.delete("/partners/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_partner(request: Request, partner_id: int, caller: AdminCaller, db: DbSession):
    await PartnerService(db).delete(caller, partner_id, ip_address=get_client_ip(request))

"""
Profile endpoints.
"""

from fastapi import APIRouter

from thinktank.api.deps import Claims, DbSession, MemberCaller
from thinktank.kernel.identity.identity_service import IdentityService
from thinktank.schemas.profile import ProfileResponse, ProfileUpdate

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(claims: Claims, db: DbSession):
    """
    The caller's profile. The first call after sign-in creates it from the
    identity provider's claims.
    """
    profile = await IdentityService(db).ensure_profile(claims)
    return ProfileResponse.model_validate(profile)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    data: ProfileUpdate,
    caller: MemberCaller,
    db: DbSession,
):
    """Edit display name, position and bio."""
    profile = await IdentityService(db).update_profile(
        caller.profile_id,
        name=data.name,
        position=data.position,
        bio=data.bio,
    )
    return ProfileResponse.model_validate(profile)

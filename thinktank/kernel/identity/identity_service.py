"""
Identity service: caller resolution and the profile store.
"""

from typing import Iterable, List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.config import get_settings
from thinktank.content.sanitize import sanitize_plain_text, sanitize_rich_text
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.errors import ConflictError, NotFoundError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.identity.jwt import SessionClaims, SessionTokenVerifier
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.profile import Profile
from thinktank.logging_config import get_logger

logger = get_logger(__name__)


def is_admin_profile(
    profile_id: str,
    profile: Optional[Profile],
    bootstrap_ids: Optional[Iterable[str]] = None,
) -> bool:
    """
    The single admin predicate.

    A profile flagged as team member is an admin. Ids in the configured
    bootstrap list are admins too, so a fresh deployment can seat its first
    administrator before any profile carries the flag.
    """
    if bootstrap_ids is None:
        bootstrap_ids = get_settings().admin_bootstrap_ids
    if profile_id in set(bootstrap_ids):
        return True
    return bool(profile is not None and profile.is_team_member)


class IdentityService:
    """
    Resolves callers and manages profiles.

    Profile rows are created by ``ensure_profile`` (first authentication,
    also reached through ``resolve_caller(..., create_profile=True)``) or by
    ``create_profile`` (admin).
    """

    def __init__(self, session: AsyncSession, verifier: Optional[SessionTokenVerifier] = None):
        self.session = session
        self.verifier = verifier or SessionTokenVerifier()
        self.audit = AuditStore(session)

    async def resolve_caller(self, token: Optional[str], create_profile: bool = False) -> Caller:
        """
        Map a session credential to a Caller.

        Fails closed: no token, a bad token or a storage error all yield
        Anonymous. With ``create_profile`` a verified caller without a profile
        row gets one, so writes keyed on the profile id have a row to point at.
        """
        if not token:
            return Caller.anonymous()

        claims = self.verifier.verify(token)
        if claims is None:
            return Caller.anonymous()

        try:
            profile = await self.get_profile(claims.sub)
        except SQLAlchemyError:
            logger.exception("Profile lookup failed; treating caller as anonymous")
            return Caller.anonymous()

        if profile is None and create_profile:
            profile = await self.ensure_profile(claims)

        name = (profile.name if profile else None) or claims.name
        if is_admin_profile(claims.sub, profile):
            return Caller.admin(claims.sub, name=name, email=claims.email)
        return Caller.member(claims.sub, name=name, email=claims.email)

    async def get_profile(self, profile_id: str) -> Optional[Profile]:
        """Get a profile by external id."""
        result = await self.session.execute(select(Profile).where(Profile.id == profile_id))
        return result.scalar_one_or_none()

    async def require_profile(self, profile_id: str) -> Profile:
        profile = await self.get_profile(profile_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def ensure_profile(self, claims: SessionClaims) -> Profile:
        """Return the caller's profile, creating it on first authentication."""
        profile = await self.get_profile(claims.sub)
        if profile is not None:
            return profile

        profile = Profile(
            id=claims.sub,
            name=claims.name,
            email=claims.email,
            avatar_url=claims.image_url,
            bio="",
            position="",
        )
        try:
            async with self.session.begin_nested():
                self.session.add(profile)
                await self.session.flush()
        except IntegrityError:
            # A concurrent first request inserted the row
            return await self.require_profile(claims.sub)

        await self.audit.log(
            action=AuditAction.PROFILE_CREATED,
            entity_type="profile",
            entity_id=profile.id,
            actor_id=profile.id,
            payload={"source": "first_authentication"},
        )
        logger.info("Profile created on first authentication", extra={"profile_id": profile.id})
        return profile

    async def update_profile(
        self,
        profile_id: str,
        name: Optional[str] = None,
        position: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> Profile:
        """Self-service profile edit (display metadata only)."""
        profile = await self.require_profile(profile_id)

        changes = {}
        if name is not None:
            profile.name = sanitize_plain_text(name)
            changes["name"] = profile.name
        if position is not None:
            profile.position = sanitize_plain_text(position)
            changes["position"] = profile.position
        if bio is not None:
            profile.bio = sanitize_rich_text(bio)
            changes["bio_length"] = len(bio)

        if changes:
            await self.audit.log(
                action=AuditAction.PROFILE_UPDATED,
                entity_type="profile",
                entity_id=profile_id,
                actor_id=profile_id,
                payload=changes,
            )
        return profile

    async def create_profile(
        self,
        profile_id: str,
        created_by: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        position: Optional[str] = None,
        bio: Optional[str] = None,
        is_team_member: bool = False,
        team_role: Optional[str] = None,
        show_on_website: bool = False,
    ) -> Profile:
        """Admin creates a profile ahead of the person's first sign-in."""
        if await self.get_profile(profile_id) is not None:
            raise ConflictError("Profile already exists")

        profile = Profile(
            id=profile_id,
            name=name,
            email=email,
            position=position,
            bio=bio,
            is_team_member=is_team_member,
            team_role=team_role,
            show_on_website=show_on_website,
        )
        self.session.add(profile)
        await self.session.flush()

        await self.audit.log(
            action=AuditAction.PROFILE_CREATED,
            entity_type="profile",
            entity_id=profile_id,
            actor_id=created_by,
            payload={"source": "admin", "is_team_member": is_team_member},
        )
        return profile

    async def change_team_flags(
        self,
        profile_id: str,
        changed_by: str,
        is_team_member: Optional[bool] = None,
        team_role: Optional[str] = None,
        show_on_website: Optional[bool] = None,
    ) -> Profile:
        """Grant or revoke the team-member (admin) flag and directory visibility."""
        profile = await self.require_profile(profile_id)

        payload = {}
        if is_team_member is not None and is_team_member != profile.is_team_member:
            payload["previous_is_team_member"] = profile.is_team_member
            payload["is_team_member"] = is_team_member
            profile.is_team_member = is_team_member
        if team_role is not None:
            profile.team_role = team_role
            payload["team_role"] = team_role
        if show_on_website is not None:
            profile.show_on_website = show_on_website
            payload["show_on_website"] = show_on_website

        if payload:
            await self.audit.log(
                action=AuditAction.PROFILE_ROLE_CHANGED,
                entity_type="profile",
                entity_id=profile_id,
                actor_id=changed_by,
                payload=payload,
            )
            logger.info(
                "Profile flags changed",
                extra={"profile_id": profile_id, "actor_id": changed_by},
            )
        return profile

    async def set_avatar(self, profile_id: str, avatar_url: str) -> Profile:
        """Upload completion callback: one atomic field update."""
        result = await self.session.execute(
            update(Profile)
            .where(Profile.id == profile_id)
            .values(avatar_url=avatar_url)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Profile not found")
        return await self.session.scalar(
            select(Profile)
            .where(Profile.id == profile_id)
            .execution_options(populate_existing=True)
        )

    async def list_profiles(
        self,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[Profile], int]:
        """Admin user list, newest first."""
        conditions = []
        if search:
            pattern = f"%{search.strip().lower()}%"
            conditions.append(
                or_(
                    func.lower(Profile.name).like(pattern),
                    func.lower(Profile.email).like(pattern),
                )
            )
        total = await self.session.scalar(select(func.count(Profile.id)).where(*conditions))
        result = await self.session.execute(
            select(Profile)
            .where(*conditions)
            .order_by(Profile.created_at.desc(), Profile.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def list_team_profiles(self) -> List[Profile]:
        """Team members who chose to appear on the website."""
        result = await self.session.execute(
            select(Profile)
            .where(Profile.is_team_member.is_(True), Profile.show_on_website.is_(True))
            .order_by(Profile.name)
        )
        return list(result.scalars().all())

"""
Integration tests for the supporting services: memberships, contact form,
search, uploads, events, the directory and profiles.
"""

from datetime import timedelta

import httpx
import pytest
from sqlalchemy import select

from thinktank.content.search import SearchService
from thinktank.kernel.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from thinktank.kernel.identity import Caller, IdentityService, SessionClaims
from thinktank.kernel.models import AuditLog, Profile, utcnow
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.services import (
    ContactService,
    EventService,
    MembershipService,
    MembershipTypeService,
    PartnerService,
    PublicationService,
    TeamMemberService,
)
from thinktank.uploads import ObjectStorageClient, UploadKind, UploadService

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _storage(handler) -> ObjectStorageClient:
    return ObjectStorageClient(
        base_url="http://storage.test/upload",
        token="storage-token",
        transport=httpx.MockTransport(handler),
    )


# ---------------------------------------------------------------------------
# Memberships
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_membership_application_flow(db_session, member, admin):
    membership_type = await MembershipTypeService(db_session).create(
        admin, {"name": "Fellow", "description": "Research fellowship", "requires_approval": True}
    )
    service = MembershipService(db_session)

    application = await service.apply(member, membership_type.id)
    assert application.status == "pending"
    assert application.start_date is None

    with pytest.raises(ConflictError):
        await service.apply(member, membership_type.id)

    approved = await service.set_status(admin, application.id, "approved")
    assert approved.status == "approved"
    assert approved.end_date - approved.start_date == timedelta(days=365)

    with pytest.raises(ConflictError):
        await MembershipTypeService(db_session).delete(admin, membership_type.id)


@pytest.mark.asyncio
async def test_membership_without_approval_is_immediate(db_session, member, admin):
    membership_type = await MembershipTypeService(db_session).create(
        admin, {"name": "Friend", "requires_approval": False}
    )
    membership = await MembershipService(db_session).apply(member, membership_type.id)
    assert membership.status == "approved"
    assert membership.start_date is not None


@pytest.mark.asyncio
async def test_membership_cancel_and_reapply(db_session, member, other_member, admin):
    membership_type = await MembershipTypeService(db_session).create(admin, {"name": "Associate"})
    service = MembershipService(db_session)
    application = await service.apply(member, membership_type.id)

    with pytest.raises(NotFoundError):
        await service.cancel(other_member, application.id)

    canceled = await service.cancel(member, application.id)
    assert canceled.status == "rejected"
    assert canceled.end_date is not None
    with pytest.raises(ConflictError):
        await service.cancel(member, application.id)

    again = await service.apply(member, membership_type.id)
    assert again.status == "pending"
    assert [m.id for m in await service.list_mine(member)] == [application.id, again.id]


@pytest.mark.asyncio
async def test_admin_cannot_reactivate_a_second_membership(db_session, member, admin):
    membership_type = await MembershipTypeService(db_session).create(admin, {"name": "Associate"})
    service = MembershipService(db_session)
    first = await service.apply(member, membership_type.id)
    await service.cancel(member, first.id)
    second = await service.apply(member, membership_type.id)

    await service.set_status(admin, second.id, "approved")
    with pytest.raises(ConflictError):
        await service.set_status(admin, first.id, "approved")
    with pytest.raises(ConflictError):
        await service.set_status(admin, first.id, "pending")

    statuses = [m.status for m in await service.list_mine(member)]
    assert statuses == ["rejected", "approved"]

    # Re-approving the active row itself is not a second membership
    assert (await service.set_status(admin, second.id, "approved")).status == "approved"


@pytest.mark.asyncio
async def test_membership_admin_only_operations(db_session, member):
    with pytest.raises(AuthorizationError):
        await MembershipTypeService(db_session).create(member, {"name": "Patron"})
    with pytest.raises(AuthorizationError):
        await MembershipService(db_session).list_all(member)
    with pytest.raises(NotFoundError):
        await MembershipService(db_session).apply(member, 999)


# ---------------------------------------------------------------------------
# Contact form
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_contact_submission_lifecycle(db_session, admin):
    service = ContactService(db_session)
    submission = await service.submit(
        Caller.anonymous(),
        {
            "name": "Jane Doe",
            "email": "jane@example.org",
            "subject": "Media request",
            "message": "Could we interview one of your fellows?",
            "inquiry_type": "media",
        },
        ip_address="203.0.113.7",
    )
    assert submission.status == "new"

    items, total = await service.list(admin)
    assert total == 1 and items[0].id == submission.id

    updated = await service.set_status(admin, submission.id, "in_progress")
    assert updated.status == "in_progress"

    with pytest.raises(AuthorizationError):
        await service.list(Caller.anonymous())


@pytest.mark.asyncio
async def test_contact_submission_rejects_short_message(db_session):
    with pytest.raises(ValidationError) as exc_info:
        await ContactService(db_session).submit(
            Caller.anonymous(),
            {"name": "J", "email": "j@example.org", "subject": "Hi", "message": "short"},
        )
    assert exc_info.value.errors[0]["field"] == "message"


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_search_only_returns_public_content(db_session, member, admin):
    publications = PublicationService(db_session)
    await publications.author_as_admin(
        admin,
        {"title": "Housing Affordability", "content": "Rents and wages", "type": "policy_brief"},
        status="published",
    )
    await publications.create(member, {"title": "Housing Draft", "content": "Unfinished", "type": "opinion"})
    await EventService(db_session).create(
        admin,
        {
            "title": "Housing Forum",
            "type": "conference",
            "start_date": utcnow() + timedelta(days=10),
        },
    )
    await EventService(db_session).create(
        admin,
        {
            "title": "Housing Workshop",
            "type": "workshop",
            "status": "canceled",
            "start_date": utcnow() + timedelta(days=20),
        },
    )
    db_session.add(
        Profile(
            id="user_expert",
            name="Hana Housing",
            position="Housing economist",
            is_team_member=True,
            show_on_website=True,
        )
    )
    await db_session.flush()

    found = await SearchService(db_session).search("housing", type="all", page=1, limit=10)
    titles = {r.title for r in found.results}
    assert titles == {"Housing Affordability", "Housing Forum", "Hana Housing"}
    assert found.total_results == 3
    assert found.total_pages == 1

    events_only = await SearchService(db_session).search("HOUSING", type="event", page=1, limit=10)
    assert [r.title for r in events_only.results] == ["Housing Forum"]

    paged = await SearchService(db_session).search("housing", page=2, limit=2)
    assert len(paged.results) == 1
    assert paged.total_pages == 2


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(db_session, admin):
    await PublicationService(db_session).author_as_admin(
        admin, {"title": "Growth of 5% a year", "content": "x", "type": "opinion"}, status="published"
    )
    await PublicationService(db_session).author_as_admin(
        admin, {"title": "Growth of 50 a year", "content": "x", "type": "opinion"}, status="published"
    )
    found = await SearchService(db_session).search("5%", type="publication")
    assert [r.title for r in found.results] == ["Growth of 5% a year"]


@pytest.mark.asyncio
async def test_search_pages_same_date_ties_by_numeric_id(db_session, admin):
    service = PublicationService(db_session)
    stamp = utcnow() - timedelta(days=1)
    created = []
    for i in range(11):
        publication = await service.author_as_admin(
            admin, {"title": f"Budget note {i}", "content": "x", "type": "opinion"}, status="published"
        )
        publication.published_at = stamp
        created.append(publication)
    await db_session.flush()

    expected = [str(p.id) for p in sorted(created, key=lambda p: p.id, reverse=True)]
    search = SearchService(db_session)
    first = await search.search("budget note", type="all", page=1, limit=5)
    second = await search.search("budget note", type="all", page=2, limit=5)
    third = await search.search("budget note", type="all", page=3, limit=5)

    assert [r.id for r in first.results] == expected[:5]
    assert [r.id for r in second.results] == expected[5:10]
    assert [r.id for r in third.results] == expected[10:]


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_avatar_upload_updates_profile(db_session, member):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = request.content
        return httpx.Response(200, json={"url": "https://cdn.test/avatars/me.png"})

    result = await UploadService(db_session, storage=_storage(handler)).upload(
        member, UploadKind.AVATAR, "me.png", "image/png", PNG
    )
    assert result.url == "https://cdn.test/avatars/me.png"
    assert seen["auth"] == "Bearer storage-token"
    assert b'name="kind"' in seen["body"]

    profile = await IdentityService(db_session).get_profile(member.profile_id)
    assert profile.avatar_url == "https://cdn.test/avatars/me.png"


@pytest.mark.asyncio
async def test_thumbnail_upload_respects_edit_rules(db_session, member, other_member, admin, sample_publication):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"url": "https://cdn.test/thumbs/t.png"})

    draft = await PublicationService(db_session).create(member, sample_publication)
    uploads = UploadService(db_session, storage=_storage(handler))

    with pytest.raises(NotFoundError):
        await uploads.upload(other_member, UploadKind.THUMBNAIL, "t.png", "image/png", PNG, publication_id=draft.id)
    assert calls == []

    await uploads.upload(member, UploadKind.THUMBNAIL, "t.png", "image/png", PNG, publication_id=draft.id)
    assert draft.thumbnail_url == "https://cdn.test/thumbs/t.png"


@pytest.mark.asyncio
async def test_upload_storage_failures_are_upstream_errors(db_session, member):
    def rejecting(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    def no_url(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    for handler in (rejecting, no_url, broken):
        with pytest.raises(UpstreamError):
            await UploadService(db_session, storage=_storage(handler)).upload(
                member, UploadKind.CONTENT_IMAGE, "a.png", "image/png", PNG
            )

    profile = await IdentityService(db_session).get_profile(member.profile_id)
    assert profile.avatar_url is None


@pytest.mark.asyncio
async def test_upload_rejects_non_images_before_storage(db_session, member):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("storage must not be called")

    with pytest.raises(ValidationError):
        await UploadService(db_session, storage=_storage(handler)).upload(
            member, UploadKind.AVATAR, "cv.pdf", "application/pdf", b"%PDF-1.7"
        )
    with pytest.raises(AuthorizationError):
        await UploadService(db_session, storage=_storage(handler)).upload(
            Caller.anonymous(), UploadKind.AVATAR, "me.png", "image/png", PNG
        )


# ---------------------------------------------------------------------------
# Events and directory
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_upcoming_and_past_events(db_session, admin):
    events = EventService(db_session)
    now = utcnow()
    soon = await events.create(admin, {"title": "Budget Briefing", "type": "seminar", "start_date": now + timedelta(days=1)})
    later = await events.create(admin, {"title": "Annual Summit", "type": "conference", "start_date": now + timedelta(days=30)})
    earlier = await events.create(admin, {"title": "Spring Webinar", "type": "webinar", "start_date": now - timedelta(days=30)})

    assert [e.id for e in await events.upcoming(now)] == [soon.id, later.id]
    assert [e.id for e in await events.past(now)] == [earlier.id]
    assert (await events.get_by_slug("annual-summit")).id == later.id
    with pytest.raises(NotFoundError):
        await events.get_by_slug("no-such-event")
    with pytest.raises(ValidationError):
        await events.create(admin, {"title": "Bad", "type": "party", "start_date": now})


@pytest.mark.asyncio
async def test_directory_hides_unlisted_rows(db_session, member, admin):
    partners = PartnerService(db_session)
    listed = await partners.create(admin, {"name": "City University", "category": "academic"})
    hidden = await partners.create(
        admin, {"name": "Quiet Foundation", "category": "civil_society", "show_on_website": False}
    )

    assert [p.id for p in await partners.by_category(member)] == [listed.id]
    assert {p.id for p in await partners.by_category(admin)} == {listed.id, hidden.id}
    assert [p.id for p in await partners.by_category(admin, "civil_society")] == [hidden.id]
    with pytest.raises(NotFoundError):
        await partners.get(member, hidden.id)
    with pytest.raises(AuthorizationError):
        await partners.create(member, {"name": "Sneaky", "category": "policy"})


@pytest.mark.asyncio
async def test_team_members_follow_display_order(db_session, admin):
    team = TeamMemberService(db_session)
    second = await team.create(admin, {"name": "B", "role": "Fellow", "category": "faculty", "display_order": 2})
    first = await team.create(admin, {"name": "A", "role": "Director", "category": "leadership", "display_order": 1})
    assert [m.id for m in await team.by_category(Caller.anonymous())] == [first.id, second.id]

    await team.delete(admin, second.id)
    await db_session.flush()
    actions = (
        await db_session.execute(select(AuditLog.action).where(AuditLog.entity_type == "team_member"))
    ).scalars().all()
    assert AuditAction.RECORD_DELETED.value in actions


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_profile_created_on_first_authentication(db_session, token_verifier):
    identity = IdentityService(db_session, verifier=token_verifier)
    claims = SessionClaims(sub="user_new", name="Nia New", email="nia@example.org", exp=utcnow() + timedelta(hours=1))

    first = await identity.ensure_profile(claims)
    second = await identity.ensure_profile(claims)
    assert first is second
    assert first.is_team_member is False

    token = token_verifier.issue("user_new")
    caller = await identity.resolve_caller(token)
    assert caller.is_authenticated and not caller.is_admin


@pytest.mark.asyncio
async def test_resolve_caller_fails_closed(db_session, admin_profile, token_verifier):
    identity = IdentityService(db_session, verifier=token_verifier)

    assert not (await identity.resolve_caller(None)).is_authenticated
    assert not (await identity.resolve_caller("garbage")).is_authenticated
    expired = token_verifier.issue(admin_profile.id, expires_delta=timedelta(seconds=-5))
    assert not (await identity.resolve_caller(expired)).is_authenticated

    caller = await identity.resolve_caller(token_verifier.issue(admin_profile.id))
    assert caller.is_admin


@pytest.mark.asyncio
async def test_team_flag_grants_admin(db_session, member_profile, admin, token_verifier):
    identity = IdentityService(db_session, verifier=token_verifier)
    await identity.change_team_flags(member_profile.id, changed_by=admin.profile_id, is_team_member=True)

    caller = await identity.resolve_caller(token_verifier.issue(member_profile.id))
    assert caller.is_admin

    with pytest.raises(ConflictError):
        await identity.create_profile(member_profile.id, created_by=admin.profile_id)


@pytest.mark.asyncio
async def test_member_resolution_creates_missing_profile(db_session, token_verifier):
    identity = IdentityService(db_session, verifier=token_verifier)
    token = token_verifier.issue("user_first_write", email="first@example.org")

    caller = await identity.resolve_caller(token)
    assert caller.is_authenticated
    assert await identity.get_profile("user_first_write") is None

    caller = await identity.resolve_caller(token, create_profile=True)
    assert caller.profile_id == "user_first_write"
    profile = await identity.get_profile("user_first_write")
    assert profile is not None
    assert profile.email == "first@example.org"

    again = await identity.resolve_caller(token, create_profile=True)
    assert again.profile_id == caller.profile_id
    count = (
        await db_session.execute(select(Profile).where(Profile.id == "user_first_write"))
    ).scalars().all()
    assert len(count) == 1

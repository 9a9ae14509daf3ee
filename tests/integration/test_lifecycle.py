"""
Integration tests for the publication lifecycle against SQLite.

Covers slug allocation, visibility, transitions, the published_at rule and
the curated listings that depend on them.
"""

from datetime import timedelta

import pytest
from sqlalchemy import select

from thinktank.content import ContentRepository, ListFilter, ListOrder, Pagination
from thinktank.kernel.errors import AuthorizationError, NotFoundError, ValidationError
from thinktank.kernel.identity import Caller
from thinktank.kernel.models import AuditLog, Publication, utcnow
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.orchestration import QueryFacade
from thinktank.services import PolicyService, PublicationService


def _assert_published_at_rule(publication: Publication):
    assert (publication.status == "published") == (publication.published_at is not None)


@pytest.mark.asyncio
async def test_identical_titles_get_distinct_slugs(db_session, member, other_member, sample_publication):
    service = PublicationService(db_session)
    first = await service.create(member, sample_publication)
    second = await service.create(other_member, sample_publication)

    assert first.slug == "tax-policy-review"
    assert second.slug == "tax-policy-review-2"
    assert (await service.get_by_slug(member, "tax-policy-review")).id == first.id
    assert (await service.get_by_slug(other_member, "tax-policy-review-2")).id == second.id


@pytest.mark.asyncio
async def test_create_sanitises_and_defaults_to_draft(db_session, member):
    publication = await PublicationService(db_session).create(
        member,
        {
            "title": "<b>Budget</b> Outlook",
            "content": "Intro<script>alert(1)</script>",
            "type": "opinion",
        },
    )
    assert publication.status == "draft"
    assert publication.author_id == member.profile_id
    assert publication.title == "Budget Outlook"
    assert "script" not in publication.content
    _assert_published_at_rule(publication)


@pytest.mark.asyncio
async def test_unknown_type_is_validation_error(db_session, member):
    with pytest.raises(ValidationError):
        await PublicationService(db_session).create(member, {"title": "X", "content": "Y", "type": "podcast"})


@pytest.mark.asyncio
async def test_anonymous_cannot_create(db_session, sample_publication):
    with pytest.raises(AuthorizationError):
        await PublicationService(db_session).create(Caller.anonymous(), sample_publication)


@pytest.mark.asyncio
async def test_drafts_hidden_from_other_members(db_session, member, other_member, sample_publication):
    service = PublicationService(db_session)
    draft = await service.create(member, sample_publication)

    with pytest.raises(NotFoundError):
        await service.get(other_member, draft.id)
    with pytest.raises(NotFoundError):
        await service.get_by_slug(Caller.anonymous(), draft.slug)

    items, total = await service.list_visible(other_member)
    assert total == 0 and items == []

    items, total = await service.list_visible(member)
    assert [p.id for p in items] == [draft.id]


@pytest.mark.asyncio
async def test_submit_incomplete_record_is_validation_error(db_session, member):
    service = PublicationService(db_session)
    draft = await service.create(member, {"title": "", "content": "", "type": "blog_post"})
    with pytest.raises(ValidationError) as exc_info:
        await service.submit(member, draft.id)
    assert {e["field"] for e in exc_info.value.errors} == {"title", "content"}


@pytest.mark.asyncio
async def test_full_review_flow(db_session, member, admin, sample_publication):
    service = PublicationService(db_session)
    draft = await service.create(member, sample_publication)

    pending = await service.submit(member, draft.id)
    assert pending.status == "pending_review"
    _assert_published_at_rule(pending)

    with pytest.raises(AuthorizationError):
        await service.update(member, draft.id, {"title": "Changed"})

    rejected = await service.reject(admin, draft.id, "Needs sources", "Cite the 2023 report")
    assert rejected.status == "rejected"
    assert rejected.rejection_reason == "Needs sources"
    _assert_published_at_rule(rejected)

    revised = await service.revise(member, draft.id)
    assert revised.status == "draft"
    await service.update(member, draft.id, {"content": "Now with sources."})
    resubmitted = await service.submit(member, draft.id)
    assert resubmitted.rejection_reason is None

    published = await service.approve(admin, draft.id, {"abstract": "Edited by the editor"})
    assert published.status == "published"
    assert published.abstract == "Edited by the editor"
    _assert_published_at_rule(published)

    await db_session.flush()
    actions = (
        await db_session.execute(
            select(AuditLog.action).where(
                AuditLog.entity_type == "publication",
                AuditLog.entity_id == str(draft.id),
            )
        )
    ).scalars().all()
    assert actions.count(AuditAction.CONTENT_STATUS_CHANGED.value) == 5


@pytest.mark.asyncio
async def test_published_to_draft_is_authorization_error(db_session, member, admin, sample_publication):
    service = PublicationService(db_session)
    draft = await service.create(member, sample_publication, submit=True)
    await service.approve(admin, draft.id)

    with pytest.raises(AuthorizationError):
        await service.transition(member, draft.id, "draft")
    with pytest.raises(AuthorizationError):
        await service.transition(admin, draft.id, "draft")

    record = await service.get(Caller.anonymous(), draft.id)
    assert record.status == "published"


@pytest.mark.asyncio
async def test_member_cannot_approve_own_work(db_session, member, sample_publication):
    service = PublicationService(db_session)
    draft = await service.create(member, sample_publication, submit=True)
    with pytest.raises(AuthorizationError):
        await service.approve(member, draft.id)


@pytest.mark.asyncio
async def test_reject_requires_reason(db_session, member, admin, sample_publication):
    service = PublicationService(db_session)
    draft = await service.create(member, sample_publication, submit=True)
    with pytest.raises(ValidationError):
        await service.reject(admin, draft.id, "   ")


@pytest.mark.asyncio
async def test_admin_direct_authoring(db_session, member, admin, sample_publication):
    service = PublicationService(db_session)
    published = await service.author_as_admin(
        admin, sample_publication, author_id=member.profile_id, status="published"
    )
    assert published.author_id == member.profile_id
    _assert_published_at_rule(published)

    with pytest.raises(ValidationError):
        await service.author_as_admin(admin, sample_publication, status="pending_review")
    with pytest.raises(NotFoundError):
        await service.author_as_admin(admin, sample_publication, author_id="user_missing")
    with pytest.raises(AuthorizationError):
        await service.author_as_admin(member, sample_publication)


@pytest.mark.asyncio
async def test_list_is_stable_without_writes(db_session, admin):
    service = PublicationService(db_session)
    for i in range(7):
        await service.author_as_admin(
            admin,
            {"title": f"Brief {i % 3}", "content": "Body", "type": "policy_brief"},
            status="published" if i % 2 else "draft",
        )

    repository = ContentRepository(db_session, Publication, "publication")
    for order in (ListOrder.PUBLIC, ListOrder.ADMIN):
        first = await repository.list(ListFilter(), Pagination(offset=0, limit=4), order=order)
        second = await repository.list(ListFilter(), Pagination(offset=0, limit=4), order=order)
        assert [p.id for p in first[0]] == [p.id for p in second[0]]
        assert first[1] == second[1] == 7

    page_one, _ = await repository.list(ListFilter(), Pagination.from_page(1, 4))
    page_two, _ = await repository.list(ListFilter(), Pagination.from_page(2, 4))
    assert not {p.id for p in page_one} & {p.id for p in page_two}


@pytest.mark.asyncio
async def test_approval_appears_in_by_type(db_session, member, admin, sample_publication):
    service = PublicationService(db_session)
    facade = QueryFacade(db_session)
    draft = await service.create(member, sample_publication, submit=True)

    assert await facade.by_type("research_paper", limit=4) == []

    await service.approve(admin, draft.id)
    listed = await facade.by_type("research_paper", limit=4)
    assert [p.id for p in listed] == [draft.id]


@pytest.mark.asyncio
async def test_query_facade_listings(db_session, admin):
    service = PublicationService(db_session)
    older = await service.author_as_admin(
        admin, {"title": "Older", "content": "a", "type": "opinion"}, status="published"
    )
    newer = await service.author_as_admin(
        admin, {"title": "Newer", "content": "b", "type": "opinion"}, status="published"
    )
    pinned = await service.author_as_admin(
        admin,
        {"title": "Pinned", "content": "c", "type": "blog_post", "featured_order": 1},
        status="published",
    )
    await service.author_as_admin(admin, {"title": "Hidden", "content": "d", "type": "opinion"})

    facade = QueryFacade(db_session)
    featured = await facade.featured(limit=3)
    assert [p.id for p in featured] == [pinned.id, newer.id, older.id]

    popular = await facade.popular(limit=2)
    assert [p.id for p in popular] == [pinned.id, newer.id]

    related = await facade.related(older.slug, limit=3)
    assert [p.id for p in related] == [newer.id]

    with pytest.raises(NotFoundError):
        await facade.related("no-such-slug")
    with pytest.raises(ValidationError):
        await facade.popular(limit=0)
    with pytest.raises(ValidationError):
        await facade.by_type("podcast")


@pytest.mark.asyncio
async def test_policies_share_the_lifecycle(db_session, member, other_member, admin):
    service = PolicyService(db_session)
    policy = await service.create(
        member,
        {"title": "Carbon Pricing", "content": "Proposal", "category": "environmental"},
        submit=True,
    )
    with pytest.raises(NotFoundError):
        await service.get(other_member, policy.id)

    published = await service.approve(admin, policy.id)
    _assert_published_at_rule(published)
    items, total = await service.list_visible(Caller.anonymous(), ListFilter(category="environmental"))
    assert total == 1 and items[0].id == policy.id


@pytest.mark.asyncio
async def test_featured_is_most_recent_regardless_of_pin(db_session, admin):
    service = PublicationService(db_session)
    old_pinned = await service.author_as_admin(
        admin,
        {"title": "Old pinned", "content": "a", "type": "research_paper", "featured_order": 1},
        status="published",
    )
    old_pinned.published_at = utcnow() - timedelta(days=400)
    await db_session.flush()
    newest = await service.author_as_admin(
        admin, {"title": "Newest", "content": "b", "type": "opinion"}, status="published"
    )

    featured = await QueryFacade(db_session).featured(limit=1)
    assert [p.id for p in featured] == [newest.id]

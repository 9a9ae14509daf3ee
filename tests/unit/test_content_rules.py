"""Unit tests for slugs, sanitisation, visibility rules and the lifecycle table."""

from types import SimpleNamespace

import pytest

from thinktank.content.sanitize import sanitize_plain_text, sanitize_rich_text
from thinktank.content.slugs import FALLBACK_SLUG, MAX_SLUG_LENGTH, slugify, with_suffix
from thinktank.kernel.errors import AuthorizationError, NotFoundError, ValidationError
from thinktank.kernel.identity import Caller, is_admin_profile
from thinktank.kernel.permissions import (
    can_edit,
    can_read,
    ensure_admin,
    ensure_editable,
    ensure_member,
    ensure_readable,
)
from thinktank.orchestration import can_transition, valid_transitions
from thinktank.orchestration.state_machine import validate_submission


ANON = Caller.anonymous()
AUTHOR = Caller.member("user_author")
STRANGER = Caller.member("user_stranger")
ADMIN = Caller.admin("user_admin")


def record(status: str, author_id: str = "user_author", title: str = "T", content: str = "C"):
    return SimpleNamespace(status=status, author_id=author_id, title=title, content=content)


class TestSlugs:
    """Tests for slug derivation."""

    def test_title_becomes_slug(self):
        assert slugify("Tax Policy Review") == "tax-policy-review"

    def test_punctuation_and_accents(self):
        assert slugify("  Économie & Société: 2024!  ") == "economie-societe-2024"

    def test_empty_title_falls_back(self):
        assert slugify("") == FALLBACK_SLUG
        assert slugify("!!!") == FALLBACK_SLUG

    def test_length_is_capped(self):
        assert len(slugify("word " * 100)) <= MAX_SLUG_LENGTH

    def test_suffixes(self):
        assert with_suffix("tax-policy-review", 1) == "tax-policy-review"
        assert with_suffix("tax-policy-review", 2) == "tax-policy-review-2"

    def test_suffix_fits_cap(self):
        base = "a" * MAX_SLUG_LENGTH
        candidate = with_suffix(base, 12)
        assert len(candidate) == MAX_SLUG_LENGTH
        assert candidate.endswith("-12")


class TestSanitize:
    """Tests for write-time sanitisation."""

    def test_script_blocks_removed(self):
        cleaned = sanitize_rich_text("Hello <script>alert(1)</script>world")
        assert "script" not in cleaned
        assert cleaned == "Hello world"

    def test_event_handlers_removed(self):
        cleaned = sanitize_rich_text('<img src="a.png" onerror="steal()">')
        assert "onerror" not in cleaned
        assert 'src="a.png"' in cleaned

    def test_javascript_urls_neutralised(self):
        assert "javascript" not in sanitize_rich_text('<a href="javascript:alert(1)">x</a>')
        assert sanitize_rich_text("[x](javascript:steal)") == "[x](#)"

    def test_slash_separated_handler_removed(self):
        cleaned = sanitize_rich_text("<img/onerror=alert(1) src=x>")
        assert "onerror" not in cleaned
        assert "alert" not in cleaned

    def test_unknown_tags_dropped(self):
        cleaned = sanitize_rich_text('<svg onload="x()"><p>Kept</p></svg><iframe src="https://e.org"></iframe>')
        assert "<svg" not in cleaned and "<iframe" not in cleaned
        assert "<p>Kept</p>" in cleaned

    def test_nested_tag_trick(self):
        cleaned = sanitize_rich_text("<scr<script>ipt>alert(1)</script>")
        assert "<script" not in cleaned.lower()

    def test_entity_encoded_javascript_urls(self):
        cleaned = sanitize_rich_text('<a href="&#106;avascript:alert(1)">x</a>')
        assert "javascript" not in cleaned.lower()
        assert "&#106;" not in cleaned
        assert sanitize_rich_text("[x](&#106;avascript:steal)") == "[x](#)"
        assert sanitize_rich_text("[x](java\tscript:steal)") == "[x](#)"

    def test_safe_links_kept(self):
        assert sanitize_rich_text("[about](/about)") == "[about](/about)"
        assert 'href="https://example.org"' in sanitize_rich_text('<a href="https://example.org">x</a>')

    def test_markdown_kept(self):
        text = "## Heading\n\n*emphasis* and [link](https://example.org)"
        assert sanitize_rich_text(text) == text

    def test_blockquotes_kept(self):
        text = "> quoted line\n>> nested"
        assert sanitize_rich_text(text) == text

    def test_plain_text_strips_tags(self):
        assert sanitize_plain_text("  <b>Bold</b> title ") == "Bold title"
        assert sanitize_plain_text(None) is None


class TestVisibility:
    """Tests for read and edit rules."""

    def test_published_visible_to_everyone(self):
        for caller in (ANON, AUTHOR, STRANGER, ADMIN):
            assert can_read(caller, record("published"))

    @pytest.mark.parametrize("status", ["draft", "pending_review", "rejected"])
    def test_unpublished_hidden_from_others(self, status):
        assert can_read(AUTHOR, record(status))
        assert can_read(ADMIN, record(status))
        assert not can_read(STRANGER, record(status))
        assert not can_read(ANON, record(status))
        with pytest.raises(NotFoundError):
            ensure_readable(STRANGER, record(status))

    def test_missing_record_is_not_found(self):
        with pytest.raises(NotFoundError):
            ensure_readable(ADMIN, None, "Publication")

    def test_author_edits_only_drafts(self):
        assert can_edit(AUTHOR, record("draft"))
        assert not can_edit(AUTHOR, record("pending_review"))
        with pytest.raises(AuthorizationError):
            ensure_editable(AUTHOR, record("published"))

    def test_stranger_cannot_edit_published(self):
        with pytest.raises(AuthorizationError):
            ensure_editable(STRANGER, record("published"))

    def test_stranger_editing_hidden_draft_is_not_found(self):
        with pytest.raises(NotFoundError):
            ensure_editable(STRANGER, record("draft"))

    def test_admin_edits_anything(self):
        for status in ("draft", "pending_review", "published", "rejected"):
            assert ensure_editable(ADMIN, record(status))

    def test_member_and_admin_guards(self):
        with pytest.raises(AuthorizationError):
            ensure_member(ANON)
        with pytest.raises(AuthorizationError):
            ensure_admin(AUTHOR)
        assert ensure_admin(ADMIN) is ADMIN


class TestAdminPredicate:
    """Tests for the single admin predicate."""

    def test_team_member_is_admin(self):
        profile = SimpleNamespace(is_team_member=True)
        assert is_admin_profile("user_x", profile, bootstrap_ids=[])

    def test_bootstrap_id_is_admin_without_profile(self):
        assert is_admin_profile("user_root", None, bootstrap_ids=["user_root"])

    def test_plain_member_is_not_admin(self):
        profile = SimpleNamespace(is_team_member=False)
        assert not is_admin_profile("user_x", profile, bootstrap_ids=["user_root"])


class TestTransitions:
    """Tests for the lifecycle transition table."""

    def test_valid_targets(self):
        assert valid_transitions("draft") == ["pending_review"]
        assert valid_transitions("pending_review") == ["published", "rejected"]
        assert valid_transitions("published") == []

    def test_owner_submits_and_revises(self):
        assert can_transition(AUTHOR, "user_author", "draft", "pending_review")
        assert can_transition(AUTHOR, "user_author", "rejected", "draft")

    def test_owner_cannot_publish(self):
        assert not can_transition(AUTHOR, "user_author", "pending_review", "published")

    def test_stranger_cannot_submit(self):
        assert not can_transition(STRANGER, "user_author", "draft", "pending_review")

    def test_published_to_draft_never_allowed(self):
        assert not can_transition(AUTHOR, "user_author", "published", "draft")
        assert not can_transition(ADMIN, "user_author", "published", "draft")

    def test_admin_moderates(self):
        assert can_transition(ADMIN, "user_author", "pending_review", "published")
        assert can_transition(ADMIN, "user_author", "pending_review", "rejected")

    def test_incomplete_submission(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_submission(record("draft", title="  ", content=""))
        fields = {e["field"] for e in exc_info.value.errors}
        assert fields == {"title", "content"}

    def test_complete_submission(self):
        validate_submission(record("draft"))

"""Unit tests for input validation outside the database."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as SchemaError

from thinktank.config import get_settings
from thinktank.content.search import SearchType, validate_search_params
from thinktank.kernel.errors import ValidationError
from thinktank.kernel.models import Event
from thinktank.kernel.models.event import EventStatus
from thinktank.orchestration.query_facade import validate_limit
from thinktank.schemas.contact import ContactCreate
from thinktank.schemas.event import EventCreate
from thinktank.uploads import validate_image
from thinktank.uploads.upload_service import UploadKind


class TestQueryLimits:
    """Tests for query facade limits."""

    @pytest.mark.parametrize("limit", [1, 5, 50])
    def test_in_range(self, limit):
        assert validate_limit(limit) == limit

    @pytest.mark.parametrize("limit", [0, -1, 51, 1000])
    def test_out_of_range(self, limit):
        with pytest.raises(ValidationError) as exc_info:
            validate_limit(limit)
        assert exc_info.value.errors[0]["field"] == "limit"


class TestSearchParams:
    """Tests for search parameter validation."""

    def test_valid(self):
        query, search_type = validate_search_params("  tax  ", "policy", 1, 10)
        assert query == "tax"
        assert search_type == SearchType.POLICY

    def test_every_violation_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_search_params("", "podcast", 0, 51)
        fields = {e["field"] for e in exc_info.value.errors}
        assert fields == {"q", "type", "page", "limit"}

    def test_query_too_long(self):
        with pytest.raises(ValidationError):
            validate_search_params("x" * 101, "all", 1, 10)


class TestContactSchema:
    """Tests for the contact form schema."""

    def _payload(self, **overrides):
        data = {
            "name": "Jane Doe",
            "email": "jane@example.org",
            "subject": "Partnership",
            "message": "We would like to collaborate on a study.",
        }
        data.update(overrides)
        return data

    def test_valid(self):
        form = ContactCreate(**self._payload())
        assert form.inquiry_type.value == "general"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": "not-an-email"},
            {"message": "too short"},
            {"name": "   "},
            {"subject": ""},
            {"inquiry_type": "sales"},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(SchemaError):
            ContactCreate(**self._payload(**overrides))


class TestEvents:
    """Tests for event scheduling rules."""

    def _event(self, start, end=None, status="upcoming"):
        return Event(title="Forum", slug="forum", type="conference", start_date=start, end_date=end, status=status)

    def test_effective_status(self):
        now = datetime(2026, 10, 19, 12, tzinfo=timezone.utc)
        assert self._event(now + timedelta(days=1)).effective_status(now) == EventStatus.UPCOMING
        assert (
            self._event(now - timedelta(hours=1), now + timedelta(hours=1)).effective_status(now)
            == EventStatus.ONGOING
        )
        assert self._event(now - timedelta(days=2)).effective_status(now) == EventStatus.COMPLETED

    def test_canceled_stays_canceled(self):
        now = datetime(2026, 10, 19, 12, tzinfo=timezone.utc)
        event = self._event(now + timedelta(days=1), status="canceled")
        assert event.effective_status(now) == EventStatus.CANCELED

    def test_naive_storage_values(self):
        now = datetime(2026, 10, 19, 12, tzinfo=timezone.utc)
        event = self._event(datetime(2026, 10, 20, 9))
        assert event.effective_status(now) == EventStatus.UPCOMING

    def test_end_before_start_rejected(self):
        start = datetime(2026, 11, 1, 9, tzinfo=timezone.utc)
        with pytest.raises(SchemaError):
            EventCreate(title="Forum", type="seminar", start_date=start, end_date=start - timedelta(hours=1))


class TestUploadValidation:
    """Tests for upload ceilings and content types."""

    def test_avatar_within_limit(self):
        validate_image(UploadKind.AVATAR, "image/png", 1024, get_settings())

    def test_avatar_too_large(self):
        settings = get_settings()
        with pytest.raises(ValidationError):
            validate_image(UploadKind.AVATAR, "image/png", settings.avatar_max_bytes + 1, settings)

    def test_thumbnail_allows_larger_files(self):
        settings = get_settings()
        validate_image(UploadKind.THUMBNAIL, "image/jpeg", settings.avatar_max_bytes + 1, settings)

    @pytest.mark.parametrize("content_type", ["application/pdf", None, "text/html"])
    def test_non_image_rejected(self, content_type):
        with pytest.raises(ValidationError):
            validate_image(UploadKind.CONTENT_IMAGE, content_type, 10, get_settings())

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError):
            validate_image(UploadKind.AVATAR, "image/png", 0, get_settings())

# tests/services/test_post_service.py
"""Tests for post creation and editing helpers."""

from datetime import UTC, datetime, timedelta

import pytest

from univibe.core.settings import settings
from univibe.services import post_service
from univibe.services.post_service import (
    AnonymousPostLimitError,
    ProfileRequiredError,
    extract_hashtags,
    merge_tags,
    sanitize_anonymous_content,
)


class TestContentHelpers:
    def test_extract_hashtags(self):
        assert extract_hashtags("Exam week #finals #library") == ["finals", "library"]

    def test_merge_tags_dedupes_in_order(self):
        assert merge_tags(["finals", "coffee"], "Late night #finals #study") == ["finals", "coffee", "study"]

    def test_sanitize_redacts_contact_details(self):
        text = "Mail me at jo.doe@uni.edu or call 555-123-4567, ask @jordan"
        sanitized = sanitize_anonymous_content(text)
        assert "jo.doe@uni.edu" not in sanitized
        assert "[email redacted]" in sanitized
        assert "555-123-4567" not in sanitized
        assert "[phone redacted]" in sanitized
        assert "@jordan" not in sanitized
        assert "@user" in sanitized

    def test_sanitize_leaves_plain_text(self):
        assert sanitize_anonymous_content("Library is packed today") == "Library is packed today"


class TestCreatePost:
    def test_post_copies_author_campus(self, db_session, test_user):
        post = post_service.create_post(
            db_session,
            author=test_user,
            content="Hello #campus",
            visibility=None,
            is_anonymous=False,
        )
        assert post.campus == "North Campus"
        assert post.visibility == "campus"
        assert post.tags == ["campus"]

    def test_profile_required(self, db_session, make_user):
        user = make_user("No Profile", campus=False)
        with pytest.raises(ProfileRequiredError):
            post_service.create_post(
                db_session,
                author=user,
                content="Hi",
                visibility=None,
                is_anonymous=False,
            )

    def test_blank_campus_uses_default(self, db_session, make_user):
        user = make_user("Blank", campus=None)
        post = post_service.create_post(
            db_session,
            author=user,
            content="Hi",
            visibility="following",
            is_anonymous=False,
        )
        assert post.campus == settings.default_campus
        assert post.visibility == "following"

    def test_anonymous_content_is_sanitized(self, db_session, test_user):
        post = post_service.create_post(
            db_session,
            author=test_user,
            content="DM @alice at alice@uni.edu",
            visibility=None,
            is_anonymous=True,
        )
        assert post.is_anonymous is True
        assert post.content == "DM @user at [email redacted]"

    def test_anonymous_daily_limit(self, db_session, test_user, monkeypatch):
        monkeypatch.setattr(settings, "anonymous_daily_limit", 2)
        for n in range(2):
            post_service.create_post(
                db_session,
                author=test_user,
                content=f"secret {n}",
                visibility=None,
                is_anonymous=True,
            )
        with pytest.raises(AnonymousPostLimitError) as excinfo:
            post_service.create_post(
                db_session,
                author=test_user,
                content="one too many",
                visibility=None,
                is_anonymous=True,
            )
        assert excinfo.value.limit.remaining == 0
        # Named posts are not counted.
        post_service.create_post(
            db_session,
            author=test_user,
            content="named is fine",
            visibility=None,
            is_anonymous=False,
        )

    def test_limit_only_counts_today(self, db_session, test_user):
        post_service.create_post(
            db_session,
            author=test_user,
            content="secret",
            visibility=None,
            is_anonymous=True,
        )
        tomorrow = datetime.now(UTC) + timedelta(days=1)
        limit = post_service.anonymous_limit(db_session, test_user.id, now=tomorrow)
        assert limit.used == 0
        assert limit.can_post


class TestUpdatePost:
    def test_update_marks_edited(self, db_session, test_user, make_post):
        post = make_post(test_user, "old")
        post_service.update_post(db_session, post, content="new #tag", visibility="private")
        assert post.content == "new #tag"
        assert post.tags == ["tag"]
        assert post.visibility == "private"
        assert post.is_edited is True
        assert post.edited_at is not None

    def test_switching_to_anonymous_sanitizes_existing_content(self, db_session, test_user, make_post):
        post = make_post(test_user, "ping @bob")
        post_service.update_post(db_session, post, is_anonymous=True)
        assert post.is_anonymous is True
        assert post.content == "ping @user"

    def test_content_edit_keeps_client_tags(self, db_session, test_user):
        post = post_service.create_post(
            db_session,
            author=test_user,
            content="Hi #a",
            visibility=None,
            is_anonymous=False,
            tags=["club"],
        )
        assert post.tags == ["club", "a"]
        post_service.update_post(db_session, post, content="Bye #b")
        assert post.tags == ["club", "b"]

    def test_explicit_tags_replace_client_tags(self, db_session, test_user):
        post = post_service.create_post(
            db_session,
            author=test_user,
            content="Hi #a",
            visibility=None,
            is_anonymous=False,
            tags=["club"],
        )
        post_service.update_post(db_session, post, tags=["sports"])
        assert post.tags == ["sports", "a"]

# tests/services/test_visibility_policy.py
"""Tests for the closed-world post visibility policy."""

import pytest

from univibe.services.visibility import (
    AuthorIdentity,
    Decision,
    PostFacts,
    ViewerContext,
    Visibility,
    can_view,
    effective_visibility,
    is_owner,
)

OWNER = "owner-1"
VIEWER = "viewer-1"


def _post(visibility="campus", campus="North", *, owner_id=OWNER, is_anonymous=False) -> PostFacts:
    return PostFacts(
        id=1,
        owner_id=owner_id,
        owner=AuthorIdentity(user_id=owner_id or "", name="Owner", username="owner"),
        visibility=visibility,
        is_anonymous=is_anonymous,
        campus=campus,
    )


def _viewer(viewer_id=VIEWER, campus="North", following=(), connections=()) -> ViewerContext:
    return ViewerContext.build(viewer_id, campus, following, connections)


class TestVisibilityParse:
    """Tests for parsing stored visibility values."""

    @pytest.mark.parametrize("raw", ["campus", "CAMPUS", " campus "])
    def test_known_values_parse(self, raw):
        assert Visibility.parse(raw) is Visibility.CAMPUS

    @pytest.mark.parametrize("raw", [None, "", "public", "everyone", 3])
    def test_unknown_values_are_none(self, raw):
        assert Visibility.parse(raw) is None


class TestOwnerClause:
    """The owner always sees their own post."""

    @pytest.mark.parametrize("visibility", ["campus", "following", "connections", "private", "bogus", None])
    def test_owner_allowed_for_every_visibility(self, visibility):
        post = _post(visibility, campus="South")
        assert can_view(post, _viewer(viewer_id=OWNER, campus="North")) is Decision.ALLOW

    def test_owner_allowed_for_anonymous_post(self):
        post = _post("private", is_anonymous=True)
        assert can_view(post, _viewer(viewer_id=OWNER)) is Decision.ALLOW

    def test_empty_owner_id_is_never_owner(self):
        post = _post(owner_id="")
        assert not is_owner(post, _viewer(viewer_id=""))
        assert can_view(post, _viewer(viewer_id="")) is Decision.DENY


class TestCampusClause:
    def test_same_campus_allowed(self):
        assert can_view(_post("campus", "North"), _viewer(campus="North")) is Decision.ALLOW

    def test_other_campus_denied(self):
        assert can_view(_post("campus", "North"), _viewer(campus="South")) is Decision.DENY

    @pytest.mark.parametrize("campus", [None, ""])
    def test_missing_campus_never_matches(self, campus):
        assert can_view(_post("campus", campus), _viewer(campus=campus)) is Decision.DENY

    def test_campus_match_is_exact(self):
        assert can_view(_post("campus", "North"), _viewer(campus="north")) is Decision.DENY


class TestFollowingClause:
    def test_follower_allowed(self):
        viewer = _viewer(following={OWNER})
        assert can_view(_post("following"), viewer) is Decision.ALLOW

    def test_same_campus_without_follow_denied(self):
        assert can_view(_post("following"), _viewer()) is Decision.DENY

    def test_connection_without_follow_denied(self):
        viewer = _viewer(connections={OWNER})
        assert can_view(_post("following"), viewer) is Decision.DENY


class TestConnectionsClause:
    def test_connection_allowed(self):
        viewer = _viewer(campus="South", connections={OWNER})
        assert can_view(_post("connections"), viewer) is Decision.ALLOW

    def test_stranger_on_same_campus_denied(self):
        assert can_view(_post("connections"), _viewer()) is Decision.DENY


class TestPrivateAndMalformed:
    def test_private_denied_to_everyone_else(self):
        viewer = _viewer(following={OWNER}, connections={OWNER})
        assert can_view(_post("private"), viewer) is Decision.DENY

    @pytest.mark.parametrize("visibility", [None, "", "public", "friends"])
    def test_unknown_visibility_denied(self, visibility):
        viewer = _viewer(following={OWNER}, connections={OWNER})
        assert can_view(_post(visibility), viewer) is Decision.DENY

    def test_missing_relationship_sets_deny(self):
        viewer = ViewerContext(viewer_id=VIEWER, viewer_campus="North", following_ids=None, connection_ids=None)
        assert can_view(_post("following"), viewer) is Decision.DENY
        assert can_view(_post("connections"), viewer) is Decision.DENY


class TestAnonymousAsCampus:
    def test_flag_off_uses_stored_visibility(self):
        post = _post("private", is_anonymous=True)
        assert effective_visibility(post) is Visibility.PRIVATE
        assert can_view(post, _viewer()) is Decision.DENY

    def test_flag_on_evaluates_anonymous_posts_as_campus(self):
        post = _post("private", is_anonymous=True)
        assert effective_visibility(post, anonymous_as_campus=True) is Visibility.CAMPUS
        assert can_view(post, _viewer(), anonymous_as_campus=True) is Decision.ALLOW
        assert can_view(post, _viewer(campus="South"), anonymous_as_campus=True) is Decision.DENY

    def test_flag_on_leaves_named_posts_alone(self):
        post = _post("private", is_anonymous=False)
        assert can_view(post, _viewer(), anonymous_as_campus=True) is Decision.DENY

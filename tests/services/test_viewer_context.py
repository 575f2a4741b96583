# tests/services/test_viewer_context.py
"""Tests for building viewer relationship facts."""

from univibe.core.settings import settings
from univibe.services.viewer_context import build_viewer_context


def test_following_and_connections(db_session, make_user, follow) -> None:
    viewer = make_user("Viewer")
    followed = make_user("Followed")
    follower = make_user("Follower")
    mutual = make_user("Mutual")
    follow(viewer, followed)
    follow(follower, viewer)
    follow(viewer, mutual)
    follow(mutual, viewer)

    context = build_viewer_context(db_session, viewer)

    assert context.viewer_id == viewer.id
    assert context.viewer_campus == "North Campus"
    assert context.following_ids == frozenset({followed.id, mutual.id})
    assert context.connection_ids == frozenset({followed.id, follower.id, mutual.id})


def test_mutual_connections_only(db_session, make_user, follow, monkeypatch) -> None:
    viewer = make_user("Viewer")
    followed = make_user("Followed")
    mutual = make_user("Mutual")
    follow(viewer, followed)
    follow(viewer, mutual)
    follow(mutual, viewer)
    monkeypatch.setattr(settings, "mutual_connections_only", True)

    context = build_viewer_context(db_session, viewer)

    assert context.connection_ids == frozenset({mutual.id})
    assert context.following_ids == frozenset({followed.id, mutual.id})


def test_missing_profile_falls_back_to_default_campus(db_session, make_user) -> None:
    viewer = make_user("No Profile", campus=False)
    assert build_viewer_context(db_session, viewer).viewer_campus == settings.default_campus


def test_profile_without_campus_falls_back_to_default_campus(db_session, make_user) -> None:
    viewer = make_user("Blank Campus", campus=None)
    assert build_viewer_context(db_session, viewer).viewer_campus == settings.default_campus

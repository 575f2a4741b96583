# src/univibe/services/viewer_context.py
"""Derive a viewer's relationship facts from the follow graph."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from univibe.core.settings import settings
from univibe.models import Follow, Profile, User
from univibe.services.visibility import ViewerContext


def get_following_ids(db: Session, user_id: str) -> set[str]:
    """Return ids of the users ``user_id`` follows."""
    rows = db.execute(select(Follow.followee_id).where(Follow.follower_id == user_id))
    return set(rows.scalars())


def get_follower_ids(db: Session, user_id: str) -> set[str]:
    """Return ids of the users following ``user_id``."""
    rows = db.execute(select(Follow.follower_id).where(Follow.followee_id == user_id))
    return set(rows.scalars())


def get_viewer_campus(db: Session, user_id: str) -> str:
    """Return the viewer's campus, falling back to the configured default."""
    campus = db.execute(
        select(Profile.campus).where(Profile.user_id == user_id)
    ).scalar_one_or_none()
    return campus or settings.default_campus


def build_viewer_context(db: Session, user: User) -> ViewerContext:
    """Build the request-scoped :class:`ViewerContext` for ``user``.

    Connections are users followed by the viewer or following the viewer. With
    ``MUTUAL_CONNECTIONS_ONLY`` enabled only mutual follows count.
    """
    following = get_following_ids(db, user.id)
    followers = get_follower_ids(db, user.id)
    if settings.mutual_connections_only:
        connections = following & followers
    else:
        connections = following | followers

    return ViewerContext.build(
        viewer_id=user.id,
        viewer_campus=get_viewer_campus(db, user.id),
        following_ids=following,
        connection_ids=connections,
    )

"""CRUD-style helpers for users and the follow graph."""
from __future__ import annotations

from sqlalchemy.orm import Session

from univibe.models import Follow, User

__all__ = [
    "get_user",
    "follow_user",
    "unfollow_user",
]


def get_user(db: Session, user_id: str) -> User | None:
    """Return a single user by primary key."""
    return db.get(User, user_id)


def follow_user(db: Session, follower: User, followee: User) -> bool:
    """Make ``follower`` follow ``followee``.

    Returns:
        True if a new edge was created, False if it already existed.

    Raises:
        ValueError: If a user tries to follow themselves.
    """
    if follower.id == followee.id:
        raise ValueError("Users cannot follow themselves")
    if db.get(Follow, (follower.id, followee.id)) is not None:
        return False
    db.add(Follow(follower_id=follower.id, followee_id=followee.id))
    db.commit()
    return True


def unfollow_user(db: Session, follower: User, followee: User) -> bool:
    """Remove the follow edge. Returns True if an edge was removed."""
    edge = db.get(Follow, (follower.id, followee.id))
    if edge is None:
        return False
    db.delete(edge)
    db.commit()
    return True

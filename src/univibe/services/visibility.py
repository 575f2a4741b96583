# src/univibe/services/visibility.py
"""Post visibility policy.

The policy is a closed-world disjunction: a viewer may see a post only when one
of the clauses below holds. There is no public fallback.

1. The viewer owns the post.
2. The post is campus-visible and shares the viewer's campus.
3. The post is following-visible and the viewer follows the owner.
4. The post is connections-visible and the owner is one of the viewer's connections.
5. The post is private and the viewer owns it.

Malformed facts (unknown visibility, missing campus or owner) never raise; the
affected clause simply does not match.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Visibility(Enum):
    """Audience a post is published to."""

    CAMPUS = "campus"
    CONNECTIONS = "connections"
    FOLLOWING = "following"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: object) -> Visibility | None:
        """Return the matching member, or None for missing or unknown values."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Decision(Enum):
    """Outcome of a visibility check."""

    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class AuthorIdentity:
    """Real identity of a post or comment author."""

    user_id: str
    name: str
    username: str
    avatar: str | None = None


@dataclass(frozen=True)
class CommentFacts:
    """Comment data the projector needs."""

    id: int
    author: AuthorIdentity
    content: str
    is_anonymous: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class PostFacts:
    """Plain-data view of a post, detached from the ORM."""

    id: int
    owner_id: str
    owner: AuthorIdentity
    visibility: str | None
    is_anonymous: bool
    campus: str | None
    likes: frozenset[str] = frozenset()
    comments: tuple[CommentFacts, ...] = ()


@dataclass(frozen=True)
class ViewerContext:
    """Request-scoped relationship facts for the requesting user."""

    viewer_id: str
    viewer_campus: str | None
    following_ids: frozenset[str] = field(default_factory=frozenset)
    connection_ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        viewer_id: str,
        viewer_campus: str | None,
        following_ids: Iterable[str] = (),
        connection_ids: Iterable[str] = (),
    ) -> ViewerContext:
        """Build a context, freezing the relationship sets."""
        return cls(
            viewer_id=viewer_id,
            viewer_campus=viewer_campus,
            following_ids=frozenset(following_ids),
            connection_ids=frozenset(connection_ids),
        )


def _is_id(value: object) -> bool:
    return isinstance(value, str) and value != ""


def is_owner(post: PostFacts, viewer: ViewerContext) -> bool:
    """Return True if the viewer authored the post."""
    return _is_id(post.owner_id) and post.owner_id == viewer.viewer_id


def effective_visibility(post: PostFacts, *, anonymous_as_campus: bool = False) -> Visibility | None:
    """Return the visibility the policy evaluates for ``post``."""
    if anonymous_as_campus and post.is_anonymous is True:
        return Visibility.CAMPUS
    return Visibility.parse(post.visibility)


def can_view(
    post: PostFacts,
    viewer: ViewerContext,
    *,
    anonymous_as_campus: bool = False,
) -> Decision:
    """Decide whether ``viewer`` may see ``post``.

    Args:
        post: Facts about the candidate post.
        viewer: Relationship facts for the requesting user.
        anonymous_as_campus: Evaluate anonymous posts as campus-visible
            regardless of their stored visibility.

    Returns:
        Decision.ALLOW if any clause holds, otherwise Decision.DENY.
    """
    if is_owner(post, viewer):
        return Decision.ALLOW

    if not _is_id(post.owner_id):
        return Decision.DENY

    visibility = effective_visibility(post, anonymous_as_campus=anonymous_as_campus)

    if visibility is Visibility.CAMPUS:
        if (
            isinstance(post.campus, str)
            and post.campus != ""
            and post.campus == viewer.viewer_campus
        ):
            return Decision.ALLOW
    elif visibility is Visibility.FOLLOWING:
        if post.owner_id in (viewer.following_ids or ()):
            return Decision.ALLOW
    elif visibility is Visibility.CONNECTIONS:
        if post.owner_id in (viewer.connection_ids or ()):
            return Decision.ALLOW
    # Visibility.PRIVATE only admits the owner, handled above.

    return Decision.DENY


__all__ = [
    "AuthorIdentity",
    "CommentFacts",
    "Decision",
    "PostFacts",
    "ViewerContext",
    "Visibility",
    "can_view",
    "effective_visibility",
    "is_owner",
]

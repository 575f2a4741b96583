# src/univibe/services/anonymity.py
"""Author identity projection for posts and comments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from univibe.services.visibility import (
    AuthorIdentity,
    CommentFacts,
    Decision,
    PostFacts,
    ViewerContext,
    is_owner,
)

ANONYMOUS_NAME = "Anonymous"
SELF_ANONYMOUS_NAME = "You (Anonymous)"
ANONYMOUS_USERNAME = "anonymous"
ANONYMOUS_AVATAR_SEED = "anonymous"
ANONYMOUS_COMMENT_AVATAR_SEED = "anonymous-comment"


@dataclass(frozen=True)
class IdentityProjection:
    """Author identity as shown to one viewer.

    ``author_id`` is only populated for real-identity projections. For an
    anonymized view the object carries no field derived from the author.
    """

    display_name: str
    display_username: str
    display_avatar_seed: str | None
    is_anonymized_view: bool
    is_own_post: bool
    author_id: str | None = None


@dataclass(frozen=True)
class CommentView:
    """A comment with its author projected for one viewer."""

    id: int
    content: str
    created_at: datetime | None
    author: IdentityProjection


def _real(author: AuthorIdentity, *, is_own: bool) -> IdentityProjection:
    return IdentityProjection(
        display_name=author.name,
        display_username=author.username,
        display_avatar_seed=author.avatar,
        is_anonymized_view=False,
        is_own_post=is_own,
        author_id=author.user_id,
    )


def _anonymized(*, is_own: bool, avatar_seed: str) -> IdentityProjection:
    return IdentityProjection(
        display_name=SELF_ANONYMOUS_NAME if is_own else ANONYMOUS_NAME,
        display_username=ANONYMOUS_USERNAME,
        display_avatar_seed=avatar_seed,
        is_anonymized_view=True,
        is_own_post=is_own,
    )


def project_identity(
    author: AuthorIdentity,
    viewer: ViewerContext,
    *,
    anonymous: bool,
    avatar_seed: str = ANONYMOUS_AVATAR_SEED,
) -> IdentityProjection:
    """Project a single author for ``viewer``."""
    is_own = bool(author.user_id) and author.user_id == viewer.viewer_id
    if anonymous:
        return _anonymized(is_own=is_own, avatar_seed=avatar_seed)
    return _real(author, is_own=is_own)


def project(post: PostFacts, viewer: ViewerContext, decision: Decision) -> IdentityProjection:
    """Project the post author for ``viewer``.

    Only meaningful for an ALLOW decision; callers must not project denied posts.
    """
    if decision is not Decision.ALLOW:
        raise ValueError("Cannot project the author of a post the viewer may not see")
    is_own = is_owner(post, viewer)
    if post.is_anonymous is True:
        return _anonymized(is_own=is_own, avatar_seed=ANONYMOUS_AVATAR_SEED)
    return _real(post.owner, is_own=is_own)


def project_comment(
    comment: CommentFacts,
    post: PostFacts,
    viewer: ViewerContext,
) -> CommentView:
    """Project one comment independently of its parent post.

    A comment keeps its author visible unless it is anonymous itself, or it was
    written by the owner of an anonymous post on that post, which would reveal
    the post's author.
    """
    by_hidden_owner = post.is_anonymous is True and comment.author.user_id == post.owner_id
    author = project_identity(
        comment.author,
        viewer,
        anonymous=comment.is_anonymous is True or by_hidden_owner,
        avatar_seed=ANONYMOUS_COMMENT_AVATAR_SEED,
    )
    return CommentView(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        author=author,
    )


def project_comments(post: PostFacts, viewer: ViewerContext) -> tuple[CommentView, ...]:
    """Project every comment on ``post`` in stored order."""
    return tuple(project_comment(comment, post, viewer) for comment in post.comments)

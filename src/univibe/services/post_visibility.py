# src/univibe/services/post_visibility.py
"""Single entry point for deciding what a viewer sees of a post.

Every read and interaction path (list, get, search, like, comment) resolves a
post through :class:`PostVisibilityEngine`. The engine is stateless: it holds
only its configuration, performs no I/O and never raises for malformed facts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from univibe.core.settings import settings
from univibe.services.anonymity import (
    CommentView,
    IdentityProjection,
    project,
    project_comments,
)
from univibe.services.visibility import (
    AuthorIdentity,
    Decision,
    PostFacts,
    ViewerContext,
    can_view,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostResolution:
    """Result of resolving one post for one viewer.

    ``internal_owner_ref`` is a side channel for moderation tooling only;
    response schemas never read it.
    """

    decision: Decision
    projection: IdentityProjection | None = None
    comments: tuple[CommentView, ...] = ()
    internal_owner_ref: str | None = field(default=None, repr=False)

    @property
    def allowed(self) -> bool:
        """Return True if the viewer may see the post."""
        return self.decision is Decision.ALLOW


# Shared result for "hidden" and "missing" so callers cannot tell them apart.
DENIED = PostResolution(decision=Decision.DENY)


class PostVisibilityEngine:
    """Compose the visibility policy with identity projection."""

    def __init__(self, *, anonymous_posts_campus_wide: bool = False) -> None:
        self.anonymous_posts_campus_wide = anonymous_posts_campus_wide

    def decide(self, post: PostFacts | None, viewer: ViewerContext | None) -> Decision:
        """Return the bare visibility decision for ``post``."""
        if not isinstance(post, PostFacts) or not isinstance(viewer, ViewerContext):
            return Decision.DENY
        return can_view(
            post,
            viewer,
            anonymous_as_campus=self.anonymous_posts_campus_wide,
        )

    def resolve(self, post: PostFacts | None, viewer: ViewerContext | None) -> PostResolution:
        """Resolve ``post`` for ``viewer``.

        A missing post resolves to the same :data:`DENIED` value as a post the
        viewer may not see.
        """
        if not isinstance(post, PostFacts) or not isinstance(viewer, ViewerContext):
            return DENIED

        decision = self.decide(post, viewer)
        if decision is not Decision.ALLOW:
            logger.debug("Post %s denied for viewer %s", post.id, viewer.viewer_id)
            return DENIED

        return PostResolution(
            decision=decision,
            projection=project(post, viewer, decision),
            comments=project_comments(post, viewer),
            internal_owner_ref=post.owner_id,
        )

    def resolve_many(
        self,
        posts: Iterable[PostFacts],
        viewer: ViewerContext,
    ) -> list[tuple[PostFacts, PostResolution]]:
        """Resolve ``posts`` in order, dropping the ones the viewer may not see."""
        resolved: list[tuple[PostFacts, PostResolution]] = []
        for post in posts:
            resolution = self.resolve(post, viewer)
            if resolution.allowed:
                resolved.append((post, resolution))
        return resolved

    @staticmethod
    def unmask(post: PostFacts | None) -> AuthorIdentity | None:
        """Return the real author of ``post`` for moderation.

        The engine does not authorize this call; callers must check the
        moderator capability before invoking it.
        """
        if not isinstance(post, PostFacts):
            return None
        return post.owner


def get_visibility_engine() -> PostVisibilityEngine:
    """Return an engine configured from application settings."""
    return PostVisibilityEngine(
        anonymous_posts_campus_wide=settings.anonymous_posts_campus_wide,
    )

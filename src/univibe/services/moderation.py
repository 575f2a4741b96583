# src/univibe/services/moderation.py
"""Moderation services for Univibe."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from univibe.models import Post, Profile, User
from univibe.repositories.post_repo import PostRepository
from univibe.services.post_visibility import PostVisibilityEngine
from univibe.services.visibility import AuthorIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnmaskedPost:
    """An anonymous post paired with its real author."""

    post: Post
    author: AuthorIdentity
    author_campus: str | None


class ModerationService:
    """Service exposing the real authors of anonymous posts.

    None of these methods authorize the caller; the API layer must verify the
    moderator capability first.
    """

    def __init__(self, engine: PostVisibilityEngine) -> None:
        self.engine = engine

    def unmask_post(self, db: Session, post: Post, moderator: User) -> UnmaskedPost | None:
        """Return ``post`` with its real author attached."""
        repo = PostRepository(db)
        author = self.engine.unmask(repo.to_fact(post))
        if author is None:
            return None
        logger.info("Moderator %s unmasked author of post %s", moderator.id, post.id)
        return UnmaskedPost(post=post, author=author, author_campus=self._campus(db, author.user_id))

    def list_unmasked_anonymous_posts(self, db: Session, moderator: User) -> list[UnmaskedPost]:
        """Return every anonymous post, newest first, with real authors."""
        repo = PostRepository(db)
        posts = repo.list_anonymous()
        unmasked: list[UnmaskedPost] = []
        for post, facts in zip(posts, repo.to_facts(posts), strict=True):
            author = self.engine.unmask(facts)
            if author is None:  # pragma: no cover - facts are always built
                continue
            unmasked.append(
                UnmaskedPost(
                    post=post,
                    author=author,
                    author_campus=self._campus(db, author.user_id),
                )
            )
        logger.info("Moderator %s listed %d anonymous posts", moderator.id, len(unmasked))
        return unmasked

    @staticmethod
    def _campus(db: Session, user_id: str) -> str | None:
        profile = db.get(Profile, user_id)
        return profile.campus if profile else None

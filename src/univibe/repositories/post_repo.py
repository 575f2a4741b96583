"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import Select, Text, cast, func, or_, select
from sqlalchemy.orm import Session

from univibe.models import Post, PostComment, PostLike, Profile, User
from univibe.services.visibility import AuthorIdentity, CommentFacts, PostFacts, ViewerContext

__all__ = ["FEED_FILTERS", "PostRepository"]

FEED_FILTERS = ("all", "following", "connections", "campus", "anonymous", "user")
AUTHOR_FILTERS = frozenset({"following", "connections", "user"})


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    @staticmethod
    def _newest_first(stmt: Select[tuple[Post]]) -> Select[tuple[Post]]:
        return stmt.order_by(Post.created_at.desc(), Post.id.desc())

    def list_candidates(
        self,
        feed_filter: str,
        viewer: ViewerContext,
        user_id: str | None = None,
    ) -> list[Post]:
        """Return posts matching a feed filter, newest first.

        The result is not yet checked for visibility; callers resolve every
        candidate through the visibility engine.
        """
        stmt = select(Post)
        if feed_filter in AUTHOR_FILTERS:
            # Selecting by author must not reveal who wrote an anonymous post.
            stmt = stmt.where(
                or_(Post.is_anonymous.is_(False), Post.user_id == viewer.viewer_id)
            )
        if feed_filter == "following":
            stmt = stmt.where(Post.user_id.in_(sorted(viewer.following_ids)))
        elif feed_filter == "connections":
            stmt = stmt.where(Post.user_id.in_(sorted(viewer.connection_ids)))
        elif feed_filter == "campus":
            stmt = stmt.where(Post.campus == viewer.viewer_campus)
        elif feed_filter == "anonymous":
            stmt = stmt.where(Post.is_anonymous.is_(True))
        elif feed_filter == "user":
            stmt = stmt.where(Post.user_id == user_id)
        return list(self.session.scalars(self._newest_first(stmt)))

    def search(self, query: str | None, campus: str | None) -> list[Post]:
        """Return posts whose content or tags contain ``query``."""
        stmt = select(Post)
        if query:
            pattern = f"%{_escape_like(query)}%"
            stmt = stmt.where(
                or_(
                    Post.content.ilike(pattern, escape="\\"),
                    cast(Post.tags, Text).ilike(pattern, escape="\\"),
                )
            )
        if campus:
            stmt = stmt.where(Post.campus == campus)
        return list(self.session.scalars(self._newest_first(stmt)))

    def list_anonymous(self, user_id: str | None = None) -> list[Post]:
        """Return anonymous posts, optionally restricted to one author."""
        stmt = select(Post).where(Post.is_anonymous.is_(True))
        if user_id is not None:
            stmt = stmt.where(Post.user_id == user_id)
        return list(self.session.scalars(self._newest_first(stmt)))

    def count_anonymous_since(self, user_id: str, since: datetime) -> int:
        """Count anonymous posts ``user_id`` created at or after ``since``."""
        stmt = select(func.count()).select_from(Post).where(
            Post.user_id == user_id,
            Post.is_anonymous.is_(True),
            Post.created_at >= since,
        )
        return int(self.session.scalar(stmt) or 0)

    def toggle_like(self, post: Post, user_id: str) -> bool:
        """Add or remove ``user_id``'s like. Returns True if the post is now liked."""
        existing = self.session.get(PostLike, (post.id, user_id))
        if existing is not None:
            self.session.delete(existing)
            liked = False
        else:
            self.session.add(PostLike(post_id=post.id, user_id=user_id))
            liked = True
        self.session.commit()
        self.session.refresh(post, ["likes"])
        return liked

    def add_comment(
        self,
        post: Post,
        user_id: str,
        content: str,
        *,
        is_anonymous: bool = False,
    ) -> PostComment:
        """Append a comment to ``post`` and return it."""
        comment = PostComment(
            post_id=post.id,
            user_id=user_id,
            content=content,
            is_anonymous=is_anonymous,
        )
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        self.session.refresh(post, ["comments"])
        return comment

    # --- Conversion to engine facts ---------------------------------------------------

    def load_identities(self, user_ids: Iterable[str]) -> dict[str, AuthorIdentity]:
        """Return real identities for ``user_ids`` keyed by id."""
        ids = set(user_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(User, Profile)
            .outerjoin(Profile, Profile.user_id == User.id)
            .where(User.id.in_(sorted(ids)))
        )
        identities: dict[str, AuthorIdentity] = {}
        for user, profile in rows:
            identities[user.id] = AuthorIdentity(
                user_id=user.id,
                name=user.name,
                username=(profile.username if profile else None) or user.username or "",
                avatar=profile.profile_picture if profile else None,
            )
        return identities

    def to_facts(self, posts: Sequence[Post]) -> list[PostFacts]:
        """Convert ORM posts to engine facts, batching identity lookups."""
        author_ids: set[str] = set()
        for post in posts:
            author_ids.add(post.user_id)
            author_ids.update(comment.user_id for comment in post.comments)
        identities = self.load_identities(author_ids)
        return [self._facts(post, identities) for post in posts]

    def to_fact(self, post: Post | None) -> PostFacts | None:
        """Convert a single post, passing ``None`` through."""
        if post is None:
            return None
        return self.to_facts([post])[0]

    @staticmethod
    def _facts(post: Post, identities: dict[str, AuthorIdentity]) -> PostFacts:
        def identity(user_id: str) -> AuthorIdentity:
            return identities.get(user_id) or AuthorIdentity(user_id=user_id, name="", username="")

        return PostFacts(
            id=post.id,
            owner_id=post.user_id,
            owner=identity(post.user_id),
            visibility=post.visibility,
            is_anonymous=bool(post.is_anonymous),
            campus=post.campus,
            likes=frozenset(like.user_id for like in post.likes),
            comments=tuple(
                CommentFacts(
                    id=comment.id,
                    author=identity(comment.user_id),
                    content=comment.content,
                    is_anonymous=bool(comment.is_anonymous),
                    created_at=comment.created_at,
                )
                for comment in post.comments
            ),
        )

"""Service-level helpers for creating and editing posts."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time

from sqlalchemy.orm import Session

from univibe.core.settings import settings
from univibe.db.time import utcnow
from univibe.models import Post, Profile, User
from univibe.models.post import VISIBILITY_CAMPUS
from univibe.repositories.post_repo import PostRepository

logger = logging.getLogger(__name__)

HASHTAG_PATTERN = re.compile(r"#(\w+)")
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
MENTION_PATTERN = re.compile(r"@(\w+)")


class AnonymousPostLimitError(RuntimeError):
    """Raised when a user exceeds their daily anonymous post quota."""

    def __init__(self, limit: AnonymousLimit) -> None:
        super().__init__(f"Daily anonymous post limit reached ({limit.limit} posts)")
        self.limit = limit


class ProfileRequiredError(RuntimeError):
    """Raised when posting without a campus profile."""


@dataclass(frozen=True)
class AnonymousLimit:
    """Daily anonymous posting quota for one user."""

    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    @property
    def can_post(self) -> bool:
        return self.used < self.limit


def extract_hashtags(content: str) -> list[str]:
    """Return hashtags in ``content`` without the leading ``#``."""
    return HASHTAG_PATTERN.findall(content)


def merge_tags(explicit: list[str] | None, content: str) -> list[str]:
    """Merge client-supplied tags with hashtags found in ``content``.

    Order is preserved and duplicates are dropped.
    """
    merged = [*(explicit or []), *extract_hashtags(content)]
    return list(dict.fromkeys(tag for tag in merged if tag))


def sanitize_anonymous_content(content: str) -> str:
    """Strip details that could identify the author of anonymous content."""
    sanitized = EMAIL_PATTERN.sub("[email redacted]", content)
    sanitized = PHONE_PATTERN.sub("[phone redacted]", sanitized)
    return MENTION_PATTERN.sub("@user", sanitized)


def _start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)


def anonymous_limit(db: Session, user_id: str, *, now: datetime | None = None) -> AnonymousLimit:
    """Return today's anonymous posting quota for ``user_id``."""
    since = _start_of_day(now or utcnow())
    used = PostRepository(db).count_anonymous_since(user_id, since)
    return AnonymousLimit(used=used, limit=settings.anonymous_daily_limit)


def create_post(
    db: Session,
    *,
    author: User,
    content: str,
    visibility: str | None,
    is_anonymous: bool,
    tags: list[str] | None = None,
) -> Post:
    """Create a post for ``author``.

    The post's campus is copied from the author's profile. Anonymous posts are
    sanitized, count against the daily quota, and default to campus visibility.

    Raises:
        ProfileRequiredError: If the author has not set up a profile.
        AnonymousPostLimitError: If the daily anonymous quota is exhausted.
    """
    profile = db.get(Profile, author.id)
    if profile is None:
        raise ProfileRequiredError("Profile not found. Please complete your profile setup first.")

    if is_anonymous:
        limit = anonymous_limit(db, author.id)
        if not limit.can_post:
            raise AnonymousPostLimitError(limit)
        content = sanitize_anonymous_content(content)

    post = Post(
        user_id=author.id,
        content=content,
        is_anonymous=is_anonymous,
        campus=profile.campus or settings.default_campus,
        visibility=visibility or VISIBILITY_CAMPUS,
        tags=merge_tags(tags, content),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Created post %s (anonymous=%s)", post.id, is_anonymous)
    return post


def update_post(
    db: Session,
    post: Post,
    *,
    content: str | None = None,
    visibility: str | None = None,
    is_anonymous: bool | None = None,
    tags: list[str] | None = None,
) -> Post:
    """Apply an owner's edit to ``post`` and mark it edited.

    Client-supplied tags survive a content edit unless ``tags`` replaces them;
    hashtags are always re-extracted from the current content.
    """
    old_hashtags = set(extract_hashtags(post.content))
    explicit = tags if tags is not None else [
        tag for tag in (post.tags or []) if tag not in old_hashtags
    ]
    if is_anonymous is not None:
        if is_anonymous and not post.is_anonymous and content is None:
            content = post.content
        post.is_anonymous = is_anonymous
    if content is not None:
        if post.is_anonymous:
            content = sanitize_anonymous_content(content)
        post.content = content
    if content is not None or tags is not None:
        post.tags = merge_tags(explicit, post.content)
    if visibility is not None:
        post.visibility = visibility

    post.is_edited = True
    post.edited_at = utcnow()
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post: Post) -> None:
    """Delete ``post`` together with its likes and comments."""
    post_id = post.id
    db.delete(post)
    db.commit()
    logger.info("Deleted post %s", post_id)

# src/univibe/models/post.py
"""SQLAlchemy models for posts, likes and comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from univibe.db.session import Base
from univibe.db.time import utcnow

VISIBILITY_CAMPUS = "campus"
VISIBILITY_CONNECTIONS = "connections"
VISIBILITY_FOLLOWING = "following"
VISIBILITY_PRIVATE = "private"


class Post(Base):
    """Primary content entity authored by a user.

    ``campus`` is copied from the author's profile when the post is created and
    never changes afterwards, even if the author moves campus.
    """

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_user_created", "user_id", "created_at"),
        Index("ix_post_campus_created", "campus", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    campus: Mapped[str] = mapped_column(Text, nullable=False)
    visibility: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=VISIBILITY_CAMPUS,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    likes: Mapped[list[PostLike]] = relationship(
        "PostLike",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    comments: Mapped[list[PostComment]] = relationship(
        "PostComment",
        cascade="all, delete-orphan",
        order_by="PostComment.id",
        lazy="selectin",
    )


class PostLike(Base):
    """Per-user like on a post."""

    __tablename__ = "post_like"

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Composite primary key keeps concurrent toggles from double-counting.


class PostComment(Base):
    """Comment attached to a post; may itself be anonymous."""

    __tablename__ = "post_comment"
    __table_args__ = (Index("ix_post_comment_post_id", "post_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

# src/univibe/models/user.py
"""SQLAlchemy models for accounts, profiles and the follow graph."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from univibe.db.session import Base
from univibe.db.time import utcnow

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def new_user_id() -> str:
    """Return a fresh opaque user identifier."""
    return uuid.uuid4().hex


class User(Base):
    """Account record. Credentials and email verification live elsewhere."""

    __tablename__ = "user_account"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_user_id)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str | None] = mapped_column(String(30), unique=True, nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_USER)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    profile: Mapped[Profile | None] = relationship(
        "Profile",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )

    @property
    def is_moderator(self) -> bool:
        """Return True if the account may unmask anonymous authors."""
        return self.role == ROLE_ADMIN


class Profile(Base):
    """Public campus profile attached to a user account."""

    __tablename__ = "profile"

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    campus: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")

    user: Mapped[User] = relationship("User", back_populates="profile")


class Follow(Base):
    """Directed follow edge: ``follower_id`` follows ``followee_id``."""

    __tablename__ = "follow"
    __table_args__ = (Index("ix_follow_followee_id", "followee_id"),)

    follower_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    followee_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Composite primary key prevents duplicate follow edges.

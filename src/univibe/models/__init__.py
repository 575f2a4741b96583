# src/univibe/models/__init__.py
"""SQLAlchemy models for the Univibe application."""

from .post import Post, PostComment, PostLike
from .user import Follow, Profile, User

__all__ = [
    "Follow", "Profile", "User",
    "Post", "PostComment", "PostLike",
]

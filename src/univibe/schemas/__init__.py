# src/univibe/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .moderation import ModerationListResponse, ModerationPostResponse, UnmaskedAuthorResponse
from .post import (
    AnonymousLimitResponse,
    AuthorResponse,
    CommentCreate,
    CommentResponse,
    LikeResponse,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostSearchResponse,
    PostUpdate,
)
from .profile import (
    ProfileListResponse,
    ProfileResponse,
    ProfileSetup,
    ProfileStatusResponse,
    ProfileUpdate,
    UsernameAvailability,
)
from .user import FollowResponse

__all__ = [
    "ModerationListResponse", "ModerationPostResponse", "UnmaskedAuthorResponse",
    "AnonymousLimitResponse", "AuthorResponse", "CommentCreate", "CommentResponse",
    "LikeResponse", "PostCreate", "PostListResponse", "PostResponse",
    "PostSearchResponse", "PostUpdate",
    "ProfileListResponse", "ProfileResponse", "ProfileSetup", "ProfileStatusResponse",
    "ProfileUpdate", "UsernameAvailability",
    "FollowResponse",
]

# src/univibe/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .moderation import router as moderation_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .users import router as users_router

__all__ = [
    "moderation_router",
    "posts_router",
    "profiles_router",
    "users_router",
]

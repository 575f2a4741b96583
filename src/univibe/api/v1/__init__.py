# src/univibe/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import moderation_router, posts_router, profiles_router, users_router

__all__ = [
    "moderation_router",
    "posts_router",
    "profiles_router",
    "users_router",
]

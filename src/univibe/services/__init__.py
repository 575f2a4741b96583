# src/univibe/services/__init__.py
"""Business logic services for the Univibe application."""

from .post_visibility import DENIED, PostResolution, PostVisibilityEngine, get_visibility_engine

__all__ = [
    "DENIED",
    "PostResolution",
    "PostVisibilityEngine",
    "get_visibility_engine",
]

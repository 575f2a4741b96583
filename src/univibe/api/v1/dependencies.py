"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from univibe.core.security import decode_access_token
from univibe.db.session import get_db
from univibe.models import User
from univibe.services.post_visibility import PostVisibilityEngine, get_visibility_engine
from univibe.services.viewer_context import build_viewer_context
from univibe.services.visibility import ViewerContext

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, subject)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_viewer_context(current_user: CurrentUserDep, db: SessionDep) -> ViewerContext:
    """Build the viewer's relationship facts once per request."""
    return build_viewer_context(db, current_user)


ViewerDep = Annotated[ViewerContext, Depends(get_viewer_context)]


def get_engine_dep() -> PostVisibilityEngine:
    """Return the post visibility engine."""
    return get_visibility_engine()


EngineDep = Annotated[PostVisibilityEngine, Depends(get_engine_dep)]


def require_moderator(current_user: CurrentUserDep) -> User:
    """Allow only moderators through.

    Raises:
        HTTPException: 403 if the caller lacks the moderator role.
    """
    if not current_user.is_moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized",
        )
    return current_user


ModeratorDep = Annotated[User, Depends(require_moderator)]

"""Campus profile setup, editing and lookup."""
from __future__ import annotations

import logging
import re

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from univibe.models import Follow, Profile, User

__all__ = [
    "InvalidUsernameError",
    "ProfileNotFoundError",
    "UsernameTakenError",
    "avatar_url",
    "follow_counts",
    "get_profile",
    "get_profile_by_username",
    "is_username_available",
    "search_profiles",
    "setup_profile",
    "update_profile",
    "validate_username",
]

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")
SEARCH_LIMIT = 20
AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


class InvalidUsernameError(ValueError):
    """Raised when a username fails the format rules."""


class UsernameTakenError(ValueError):
    """Raised when a username belongs to another account."""


class ProfileNotFoundError(LookupError):
    """Raised when editing a profile that was never set up."""


def avatar_url(seed: str) -> str:
    """Return the generated avatar used when no picture is supplied."""
    return AVATAR_URL.format(seed=seed)


def validate_username(username: str) -> str:
    """Return the trimmed username or raise :class:`InvalidUsernameError`."""
    username = username.strip()
    if len(username) < USERNAME_MIN_LENGTH:
        raise InvalidUsernameError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters"
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise InvalidUsernameError(
            f"Username must be less than {USERNAME_MAX_LENGTH} characters"
        )
    if not USERNAME_PATTERN.match(username):
        raise InvalidUsernameError(
            "Username can only contain letters, numbers, underscores, dots, and hyphens"
        )
    return username


def is_username_available(db: Session, username: str, exclude_user_id: str | None = None) -> bool:
    """Return True if no other account or profile uses ``username``.

    The comparison is case-insensitive.
    """
    lowered = username.strip().lower()
    user_stmt = select(User.id).where(func.lower(User.username) == lowered)
    profile_stmt = select(Profile.user_id).where(func.lower(Profile.username) == lowered)
    if exclude_user_id is not None:
        user_stmt = user_stmt.where(User.id != exclude_user_id)
        profile_stmt = profile_stmt.where(Profile.user_id != exclude_user_id)
    if db.execute(user_stmt.limit(1)).first() is not None:
        return False
    return db.execute(profile_stmt.limit(1)).first() is None


def _claim_username(db: Session, user: User, username: str) -> str:
    username = validate_username(username)
    if not is_username_available(db, username, exclude_user_id=user.id):
        raise UsernameTakenError("Username is already taken")
    user.username = username
    return username


def _clean_campus(campus: str | None) -> str | None:
    if campus is None:
        return None
    return campus.strip() or None


def setup_profile(
    db: Session,
    user: User,
    *,
    username: str,
    campus: str | None = None,
    bio: str | None = None,
    profile_picture: str | None = None,
) -> Profile:
    """Create the caller's profile, or overwrite it if one exists.

    The profile's display name is the account name and the username is also
    written to the account. The campus chosen here is what new posts inherit.

    Raises:
        InvalidUsernameError: If ``username`` is malformed.
        UsernameTakenError: If another account already uses ``username``.
    """
    username = _claim_username(db, user, username)
    profile = db.get(Profile, user.id)
    if profile is None:
        profile = Profile(user_id=user.id)
        db.add(profile)
    profile.full_name = user.name
    profile.username = username
    profile.campus = _clean_campus(campus)
    profile.bio = (bio or "").strip()
    profile.profile_picture = profile_picture or avatar_url(username)
    db.commit()
    db.refresh(profile)
    logger.info("Profile set up for user %s", user.id)
    return profile


def update_profile(
    db: Session,
    user: User,
    *,
    username: str | None = None,
    campus: str | None = None,
    bio: str | None = None,
    profile_picture: str | None = None,
) -> Profile:
    """Apply a partial edit to the caller's profile.

    A ``profile_picture`` that is not an http(s) URL is ignored. Changing the
    campus affects only posts created afterwards.

    Raises:
        ProfileNotFoundError: If the user has no profile yet.
        InvalidUsernameError: If ``username`` is malformed.
        UsernameTakenError: If another account already uses ``username``.
    """
    profile = db.get(Profile, user.id)
    if profile is None:
        raise ProfileNotFoundError("Profile not found. Please complete your profile setup first.")
    if username is not None and username.strip() != profile.username:
        profile.username = _claim_username(db, user, username)
    if campus is not None:
        profile.campus = _clean_campus(campus)
    if bio is not None:
        profile.bio = bio.strip()
    if profile_picture is not None and profile_picture.startswith(("http://", "https://")):
        profile.profile_picture = profile_picture
    db.commit()
    db.refresh(profile)
    return profile


def get_profile(db: Session, user_id: str) -> Profile | None:
    """Return the profile of ``user_id``."""
    return db.get(Profile, user_id)


def get_profile_by_username(db: Session, username: str) -> Profile | None:
    """Return the profile with ``username``, ignoring case."""
    stmt = select(Profile).where(func.lower(Profile.username) == username.strip().lower())
    return db.execute(stmt).scalars().first()


def search_profiles(db: Session, query: str, limit: int = SEARCH_LIMIT) -> list[Profile]:
    """Case-insensitive substring search over name, username and bio."""
    pattern = f"%{query.strip()}%"
    stmt = (
        select(Profile)
        .where(
            or_(
                Profile.full_name.ilike(pattern),
                Profile.username.ilike(pattern),
                Profile.bio.ilike(pattern),
            )
        )
        .order_by(Profile.username)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())


def follow_counts(db: Session, user_id: str) -> tuple[int, int]:
    """Return ``(followers, following)`` for ``user_id``."""
    followers = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.followee_id == user_id)
    )
    following = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    return int(followers or 0), int(following or 0)

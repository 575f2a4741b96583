"""Campus profile endpoints for the Univibe API."""

from fastapi import APIRouter, HTTPException, Query, status

from univibe.api.v1.dependencies import CurrentUserDep, SessionDep
from univibe.models import Profile
from univibe.schemas.profile import (
    ProfileListResponse,
    ProfileResponse,
    ProfileSetup,
    ProfileStatusResponse,
    ProfileUpdate,
    UsernameAvailability,
)
from univibe.services import profile_service
from univibe.services.profile_service import (
    InvalidUsernameError,
    ProfileNotFoundError,
    UsernameTakenError,
)

router = APIRouter(prefix="/profiles", tags=["profiles"])

PROFILE_NOT_FOUND = "Profile not found"


def _respond(db: SessionDep, profile: Profile) -> ProfileResponse:
    followers, following = profile_service.follow_counts(db, profile.user_id)
    return ProfileResponse.build(profile, followers, following)


def _or_404(profile: Profile | None) -> Profile:
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=PROFILE_NOT_FOUND,
        )
    return profile


def _bad_username(exc: ValueError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(exc),
    )


@router.get("/check-username/{username}", response_model=UsernameAvailability)
async def check_username(
    username: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> UsernameAvailability:
    """Report whether ``username`` is valid and free for the caller."""
    try:
        username = profile_service.validate_username(username)
    except InvalidUsernameError as exc:
        raise _bad_username(exc) from exc
    if not profile_service.is_username_available(db, username, exclude_user_id=current_user.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already taken",
        )
    return UsernameAvailability(username=username, available=True)


@router.get("/status", response_model=ProfileStatusResponse)
async def profile_status(current_user: CurrentUserDep, db: SessionDep) -> ProfileStatusResponse:
    """Tell the client whether profile setup is still required."""
    profile = profile_service.get_profile(db, current_user.id)
    if profile is None:
        return ProfileStatusResponse(has_profile=False)
    return ProfileStatusResponse(has_profile=True, username=profile.username)


@router.post("/setup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def setup_profile(
    payload: ProfileSetup,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Create or replace the caller's profile, including their campus."""
    try:
        profile = profile_service.setup_profile(
            db,
            current_user,
            username=payload.username,
            campus=payload.campus,
            bio=payload.bio,
            profile_picture=payload.profile_picture,
        )
    except (InvalidUsernameError, UsernameTakenError) as exc:
        raise _bad_username(exc) from exc
    return _respond(db, profile)


@router.put("/me", response_model=ProfileResponse)
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Edit the caller's profile."""
    try:
        profile = profile_service.update_profile(
            db,
            current_user,
            username=payload.username,
            campus=payload.campus,
            bio=payload.bio,
            profile_picture=payload.profile_picture,
        )
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except (InvalidUsernameError, UsernameTakenError) as exc:
        raise _bad_username(exc) from exc
    return _respond(db, profile)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(current_user: CurrentUserDep, db: SessionDep) -> ProfileResponse:
    """Return the caller's own profile."""
    profile = _or_404(profile_service.get_profile(db, current_user.id))
    return _respond(db, profile)


@router.get("/search", response_model=ProfileListResponse)
async def search_profiles(
    current_user: CurrentUserDep,
    db: SessionDep,
    query: str = Query("", description="Name, username or bio fragment"),
) -> ProfileListResponse:
    """Search profiles by name, username or bio."""
    if len(query.strip()) < 2:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query must be at least 2 characters",
        )
    profiles = profile_service.search_profiles(db, query)
    return ProfileListResponse(profiles=[_respond(db, profile) for profile in profiles])


@router.get("/username/{username}", response_model=ProfileResponse)
async def get_profile_by_username(
    username: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Look a profile up by its username."""
    profile = _or_404(profile_service.get_profile_by_username(db, username))
    return _respond(db, profile)


@router.get("/public/{user_id}", response_model=ProfileResponse)
async def get_public_profile(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Return another user's public profile."""
    profile = _or_404(profile_service.get_profile(db, user_id))
    return _respond(db, profile)

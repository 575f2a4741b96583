"""Follow graph endpoints for the Univibe API."""

from fastapi import APIRouter, HTTPException, status

from univibe.api.v1.dependencies import CurrentUserDep, SessionDep
from univibe.models import User
from univibe.schemas.user import FollowResponse
from univibe.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


def _target_or_404(db: SessionDep, user_id: str) -> User:
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def follow(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FollowResponse:
    """Follow another user."""
    target = _target_or_404(db, user_id)
    try:
        changed = user_service.follow_user(db, current_user, target)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return FollowResponse(user_id=target.id, following=True, changed=changed)


@router.delete("/{user_id}/follow", response_model=FollowResponse)
async def unfollow(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FollowResponse:
    """Stop following a user."""
    target = _target_or_404(db, user_id)
    changed = user_service.unfollow_user(db, current_user, target)
    return FollowResponse(user_id=target.id, following=False, changed=changed)

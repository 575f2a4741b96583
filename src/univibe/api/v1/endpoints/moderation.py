"""Moderation-related endpoints for the Univibe API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from univibe.api.v1.dependencies import EngineDep, ModeratorDep, SessionDep
from univibe.repositories.post_repo import PostRepository
from univibe.schemas.moderation import ModerationListResponse, ModerationPostResponse
from univibe.services.moderation import ModerationService

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.get("/anonymous-posts", response_model=ModerationListResponse)
async def list_anonymous_posts_for_moderation(
    moderator: ModeratorDep,
    engine: EngineDep,
    db: SessionDep,
) -> ModerationListResponse:
    """List every anonymous post with its real author (moderators only)."""
    unmasked = ModerationService(engine).list_unmasked_anonymous_posts(db, moderator)
    return ModerationListResponse(
        posts=[ModerationPostResponse.from_unmasked(item) for item in unmasked],
        total=len(unmasked),
    )


@router.get("/posts/{post_id}/unmask", response_model=ModerationPostResponse)
async def unmask_post(
    post_id: int,
    moderator: ModeratorDep,
    engine: EngineDep,
    db: SessionDep,
) -> ModerationPostResponse:
    """Reveal the real author of a single post (moderators only)."""
    post = PostRepository(db).get_by_id(post_id)
    unmasked = ModerationService(engine).unmask_post(db, post, moderator) if post else None
    if unmasked is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    return ModerationPostResponse.from_unmasked(unmasked)

# src/univibe/api/v1/endpoints/posts.py
"""Post-related endpoints for the Univibe API.

Every handler that exposes or touches a post resolves it through the
visibility engine first. A post the viewer may not see is reported exactly
like a post that does not exist.
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Query, status

from univibe.api.v1.dependencies import CurrentUserDep, EngineDep, SessionDep, ViewerDep
from univibe.core.settings import settings
from univibe.models import Post
from univibe.repositories.post_repo import PostRepository
from univibe.schemas.post import (
    AnonymousLimitResponse,
    CommentCreate,
    CommentResponse,
    FeedFilterLiteral,
    LikeResponse,
    Pagination,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostSearchResponse,
    PostUpdate,
)
from univibe.services import post_service
from univibe.services.post_service import AnonymousPostLimitError, ProfileRequiredError
from univibe.services.post_visibility import PostResolution, PostVisibilityEngine
from univibe.services.visibility import PostFacts, ViewerContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

POST_NOT_FOUND = "Post not found"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)


def resolve_post_or_404(
    repo: PostRepository,
    engine: PostVisibilityEngine,
    viewer: ViewerContext,
    post_id: int,
) -> tuple[Post, PostFacts, PostResolution]:
    """Fetch and resolve a post, raising the same 404 for missing and hidden posts."""
    post = repo.get_by_id(post_id)
    facts = repo.to_fact(post)
    resolution = engine.resolve(facts, viewer)
    if not resolution.allowed or post is None or facts is None:
        raise _not_found()
    return post, facts, resolution


def _serialize_visible(
    repo: PostRepository,
    engine: PostVisibilityEngine,
    viewer: ViewerContext,
    posts: list[Post],
) -> list[PostResponse]:
    by_id = {post.id: post for post in posts}
    return [
        PostResponse.build(by_id[facts.id], facts, resolution, viewer.viewer_id)
        for facts, resolution in engine.resolve_many(repo.to_facts(posts), viewer)
    ]


def _paginate(items: list[PostResponse], page: int, limit: int) -> tuple[list[PostResponse], Pagination]:
    total = len(items)
    start = (page - 1) * limit
    return items[start:start + limit], Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit) if total else 0,
    )


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
) -> PostResponse:
    """Create a post on the author's campus.

    Raises:
        HTTPException: 404 if the author has no profile, 429 if the daily
            anonymous quota is exhausted.
    """
    try:
        post = post_service.create_post(
            db,
            author=current_user,
            content=post_data.content,
            visibility=post_data.visibility,
            is_anonymous=post_data.is_anonymous,
            tags=post_data.tags,
        )
    except ProfileRequiredError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AnonymousPostLimitError as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(exc),
        ) from exc

    repo = PostRepository(db)
    _, facts, resolution = resolve_post_or_404(repo, engine, viewer, post.id)
    return PostResponse.build(post, facts, resolution, viewer.viewer_id)


@router.get("/", response_model=PostListResponse)
async def list_posts(
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
    feed_filter: FeedFilterLiteral = Query("all", alias="filter", description="Feed filter"),
    user_id: str | None = Query(None, description="Author id for the 'user' filter"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> PostListResponse:
    """List posts visible to the viewer, newest first."""
    if feed_filter == "user" and not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="user_id is required for the 'user' filter",
        )

    repo = PostRepository(db)
    candidates = repo.list_candidates(feed_filter, viewer, user_id=user_id)
    visible = _serialize_visible(repo, engine, viewer, candidates)
    page_items, pagination = _paginate(visible, page, limit)
    return PostListResponse(
        posts=page_items,
        current_campus=viewer.viewer_campus or settings.default_campus,
        pagination=pagination,
    )


@router.get("/search", response_model=PostSearchResponse)
async def search_posts(
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
    q: str | None = Query(None, description="Text matched against content and tags"),
    campus: str | None = Query(None, description="Campus to search; defaults to the viewer's"),
) -> PostSearchResponse:
    """Search visible posts by content or tag."""
    search_campus = campus or viewer.viewer_campus
    repo = PostRepository(db)
    candidates = repo.search(q, search_campus)
    visible = _serialize_visible(repo, engine, viewer, candidates)
    return PostSearchResponse(
        posts=visible[:settings.search_result_limit],
        search_campus=search_campus,
    )


@router.get("/anonymous/limit", response_model=AnonymousLimitResponse)
async def get_anonymous_limit(
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AnonymousLimitResponse:
    """Report today's anonymous posting quota."""
    limit = post_service.anonymous_limit(db, current_user.id)
    return AnonymousLimitResponse(
        can_post=limit.can_post,
        used=limit.used,
        remaining=limit.remaining,
        limit=limit.limit,
    )


@router.get("/anonymous/mine", response_model=PostListResponse)
async def list_my_anonymous_posts(
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> PostListResponse:
    """List the viewer's own anonymous posts, shown as "You (Anonymous)"."""
    repo = PostRepository(db)
    posts = repo.list_anonymous(user_id=viewer.viewer_id)
    visible = _serialize_visible(repo, engine, viewer, posts)
    page_items, pagination = _paginate(visible, page, limit)
    return PostListResponse(
        posts=page_items,
        current_campus=viewer.viewer_campus or settings.default_campus,
        pagination=pagination,
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
) -> PostResponse:
    """Get a specific post by ID.

    Raises:
        HTTPException: 404 if the post does not exist or is not visible.
    """
    post, facts, resolution = resolve_post_or_404(PostRepository(db), engine, viewer, post_id)
    return PostResponse.build(post, facts, resolution, viewer.viewer_id)


def _owned_post_or_error(
    repo: PostRepository,
    engine: PostVisibilityEngine,
    viewer: ViewerContext,
    post_id: int,
    action: str,
) -> Post:
    post, _, _ = resolve_post_or_404(repo, engine, viewer, post_id)
    if post.user_id != viewer.viewer_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} this post",
        )
    return post


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    update: PostUpdate,
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
) -> PostResponse:
    """Edit a post's content, visibility or anonymity (owner only)."""
    repo = PostRepository(db)
    post = _owned_post_or_error(repo, engine, viewer, post_id, "update")
    post_service.update_post(
        db,
        post,
        content=update.content,
        visibility=update.visibility,
        is_anonymous=update.is_anonymous,
        tags=update.tags,
    )
    post, facts, resolution = resolve_post_or_404(repo, engine, viewer, post_id)
    return PostResponse.build(post, facts, resolution, viewer.viewer_id)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
) -> dict[str, str]:
    """Delete a post (owner only)."""
    post = _owned_post_or_error(PostRepository(db), engine, viewer, post_id, "delete")
    post_service.delete_post(db, post)
    return {"status": "deleted"}


@router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: int,
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
) -> LikeResponse:
    """Like or unlike a post the viewer can see."""
    repo = PostRepository(db)
    post, _, _ = resolve_post_or_404(repo, engine, viewer, post_id)
    liked = repo.toggle_like(post, viewer.viewer_id)
    return LikeResponse(likes=len(post.likes), is_liked=liked)


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: int,
    comment_data: CommentCreate,
    viewer: ViewerDep,
    engine: EngineDep,
    db: SessionDep,
) -> CommentResponse:
    """Comment on a post the viewer can see."""
    repo = PostRepository(db)
    post, _, _ = resolve_post_or_404(repo, engine, viewer, post_id)

    content = comment_data.content
    if comment_data.is_anonymous:
        content = post_service.sanitize_anonymous_content(content)
    comment = repo.add_comment(
        post,
        viewer.viewer_id,
        content,
        is_anonymous=comment_data.is_anonymous,
    )

    _, _, resolution = resolve_post_or_404(repo, engine, viewer, post_id)
    for view in resolution.comments:
        if view.id == comment.id:
            return CommentResponse.from_view(view)
    logger.error("Comment %s missing from resolved post %s", comment.id, post_id)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to add comment",
    )

# src/univibe/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer

from univibe.core.settings import settings
from univibe.models import Post
from univibe.services.anonymity import CommentView, IdentityProjection
from univibe.services.post_visibility import PostResolution
from univibe.services.visibility import PostFacts

VisibilityLiteral = Literal["campus", "connections", "following", "private"]
FeedFilterLiteral = Literal["all", "following", "connections", "campus", "anonymous", "user"]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    content: str = Field(
        ...,
        min_length=1,
        max_length=settings.max_post_length,
        description="Post text",
    )
    visibility: VisibilityLiteral | None = Field(
        None,
        description="Audience; defaults to campus",
    )
    is_anonymous: bool = Field(False, description="Hide the author from other viewers")
    tags: list[str] | None = Field(None, description="Extra tags merged with #hashtags")


class PostUpdate(BaseModel):
    """Schema for an owner's edit; omitted fields stay unchanged."""

    content: str | None = Field(None, min_length=1, max_length=settings.max_post_length)
    visibility: VisibilityLiteral | None = None
    is_anonymous: bool | None = None
    tags: list[str] | None = Field(None, description="Replaces client tags; #hashtags are re-extracted")


class CommentCreate(BaseModel):
    """Schema for adding a comment."""

    content: str = Field(..., min_length=1, max_length=settings.max_post_length)
    is_anonymous: bool = Field(False, description="Hide the commenter from other viewers")


class AuthorResponse(BaseModel):
    """Author identity as projected for the requesting viewer."""

    display_name: str
    display_username: str
    display_avatar_seed: str | None
    is_anonymized_view: bool
    is_own_post: bool
    author_id: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @model_serializer(mode="wrap")
    def _omit_hidden_author(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data: dict[str, Any] = handler(self)
        if data.get("author_id") is None:
            data.pop("author_id", None)
        return data

    @classmethod
    def from_projection(cls, projection: IdentityProjection) -> "AuthorResponse":
        return cls.model_validate(projection)


class CommentResponse(BaseModel):
    """Comment with its author projected for the viewer."""

    id: int
    content: str
    created_at: datetime | None
    author: AuthorResponse

    @classmethod
    def from_view(cls, view: CommentView) -> "CommentResponse":
        return cls(
            id=view.id,
            content=view.content,
            created_at=view.created_at,
            author=AuthorResponse.from_projection(view.author),
        )


class PostResponse(BaseModel):
    """Schema for post information returned by the API.

    Built only from an ALLOW resolution; the post owner's id reaches the
    response solely through a non-anonymized author projection.
    """

    id: int
    content: str
    tags: list[str]
    visibility: str
    is_anonymous: bool
    campus: str
    is_edited: bool
    edited_at: datetime | None
    created_at: datetime
    author: AuthorResponse
    is_own_post: bool
    like_count: int
    is_liked: bool
    comments: list[CommentResponse]

    @classmethod
    def build(
        cls,
        post: Post,
        facts: PostFacts,
        resolution: PostResolution,
        viewer_id: str,
    ) -> "PostResponse":
        """Serialize an allowed post for ``viewer_id``."""
        if not resolution.allowed or resolution.projection is None:
            raise ValueError("Only allowed posts can be serialized")
        projection = resolution.projection
        return cls(
            id=post.id,
            content=post.content,
            tags=list(post.tags or []),
            visibility=post.visibility,
            is_anonymous=post.is_anonymous,
            campus=post.campus,
            is_edited=post.is_edited,
            edited_at=post.edited_at,
            created_at=post.created_at,
            author=AuthorResponse.from_projection(projection),
            is_own_post=projection.is_own_post,
            like_count=len(facts.likes),
            is_liked=viewer_id in facts.likes,
            comments=[CommentResponse.from_view(view) for view in resolution.comments],
        )


class Pagination(BaseModel):
    """Page metadata for list endpoints."""

    page: int
    limit: int
    total: int
    pages: int


class PostListResponse(BaseModel):
    """A page of visible posts."""

    posts: list[PostResponse]
    current_campus: str
    pagination: Pagination


class PostSearchResponse(BaseModel):
    """Search results restricted to visible posts."""

    posts: list[PostResponse]
    search_campus: str | None


class LikeResponse(BaseModel):
    """Result of toggling a like."""

    likes: int
    is_liked: bool


class AnonymousLimitResponse(BaseModel):
    """Daily anonymous posting quota."""

    can_post: bool
    used: int
    remaining: int
    limit: int

# src/univibe/schemas/moderation.py
"""Moderation-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from univibe.services.moderation import UnmaskedPost


class UnmaskedAuthorResponse(BaseModel):
    """Real identity behind an anonymous post."""

    user_id: str
    name: str
    username: str
    avatar: str | None
    campus: str | None

    model_config = ConfigDict(from_attributes=True)


class ModerationPostResponse(BaseModel):
    """Anonymous post as seen by a moderator."""

    id: int
    content: str
    campus: str
    visibility: str
    created_at: datetime
    author: UnmaskedAuthorResponse

    @classmethod
    def from_unmasked(cls, unmasked: UnmaskedPost) -> "ModerationPostResponse":
        post, author = unmasked.post, unmasked.author
        return cls(
            id=post.id,
            content=post.content,
            campus=post.campus,
            visibility=post.visibility,
            created_at=post.created_at,
            author=UnmaskedAuthorResponse(
                user_id=author.user_id,
                name=author.name,
                username=author.username,
                avatar=author.avatar,
                campus=unmasked.author_campus,
            ),
        )


class ModerationListResponse(BaseModel):
    """All anonymous posts with their authors revealed."""

    posts: list[ModerationPostResponse]
    total: int

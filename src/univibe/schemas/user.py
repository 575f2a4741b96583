"""User-related Pydantic schemas."""

from pydantic import BaseModel, Field


class FollowResponse(BaseModel):
    """Result of a follow or unfollow request."""

    user_id: str = Field(..., description="Id of the followed user")
    following: bool = Field(..., description="True if the caller now follows the user")
    changed: bool = Field(..., description="False if the request was a no-op")

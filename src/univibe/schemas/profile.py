# src/univibe/schemas/profile.py
"""Profile-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from univibe.models import Profile


class ProfileSetup(BaseModel):
    """Schema for first-time profile setup."""

    username: str = Field(..., min_length=1, max_length=30, description="Public handle")
    campus: str | None = Field(None, max_length=100, description="Campus new posts are scoped to")
    bio: str | None = Field(None, max_length=500)
    profile_picture: str | None = Field(None, description="Avatar URL; generated when omitted")


class ProfileUpdate(BaseModel):
    """Schema for editing a profile; omitted fields stay unchanged."""

    username: str | None = Field(None, min_length=1, max_length=30)
    campus: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    profile_picture: str | None = None


class ProfileResponse(BaseModel):
    """Public profile information."""

    user_id: str
    full_name: str
    username: str
    campus: str | None
    profile_picture: str | None
    bio: str
    followers_count: int = 0
    following_count: int = 0

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def build(cls, profile: Profile, followers: int = 0, following: int = 0) -> "ProfileResponse":
        response = cls.model_validate(profile)
        return response.model_copy(
            update={"followers_count": followers, "following_count": following}
        )


class ProfileListResponse(BaseModel):
    """Profiles matching a search."""

    profiles: list[ProfileResponse]


class UsernameAvailability(BaseModel):
    """Result of a username availability check."""

    username: str
    available: bool
    message: str | None = None


class ProfileStatusResponse(BaseModel):
    """Whether the caller has finished profile setup."""

    has_profile: bool
    username: str | None = None

"""Application settings and configuration.

This module defines all configuration options for the Univibe backend.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Univibe", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./univibe.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Campus assigned to viewers and posts whose profile has none
    default_campus: str = Field(default="Unknown Campus", alias="DEFAULT_CAMPUS")

    # Anonymous posting
    anonymous_daily_limit: int = Field(default=5, alias="ANONYMOUS_DAILY_LIMIT")
    # When enabled, anonymous posts are evaluated as campus-wide regardless of
    # their stored visibility.
    anonymous_posts_campus_wide: bool = Field(
        default=False,
        alias="ANONYMOUS_POSTS_CAMPUS_WIDE",
    )

    # Connections are "either side follows" unless this narrows them to mutual follows.
    mutual_connections_only: bool = Field(default=False, alias="MUTUAL_CONNECTIONS_ONLY")

    # Feed pagination
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")
    search_result_limit: int = Field(default=50, alias="SEARCH_RESULT_LIMIT")
    max_post_length: int = Field(default=500, alias="MAX_POST_LENGTH")

    # CORS configuration for the mobile client and web previews
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]

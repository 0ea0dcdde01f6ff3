"""Application settings and configuration.

This module defines all configuration options for the Community Maps service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Community Maps", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Public site used for sitemap links
    site_url: str = Field(default="https://www.bengalurumaps.com", alias="SITE_URL")
    default_city: str = Field(default="Bangalore", alias="DEFAULT_CITY")

    # Database configuration
    database_url: str = Field(default="sqlite:///./community_maps.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Access tokens issued by the hosted auth provider
    auth_jwt_secret: str = Field(default="change-me", alias="AUTH_JWT_SECRET")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_audience: str | None = Field(default="authenticated", alias="AUTH_JWT_AUDIENCE")

    # Listing
    maps_page_size: int = Field(default=10, alias="MAPS_PAGE_SIZE")
    maps_max_page_size: int = Field(default=100, alias="MAPS_MAX_PAGE_SIZE")
    sitemap_max_maps: int = Field(default=100, alias="SITEMAP_MAX_MAPS")

    # Slugs that collide with application routes
    reserved_slugs: list[str] = Field(
        default=[
            "api",
            "auth",
            "create-map",
            "edit",
            "invite",
            "login",
            "my-maps",
            "new",
            "sign-up",
            "sitemap",
            "submit",
        ],
        alias="RESERVED_SLUGS",
    )

    # Place search (Google Places "find place from text")
    places_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api/place",
        alias="PLACES_BASE_URL",
    )
    places_api_key: str | None = Field(default=None, alias="PLACES_API_KEY")
    places_timeout_seconds: float = Field(default=10.0, alias="PLACES_TIMEOUT_SECONDS")

    # Google Maps shared list import
    google_maps_timeout_seconds: float = Field(default=15.0, alias="GOOGLE_MAPS_TIMEOUT_SECONDS")
    google_maps_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        alias="GOOGLE_MAPS_USER_AGENT",
    )

    # Object storage for uploaded images
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")
    upload_public_base_url: str = Field(default="/uploads", alias="UPLOAD_PUBLIC_BASE_URL")
    image_max_bytes: int = Field(default=5 * 1024 * 1024, alias="IMAGE_MAX_BYTES")
    image_accepted_types: list[str] = Field(
        default=["image/jpeg", "image/png", "image/webp"],
        alias="IMAGE_ACCEPTED_TYPES",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling such as Alembic."""
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()

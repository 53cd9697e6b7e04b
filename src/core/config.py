"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Biolink API")
    app_version: str = Field(default="1.0.0")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/biolink",
        description="PostgreSQL connection URL with asyncpg driver",
    )
    database_pool_size: int = Field(default=5)
    database_max_overflow: int = Field(default=10)
    database_behind_pooler: bool = Field(
        default=False,
        description="Set when connecting through a transaction-mode pooler (PgBouncer)",
    )

    # Session tokens issued by this service
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for signing session tokens (HS256)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=60 * 24 * 7)

    # External identity provider (OAuth sign-in)
    identity_provider_name: str = Field(
        default="google",
        description="Provider label stored on accounts created via external sign-in",
    )
    identity_provider_jwks_url: str = Field(
        default="",
        description="JWKS endpoint used to verify ES256 identity tokens",
    )

    # Passwords
    password_min_length: int = Field(default=8)

    # Profiles
    avatar_max_bytes: int = Field(
        default=512 * 1024,
        description="Ceiling for inline data: URI avatars and outfit photos",
    )
    profile_cache_ttl_seconds: int = Field(
        default=5,
        description="How long public projections may be served from cache (0 disables)",
    )
    profile_cache_max_entries: int = Field(default=1024)

    # Import enrichment
    import_timeout_seconds: float = Field(default=10.0)
    import_max_links: int = Field(default=10)
    import_mock_fallback: bool = Field(
        default=True,
        description="Return a placeholder (marked as mock) when the source is unreachable",
    )
    import_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
        ),
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )
    rate_limit_read: str = Field(default="60/minute")
    rate_limit_write: str = Field(default="10/minute")
    rate_limit_click: str = Field(
        default="120/minute",
        description="Per visitor IP; click beacons fire on every outbound tap",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers usually supply a plain ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

"""Application configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, PostgresDsn, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum entropy for secrets (measured by character diversity)
MIN_SECRET_UNIQUE_CHARS = 16


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Media Team Portal API"
    debug: bool = False
    environment: Literal["development", "staging", "production", "test"] = "development"

    # Database (required - no default for security)
    database_url: PostgresDsn = Field(
        description="PostgreSQL connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Security - JWT
    jwt_secret: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24 * 7

    # Password reset links stay valid for one hour
    password_reset_token_minutes: int = 60
    password_min_length: int = 6

    # Permission denials echo the caller's own permission set back to them
    expose_permissions_on_denial: bool = True

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    # Trusted proxies for rate limiting (comma-separated IP/CIDR ranges)
    trusted_proxies: str = ""

    # Rate limiting settings (requests per minute)
    rate_limit_default: int = 100
    rate_limit_auth_login: int = 10
    rate_limit_password_reset: int = 5
    rate_limit_submission: int = 10
    rate_limit_enabled: bool = True

    # Redis (optional, shared rate limit counters across workers)
    redis_url: str | None = None

    # Email (SMTP)
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    email_from_address: str = "media-team@example.org"
    email_from_name: str = "Media Team"
    admin_notification_email: str | None = None
    frontend_url: str = "http://localhost:3000"

    # File storage
    data_dir: Path = Path("data")
    max_minutes_attachments: int = 5
    max_attachment_size_mb: int = 10

    # Notification retention
    notification_retention_days: int = 30
    notification_cleanup_interval_hours: int = 24
    scheduler_enabled: bool = True

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for security requirements."""
        # Security: Prevent debug mode in production
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = str(self.database_url)
        if not url.startswith(("postgresql://", "postgres://")):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL starting with 'postgresql://' or 'postgres://'"
            )

        # Security: Validate JWT secret has sufficient entropy
        if self.environment == "production":
            if len(set(self.jwt_secret)) < MIN_SECRET_UNIQUE_CHARS:
                raise ValueError(
                    f"JWT_SECRET must contain at least {MIN_SECRET_UNIQUE_CHARS} unique characters "
                    "for sufficient entropy. Use a cryptographically random value."
                )

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy with asyncpg.

        Converts sslmode parameter to ssl for asyncpg compatibility.
        """
        url = str(self.database_url)
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return url.replace("sslmode=", "ssl=")

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def trusted_proxies_list(self) -> list[str]:
        """Get trusted proxies as a list."""
        if not self.trusted_proxies:
            return []
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]

    @property
    def uploads_dir(self) -> Path:
        """Directory holding meeting minutes attachments."""
        return self.data_dir / "uploads" / "minutes"

    @property
    def smtp_configured(self) -> bool:
        """Whether outgoing email can be sent."""
        return bool(self.smtp_host)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

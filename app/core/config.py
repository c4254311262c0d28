"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (SECRET_KEY, S3_BUCKET) are validated
when get_settings() is first called, not at import time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.constants import OBJECT_STORE_DELETE_CEILING


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (secret_key, s3_bucket and the media limits).
    """

    # App
    app_name: str = "memorial-service"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (PostgreSQL via asyncpg). Empty means SQL is not configured.
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_command_timeout: int = 60  # seconds, asyncpg only

    # Security: bearer tokens are issued by the auth provider; sub = user id.
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Object store (S3-compatible, e.g. Cloudflare R2)
    s3_bucket: str = ""
    s3_region: str = "auto"
    s3_endpoint_url: str | None = None
    s3_public_base_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    s3_max_attempts: int = 3

    # Upload grants
    upload_grant_expiry_seconds: int = 1800  # 30 minutes
    max_image_size: int = 2 * 1024 * 1024  # 2MB
    max_video_size: int = 65 * 1024 * 1024  # 65MB

    # Memorial lifecycle
    default_max_edits: int = 3
    family_max_members: int = 10

    # Media cleanup (outbox worker)
    media_delete_batch_size: int = OBJECT_STORE_DELETE_CEILING
    media_cleanup_worker_enabled: bool = True
    media_cleanup_max_attempts: int = 5
    media_cleanup_poll_seconds: int = 30
    media_cleanup_claim_limit: int = 20
    media_cleanup_stale_seconds: int = 600

    # Cache: in-process TTL cache unless Redis is enabled
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_profiles: int = 120
    cache_max_entries: int = 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and media limits."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Use the same HS256 secret as the auth provider "
                "that issues bearer tokens."
            )
        if not self.s3_bucket:
            raise ValueError(
                "S3_BUCKET is required. Set S3_BUCKET environment variable or update .env file."
            )
        if not 1 <= self.media_delete_batch_size <= OBJECT_STORE_DELETE_CEILING:
            raise ValueError(
                f"MEDIA_DELETE_BATCH_SIZE must be between 1 and {OBJECT_STORE_DELETE_CEILING}, "
                f"got {self.media_delete_batch_size}"
            )
        if self.max_image_size < 1 or self.max_video_size < 1:
            raise ValueError("MAX_IMAGE_SIZE and MAX_VIDEO_SIZE must be positive")
        if self.default_max_edits < 0:
            raise ValueError("DEFAULT_MAX_EDITS must be >= 0")
        if self.family_max_members < 1:
            raise ValueError("FAMILY_MAX_MEMBERS must be >= 1")
        if self.media_cleanup_max_attempts < 1:
            raise ValueError("MEDIA_CLEANUP_MAX_ATTEMPTS must be >= 1")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

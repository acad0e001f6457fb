"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    mongo_timeout_ms: int = 5000

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_timeout_seconds: float = 5.0

    # JWT Configuration (access and refresh tokens are signed with distinct secrets)
    jwt_access_secret_key: str = "CHANGE_ME_IN_PRODUCTION_ACCESS_SECRET"
    jwt_refresh_secret_key: str = "CHANGE_ME_IN_PRODUCTION_REFRESH_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30
    jwt_refresh_token_expire_minutes: int = 60 * 24 * 10
    email_verification_expire_minutes: int = 60
    password_reset_expire_minutes: int = 10

    # Rate Limiting
    rate_limit_enabled: bool = True
    login_rate_limit_attempts: int = 5
    login_rate_limit_window_seconds: int = 60
    register_rate_limit_attempts: int = 10
    register_rate_limit_window_seconds: int = 60
    user_lockout_threshold: int = 10
    user_lockout_duration_minutes: int = 30

    # Mail dispatch (SMTP)
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: int = 10
    mail_from: str = "no-reply@videoshare.local"

    # Links embedded in outbound mail
    client_scheme: str = "http"
    client_host: str = "localhost:5173"

    # Asset storage
    media_root: str = "media"
    media_base_url: str = "http://localhost:8000/media"
    upload_tmp_dir: str = "tmp/uploads"
    default_avatar_path: str = "/public/images/avatars/no-profile-picture-icon.png"

    # HTTP
    cors_origins: list[str] = ["http://localhost:5173"]
    cookie_secure: bool = True
    media_mount_enabled: bool = True

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

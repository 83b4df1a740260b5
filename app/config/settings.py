"""Application configuration using Pydantic settings."""

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Site
    SITE_TITLE: str = "ShinyCMS"
    SITE_VERSION: str = "1.0.0"
    SITE_DESCRIPTION: str = "Content management with an admin area and user accounts"
    ADMIN_PREFIX: str = "/admin"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    TESTING: bool = False

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./shinycms.db", description="Async database URL"
    )
    DATABASE_ECHO: bool = False

    # JWT Configuration
    JWT_SECRET_KEY: str = Field(
        default="dev-jwt-secret-key-super-long-for-local-use-only-change-me",
        min_length=32,
        description="Secret key for JWT tokens",
    )
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    JWT_ISSUER: str = "shinycms"
    JWT_AUDIENCE: str = "shinycms-site"
    CONFIRMATION_TOKEN_EXPIRE_DAYS: int = 7
    CAPTCHA_FALLBACK_EXPIRE_MINUTES: int = 30

    # reCAPTCHA keys, one pair per variant; a site key enables rendering,
    # a secret key enables verification
    RECAPTCHA_V3_SITE_KEY: str | None = None
    RECAPTCHA_V3_SECRET_KEY: str | None = None
    RECAPTCHA_V2_SITE_KEY: str | None = None
    RECAPTCHA_V2_SECRET_KEY: str | None = None
    RECAPTCHA_CHECKBOX_SITE_KEY: str | None = None
    RECAPTCHA_CHECKBOX_SECRET_KEY: str | None = None
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    RECAPTCHA_TIMEOUT_SECONDS: float = 5.0
    RECAPTCHA_V3_MINIMUM_SCORE: float = 0.5
    RECAPTCHA_V3_ACTION: str = "registration"

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8080"]
    ALLOWED_METHODS: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    ALLOWED_HEADERS: list[str] = ["*"]

    # Monitoring
    LOG_LEVEL: str = "INFO"
    SLOW_REQUEST_THRESHOLD_SECONDS: float = 2.0

    # Account Settings
    PASSWORD_MIN_LENGTH: int = 10
    CONFIRMATION_REQUIRED: bool = True

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("RECAPTCHA_V3_MINIMUM_SCORE")
    @classmethod
    def validate_minimum_score(cls, v):
        """reCAPTCHA v3 scores run from 0.0 to 1.0."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("RECAPTCHA_V3_MINIMUM_SCORE must be between 0.0 and 1.0")
        return v

    @field_validator("ALLOWED_ORIGINS")
    @classmethod
    def validate_origins(cls, v):
        """Validate CORS origins."""
        validated_origins = []
        for origin in v:
            if origin == "*":
                validated_origins.append(origin)
                continue
            try:
                AnyHttpUrl(origin)
            except ValueError:
                raise ValueError(f"Invalid origin URL: {origin}")
            validated_origins.append(origin)
        return validated_origins


# Global settings instance
settings = Settings()

"""
vendorhub/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, Twilio Verify, JWT secret, upload limits)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Literal


DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="vendorhub",
        description="MongoDB database name"
    )
    GRIDFS_BUCKET_NAME: str = Field(
        default="uploads",
        description="GridFS bucket holding product/service attachments"
    )

    # Twilio Verify (OTP provider)
    TWILIO_ACCOUNT_SID: Optional[str] = Field(
        default=None,
        description="Twilio account SID"
    )
    TWILIO_AUTH_TOKEN: Optional[str] = Field(
        default=None,
        description="Twilio auth token"
    )
    TWILIO_VERIFY_SID: Optional[str] = Field(
        default=None,
        description="Twilio Verify service SID"
    )
    TWILIO_VERIFY_BASE_URL: str = Field(
        default="https://verify.twilio.com/v2",
        description="Twilio Verify API base URL"
    )
    OTP_CHANNEL: str = Field(
        default="sms",
        description="Delivery channel for one-time codes"
    )
    OTP_PROVIDER_TIMEOUT: float = Field(
        default=10.0,
        description="OTP provider request timeout in seconds"
    )

    # Session tokens
    JWT_SECRET_KEY: str = Field(
        default=DEFAULT_JWT_SECRET,
        validate_default=True,
        description="Secret used to sign session tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Session token signing algorithm"
    )
    TOKEN_TTL_HOURS: int = Field(
        default=9,
        description="Session token lifetime in hours"
    )

    # Uploads
    MAX_UPLOAD_FILE_SIZE_MB: int = Field(
        default=20,
        description="Per-file upload ceiling in megabytes"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    PORT: int = Field(
        default=3001,
        description="HTTP port used when running the app directly"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret(cls, v, info: ValidationInfo):
        """Ensure the signing secret is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be changed in production environment")
        return v

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_FILE_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def validate_settings(config: Optional[Settings] = None):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    config = config or settings
    errors = []

    if not config.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if config.TOKEN_TTL_HOURS <= 0:
        errors.append("TOKEN_TTL_HOURS must be positive")

    # Production-specific validations
    if config.is_production:
        if not config.TWILIO_ACCOUNT_SID:
            errors.append("TWILIO_ACCOUNT_SID is required in production")
        if not config.TWILIO_AUTH_TOKEN:
            errors.append("TWILIO_AUTH_TOKEN is required in production")
        if not config.TWILIO_VERIFY_SID:
            errors.append("TWILIO_VERIFY_SID is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True

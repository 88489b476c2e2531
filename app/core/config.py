"""
Configuration management for Mountain Care HR Backend
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Required settings
    DATABASE_URL: str = Field(..., description="Database URL (PostgreSQL or SQLite)")
    JWT_SECRET_KEY: str = Field(..., description="JWT secret key for token signing")

    # Optional settings with defaults
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=120, description="JWT token expiration in minutes")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Version (can be git SHA or semver)
    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    # Leave ledger
    ACCRUAL_LEAVE_TYPE: str = Field(default="Vacation", description="Leave type credited by the monthly accrual job")
    ACCRUAL_AMOUNT: float = Field(default=8.0, description="Hours credited per employee by the monthly accrual job")
    LEAVE_HOURS_PER_DAY: float = Field(default=8.0, description="Hours deducted per approved leave day")

    # Compliance tracking
    COMPLIANCE_EXPIRING_SOON_DAYS: int = Field(
        default=30,
        description="Items expiring within this many days are marked ExpiringSoon"
    )
    COMPLIANCE_REMINDER_DAYS: str = Field(
        default="30,14,7",
        description="Comma-separated day offsets at which expiration reminders are sent"
    )

    # Document storage
    DOCUMENT_STORAGE_PATH: str = Field(
        default="./local-storage/documents",
        description="Directory where uploaded documents are stored"
    )
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, description="Maximum upload size in bytes")

    # Initial admin bootstrap settings
    INITIAL_ADMIN_USERNAME: str = Field(
        default="admin@mountaincare.local",
        description="Username for initial admin user (used when no admin exists)"
    )
    INITIAL_ADMIN_PASSWORD: str = Field(
        default="Admin@12345",
        description="Password for initial admin user (used when no admin exists)"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("COMPLIANCE_EXPIRING_SOON_DAYS")
    @classmethod
    def validate_expiring_soon_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError("COMPLIANCE_EXPIRING_SOON_DAYS must be at least 1")
        return v

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            # JWT_SECRET_KEY must be at least 32 characters in production
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            # ALLOWED_ORIGINS must not be wildcard in production
            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def get_reminder_days(self) -> List[int]:
        """Parse COMPLIANCE_REMINDER_DAYS into a list of positive ints (largest first)."""
        days = []
        for part in self.COMPLIANCE_REMINDER_DAYS.split(","):
            part = part.strip()
            if not part:
                continue
            value = int(part)
            if value < 0:
                raise ValueError("COMPLIANCE_REMINDER_DAYS entries must be non-negative")
            days.append(value)
        return sorted(set(days), reverse=True)


# Create settings instance
settings = Settings()

# Validate production settings if in prod
if settings.APP_ENV == "prod":
    settings.validate_production()

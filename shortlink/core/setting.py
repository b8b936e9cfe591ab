"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Audit logging is disabled unless both AUTH_URL and LOG_API_URL are set
- Store behaviour (overwrite, history cap, sweep) is tunable without code changes
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shortlink.core.validators import MAX_VALIDITY_PERIOD_SECONDS

__all__ = ["Settings", "settings"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Level for the service's operational logger"
    )

    # Application Configuration
    BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL for generating short URLs"
    )
    FRONTEND_ORIGIN: str = Field(
        default="*",
        description="Origin allowed by CORS (the frontend host)"
    )

    # Short Link Store Configuration
    DEFAULT_VALIDITY_PERIOD_SECONDS: int = Field(
        default=3600,
        gt=0,
        le=MAX_VALIDITY_PERIOD_SECONDS,
        description="Validity period applied when the caller omits one"
    )
    ALLOW_CODE_OVERWRITE: bool = Field(
        default=True,
        description="Creating an existing code replaces it; False rejects with 409"
    )
    CLICK_HISTORY_LIMIT: Optional[int] = Field(
        default=None,
        gt=0,
        description="Keep only the last N clicks per link (None keeps all)"
    )
    EXPIRY_SWEEP_ENABLED: bool = Field(
        default=False,
        description="Run a background task that purges expired links"
    )
    EXPIRY_SWEEP_INTERVAL_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between expiry sweeps"
    )

    # Audit Log Configuration
    AUTH_URL: Optional[str] = Field(
        default=None,
        description="Endpoint issuing bearer tokens for the audit log API"
    )
    LOG_API_URL: Optional[str] = Field(
        default=None,
        description="Remote audit log endpoint"
    )
    AUDIT_CLIENT_EMAIL: Optional[str] = Field(default=None)
    AUDIT_CLIENT_NAME: Optional[str] = Field(default=None)
    AUDIT_ROLL_NO: Optional[str] = Field(default=None)
    AUDIT_ACCESS_CODE: Optional[str] = Field(default=None)
    AUDIT_CLIENT_ID: Optional[str] = Field(default=None)
    AUDIT_CLIENT_SECRET: Optional[str] = Field(default=None)
    AUDIT_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for each call to the auth and log endpoints"
    )
    AUDIT_TOKEN_TTL_SECONDS: int = Field(
        default=300,
        gt=0,
        description="Token lifetime assumed when the auth response omits one"
    )

    @property
    def audit_credentials(self) -> dict[str, str]:
        """Credential payload posted to AUTH_URL (unset fields are omitted)."""
        fields = {
            "email": self.AUDIT_CLIENT_EMAIL,
            "name": self.AUDIT_CLIENT_NAME,
            "rollNo": self.AUDIT_ROLL_NO,
            "accessCode": self.AUDIT_ACCESS_CODE,
            "clientID": self.AUDIT_CLIENT_ID,
            "clientSecret": self.AUDIT_CLIENT_SECRET,
        }
        return {key: value for key, value in fields.items() if value is not None}


settings = Settings()

"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- JSON field names are camelCase (originalUrl, shortUrl, ...), Python names snake_case
- originalUrl is optional at the schema level so the service can report a
  missing URL with its own error message
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shortlink.core.validators import MAX_VALIDITY_PERIOD_SECONDS


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request model for URL shortening endpoint."""
    original_url: Optional[str] = Field(None, description="The long URL to shorten")
    custom_code: Optional[str] = Field(None, description="Optional caller-chosen short code")
    validity_period: Optional[int] = Field(
        None,
        gt=0,
        le=MAX_VALIDITY_PERIOD_SECONDS,
        description="Lifetime in seconds (service default if omitted)"
    )


class ShortenResponse(CamelModel):
    """Response model for URL shortening endpoint."""
    short_url: str = Field(..., description="The complete short URL")


class ClickEntry(BaseModel):
    """One entry of a link's click history."""
    ip: str
    timestamp: datetime


class AnalyticsResponse(CamelModel):
    """Response model for analytics endpoint."""
    original_url: str
    clicks: int
    unique_users: int
    click_history: List[ClickEntry]


class LogRequest(BaseModel):
    """Request model for client-submitted log entries."""
    level: str
    package: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str

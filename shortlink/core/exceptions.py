"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Each exception maps onto one caller-visible outcome:
- ValidationError: missing or malformed input (400)
- ShortCodeNotFoundError: unknown short code (404)
- ShortCodeExpiredError: known but stale short code (410)
- ShortCodeConflictError: custom code already live, overwrite disabled (409)
- InternalError: unexpected failure inside the service (500)

AuditLogError never leaves the audit logger.
"""


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class ValidationError(URLShortenerException):
    """Raised when request input is missing or malformed."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class InvalidURLError(ValidationError):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        super().__init__("originalUrl", f"{reason}: {url}")


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not in the store."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class ShortCodeExpiredError(URLShortenerException):
    """Raised when a short code exists but its validity period has passed."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' expired")


class ShortCodeConflictError(URLShortenerException):
    """Raised when a custom short code is already taken."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' is already in use")


class InternalError(URLShortenerException):
    """Raised when an unexpected error escapes the service layer."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Internal error: {message}")


class AuditLogError(URLShortenerException):
    """Raised inside the audit logger when an entry cannot be delivered."""
    pass

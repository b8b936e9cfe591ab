"""
Short Link Service

This service is the facade the HTTP layer talks to:
- Creating short links (validation, code generation, store insert)
- Resolving short codes for redirects (click bookkeeping happens in the store)
- Reading analytics

Design Decisions:
- The store is passed in, never looked up globally, so each app/test owns one
- Validation lives here, not in the store
- Audit entries are emitted fire-and-forget; the audit logger can't fail a request
- Store errors (not found, expired, conflict) pass through unchanged; anything
  unexpected during create is wrapped in InternalError
"""

import logging
from typing import Optional

from shortlink.core.exceptions import (
    InternalError,
    InvalidURLError,
    ShortCodeConflictError,
    ShortCodeExpiredError,
    ShortCodeNotFoundError,
    ValidationError,
)
from shortlink.core.validators import (
    MAX_VALIDITY_PERIOD_SECONDS,
    is_reserved_code,
    is_valid_url,
    sanitize_short_code,
)
from shortlink.services.audit_logger import AuditLogger
from shortlink.services.code_generator import generate_short_code
from shortlink.store.interface import LinkStore
from shortlink.store.models import AnalyticsView, ShortLinkRecord

logger = logging.getLogger(__name__)

AUDIT_STACK = "backend"


class ShortLinkService:
    """
    Orchestrates the code generator, expiry-aware store and audit channel.
    """

    def __init__(
        self,
        store: LinkStore,
        base_url: str,
        default_validity_period: int = 3600,
        allow_overwrite: bool = True,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the short link service.

        Args:
            store: The store holding all short links
            base_url: Prefix for generated short URLs
            default_validity_period: Seconds applied when the caller gives none
            allow_overwrite: Whether a create may replace a live code
            audit_logger: Optional remote audit channel
        """
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.default_validity_period = default_validity_period
        self.allow_overwrite = allow_overwrite
        self.audit_logger = audit_logger

    def build_short_url(self, short_code: str) -> str:
        return f"{self.base_url}/{short_code}"

    def create_short_link(
        self,
        original_url: Optional[str],
        custom_code: Optional[str] = None,
        validity_period: Optional[int] = None,
    ) -> ShortLinkRecord:
        """
        Create a short link.

        Args:
            original_url: The long URL to shorten
            custom_code: Caller-chosen short code, stored verbatim (padded,
                malformed or reserved codes are rejected, not normalised)
            validity_period: Lifetime in seconds (default applied if None)

        Returns:
            The stored record

        Raises:
            ValidationError: If any input is missing or malformed
            ShortCodeConflictError: If overwrite is disabled and the code is live
            InternalError: If anything unexpected fails
        """
        if not original_url:
            raise ValidationError("originalUrl", "is required")
        if not is_valid_url(original_url):
            raise InvalidURLError(
                original_url,
                reason="URL must be an absolute http:// or https:// URL with a valid domain"
            )
        if custom_code:
            if sanitize_short_code(custom_code) != custom_code:
                raise ValidationError(
                    "customCode",
                    "may only contain letters, digits, '-' and '_' (max 64 characters)"
                )
            if is_reserved_code(custom_code):
                raise ValidationError("customCode", f"'{custom_code}' is reserved")
        if validity_period is None:
            validity_period = self.default_validity_period
        elif isinstance(validity_period, bool) or not isinstance(validity_period, int) or validity_period <= 0:
            raise ValidationError("validityPeriod", "must be a positive integer number of seconds")
        elif validity_period > MAX_VALIDITY_PERIOD_SECONDS:
            raise ValidationError(
                "validityPeriod",
                f"must not exceed {MAX_VALIDITY_PERIOD_SECONDS} seconds"
            )

        try:
            short_code = generate_short_code(custom_code)
            record = self.store.create(
                short_code,
                original_url,
                validity_period,
                overwrite=self.allow_overwrite,
            )
        except ShortCodeConflictError:
            self._audit("warn", "service", f"Short code already in use: {custom_code}")
            raise
        except Exception as e:
            logger.error(f"Failed to create short URL: {str(e)}", exc_info=True)
            self._audit("error", "controller", f"Error creating short URL: {str(e)}")
            raise InternalError(f"Failed to create short URL: {str(e)}", original_error=e)

        logger.info(f"Short URL created: {short_code} -> {original_url}")
        self._audit("info", "route", f"Short URL created: {short_code}")
        return record

    def redirect(self, short_code: str, visitor: str) -> str:
        """
        Resolve a short code and record the click.

        Raises:
            ShortCodeNotFoundError: Unknown code
            ShortCodeExpiredError: Code expired (and is now removed)
        """
        try:
            return self.store.resolve(short_code, visitor)
        except ShortCodeNotFoundError:
            self._audit("warn", "handler", f"Short URL not found: {short_code}")
            raise
        except ShortCodeExpiredError:
            logger.info(f"Short URL expired and removed: {short_code}")
            self._audit("info", "handler", f"Short URL expired: {short_code}")
            raise

    def analytics(self, short_code: str) -> AnalyticsView:
        """
        Return the analytics snapshot for a short code.

        Expired-but-unvisited links still report their analytics.

        Raises:
            ShortCodeNotFoundError: Unknown code
        """
        return self.store.get_analytics(short_code)

    def _audit(self, level: str, package: str, message: str) -> None:
        if self.audit_logger is not None:
            self.audit_logger.emit(AUDIT_STACK, level, package, message)

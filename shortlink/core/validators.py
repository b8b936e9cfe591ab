"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Only http/https targets are accepted, so the redirect can't serve javascript:
- Custom short codes are restricted to URL-safe characters
- Length limits prevent DoS attacks
"""

import ipaddress
import re
from typing import Optional
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048
MAX_SHORT_CODE_LENGTH = 64

# 100 years; created_at + validity must stay below datetime.max
MAX_VALIDITY_PERIOD_SECONDS = 100 * 365 * 24 * 3600

# First path segments owned by fixed routes; a code equal to one could never redirect
RESERVED_CODES = frozenset({"health", "docs", "redoc", "shorturls", "log"})

SHORT_CODE_PATTERN = re.compile(r'^[0-9a-zA-Z_-]+$')


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Sanitize and validate short code format.

    Short codes may contain [0-9a-zA-Z], '-' and '_'. Generated codes are
    UUID prefixes (hex digits only), custom codes may use the full set.

    Args:
        short_code: The short code to sanitize

    Returns:
        Sanitized short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    # Remove any whitespace
    short_code = short_code.strip()

    if len(short_code) > MAX_SHORT_CODE_LENGTH:
        return None

    if not SHORT_CODE_PATTERN.match(short_code):
        return None

    return short_code


def validate_url_length(url: str, max_length: int = MAX_URL_LENGTH) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def is_valid_url(url: str) -> bool:
    """
    Check that a URL is an absolute http(s) URL with a plausible host.

    Args:
        url: The URL string to validate

    Returns:
        True if valid and safe, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if not validate_url_length(url):
        return False

    try:
        result = urlparse(url)
    except ValueError:
        return False

    if not result.scheme or not result.netloc:
        return False

    if result.scheme.lower() not in {'http', 'https'}:
        return False

    domain = result.hostname or ''
    if domain != 'localhost' and '.' not in domain and not _is_ip_literal(domain):
        return False

    return True


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def is_reserved_code(short_code: str) -> bool:
    """True if the code would shadow, or be shadowed by, a fixed route."""
    return short_code in RESERVED_CODES

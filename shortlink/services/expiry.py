"""
Expiry Policy

Stateless helpers deciding whether a short link is still valid.
A record is expired once the current time is strictly past
created_at + validity_period_seconds.
"""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shortlink.store.models import ShortLinkRecord


def utc_now() -> datetime:
    """Default clock used by the store."""
    return datetime.now(timezone.utc)


def expires_at(record: "ShortLinkRecord") -> datetime:
    return record.created_at + timedelta(seconds=record.validity_period_seconds)


def is_expired(record: "ShortLinkRecord", now: datetime) -> bool:
    """
    Check whether a record has outlived its validity period.

    Args:
        record: The record to check
        now: Current time (timezone-aware)

    Returns:
        True if now is strictly after the expiry instant
    """
    return now > expires_at(record)

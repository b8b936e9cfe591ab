"""
In-Memory Short Link Store

Holds every short link in a dict guarded by a single lock.

Design Decisions:
- One threading.Lock for the whole map: operations are short and never do I/O,
  so a coarse lock is enough and keeps create/resolve/analytics from interleaving
- Lazy expiry: a record is deleted the first time resolve sees it expired
- purge_expired() exists for the optional background sweep
- The clock is injected so tests can move time without sleeping
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Optional

from shortlink.core.exceptions import (
    ShortCodeConflictError,
    ShortCodeExpiredError,
    ShortCodeNotFoundError,
)
from shortlink.services.expiry import expires_at, is_expired, utc_now
from shortlink.store.interface import LinkStore
from shortlink.store.models import AnalyticsView, ShortLinkRecord

logger = logging.getLogger(__name__)


class InMemoryLinkStore(LinkStore):
    """
    Process-local store. All state is lost on restart.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        click_history_limit: Optional[int] = None,
    ):
        """
        Args:
            clock: Returns the current timezone-aware time
            click_history_limit: Keep only the last N clicks per record (None keeps all)
        """
        self._clock = clock
        self._click_history_limit = click_history_limit
        self._records: Dict[str, ShortLinkRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, short_code: str) -> bool:
        with self._lock:
            return short_code in self._records

    def create(
        self,
        short_code: str,
        original_url: str,
        validity_period_seconds: int,
        overwrite: bool = True,
    ) -> ShortLinkRecord:
        with self._lock:
            now = self._clock()
            existing = self._records.get(short_code)
            if existing is not None:
                if not overwrite and not is_expired(existing, now):
                    raise ShortCodeConflictError(short_code)
                logger.info(f"Replacing existing short code {short_code}")

            record = ShortLinkRecord.new(
                short_code=short_code,
                original_url=original_url,
                created_at=now,
                validity_period_seconds=validity_period_seconds,
                history_limit=self._click_history_limit,
            )
            self._records[short_code] = record
            return record

    def resolve(self, short_code: str, visitor: str) -> str:
        with self._lock:
            record = self._records.get(short_code)
            if record is None:
                raise ShortCodeNotFoundError(short_code)

            now = self._clock()
            if is_expired(record, now):
                del self._records[short_code]
                raise ShortCodeExpiredError(short_code)

            record.record_click(visitor, now)
            return record.original_url

    def get_analytics(self, short_code: str) -> AnalyticsView:
        with self._lock:
            record = self._records.get(short_code)
            if record is None:
                raise ShortCodeNotFoundError(short_code)

            return AnalyticsView(
                short_code=record.short_code,
                original_url=record.original_url,
                created_at=record.created_at,
                expires_at=expires_at(record),
                clicks=record.click_count,
                unique_users=len(record.unique_visitors),
                click_history=tuple(record.click_history),
            )

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [
                code for code, record in self._records.items()
                if is_expired(record, now)
            ]
            for code in expired:
                del self._records[code]
        return len(expired)

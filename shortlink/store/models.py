"""
Data Models for the Short Link Store

This module defines the in-memory records held by the store:
- ShortLinkRecord: One mapping from short code to original URL, with click stats
- ClickEvent: A single resolved visit (visitor identifier and timestamp)
- AnalyticsView: Read-only snapshot handed out by analytics reads

Design Decisions:
- click_count is kept separately from click_history so the count stays exact
  when the history is capped
- unique_visitors is a set maintained alongside the history, not derived from it
- AnalyticsView copies the history into a tuple so callers never see later clicks
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Optional, Set, Tuple


@dataclass(frozen=True)
class ClickEvent:
    """One successful resolve of a short code."""
    visitor: str
    timestamp: datetime


@dataclass
class ShortLinkRecord:
    """
    Mutable record for one live short code.

    Fields:
    - short_code: Unique key in the store
    - original_url: Redirect target
    - created_at: Creation instant (timezone-aware UTC)
    - validity_period_seconds: Lifetime measured from created_at
    - click_count: Number of successful resolves
    - unique_visitors: Distinct visitor identifiers seen
    - click_history: Ordered clicks, oldest first (bounded when a limit is set)
    """
    short_code: str
    original_url: str
    created_at: datetime
    validity_period_seconds: int
    click_count: int = 0
    unique_visitors: Set[str] = field(default_factory=set)
    click_history: Deque[ClickEvent] = field(default_factory=deque)

    @classmethod
    def new(
        cls,
        short_code: str,
        original_url: str,
        created_at: datetime,
        validity_period_seconds: int,
        history_limit: Optional[int] = None,
    ) -> "ShortLinkRecord":
        return cls(
            short_code=short_code,
            original_url=original_url,
            created_at=created_at,
            validity_period_seconds=validity_period_seconds,
            click_history=deque(maxlen=history_limit),
        )

    def record_click(self, visitor: str, timestamp: datetime) -> None:
        self.click_count += 1
        self.unique_visitors.add(visitor)
        self.click_history.append(ClickEvent(visitor=visitor, timestamp=timestamp))


@dataclass(frozen=True)
class AnalyticsView:
    """Snapshot of a record's analytics at the moment it was read."""
    short_code: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    clicks: int
    unique_users: int
    click_history: Tuple[ClickEvent, ...]

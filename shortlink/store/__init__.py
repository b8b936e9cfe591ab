"""
Short link store package.

This module provides:
- LinkStore interface: Abstract base class for store implementations
- InMemoryLinkStore: Lock-guarded dict implementation (the only backend)
- Record and snapshot models
"""

from shortlink.store.interface import LinkStore
from shortlink.store.memory_store import InMemoryLinkStore
from shortlink.store.models import AnalyticsView, ClickEvent, ShortLinkRecord

__all__ = [
    "LinkStore",
    "InMemoryLinkStore",
    "AnalyticsView",
    "ClickEvent",
    "ShortLinkRecord",
]

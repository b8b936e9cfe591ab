"""
Short Link Store Interface

This module defines the store abstraction the service layer depends on.
The in-memory implementation is the only backend; the interface keeps the
service independent of it and lets tests substitute their own.

Every implementation must make each operation atomic with respect to the
others on the same short code.
"""

from abc import ABC, abstractmethod

from shortlink.store.models import AnalyticsView, ShortLinkRecord


class LinkStore(ABC):
    """
    Abstract base class for short link stores.

    Implementations own the short code -> record mapping and apply
    the expiry policy on resolve.
    """

    @abstractmethod
    def create(
        self,
        short_code: str,
        original_url: str,
        validity_period_seconds: int,
        overwrite: bool = True,
    ) -> ShortLinkRecord:
        """
        Insert a fresh record for short_code.

        Args:
            short_code: Key for the new record
            original_url: Redirect target (not validated here)
            validity_period_seconds: Lifetime from now
            overwrite: Replace an existing record; if False, a live record
                with the same code raises ShortCodeConflictError

        Returns:
            The stored record
        """
        pass

    @abstractmethod
    def resolve(self, short_code: str, visitor: str) -> str:
        """
        Record a click and return the redirect target.

        Raises:
            ShortCodeNotFoundError: No record for short_code
            ShortCodeExpiredError: Record expired; it is removed as a side effect
        """
        pass

    @abstractmethod
    def get_analytics(self, short_code: str) -> AnalyticsView:
        """
        Return a snapshot of a record's analytics without mutating it.

        Expiry is not checked here.

        Raises:
            ShortCodeNotFoundError: No record for short_code
        """
        pass

    @abstractmethod
    def purge_expired(self) -> int:
        """
        Remove every expired record.

        Returns:
            Number of records removed
        """
        pass

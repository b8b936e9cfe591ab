"""
Audit Logging Service

This service ships audit entries to the remote log API.
It sits beside the request path, never in it.

Design Decisions:
- Fire-and-forget: emit() schedules a task on the running loop and returns
- Every failure (validation, auth, network, non-2xx) is caught and written to
  the operational logger; nothing is raised to the caller of emit()
- The bearer token is cached with its own expiry and refreshed lazily
- At-most-once delivery: no retries
- Disabled entirely when AUTH_URL or LOG_API_URL is not configured

Entry format:
{
    "stack": "backend",
    "level": "info",
    "package": "service",
    "message": "Short URL created: docs",
    "timestamp": "2026-01-01T12:00:00.000000+00:00"
}
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Set

import httpx

from shortlink.core.exceptions import AuditLogError

logger = logging.getLogger(__name__)

STACKS = frozenset({"backend", "frontend"})
LEVELS = frozenset({"debug", "info", "warn", "error", "fatal"})

BACKEND_PACKAGES = frozenset({
    "cache", "controller", "cron_job", "db", "domain",
    "handler", "repository", "route", "service",
})
FRONTEND_PACKAGES = frozenset({"api", "component", "hook", "page", "state", "style"})
SHARED_PACKAGES = frozenset({"auth", "config", "middleware", "utils"})

PACKAGES_BY_STACK = {
    "backend": BACKEND_PACKAGES | SHARED_PACKAGES,
    "frontend": FRONTEND_PACKAGES | SHARED_PACKAGES,
}


def validate_entry(stack: str, level: str, package: str) -> None:
    """
    Check stack, level and package against the log API's vocabulary.

    Raises:
        AuditLogError: If any of the three is not accepted
    """
    if stack not in STACKS:
        raise AuditLogError(f"Invalid stack: {stack}")
    if level.lower() not in LEVELS:
        raise AuditLogError(f"Invalid level: {level}")
    if package not in PACKAGES_BY_STACK[stack]:
        raise AuditLogError(f"Invalid {stack} package: {package}")


class AuditLogger:
    """
    Client for the remote, token-authenticated audit log API.
    """

    def __init__(
        self,
        auth_url: Optional[str],
        log_api_url: Optional[str],
        credentials: Optional[dict[str, str]] = None,
        timeout: float = 5.0,
        token_ttl_seconds: int = 300,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the audit logger.

        Args:
            auth_url: Endpoint issuing bearer tokens
            log_api_url: Endpoint accepting log entries
            credentials: JSON body posted to auth_url
            timeout: Per-request timeout in seconds
            token_ttl_seconds: Token lifetime when the auth response omits one
            client: Pre-built HTTP client (tests pass one with a mock transport)
        """
        self.auth_url = auth_url
        self.log_api_url = log_api_url
        self.credentials = credentials or {}
        self.token_ttl_seconds = token_ttl_seconds
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._token_lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.auth_url and self.log_api_url)

    def emit(self, stack: str, level: str, package: str, message: str) -> None:
        """
        Schedule delivery of one entry and return immediately.

        Outside a running event loop the entry is dropped (with a debug log).
        """
        if not self.enabled:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, dropping audit entry: {message}")
            return

        task = loop.create_task(self.log(stack, level, package, message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def log(self, stack: str, level: str, package: str, message: str) -> bool:
        """
        Deliver one entry to the log API.

        Returns:
            True if the API accepted the entry, False otherwise (never raises)
        """
        if not self.enabled:
            return False

        try:
            validate_entry(stack, level, package)
            token = await self._get_token()
            entry = {
                "stack": stack,
                "level": level.lower(),
                "package": package,
                "message": message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            response = await self._client.post(
                self.log_api_url,
                json=entry,
                headers={"Authorization": f"Bearer {token}"},
            )
            if response.is_error:
                if response.status_code == 401:
                    self._invalidate_token()
                raise AuditLogError(
                    f"Log API rejected entry: {response.status_code} {response.reason_phrase}"
                )
            return True
        except (AuditLogError, httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to send audit log: {str(e)}")
            return False
        except Exception as e:
            logger.error(f"Unexpected audit logger error: {str(e)}", exc_info=True)
            return False

    async def _get_token(self) -> str:
        async with self._token_lock:
            now = datetime.now(timezone.utc)
            if self._token and self._token_expires_at and now < self._token_expires_at:
                return self._token

            response = await self._client.post(self.auth_url, json=self.credentials)
            if response.is_error:
                raise AuditLogError(
                    f"Auth failed: {response.status_code} {response.reason_phrase}"
                )

            data = response.json()
            token = data.get("access_token") or data.get("token")
            if not token:
                raise AuditLogError("Auth response did not contain a token")

            self._token = token
            self._token_expires_at = self._token_expiry(data, now)
            logger.debug(f"Audit token refreshed, valid until {self._token_expires_at.isoformat()}")
            return token

    def _token_expiry(self, data: dict[str, Any], now: datetime) -> datetime:
        # expires_at is an epoch timestamp, expires_in a lifetime in seconds
        expires_at = data.get("expires_at")
        if isinstance(expires_at, (int, float)):
            return datetime.fromtimestamp(expires_at, tz=timezone.utc)
        expires_in = data.get("expires_in")
        if isinstance(expires_in, (int, float)) and expires_in > 0:
            return now + timedelta(seconds=expires_in)
        return now + timedelta(seconds=self.token_ttl_seconds)

    def _invalidate_token(self) -> None:
        self._token = None
        self._token_expires_at = None

    async def aclose(self, timeout: float = 5.0) -> None:
        """Wait briefly for in-flight entries, then close the HTTP client."""
        if self._pending:
            _, pending = await asyncio.wait(set(self._pending), timeout=timeout)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        await self._client.aclose()

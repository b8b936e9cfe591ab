"""
Background Task Helpers

Long-running and after-response helpers. Each catches and logs its own
errors so a failure never reaches a request.
"""

import asyncio
import logging

from shortlink.services.audit_logger import AuditLogger
from shortlink.store.interface import LinkStore

logger = logging.getLogger(__name__)


async def forward_log_background(
    audit_logger: AuditLogger,
    stack: str,
    level: str,
    package: str,
    message: str
) -> None:
    """
    Background task forwarding a client-submitted log entry.

    Runs after the response has been sent.
    """
    try:
        await audit_logger.log(stack, level, package, message)
    except Exception as e:
        logger.error(
            f"Failed to forward {stack} log: {str(e)}",
            exc_info=True
        )


async def sweep_expired_links(store: LinkStore, interval_seconds: float) -> None:
    """
    Purge expired links every interval_seconds until cancelled.

    Args:
        store: The store to sweep
        interval_seconds: Pause between sweeps
    """
    logger.info(f"Expiry sweep started (every {interval_seconds}s)")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = store.purge_expired()
            if removed:
                logger.info(f"Expiry sweep removed {removed} link(s)")
        except Exception as e:
            logger.error(f"Expiry sweep failed: {str(e)}", exc_info=True)

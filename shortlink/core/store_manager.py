"""
Store Lifecycle Manager

This module builds the per-process service objects on startup and tears
them down on shutdown.

Design:
- One store per application instance, constructed once on startup
- Instances live on app.state, not in module globals, so every app
  (and every test) owns its own store
- Request handlers reach them through FastAPI dependencies
- The optional expiry sweep runs as an asyncio task tied to the app's lifetime
"""

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request

from shortlink.core.setting import Settings
from shortlink.services.audit_logger import AuditLogger
from shortlink.services.background_tasks import sweep_expired_links
from shortlink.services.link_service import ShortLinkService
from shortlink.store.memory_store import InMemoryLinkStore

logger = logging.getLogger(__name__)


def build_link_service(config: Settings, audit_logger: Optional[AuditLogger] = None) -> ShortLinkService:
    """
    Build a service backed by a fresh in-memory store.

    Args:
        config: Application settings
        audit_logger: Audit channel handed to the service

    Returns:
        ShortLinkService instance
    """
    store = InMemoryLinkStore(click_history_limit=config.CLICK_HISTORY_LIMIT)
    return ShortLinkService(
        store=store,
        base_url=config.BASE_URL,
        default_validity_period=config.DEFAULT_VALIDITY_PERIOD_SECONDS,
        allow_overwrite=config.ALLOW_CODE_OVERWRITE,
        audit_logger=audit_logger,
    )


async def initialize_services(app: FastAPI, config: Settings) -> None:
    """
    Create the audit logger, store and service for this app instance.
    """
    if getattr(app.state, "link_service", None) is not None:
        logger.warning("Short link services already initialized")
        return

    audit_logger = AuditLogger(
        auth_url=config.AUTH_URL,
        log_api_url=config.LOG_API_URL,
        credentials=config.audit_credentials,
        timeout=config.AUDIT_TIMEOUT_SECONDS,
        token_ttl_seconds=config.AUDIT_TOKEN_TTL_SECONDS,
    )
    if not audit_logger.enabled:
        logger.info("Audit logging disabled (AUTH_URL or LOG_API_URL not set)")

    app.state.audit_logger = audit_logger
    app.state.link_service = build_link_service(config, audit_logger)
    app.state.sweep_task = None

    if config.EXPIRY_SWEEP_ENABLED:
        app.state.sweep_task = asyncio.create_task(
            sweep_expired_links(
                app.state.link_service.store,
                config.EXPIRY_SWEEP_INTERVAL_SECONDS,
            )
        )

    logger.info(
        f"Short link store initialized: "
        f"default_validity={config.DEFAULT_VALIDITY_PERIOD_SECONDS}s, "
        f"overwrite={config.ALLOW_CODE_OVERWRITE}, "
        f"history_limit={config.CLICK_HISTORY_LIMIT}"
    )


async def shutdown_services(app: FastAPI) -> None:
    """Stop the sweep and flush the audit logger."""
    sweep_task = getattr(app.state, "sweep_task", None)
    if sweep_task is not None:
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass

    audit_logger = getattr(app.state, "audit_logger", None)
    if audit_logger is not None:
        try:
            await audit_logger.aclose()
        except Exception as e:
            logger.warning(f"Failed to close audit logger: {e}")

    app.state.link_service = None
    app.state.audit_logger = None
    app.state.sweep_task = None
    logger.info("Short link services shut down")


def get_link_service(request: Request) -> ShortLinkService:
    """FastAPI dependency returning the app's ShortLinkService."""
    return request.app.state.link_service


def get_audit_logger(request: Request) -> AuditLogger:
    """FastAPI dependency returning the app's AuditLogger."""
    return request.app.state.audit_logger
